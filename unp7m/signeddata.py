# *-* coding: utf-8 *-*
"""Walk a ContentInfo / SignedData structure down to its encapsulated content.

Field values are decoded by asn1crypto, the element offsets and the eContent
octets come from the header walk in ``unp7m.der``. Certificates and signer
infos are kept as raw bytes, signatures are never checked.
"""
import logging

import attr
from asn1crypto import cms, core

from unp7m import der
from unp7m.errors import DetachedSignature, MalformedDer, UnsupportedContentType


logger = logging.getLogger(__name__)

ID_DATA = '1.2.840.113549.1.7.1'
ID_SIGNED_DATA = '1.2.840.113549.1.7.2'

OID_NAMES = {
    ID_DATA: 'data',
    ID_SIGNED_DATA: 'signedData',
    '1.2.840.113549.1.7.3': 'envelopedData',
    '1.2.840.113549.1.7.4': 'signedAndEnvelopedData',
    '1.2.840.113549.1.7.5': 'digestedData',
    '1.2.840.113549.1.7.6': 'encryptedData',
    '1.2.840.113549.1.9.16.1.2': 'authData',
    '1.2.840.113549.1.9.16.1.4': 'tstInfo',
    '1.3.14.3.2.26': 'sha1',
    '2.16.840.1.101.3.4.2.1': 'sha256',
    '2.16.840.1.101.3.4.2.2': 'sha384',
    '2.16.840.1.101.3.4.2.3': 'sha512',
    '2.16.840.1.101.3.4.2.4': 'sha224',
}


def oid_name(oid):
    return OID_NAMES.get(oid, oid)


@attr.s(frozen=True, slots=True)
class SignedData(object):
    content_type = attr.ib(type=str)
    version = attr.ib(type=int)
    digest_algorithms = attr.ib(type=tuple)
    econtent_type = attr.ib(type=str)
    econtent = attr.ib(default=None, repr=lambda value: 'None' if value is None else '<%d bytes>' % len(value))
    certificates = attr.ib(default=None, repr=False)
    signer_infos = attr.ib(default=b'', repr=False)

    @property
    def detached(self):
        return self.econtent is None


def _field(fields, index):
    return fields[index] if index < len(fields) else None


def _ignore_extra(fields, expected, after):
    if len(fields) > expected:
        extra = fields[expected:]
        logger.debug(
            'ignoring %d unexpected elements (%d bytes) after %s',
            len(extra),
            sum(element.length for element in extra),
            after,
        )


def _econtent(encap):
    """Return the eContent octets of an encapContentInfo element, or None."""
    fields = list(der.children(encap))
    wrapper = _field(fields, 1)
    if wrapper is None:
        return None
    der.expect(wrapper, der.CONTEXT, 0, 'eContent [0]')
    if len(fields) > 2:
        raise MalformedDer('unexpected %s after eContent' % fields[2].name, fields[2].offset)
    octets = der.read(wrapper.contents, wrapper.value_offset)
    if octets.end < wrapper.end:
        raise MalformedDer('unexpected data after eContent OCTET STRING', octets.end)
    return der.octet_string_contents(octets)


def parse(data: bytes) -> SignedData:
    """
    Parse DER bytes holding a ContentInfo with a SignedData content.

    Parameters:
        data: DER encoded ContentInfo.

    Returns:
        SignedData record.

    Raises:
        MalformedDer: truncated data or an unexpected tag.
        UnsupportedEncoding: indefinite length BER.
        UnsupportedContentType: outer content type is not signedData.
    """
    data = bytes(data)
    outer = der.read(data)
    if outer.length < len(data):
        logger.debug('ignoring %d trailing bytes after ContentInfo', len(data) - outer.length)
        data = data[:outer.length]

    with der.decoding('ContentInfo', outer.offset):
        info = cms.ContentInfo.load(data, strict=True)
        content_type = info['content_type'].dotted
    fields = list(der.children(outer))
    if content_type != ID_SIGNED_DATA:
        raise UnsupportedContentType(
            'content type %s is not signedData' % oid_name(content_type), fields[0].offset
        )
    explicit = der.expect(_field(fields, 1), der.CONTEXT, 0, 'ContentInfo content [0]')
    _ignore_extra(fields, 2, 'ContentInfo content')
    sd = der.read(explicit.contents, explicit.value_offset, strict=True)
    fields = list(der.children(sd))

    with der.decoding('SignedData', sd.offset):
        signed = info['content']
        version = int(signed['version'])
        digest_algorithms = tuple(algo['algorithm'].dotted for algo in signed['digest_algorithms'])
        econtent_type = signed['encap_content_info']['content_type'].dotted
        certificates = signed['certificates']
        crls = signed['crls']
        signer_infos = signed['signer_infos']

    expected = 4
    if not isinstance(certificates, core.Void):
        expected += 1
    if not isinstance(crls, core.Void):
        logger.debug('skipped %d bytes of revocation info', len(crls.contents))
        expected += 1
    _ignore_extra(fields, expected, 'signerInfos')
    econtent = _econtent(fields[2])

    logger.debug(
        'SignedData v%d, eContentType %s, %s, digests %s',
        version,
        oid_name(econtent_type),
        'detached' if econtent is None else '%d content bytes' % len(econtent),
        ', '.join(oid_name(algo) for algo in digest_algorithms),
    )
    return SignedData(
        content_type=content_type,
        version=version,
        digest_algorithms=digest_algorithms,
        econtent_type=econtent_type,
        econtent=econtent,
        certificates=None if isinstance(certificates, core.Void) else certificates.contents,
        signer_infos=signer_infos.contents,
    )


def extract_content(data: bytes) -> bytes:
    """Return the id-data payload embedded in a DER SignedData."""
    signed = parse(data)
    if signed.econtent_type != ID_DATA:
        raise UnsupportedContentType(
            'encapsulated content type %s is not data' % oid_name(signed.econtent_type)
        )
    if signed.detached:
        raise DetachedSignature('signature is detached, no content to extract')
    return signed.econtent
