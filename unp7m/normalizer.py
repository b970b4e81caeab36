# *-* coding: utf-8 *-*
"""Turn raw envelope bytes into canonical DER.

A ``.p7m`` file is either binary DER or the same bytes base64 armored
between ``-----BEGIN PKCS7-----`` / ``-----END PKCS7-----`` lines (a ``CMS``
label is seen in the wild as well).
"""
import enum
import logging

import attr
from asn1crypto import pem

from unp7m.errors import EmptyInput, MalformedPem


logger = logging.getLogger(__name__)

PEM_MARKER = b'-----BEGIN'
PEM_LABELS = ('PKCS7', 'CMS')


class Encoding(enum.Enum):
    DER = 'DER'
    PEM = 'PEM'
    UNKNOWN = 'Unknown'


@attr.s(frozen=True, slots=True)
class EncodedEnvelope(object):
    data = attr.ib(type=bytes, repr=lambda data: '<%d bytes>' % len(data))
    encoding = attr.ib(type=Encoding)


def detect(data: bytes) -> Encoding:
    if not data:
        return Encoding.UNKNOWN
    if bytes(data).lstrip().startswith(PEM_MARKER):
        return Encoding.PEM
    return Encoding.DER


def normalize(data: bytes) -> EncodedEnvelope:
    return EncodedEnvelope(bytes(data), detect(data))


def unarmor(data: bytes) -> bytes:
    """
    Decode a PEM armored envelope.

    Parameters:
        data: PEM text as bytes, possibly with leading whitespace.

    Returns:
        The DER bytes of the first BEGIN/END block.

    Raises:
        MalformedPem: footer missing or not matching the header, empty body,
            or a body that is not valid base64.
    """
    data = bytes(data).lstrip()
    try:
        label, headers, der = pem.unarmor(data)
    except ValueError as ex:
        # binascii.Error and UnicodeDecodeError are ValueErrors too
        raise MalformedPem(str(ex).strip())
    footer = b'-----END ' + label.encode('ascii') + b'-----'
    if footer not in data:
        raise MalformedPem('PEM footer does not match %r header' % label)
    if label not in PEM_LABELS:
        logger.debug('unusual PEM label %r, decoding anyway', label)
    if headers:
        logger.debug('skipped PEM headers %s', ', '.join(sorted(headers)))
    if not der:
        raise MalformedPem('empty PEM body', data.index(footer))
    logger.debug('PEM %r block decoded to %d DER bytes', label, len(der))
    return der


def to_der(data: bytes) -> bytes:
    """Return the canonical DER bytes for ``data``, which is DER or PEM."""
    encoding = detect(data)
    if encoding is Encoding.UNKNOWN:
        raise EmptyInput('empty envelope', 0)
    if encoding is Encoding.PEM:
        return unarmor(data)
    return bytes(data)
