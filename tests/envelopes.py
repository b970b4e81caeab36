# *-* coding: utf-8 *-*
"""Hand assembled DER, for encodings asn1crypto never produces."""
from unp7m import signer

from . import test_cert

OID_DATA = bytes.fromhex('2a864886f70d010701')
OID_SIGNED_DATA = bytes.fromhex('2a864886f70d010702')
OID_ENVELOPED_DATA = bytes.fromhex('2a864886f70d010703')
OID_SHA256 = bytes.fromhex('608648016503040201')


def length(n):
    if n < 0x80:
        return bytes([n])
    octets = n.to_bytes((n.bit_length() + 7) // 8, 'big')
    return bytes([0x80 | len(octets)]) + octets


def tlv(tag, *values):
    value = b''.join(values)
    return bytes([tag]) + length(len(value)) + value


def econtent_primitive(data):
    return tlv(0x04, data)


def econtent_constructed(data, cuts=(3, 7)):
    """Split ``data`` into OCTET STRING fragments, the middle one nested one level deeper."""
    a, b = cuts
    return tlv(
        0x24,
        tlv(0x04, data[:a]),
        tlv(0x24, tlv(0x04, data[a:b])),
        tlv(0x04, data[b:]),
    )


def signed_data(econtent=None, econtent_type=OID_DATA, outer_type=OID_SIGNED_DATA, certificates=None,
                after_econtent=b'', after_signer_infos=b''):
    """
    ContentInfo / SignedData with an empty signerInfos SET.

    ``econtent`` is the already encoded content of the eContent [0] wrapper,
    or None for a detached signature. The ``after_*`` bytes are appended
    behind the eContent [0] wrapper and behind signerInfos.
    """
    encap = [tlv(0x06, econtent_type)]
    if econtent is not None:
        encap.append(tlv(0xa0, econtent))
    encap.append(after_econtent)
    fields = [
        tlv(0x02, b'\x01'),
        tlv(0x31, tlv(0x30, tlv(0x06, OID_SHA256), tlv(0x05))),
        tlv(0x30, *encap),
    ]
    if certificates is not None:
        fields.append(tlv(0xa0, certificates))
    fields.append(tlv(0x31))
    fields.append(after_signer_infos)
    return tlv(0x30, tlv(0x06, outer_type), tlv(0xa0, tlv(0x30, *fields)))


def signed(datau, **kwargs):
    """A real RSA signed envelope built with unp7m.signer."""
    key, cert = test_cert.rsa_user()
    return signer.sign(datau, key, cert, [], **kwargs)
