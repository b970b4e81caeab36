# *-* coding: utf-8 *-*
"""Build ``.p7m`` envelopes: a CMS SignedData wrapping the signed bytes."""
import hashlib
import logging

from asn1crypto import cms, algos, pem, tsp, x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, utils, ec


logger = logging.getLogger(__name__)

DEFAULT_HASHALGO = 'sha256'
PEM_LABEL = 'PKCS7'


def cert2asn(cert, cert_bytes=True):
    if isinstance(cert, x509.Certificate):
        return cert
    if cert_bytes:
        cert_bytes = cert.public_bytes(serialization.Encoding.PEM)
    else:
        cert_bytes = cert
    if pem.detect(cert_bytes):
        _, _, cert_bytes = pem.unarmor(cert_bytes)
    return x509.Certificate.load(cert_bytes)


def _signing_certificate_v2(cert):
    return cms.CMSAttribute(
        {
            "type": cms.CMSAttributeType("signing_certificate_v2"),
            "values": [
                tsp.SigningCertificateV2(
                    {
                        "certs": [
                            tsp.ESSCertIDv2(
                                {
                                    "hash_algorithm": algos.DigestAlgorithm(
                                        {"algorithm": "sha256"}
                                    ),
                                    "cert_hash": hashlib.sha256(cert.dump()).digest(),
                                    "issuer_serial": tsp.IssuerSerial(
                                        {
                                            "issuer": (
                                                x509.GeneralName(
                                                    {"directory_name": cert.issuer}
                                                ),
                                            ),
                                            "serial_number": cert.serial_number,
                                        }
                                    ),
                                }
                            ),
                        ]
                    }
                ),
            ],
        }
    )


def _signature_algorithm(key, hashalgo, pss):
    if isinstance(key, ec.EllipticCurvePrivateKey):
        return algos.SignedDigestAlgorithm(
            {"algorithm": "%s_ecdsa" % hashalgo}
        ), None
    if not pss:
        return algos.SignedDigestAlgorithm({"algorithm": "rsassa_pkcs1v15"}), None
    md = getattr(hashes, hashalgo.upper())
    salt_length = padding.calculate_max_pss_salt_length(key, md())
    return algos.SignedDigestAlgorithm(
        {
            "algorithm": "rsassa_pss",
            "parameters": algos.RSASSAPSSParams(
                {
                    "hash_algorithm": algos.DigestAlgorithm({"algorithm": hashalgo}),
                    "mask_gen_algorithm": algos.MaskGenAlgorithm(
                        {
                            "algorithm": algos.MaskGenAlgorithmId("mgf1"),
                            "parameters": {
                                "algorithm": algos.DigestAlgorithmId(hashalgo),
                            },
                        }
                    ),
                    "salt_length": algos.Integer(salt_length),
                    "trailer_field": algos.TrailerField(1),
                }
            ),
        }
    ), salt_length


def _sign_bytes(key, tosign, hashalgo, salt_length):
    md = getattr(hashes, hashalgo.upper())
    if isinstance(key, ec.EllipticCurvePrivateKey):
        return key.sign(tosign, ec.ECDSA(md()))
    if salt_length is not None:
        hasher = hashes.Hash(md())
        hasher.update(tosign)
        digest = hasher.finalize()
        return key.sign(
            digest,
            padding.PSS(mgf=padding.MGF1(md()), salt_length=salt_length),
            utils.Prehashed(md()),
        )
    return key.sign(tosign, padding.PKCS1v15(), md())


def sign(datau, key, cert, othercerts, hashalgo=DEFAULT_HASHALGO, attrs=True, pss=False, detached=False) -> bytes:
    """
    Sign data and wrap it in a DER encoded CMS SignedData.

    Parameters:
        datau: Data to sign (bytes).
        key: Private key to sign with (RSA or EC, from cryptography).
        cert: Certificate matching the key (x509.Certificate).
        othercerts: Additional certificates to embed (list).
        hashalgo: Hash algorithm name (str, default 'sha256').
        attrs: Whether to include signed attributes (bool, default True).
        pss: Use RSASSA-PSS instead of PKCS#1 v1.5 for RSA keys (bool).
        detached: Leave the data out of the envelope (bool, default False).

    Returns:
        The envelope as DER bytes, what a ``.p7m`` file holds.
    """
    hashalgo = hashalgo.lower()
    signed_value = getattr(hashlib, hashalgo)(datau).digest()

    cert = cert2asn(cert)
    certificates = [cert]
    for certo in othercerts or ():
        certificates.append(cert2asn(certo))

    signature_algorithm, salt_length = _signature_algorithm(key, hashalgo, pss)
    signer = {
        "version": "v1",
        "sid": cms.SignerIdentifier(
            {
                "issuer_and_serial_number": cms.IssuerAndSerialNumber(
                    {
                        "issuer": cert.issuer,
                        "serial_number": cert.serial_number,
                    }
                ),
            }
        ),
        "digest_algorithm": algos.DigestAlgorithm({"algorithm": hashalgo}),
        "signature_algorithm": signature_algorithm,
        "signature": b"",
    }
    if attrs:
        signer["signed_attrs"] = [
            cms.CMSAttribute(
                {
                    "type": cms.CMSAttributeType("content_type"),
                    "values": ("data",),
                }
            ),
            cms.CMSAttribute(
                {
                    "type": cms.CMSAttributeType("message_digest"),
                    "values": (signed_value,),
                }
            ),
            _signing_certificate_v2(cert),
        ]

    encap_content_info = {"content_type": "data"}
    if not detached:
        encap_content_info["content"] = datau

    datas = cms.ContentInfo(
        {
            "content_type": cms.ContentType("signed_data"),
            "content": cms.SignedData(
                {
                    "version": "v1",
                    "digest_algorithms": cms.DigestAlgorithms(
                        (algos.DigestAlgorithm({"algorithm": hashalgo}),)
                    ),
                    "encap_content_info": encap_content_info,
                    "certificates": certificates,
                    "signer_infos": [signer],
                }
            ),
        }
    )
    if attrs:
        tosign = datas["content"]["signer_infos"][0]["signed_attrs"].dump()
        # signed attributes are signed as an explicit SET OF
        tosign = b"\x31" + tosign[1:]
    else:
        tosign = datau
    datas["content"]["signer_infos"][0]["signature"] = _sign_bytes(key, tosign, hashalgo, salt_length)

    der = datas.dump()
    logger.debug('signed %d bytes with %s, envelope is %d bytes', len(datau), hashalgo, len(der))
    return der


def armor(der: bytes) -> bytes:
    return pem.armor(PEM_LABEL, der)
