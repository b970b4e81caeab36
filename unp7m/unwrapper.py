# *-* coding: utf-8 *-*
import logging
import os

import attr

from unp7m import classifier, normalizer, signeddata
from unp7m.errors import UnwrapError


logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 5


@attr.s(frozen=True, slots=True)
class UnwrapResult(object):
    payload = attr.ib(default=None)
    error = attr.ib(default=None)

    @property
    def ok(self):
        return self.error is None

    @property
    def kind(self):
        return None if self.error is None else self.error.kind


def unwrap(envelope: bytes, original_filename: str) -> classifier.DecodedPayload:
    """
    Extract the signed content from a PKCS#7/CMS SignedData envelope.

    Parameters:
        envelope: DER or PEM encoded envelope.
        original_filename: name of the ``.p7m`` file, used to guess the
            name and type of the content.

    Returns:
        DecodedPayload with the content bytes, suggested name and MIME type.

    Raises:
        UnwrapError: one of its subclasses, see ``unp7m.errors``.
    """
    der = normalizer.to_der(envelope)
    logger.debug('%s: %d DER bytes', original_filename, len(der))
    content = signeddata.extract_content(der)
    return classifier.classify(content, original_filename)


def try_unwrap(envelope: bytes, original_filename: str) -> UnwrapResult:
    """Like ``unwrap`` but report failures in the returned result."""
    try:
        return UnwrapResult(payload=unwrap(envelope, original_filename))
    except UnwrapError as ex:
        logger.debug('%s: %r', original_filename, ex)
        return UnwrapResult(error=ex)


def unwrap_nested(envelope: bytes, original_filename: str, max_depth: int = DEFAULT_MAX_DEPTH) -> classifier.DecodedPayload:
    """
    Peel envelopes signed more than once, e.g. ``fattura.xml.p7m.p7m``.

    Unwrapping continues while the suggested name still ends in ``.p7m``
    and at most ``max_depth`` envelopes are removed.
    """
    if max_depth < 1:
        raise ValueError('max_depth must be at least 1')
    payload = unwrap(envelope, original_filename)
    while classifier.is_p7m(payload.suggested_name) and payload.depth < max_depth:
        inner = unwrap(payload.data, payload.suggested_name)
        payload = attr.evolve(inner, depth=payload.depth + 1)
    logger.debug('%s: unwrapped %d envelope(s)', original_filename, payload.depth)
    return payload


def unwrap_file(path: str, nested: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> classifier.DecodedPayload:
    with open(path, 'rb') as fp:
        envelope = fp.read()
    name = os.path.basename(path)
    if nested:
        return unwrap_nested(envelope, name, max_depth)
    return unwrap(envelope, name)
