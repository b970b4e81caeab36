# *-* coding: utf-8 *-*
"""Failure kinds reported while unwrapping a signed envelope.

Every error carries a ``kind`` tag (the class name) and, when the failure
can be pinned to a position in the input, the byte ``offset`` at which
parsing stopped.
"""


class UnwrapError(ValueError):
    kind = 'UnwrapError'

    def __init__(self, message, offset=None):
        super().__init__(message)
        self.message = message
        self.offset = offset

    def __str__(self):
        if self.offset is None:
            return self.message
        return '%s at offset %d' % (self.message, self.offset)

    def __repr__(self):
        return '%s(%r, offset=%r)' % (self.kind, self.message, self.offset)


class EmptyInput(UnwrapError):
    kind = 'EmptyInput'


class MalformedPem(UnwrapError):
    kind = 'MalformedPem'


class MalformedDer(UnwrapError):
    kind = 'MalformedDer'


class UnsupportedContentType(UnwrapError):
    kind = 'UnsupportedContentType'


class UnsupportedEncoding(UnwrapError):
    kind = 'UnsupportedEncoding'


class DetachedSignature(UnwrapError):
    kind = 'DetachedSignature'


KINDS = (
    EmptyInput,
    MalformedPem,
    MalformedDer,
    UnsupportedContentType,
    UnsupportedEncoding,
    DetachedSignature,
)
