# *-* coding: utf-8 *-*
"""Guess the name and type of the content found inside a ``.p7m`` file."""
import ntpath
import posixpath
import types

import attr


P7M_SUFFIX = '.p7m'
DEFAULT_CONTENT_TYPE = ('application/octet-stream', False)

TEXT_TYPES = {
    '.xml': 'application/xml',
    '.txt': 'text/plain',
    '.html': 'text/html',
    '.htm': 'text/html',
    '.json': 'application/json',
    '.csv': 'text/csv',
    '.md': 'text/markdown',
    '.eml': 'message/rfc822',
}

BINARY_TYPES = {
    '.pdf': 'application/pdf',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.xls': 'application/vnd.ms-excel',
    '.xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.zip': 'application/zip',
    '.p7m': 'application/pkcs7-mime',
}

CONTENT_TYPES = types.MappingProxyType(dict(
    [(ext, (mime, True)) for ext, mime in TEXT_TYPES.items()]
    + [(ext, (mime, False)) for ext, mime in BINARY_TYPES.items()]
))


@attr.s(frozen=True, slots=True)
class DecodedPayload(object):
    data = attr.ib(type=bytes, repr=lambda data: '<%d bytes>' % len(data))
    suggested_name = attr.ib(type=str)
    mime_type = attr.ib(type=str)
    is_text = attr.ib(type=bool)
    depth = attr.ib(type=int, default=1)

    def text(self, encoding='utf-8', errors='replace'):
        return self.data.decode(encoding, errors)


def basename(filename):
    # names may come from either a Windows or a POSIX file picker
    return posixpath.basename(ntpath.basename(filename))


def suggested_name(original: str) -> str:
    """Strip one trailing ``.p7m`` (any case) from the base name."""
    name = basename(original)
    if name.lower().endswith(P7M_SUFFIX):
        name = name[:-len(P7M_SUFFIX)]
    return name


def extension(name: str) -> str:
    ext = posixpath.splitext(name)[1]
    return ext.lower()


def content_type(name: str) -> tuple:
    return CONTENT_TYPES.get(extension(name), DEFAULT_CONTENT_TYPE)


def is_p7m(name: str) -> bool:
    return name.lower().endswith(P7M_SUFFIX)


def classify(data: bytes, original_name: str, depth: int = 1) -> DecodedPayload:
    name = suggested_name(original_name)
    mime_type, is_text = content_type(name)
    return DecodedPayload(bytes(data), name, mime_type, is_text, depth)
