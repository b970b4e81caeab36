# *-* coding: utf-8 *-*
"""Header level view of DER bytes on top of ``asn1crypto.parser``.

asn1crypto does the TLV parsing; this module adds absolute offsets for
error messages, rejects indefinite lengths and maps parser failures onto
the unwrap error taxonomy.
"""
import contextlib
import logging

import attr
from asn1crypto import parser

from unp7m.errors import MalformedDer, UnsupportedEncoding, UnwrapError


logger = logging.getLogger(__name__)

UNIVERSAL = 0
CONTEXT = 2

PRIMITIVE = 0
CONSTRUCTED = 1

OCTET_STRING = 4
SET = 17

# most elements fit, larger ones are re-read from the whole buffer
WINDOW = 0x10000

UNIVERSAL_NAMES = {
    2: 'INTEGER',
    4: 'OCTET STRING',
    5: 'NULL',
    6: 'OBJECT IDENTIFIER',
    16: 'SEQUENCE',
    17: 'SET',
}


def tag_name(class_, tag):
    if class_ == UNIVERSAL:
        return UNIVERSAL_NAMES.get(tag, 'universal tag %d' % tag)
    if class_ == CONTEXT:
        return '[%d]' % tag
    return 'class %d tag %d' % (class_, tag)


@attr.s(frozen=True, slots=True)
class Element(object):
    class_ = attr.ib(type=int)
    method = attr.ib(type=int)
    tag = attr.ib(type=int)
    header = attr.ib(type=bytes)
    contents = attr.ib(type=bytes, repr=lambda value: '<%d bytes>' % len(value))
    offset = attr.ib(type=int)

    @property
    def name(self):
        return tag_name(self.class_, self.tag)

    @property
    def length(self):
        return len(self.header) + len(self.contents)

    @property
    def value_offset(self):
        return self.offset + len(self.header)

    @property
    def end(self):
        return self.offset + self.length

    def is_a(self, class_, tag):
        return self.class_ == class_ and self.tag == tag


def read(data, offset=0, strict=False):
    """
    Parse the element at the start of ``data``.

    Parameters:
        data: bytes starting with a DER element.
        offset: absolute offset of ``data[0]``, only used in errors.
        strict: reject bytes after the element.

    Raises:
        MalformedDer: asn1crypto could not parse the element.
        UnsupportedEncoding: the element uses an indefinite length.
    """
    try:
        class_, method, tag, header, contents, trailer = parser.parse(data, strict=strict)
    except ValueError as ex:
        raise MalformedDer(str(ex).strip(), offset)
    if trailer:
        # asn1crypto reports the end-of-contents octets of BER indefinite lengths here
        raise UnsupportedEncoding('indefinite length encoding', offset)
    return Element(class_, method, tag, header, contents, offset)


def _read_at(data, pointer, base):
    if pointer + WINDOW < len(data):
        try:
            return read(data[pointer:pointer + WINDOW], base + pointer)
        except MalformedDer:
            pass
    return read(data[pointer:], base + pointer)


def children(element):
    """Yield the elements inside a constructed ``element``."""
    data = element.contents
    pointer = 0
    while pointer < len(data):
        child = _read_at(data, pointer, element.value_offset)
        yield child
        pointer += child.length


def expect(element, class_, tag, what):
    if element is None:
        raise MalformedDer('%s is missing' % what)
    if not element.is_a(class_, tag):
        raise MalformedDer(
            '%s: expected %s, found %s' % (what, tag_name(class_, tag), element.name), element.offset
        )
    return element


@contextlib.contextmanager
def decoding(what, offset=None):
    """Turn asn1crypto decoding failures into ``MalformedDer``."""
    try:
        yield
    except UnwrapError:
        raise
    except ValueError as ex:
        raise MalformedDer('%s: %s' % (what, str(ex).strip()), offset)


def octet_string_contents(element):
    """
    Return the contents of an OCTET STRING.

    A constructed OCTET STRING is the concatenation of its nested OCTET
    STRING fragments, which may themselves be constructed.
    """
    expect(element, UNIVERSAL, OCTET_STRING, 'eContent')
    if element.method == PRIMITIVE:
        return element.contents
    chunks = []
    pending = [children(element)]
    # explicit stack keeps deep nesting from hitting the recursion limit
    while pending:
        child = next(pending[-1], None)
        if child is None:
            pending.pop()
            continue
        if not child.is_a(UNIVERSAL, OCTET_STRING):
            raise MalformedDer('OCTET STRING fragment has tag %s' % child.name, child.offset)
        if child.method == CONSTRUCTED:
            pending.append(children(child))
        else:
            chunks.append(child.contents)
    logger.debug('reassembled constructed OCTET STRING from %d fragments', len(chunks))
    return b''.join(chunks)
