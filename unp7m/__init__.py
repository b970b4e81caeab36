# *-* coding: utf-8 *-*
__version__ = '1.0.0'

from unp7m.classifier import DecodedPayload, classify, content_type, suggested_name
from unp7m.errors import (
    UnwrapError,
    EmptyInput,
    MalformedPem,
    MalformedDer,
    UnsupportedContentType,
    UnsupportedEncoding,
    DetachedSignature,
)
from unp7m.normalizer import Encoding
from unp7m.unwrapper import UnwrapResult, unwrap, try_unwrap, unwrap_nested, unwrap_file
