"""Hermes: safe decoding of url-encoded request bodies."""

from .config import ParseOptions, QueryStringOptions, parse_size
from .encoding import RawPayload
from .exceptions import (
    BadRequest,
    ClientDisconnect,
    HermesError,
    HTTPError,
    PayloadTooLarge,
    UnsupportedMediaType,
)
from .forms import FormResult, FormStage, decode_form, parse_form
from .metadata import __version__
from .querystring import FormParser, QueryStringParser, parse_query, strict_parse_query, stringify
from .requests import Request
from .sanitize import sanitize

__all__ = [
    "BadRequest",
    "ClientDisconnect",
    "FormParser",
    "FormResult",
    "FormStage",
    "HTTPError",
    "HermesError",
    "ParseOptions",
    "PayloadTooLarge",
    "QueryStringOptions",
    "QueryStringParser",
    "RawPayload",
    "Request",
    "UnsupportedMediaType",
    "__version__",
    "decode_form",
    "parse_form",
    "parse_query",
    "parse_size",
    "sanitize",
    "strict_parse_query",
    "stringify",
]
