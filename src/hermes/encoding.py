"""Checks applied to a raw body before any parsing work happens."""

from __future__ import annotations

import codecs
from typing import TYPE_CHECKING, Iterable

from msgspec import Struct

from .exceptions import BadRequest, PayloadTooLarge, UnsupportedMediaType

if TYPE_CHECKING:
    from .config import ParseOptions

IDENTITY = "identity"


class RawPayload(Struct, frozen=True):
    """Fully buffered request body together with its declared metadata."""

    content: bytes
    content_type: str | None = None
    content_encoding: str | None = None
    content_length: int | None = None


def validate_content_encoding(value: str | None) -> None:
    """Raise :class:`UnsupportedMediaType` unless ``value`` means no compression."""

    if value is None:
        return
    normalized = value.strip().lower()
    if normalized and normalized != IDENTITY:
        raise UnsupportedMediaType(f'Unsupported content encoding "{value}"')


def media_type(value: str) -> str:
    """Return the lower-cased media type of a content-type header."""

    return value.split(";", 1)[0].strip().lower()


def validate_content_type(value: str | None, form_types: Iterable[str]) -> None:
    if value is None:
        return
    if media_type(value) not in {item.lower() for item in form_types}:
        raise UnsupportedMediaType(f'Unsupported content type "{value}"')


def validate_length(payload: RawPayload, limit: int) -> None:
    """Enforce the size limit and the declared content length."""

    declared = payload.content_length
    if declared is not None and declared > limit:
        raise PayloadTooLarge()
    actual = len(payload.content)
    if actual > limit:
        raise PayloadTooLarge()
    if declared is not None and declared != actual:
        raise BadRequest("request size did not match content length")


def decode_text(payload: RawPayload, encoding: str) -> str:
    """Decode the payload bytes using ``encoding``."""

    try:
        codec = codecs.lookup(encoding)
    except LookupError as exc:
        raise UnsupportedMediaType(f'Unsupported charset "{encoding}"') from exc
    try:
        return payload.content.decode(codec.name)
    except UnicodeDecodeError as exc:
        raise BadRequest(f"Invalid {codec.name} in request body") from exc


def validate_payload(payload: RawPayload, options: "ParseOptions") -> None:
    validate_content_encoding(payload.content_encoding)
    validate_content_type(payload.content_type, options.form_types)
    validate_length(payload, options.limit)


__all__ = [
    "IDENTITY",
    "RawPayload",
    "decode_text",
    "media_type",
    "validate_content_encoding",
    "validate_content_type",
    "validate_length",
    "validate_payload",
]
