"""Decode url-encoded request bodies into nested structures.

The pipeline runs ``validate -> parse -> sanitize -> assemble``. Only body
acquisition in :func:`parse_form` awaits; :func:`decode_form` is synchronous
and can be used directly on an already buffered :class:`RawPayload`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping

from msgspec import Struct

from .config import ParseOptions
from .encoding import RawPayload, decode_text, validate_content_encoding, validate_content_type, validate_payload
from .exceptions import BadRequest, HTTPError
from .querystring import parse_query
from .sanitize import sanitize

if TYPE_CHECKING:
    from .requests import Request

logger = logging.getLogger(__name__)


class FormStage(str, Enum):
    VALIDATING = "validating"
    PARSING = "parsing"
    SANITIZING = "sanitizing"
    ASSEMBLING = "assembling"


class FormResult(Struct, frozen=True):
    """Parsed form data returned alongside the text it was parsed from."""

    parsed: Any
    raw: str


def assemble(parsed: Any, raw: str, *, return_raw_body: bool = False) -> Any:
    if return_raw_body:
        return FormResult(parsed=parsed, raw=raw)
    return parsed


def parse_text(text: str, options: ParseOptions) -> Any:
    """Run the configured parsing strategy over ``text``.

    Errors raised by the strategy abort the pipeline. :class:`HTTPError`
    instances keep their status and message; anything else becomes a
    :class:`BadRequest` carrying the original message.
    """

    strategy = options.parser_override or parse_query
    try:
        return strategy(text, options.query_string_options)
    except HTTPError as exc:
        if exc.body is None:
            exc.body = text
        raise
    except Exception as exc:
        logger.debug("Form parser %r failed", strategy, exc_info=True)
        raise BadRequest(str(exc) or "Bad Request", body=text) from exc


def decode_form(payload: RawPayload, options: ParseOptions | Mapping[str, Any] | None = None) -> Any:
    """Validate, parse, sanitize and assemble an already buffered body."""

    resolved = ParseOptions.coerce(options)
    stage = FormStage.VALIDATING
    try:
        validate_payload(payload, resolved)
        text = decode_text(payload, resolved.encoding)
        stage = FormStage.PARSING
        parsed = parse_text(text, resolved)
        stage = FormStage.SANITIZING
        cleaned = sanitize(parsed, convert_empty_strings_to_null=resolved.convert_empty_strings_to_null)
        stage = FormStage.ASSEMBLING
        return assemble(cleaned, text, return_raw_body=resolved.return_raw_body)
    except HTTPError as exc:
        logger.debug("Rejected form body while %s: %s %s", stage.value, exc.status, exc.message)
        raise


async def parse_form(request: "Request", options: ParseOptions | Mapping[str, Any] | None = None) -> Any:
    """Read ``request``'s body and decode it as a url-encoded form.

    The declared ``content-encoding`` and ``content-type`` are checked before
    the body is awaited, so unsupported requests never buffer their payload.
    """

    resolved = ParseOptions.coerce(options)
    try:
        validate_content_encoding(request.header("content-encoding"))
        validate_content_type(request.header("content-type"), resolved.form_types)
    except HTTPError as exc:
        logger.debug("Rejected form body while %s: %s %s", FormStage.VALIDATING.value, exc.status, exc.message)
        raise
    payload = await request.payload()
    return decode_form(payload, resolved)


__all__ = [
    "FormResult",
    "FormStage",
    "assemble",
    "decode_form",
    "parse_form",
    "parse_text",
]
