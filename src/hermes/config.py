"""Configuration objects for form decoding."""

from __future__ import annotations

import re
from typing import Any, Mapping

import msgspec
from msgspec import Struct

DEFAULT_LIMIT = 56 * 1024
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(b|kb|mb|gb)?\s*$", re.IGNORECASE)
_SIZE_UNITS = {"b": 1, "kb": 1 << 10, "mb": 1 << 20, "gb": 1 << 30}
_OPTION_ALIASES = {"queryString": "queryStringOptions", "qs": "parserOverride"}


def parse_size(value: int | str) -> int:
    """Return ``value`` in bytes, accepting integers or strings like ``"56kb"``."""

    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid size: {value!r}")
    match = _SIZE_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid size: {value!r}")
    number, unit = match.groups()
    return int(float(number) * _SIZE_UNITS[(unit or "b").lower()])


class QueryStringOptions(Struct, frozen=True, rename="camel", forbid_unknown_fields=True):
    """Options controlling how a flat ``key=value`` string expands into nested data."""

    depth: int = 5
    allow_dots: bool = True
    array_limit: int = 20
    parameter_limit: int = 1000
    delimiter: str = "&"
    parse_arrays: bool = True
    strict_null_handling: bool = False
    allow_prototypes: bool = False
    charset: str = "utf-8"

    def __post_init__(self) -> None:
        if self.depth < 0:
            raise ValueError("depth must be zero or greater")
        if self.array_limit < 0:
            raise ValueError("array_limit must be zero or greater")
        if self.parameter_limit < 1:
            raise ValueError("parameter_limit must be at least 1")
        if not self.delimiter:
            raise ValueError("delimiter must not be empty")


class ParseOptions(Struct, frozen=True, rename="camel", forbid_unknown_fields=True):
    """Per-call configuration for :func:`hermes.forms.parse_form`.

    ``parser_override`` accepts any :class:`~hermes.querystring.FormParser`.
    ``limit`` is the maximum body size in bytes.
    """

    query_string_options: QueryStringOptions = QueryStringOptions()
    parser_override: Any = None
    return_raw_body: bool = False
    convert_empty_strings_to_null: bool = False
    limit: int = DEFAULT_LIMIT
    encoding: str = "utf-8"
    form_types: tuple[str, ...] = (FORM_CONTENT_TYPE,)

    def __post_init__(self) -> None:
        if self.limit < 0:
            raise ValueError("limit must be zero or greater")
        if self.parser_override is not None and not callable(self.parser_override):
            raise ValueError("parser_override must be callable")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ParseOptions":
        """Build options from camelCase keys such as ``returnRawBody``.

        ``queryString`` and ``qs`` are accepted as aliases for
        ``queryStringOptions`` and ``parserOverride``.
        """

        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name in values:
                raise ValueError(f"Duplicate option: {name}")
            values[name] = value
        if "limit" in values:
            values["limit"] = parse_size(values["limit"])
        return msgspec.convert(values, type=cls)

    @classmethod
    def coerce(cls, options: "ParseOptions | Mapping[str, Any] | None") -> "ParseOptions":
        if options is None:
            return cls()
        if isinstance(options, ParseOptions):
            return options
        return cls.from_mapping(options)


__all__ = [
    "DEFAULT_LIMIT",
    "FORM_CONTENT_TYPE",
    "ParseOptions",
    "QueryStringOptions",
    "parse_size",
]
