"""Bracket and dot notation expansion for url-encoded strings.

``a[b][c]=1`` and ``a.b.c=1`` both expand to ``{"a": {"b": {"c": "1"}}}``.
Expansion is bounded by :attr:`QueryStringOptions.depth`; segments past the
limit are kept verbatim as a single key instead of being rejected.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Mapping, Protocol
from urllib.parse import quote, unquote_plus

from .config import QueryStringOptions
from .exceptions import BadRequest

_DOT_SEGMENT = re.compile(r"\.([^.\[]+)")
_BRACKET_SEGMENT = re.compile(r"\[[^\[\]]*\]")

# Own properties of a JavaScript ``Object.prototype``.
PROTOTYPE_KEYS = frozenset(
    {
        "__defineGetter__",
        "__defineSetter__",
        "__lookupGetter__",
        "__lookupSetter__",
        "__proto__",
        "constructor",
        "hasOwnProperty",
        "isPrototypeOf",
        "propertyIsEnumerable",
        "toLocaleString",
        "toString",
        "valueOf",
    }
)


class _Hole:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<hole>"


_HOLE = _Hole()


class FormParser(Protocol):
    """Callable turning decoded body text into a nested mapping."""

    def __call__(self, text: str, options: QueryStringOptions) -> Mapping[str, Any]:  # pragma: no cover - protocol
        ...


class QueryStringParser:
    """Expand ``key=value`` pairs into nested dictionaries and lists.

    With ``strict`` enabled, an explicit list index above
    ``options.array_limit`` raises :class:`~hermes.exceptions.BadRequest`
    instead of degrading into a mapping key.
    """

    __slots__ = ("options", "strict")

    def __init__(self, options: QueryStringOptions | None = None, *, strict: bool = False) -> None:
        self.options = options or QueryStringOptions()
        self.strict = strict

    def parse(self, text: str) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if not text:
            return result
        for key, value in self._pairs(text).items():
            expanded = self._expand(key, value)
            if expanded is None:
                continue
            result = _merge(result, expanded, self.options.allow_prototypes)
        return _compact(result)

    def _decode(self, raw: str) -> str:
        return unquote_plus(raw, encoding=self.options.charset, errors="replace")

    def _pairs(self, text: str) -> dict[str, Any]:
        options = self.options
        pairs: dict[str, Any] = {}
        for part in text.split(options.delimiter)[: options.parameter_limit]:
            bracket_equals = part.find("]=")
            position = part.find("=") if bracket_equals == -1 else bracket_equals + 1
            value: str | None
            if position == -1:
                key = self._decode(part)
                value = None if options.strict_null_handling else ""
            else:
                key = self._decode(part[:position])
                value = self._decode(part[position + 1 :])
            if key in pairs:
                pairs[key] = _combine(pairs[key], value)
            else:
                pairs[key] = value
        return pairs

    def _blocked(self, name: str) -> bool:
        return not self.options.allow_prototypes and name in PROTOTYPE_KEYS

    def _expand(self, key: str, value: Any) -> Any:
        if not key:
            return None
        options = self.options
        if options.allow_dots:
            key = _DOT_SEGMENT.sub(r"[\1]", key)
        segments = list(_BRACKET_SEGMENT.finditer(key)) if options.depth > 0 else []
        parent = key[: segments[0].start()] if segments else key
        chain: list[str] = []
        if parent:
            if self._blocked(parent):
                return None
            chain.append(parent)
        for position, segment in enumerate(segments):
            if position >= options.depth:
                chain.append(f"[{key[segment.start():]}]")
                break
            if self._blocked(segment.group()[1:-1]):
                return None
            chain.append(segment.group())
        return self._build(chain, value)

    def _build(self, chain: list[str], value: Any) -> Any:
        options = self.options
        leaf = value
        for root in reversed(chain):
            if root == "[]" and options.parse_arrays:
                leaf = list(leaf) if isinstance(leaf, list) else [leaf]
                continue
            clean = root[1:-1] if len(root) >= 2 and root[0] == "[" and root[-1] == "]" else root
            if not options.parse_arrays and clean == "":
                leaf = {"0": leaf}
                continue
            if root == clean or not options.parse_arrays or not _is_index(clean):
                leaf = {clean: leaf}
            elif _exceeds(clean, options.array_limit):
                if self.strict:
                    raise BadRequest(f"Index of array [{clean}] is overstep limit: {options.array_limit}")
                leaf = {clean: leaf}
            else:
                leaf = [_HOLE] * int(clean) + [leaf]
        return leaf


def parse_query(text: str, options: QueryStringOptions | None = None) -> dict[str, Any]:
    """Parse ``text`` with bracket and dot expansion."""

    return QueryStringParser(options).parse(text)


def strict_parse_query(text: str, options: QueryStringOptions | None = None) -> dict[str, Any]:
    """Parse ``text`` rejecting list indices above the configured array limit."""

    return QueryStringParser(options, strict=True).parse(text)


def stringify(structure: Mapping[str, Any], *, allow_dots: bool = False, delimiter: str = "&") -> str:
    """Encode ``structure`` back into url-encoded bracket (or dot) notation.

    Lists are written with explicit indices and ``None`` values as bare keys.
    """

    pairs: list[str] = []
    for key, value in structure.items():
        _stringify_into(pairs, quote(str(key), safe=""), value, allow_dots)
    return delimiter.join(pairs)


def _stringify_into(pairs: list[str], prefix: str, value: Any, allow_dots: bool) -> None:
    if isinstance(value, Mapping):
        for key, item in value.items():
            encoded = quote(str(key), safe="")
            child = f"{prefix}.{encoded}" if allow_dots else f"{prefix}[{encoded}]"
            _stringify_into(pairs, child, item, allow_dots)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _stringify_into(pairs, f"{prefix}[{index}]", item, allow_dots)
    elif value is None:
        pairs.append(prefix)
    else:
        pairs.append(f"{prefix}={quote(str(value), safe='')}")


def _is_index(segment: str) -> bool:
    return segment.isascii() and segment.isdigit() and (segment == "0" or segment[0] != "0")


def _exceeds(segment: str, limit: int) -> bool:
    # Compare digit counts first; int() refuses very long digit strings.
    return len(segment) > len(str(limit)) or int(segment) > limit


def _combine(first: Any, second: Any) -> list[Any]:
    left = first if isinstance(first, list) else [first]
    right = second if isinstance(second, list) else [second]
    return left + right


def _entries(value: dict[str, Any] | list[Any]) -> Iterator[tuple[str, Any]]:
    if isinstance(value, dict):
        yield from value.items()
        return
    for index, item in enumerate(value):
        if item is not _HOLE:
            yield str(index), item


def _assign(target: list[Any], index: int, item: Any) -> None:
    if index >= len(target):
        target.extend([_HOLE] * (index - len(target) + 1))
    target[index] = item


def _merge(target: Any, source: Any, allow_prototypes: bool) -> Any:
    if source is None or (isinstance(source, str) and not source):
        return target
    if not isinstance(source, (dict, list)):
        if isinstance(target, list):
            target.append(source)
        elif isinstance(target, dict):
            if allow_prototypes or source not in PROTOTYPE_KEYS:
                target[source] = True
        else:
            return [target, source]
        return target
    if not isinstance(target, (dict, list)):
        if isinstance(source, list):
            return [target, *(item for item in source if item is not _HOLE)]
        return [target, source]
    if isinstance(target, list):
        if isinstance(source, list):
            for index, item in enumerate(source):
                if item is _HOLE:
                    continue
                existing = target[index] if index < len(target) else _HOLE
                if existing is _HOLE:
                    _assign(target, index, item)
                elif isinstance(existing, (dict, list)) and isinstance(item, (dict, list)):
                    target[index] = _merge(existing, item, allow_prototypes)
                else:
                    target.append(item)
            return target
        target = dict(_entries(target))
    for key, value in _entries(source):
        if key in target:
            target[key] = _merge(target[key], value, allow_prototypes)
        else:
            target[key] = value
    return target


def _compact(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _compact(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_compact(item) for item in value if item is not _HOLE]
    return value


__all__ = [
    "PROTOTYPE_KEYS",
    "FormParser",
    "QueryStringParser",
    "parse_query",
    "stringify",
    "strict_parse_query",
]
