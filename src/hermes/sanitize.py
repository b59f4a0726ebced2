"""Post-processing applied to every parsed form structure."""

from __future__ import annotations

from typing import Any, Mapping

# Keys that would reach the shared prototype once the structure is handed to a
# JavaScript consumer.
UNSAFE_KEYS = frozenset({"__proto__"})


def sanitize(structure: Any, *, convert_empty_strings_to_null: bool = False) -> Any:
    """Return a copy of ``structure`` without prototype accessor keys.

    The removal applies to mappings at every depth, including mappings nested
    inside lists. With ``convert_empty_strings_to_null`` every empty-string
    value becomes ``None``. Keys are never rewritten, so ``{"": "foo"}`` keeps
    its empty key.
    """

    if isinstance(structure, Mapping):
        return {
            key: sanitize(value, convert_empty_strings_to_null=convert_empty_strings_to_null)
            for key, value in structure.items()
            if key not in UNSAFE_KEYS
        }
    if isinstance(structure, (list, tuple)):
        return [sanitize(item, convert_empty_strings_to_null=convert_empty_strings_to_null) for item in structure]
    if convert_empty_strings_to_null and isinstance(structure, str) and not structure:
        return None
    return structure


__all__ = ["UNSAFE_KEYS", "sanitize"]
