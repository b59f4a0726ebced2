from __future__ import annotations

import msgspec
import pytest

from hermes.config import DEFAULT_LIMIT, FORM_CONTENT_TYPE, ParseOptions, QueryStringOptions, parse_size
from hermes.querystring import strict_parse_query


def test_defaults() -> None:
    options = ParseOptions()
    assert options.query_string_options == QueryStringOptions()
    assert options.query_string_options.depth == 5
    assert options.query_string_options.allow_dots is True
    assert options.query_string_options.array_limit == 20
    assert options.parser_override is None
    assert options.return_raw_body is False
    assert options.convert_empty_strings_to_null is False
    assert options.limit == DEFAULT_LIMIT == 57344
    assert options.form_types == (FORM_CONTENT_TYPE,)


def test_options_are_frozen() -> None:
    options = ParseOptions()
    with pytest.raises(AttributeError):
        options.return_raw_body = True  # type: ignore[misc]


def test_from_mapping_accepts_camel_case_and_aliases() -> None:
    options = ParseOptions.from_mapping(
        {
            "queryString": {"depth": 10, "allowDots": False},
            "qs": strict_parse_query,
            "returnRawBody": True,
            "convertEmptyStringsToNull": True,
            "limit": "1mb",
        }
    )
    assert options.query_string_options.depth == 10
    assert options.query_string_options.allow_dots is False
    assert options.query_string_options.array_limit == 20
    assert options.parser_override is strict_parse_query
    assert options.return_raw_body is True
    assert options.convert_empty_strings_to_null is True
    assert options.limit == 1024 * 1024


def test_each_option_defaults_independently() -> None:
    options = ParseOptions.from_mapping({"queryStringOptions": {"depth": 2}})
    assert options.query_string_options.depth == 2
    assert options.query_string_options.allow_dots is True
    assert options.return_raw_body is False


def test_from_mapping_rejects_unknown_options() -> None:
    with pytest.raises(msgspec.ValidationError):
        ParseOptions.from_mapping({"returnRawBodies": True})
    with pytest.raises(msgspec.ValidationError):
        ParseOptions.from_mapping({"queryString": {"depht": 3}})


def test_from_mapping_rejects_duplicate_aliases() -> None:
    with pytest.raises(ValueError):
        ParseOptions.from_mapping({"queryString": {}, "queryStringOptions": {}})


def test_from_mapping_validates_types_and_ranges() -> None:
    with pytest.raises(msgspec.ValidationError):
        ParseOptions.from_mapping({"returnRawBody": "yes"})
    with pytest.raises(msgspec.ValidationError):
        ParseOptions.from_mapping({"queryString": {"depth": -1}})
    with pytest.raises(msgspec.ValidationError):
        ParseOptions.from_mapping({"parserOverride": "qs"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"depth": -1},
        {"array_limit": -1},
        {"parameter_limit": 0},
        {"delimiter": ""},
    ],
)
def test_query_string_options_validate_ranges(kwargs: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        QueryStringOptions(**kwargs)  # type: ignore[arg-type]


def test_parse_options_validate_limit_and_override() -> None:
    with pytest.raises(ValueError):
        ParseOptions(limit=-1)
    with pytest.raises(ValueError):
        ParseOptions(parser_override="not-callable")


def test_coerce() -> None:
    options = ParseOptions(return_raw_body=True)
    assert ParseOptions.coerce(options) is options
    assert ParseOptions.coerce(None) == ParseOptions()
    assert ParseOptions.coerce({"returnRawBody": True}).return_raw_body is True


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1024, 1024),
        ("56kb", 57344),
        ("1MB", 1048576),
        ("1.5kb", 1536),
        ("100", 100),
        (" 2 gb ", 2 * 1024**3),
    ],
)
def test_parse_size(value: int | str, expected: int) -> None:
    assert parse_size(value) == expected


@pytest.mark.parametrize("value", ["lots", "5tb", True, 1.5])
def test_parse_size_rejects_garbage(value: object) -> None:
    with pytest.raises(ValueError):
        parse_size(value)  # type: ignore[arg-type]
