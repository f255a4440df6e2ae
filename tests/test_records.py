import datetime
from types import SimpleNamespace

import pytest
import sqlalchemy

from uiapi.attr_parse import check_rules, coerce_value, parse_attr, parse_bool, parse_rules, validate_payload
from uiapi.errors import FieldValidationError, UnknownEntity
from uiapi.query import Page
from uiapi.records import format_record, nest_record, reorder_record
from uiapi.registry import EntityRegistry

from conftest import Country, Person, Tag


RECORD = {"id": 1, "country.name_eng": "Maldives", "first_name_eng": "person00", "country.code": "MDV"}


def test_reorder_record() -> None:
    tokens = ["first_name_eng", "country.name_eng", "id"]
    result = reorder_record(RECORD, tokens)
    assert list(result) == tokens
    assert result["country.name_eng"] == "Maldives"
    assert reorder_record(RECORD, None) is RECORD
    assert reorder_record(RECORD, []) == {}
    assert format_record(RECORD, [], nested=False) == format_record(RECORD, []) == {}


def test_nest_record() -> None:
    tokens = ["country.name_eng", "id", "country.code", "missing"]
    result = nest_record(RECORD, tokens)
    assert result == {"country": {"name_eng": "Maldives", "code": "MDV"}, "id": 1}
    assert list(result) == ["country", "id"]


def test_format_record() -> None:
    tokens = ["id", "country.name_eng"]
    assert format_record(RECORD, tokens, nested=False) == {"id": 1, "country.name_eng": "Maldives"}
    assert format_record(RECORD, tokens) == {"id": 1, "country": {"name_eng": "Maldives"}}


def test_page_last_page() -> None:
    assert Page([], 25, 2, 10).last_page == 3
    assert Page([], 0, 1, 10).last_page == 1
    assert Page([], 30, 1, 10).last_page == 3


def test_registry() -> None:
    registry = EntityRegistry()
    assert registry.register(Person) == "person"
    assert registry.register(Country, "Land") == "land"
    registry.register(Tag)
    assert registry.resolve("PERSON") is Person
    assert "Land" in registry
    assert registry.names == ["land", "person", "tag"]
    assert len(registry) == 3
    assert registry.name_for(Country) == "land"
    assert registry.name_for(object) is None
    with pytest.raises(UnknownEntity) as exc_info:
        registry.resolve("Unknown")
    assert exc_info.value.message == "Model 'Unknown' not found or missing schema"
    with pytest.raises(UnknownEntity):
        registry.resolve("tag")


@pytest.mark.parametrize(
    "value, expected",
    [(True, True), (0, False), ("Yes", True), (" off ", False), ("1", True)],
)
def test_parse_bool(value, expected: bool) -> None:
    assert parse_bool(value) is expected


def test_parse_bool_invalid() -> None:
    with pytest.raises(ValueError):
        parse_bool("maybe")


def test_parse_attr() -> None:
    date_column = SimpleNamespace(type=sqlalchemy.Date())
    assert parse_attr(date_column, "2020-02-03") == datetime.date(2020, 2, 3)
    datetime_column = SimpleNamespace(type=sqlalchemy.DateTime())
    assert parse_attr(datetime_column, "2020-02-03 10:11:12") == datetime.datetime(2020, 2, 3, 10, 11, 12)
    int_column = SimpleNamespace(type=sqlalchemy.Integer())
    assert parse_attr(int_column, " 12 ") == 12
    assert parse_attr(int_column, None) is None
    json_column = SimpleNamespace(type=sqlalchemy.JSON())
    assert parse_attr(json_column, {"a": [1]}) == {"a": [1]}
    with pytest.raises(ValueError):
        parse_attr(int_column, "twelve")


def test_coerce_value_keeps_unconvertible_values() -> None:
    int_column = SimpleNamespace(type=sqlalchemy.Integer())
    assert coerce_value(int_column, "3") == 3
    assert coerce_value(int_column, "three") == "three"


def test_parse_rules() -> None:
    assert parse_rules("required|string|max:255") == [("required", None), ("string", None), ("max", "255")]
    assert parse_rules(["Nullable", "in:a,b"]) == [("nullable", None), ("in", "a,b")]
    assert parse_rules(None) == []


def test_check_rules() -> None:
    rules = parse_rules("required|string|max:5")
    assert check_rules("name", "", rules) == ["The name field is required."]
    assert check_rules("name", "abcdef", rules) == ["The name field must not be greater than 5."]
    assert check_rules("name", 12, parse_rules("string")) == ["The name field must be a string."]
    assert check_rules("age", "x", parse_rules("integer")) == ["The age field must be an integer."]
    assert check_rules("age", 12, parse_rules("integer|min:18")) == ["The age field must be at least 18."]
    assert check_rules("gender", "X", parse_rules("in:M,F")) == ["The selected gender is invalid."]
    assert check_rules("dob", "not a date", parse_rules("date")) == ["The dob field must be a valid date."]
    assert check_rules("note", None, parse_rules("nullable|string")) == []


def test_validate_payload() -> None:
    schema = Person._s_schema
    payload = {"id": 99, "first_name_eng": "Ann", "date_of_birth": "2001-02-03", "country_id": "2", "nickname": "x"}
    attributes = validate_payload(Person, schema, payload)
    assert attributes == {
        "id": 99,
        "first_name_eng": "Ann",
        "date_of_birth": datetime.date(2001, 2, 3),
        "country_id": 2,
    }


def test_validate_payload_collects_errors() -> None:
    schema = Person._s_schema
    with pytest.raises(FieldValidationError) as exc_info:
        validate_payload(Person, schema, {"gender": "X", "date_of_birth": "yesterday"})
    assert exc_info.value.errors == {
        "first_name_eng": ["The first_name_eng field is required."],
        "gender": ["The selected gender is invalid."],
        "date_of_birth": ["The date_of_birth field must be a valid date."],
    }
    assert exc_info.value.to_dict()["message"] == "Validation failed."
    assert exc_info.value.status_code == 422


def test_validate_partial_payload() -> None:
    schema = Person._s_schema
    assert validate_payload(Person, schema, {"gender": "F"}, partial=True) == {"gender": "F"}
    assert validate_payload(Person, schema, {"country_id": ""}, partial=True) == {"country_id": None}
