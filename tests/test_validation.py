from __future__ import annotations

import pytest

from postmatter.config import FrontMatterSchema
from postmatter.content import parse_document
from postmatter.errors import FrontMatterValidationError, MissingRequiredField, TypeMismatch
from jsonschema import Draft202012Validator

from postmatter.validation import build_json_schema, collect_violations, parse_boolean, validate_front_matter


def _front_matter(block: str):
    return parse_document(f"---\n{block}\n---\nBody").metadata


def test_valid_front_matter_has_no_violations() -> None:
    front_matter = _front_matter(
        "layout: post\ntitle: Hello World\ntags: [a]\ncategories:\n  - b\ncomments: true\nimage: x.png"
    )

    assert collect_violations(front_matter) == []
    validate_front_matter(front_matter)


def test_reports_every_missing_required_field() -> None:
    violations = collect_violations(_front_matter("description: no layout or title"))

    assert [type(v) for v in violations] == [MissingRequiredField, MissingRequiredField]
    assert [v.field for v in violations] == ["layout", "title"]


def test_blank_required_scalar_counts_as_missing() -> None:
    violations = collect_violations(_front_matter('layout: post\ntitle: ""'))

    assert len(violations) == 1
    assert isinstance(violations[0], MissingRequiredField)
    assert violations[0].field == "title"


def test_scalar_tags_is_a_type_mismatch() -> None:
    violations = collect_violations(_front_matter("layout: post\ntitle: Hi\ntags: dotnet"))

    assert len(violations) == 1
    mismatch = violations[0]
    assert isinstance(mismatch, TypeMismatch)
    assert (mismatch.field, mismatch.expected, mismatch.actual) == ("tags", "sequence", "scalar")


def test_shape_mismatches_name_the_actual_kind() -> None:
    violations = collect_violations(
        _front_matter("layout: post\ntitle:\n  - not\n  - scalar\ncategories:\n  main: dotnet")
    )

    assert [(v.field, v.expected, v.actual) for v in violations] == [
        ("title", "scalar", "sequence"),
        ("categories", "sequence", "mapping"),
    ]


@pytest.mark.parametrize("value", ["true", "false", "True", "FALSE"])
def test_comments_accepts_booleans(value: str) -> None:
    assert collect_violations(_front_matter(f"layout: post\ntitle: Hi\ncomments: {value}")) == []


@pytest.mark.parametrize(("block", "actual"), [("comments: yes", "scalar"), ("comments: [true]", "sequence")])
def test_comments_rejects_non_booleans(block: str, actual: str) -> None:
    violations = collect_violations(_front_matter(f"layout: post\ntitle: Hi\n{block}"))

    assert [(v.field, v.expected, v.actual) for v in violations] == [("comments", "boolean", actual)]


def test_violations_are_collected_not_short_circuited() -> None:
    front_matter = _front_matter("layout: post\ntags: one\ncomments: maybe")

    with pytest.raises(FrontMatterValidationError) as excinfo:
        validate_front_matter(front_matter)

    violations = excinfo.value.violations
    assert [type(v) for v in violations] == [MissingRequiredField, TypeMismatch, TypeMismatch]
    assert [v.field for v in violations] == ["title", "tags", "comments"]


def test_custom_schema_is_applied() -> None:
    schema = FrontMatterSchema(required=["title", "date"], sequences=["authors"], booleans=[])
    front_matter = _front_matter("title: Hi\nauthors: someone\ncomments: sometimes")

    violations = collect_violations(front_matter, schema)

    assert [(type(v), v.field) for v in violations] == [
        (MissingRequiredField, "date"),
        (TypeMismatch, "authors"),
    ]


def test_parse_boolean() -> None:
    front_matter = _front_matter("a: true\nb: False\nc: 1")

    assert parse_boolean(front_matter.get("a")) is True
    assert parse_boolean(front_matter.get("b")) is False
    assert parse_boolean(front_matter.get("c")) is None
    assert parse_boolean(None) is None


def test_json_schema_is_a_valid_draft_2020_12_schema() -> None:
    json_schema = build_json_schema(FrontMatterSchema())

    Draft202012Validator.check_schema(json_schema)
    assert json_schema["allOf"] == [{"required": ["layout"]}, {"required": ["title"]}]
    assert json_schema["properties"]["tags"]["type"] == "array"
    assert json_schema["properties"]["comments"]["type"] == "string"
    assert "not" in json_schema["properties"]["title"]


def test_boolean_rule_wins_over_scalar_rule() -> None:
    schema = FrontMatterSchema(scalars=["draft"], booleans=["draft"])
    violations = collect_violations(_front_matter("layout: post\ntitle: Hi\ndraft: perhaps"), schema)

    assert [(v.field, v.expected, v.actual) for v in violations] == [("draft", "boolean", "scalar")]


def test_required_field_without_kind_rule_may_hold_any_value() -> None:
    schema = FrontMatterSchema(required=["layout", "title", "author"])
    front_matter = _front_matter("layout: post\ntitle: Hi\nauthor:\n  name: Sam")

    assert collect_violations(front_matter, schema) == []
    assert [v.field for v in collect_violations(_front_matter('layout: post\ntitle: Hi\nauthor: " "'), schema)] == [
        "author"
    ]
