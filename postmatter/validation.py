"""Schema checks for parsed front matter."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from jsonschema import Draft202012Validator

from .config import FrontMatterSchema
from .content.models import FrontMatter, MappingValue, MetadataValue, ScalarValue, SequenceValue
from .errors import (
    FrontMatterValidationError,
    FrontMatterViolation,
    MissingRequiredField,
    TypeMismatch,
)

BOOLEAN_VALUES = {"true": True, "false": False}

# Case-insensitive true/false with surrounding whitespace allowed.
BOOLEAN_PATTERN = r"^\s*([Tt][Rr][Uu][Ee]|[Ff][Aa][Ll][Ss][Ee])\s*$"
BLANK_STRING = {"type": "string", "pattern": r"^\s*$"}

# Keywords whose failure means the field is absent or blank rather than mistyped.
_MISSING_KEYWORDS = {"required", "not"}


def build_json_schema(schema: FrontMatterSchema) -> dict[str, Any]:
    """Translate *schema* into a JSON Schema for :meth:`FrontMatter.to_plain` output.

    Scalars become strings, sequences become arrays of strings and booleans
    become strings matching ``true``/``false``. A key listed under several
    kinds takes the boolean rule first, then the sequence rule. Required keys
    get their own ``required`` entry, so each missing key yields one error,
    and a ``not`` rule that rejects blank strings.
    """
    properties: dict[str, dict[str, Any]] = {}
    for name in schema.scalars:
        properties[name] = {"type": "string"}
    for name in schema.sequences:
        properties[name] = {"type": "array", "items": {"type": "string"}}
    for name in schema.booleans:
        properties[name] = {"type": "string", "pattern": BOOLEAN_PATTERN}
    for name in schema.required:
        properties.setdefault(name, {})["not"] = dict(BLANK_STRING)

    json_schema: dict[str, Any] = {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": properties,
    }
    if schema.required:
        json_schema["allOf"] = [{"required": [name]} for name in schema.required]
    return json_schema


def collect_violations(
    front_matter: FrontMatter,
    schema: FrontMatterSchema | None = None,
) -> list[FrontMatterViolation]:
    """Check *front_matter* against *schema* and return every violation found.

    Missing required fields are reported first, in schema order, followed by
    type mismatches in document key order. An empty list means valid.
    """
    schema = schema or FrontMatterSchema()
    validator = _validator_for(schema)

    missing: dict[str, FrontMatterViolation] = {}
    mismatched: dict[str, FrontMatterViolation] = {}
    for error in validator.iter_errors(front_matter.to_plain()):
        if error.path:
            name = str(error.path[0])
        else:
            name = str(error.validator_value[0])

        if error.validator in _MISSING_KEYWORDS:
            missing.setdefault(name, MissingRequiredField(name))
        elif name not in mismatched:
            expected = _expected_kind(name, schema) or "scalar"
            mismatched[name] = TypeMismatch(name, expected, kind_of(front_matter[name]))

    violations = [missing[name] for name in dict.fromkeys(schema.required) if name in missing]
    violations.extend(mismatched[key] for key in front_matter.keys() if key in mismatched)
    return violations


def validate_front_matter(
    front_matter: FrontMatter,
    schema: FrontMatterSchema | None = None,
) -> None:
    """Raise :class:`FrontMatterValidationError` when *front_matter* breaks the schema."""
    violations = collect_violations(front_matter, schema)
    if violations:
        raise FrontMatterValidationError(violations)


def kind_of(value: MetadataValue) -> str:
    if isinstance(value, ScalarValue):
        return "scalar"
    if isinstance(value, SequenceValue):
        return "sequence"
    if isinstance(value, MappingValue):
        return "mapping"
    raise TypeError(f"Unsupported metadata value: {value!r}")


def parse_boolean(value: MetadataValue | None) -> bool | None:
    """Return the boolean held by a ``true``/``false`` scalar, else ``None``."""
    if not isinstance(value, ScalarValue):
        return None
    return BOOLEAN_VALUES.get(value.value.strip().lower())


def _expected_kind(key: str, schema: FrontMatterSchema) -> str | None:
    if key in schema.booleans:
        return "boolean"
    if key in schema.sequences:
        return "sequence"
    if key in schema.scalars:
        return "scalar"
    return None


def _validator_for(schema: FrontMatterSchema) -> Draft202012Validator:
    return _cached_validator(
        tuple(schema.required),
        tuple(schema.scalars),
        tuple(schema.sequences),
        tuple(schema.booleans),
    )


@lru_cache(maxsize=32)
def _cached_validator(
    required: tuple[str, ...],
    scalars: tuple[str, ...],
    sequences: tuple[str, ...],
    booleans: tuple[str, ...],
) -> Draft202012Validator:
    schema = FrontMatterSchema(
        required=list(required),
        scalars=list(scalars),
        sequences=list(sequences),
        booleans=list(booleans),
    )
    return Draft202012Validator(build_json_schema(schema))
