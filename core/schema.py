# =============================================================================
# core/schema.py  —  Schema Validator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Checks a candidate value against an OutputSchema (a pydantic model class)
#   and reports either "ok" or the list of violations (field path + reason).
#
# RULES:
#   - Validation is pydantic's: structural and recursive, nested objects
#     against their own model, arrays element by element.
#   - ValidationError.errors() is translated into FieldViolations:
#       missing / blank string        -> missing
#       any other error at the leaf   -> wrong-type
#       every field above a failure   -> failed-nested-validation
#   - Unknown extra keys are NEVER violations.  Whether they survive is the
#     coercer's business (extra="allow" vs "ignore"), not the validator's.
#   - The validated model instance is discarded; callers keep their dicts.
# =============================================================================

import functools
import types
from typing import Annotated, Any, Iterable, Mapping, Optional, Sequence, Union, get_args, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError

from core.models import (
    VALID,
    FieldViolation,
    OutputSchema,
    ValidationResult,
    ViolationReason,
)

_MISSING_ERROR_TYPES = frozenset({"missing", "blank_string"})


# -----------------------------------------------------------------------------
# Schema introspection
# -----------------------------------------------------------------------------
def field_names(schema: OutputSchema) -> tuple[str, ...]:
    return tuple(schema.model_fields)


def passes_unknown_fields(schema: OutputSchema) -> bool:
    return schema.model_config.get("extra") == "allow"


@functools.lru_cache(maxsize=None)
def field_adapter(schema: OutputSchema, name: str) -> TypeAdapter:
    """A TypeAdapter that validates one field of `schema` on its own."""
    info = schema.model_fields[name]
    if info.metadata:
        return TypeAdapter(Annotated[(info.annotation, *info.metadata)])
    return TypeAdapter(info.annotation)


@functools.lru_cache(maxsize=None)
def nested_schema(schema: OutputSchema, name: str) -> Optional[OutputSchema]:
    """The record model inside field `name` (object or list of objects), if any."""
    annotation = schema.model_fields[name].annotation
    while True:
        origin = get_origin(annotation)
        if origin in (Union, types.UnionType):
            args = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(args) != 1:
                return None
            annotation = args[0]
        elif origin in (list, Annotated):
            annotation = get_args(annotation)[0]
        else:
            break
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


# -----------------------------------------------------------------------------
# ValidationError -> FieldViolation
# -----------------------------------------------------------------------------
def _path(loc: Sequence[Any]) -> str:
    path = ""
    for step in loc:
        if isinstance(step, int):
            path += f"[{step}]"
        else:
            path = f"{path}.{step}" if path else str(step)
    return path


def _violations(error: ValidationError, prefix: tuple = ()) -> list[FieldViolation]:
    found: list[FieldViolation] = []
    seen = set()

    def add(violation: FieldViolation) -> None:
        if violation not in seen:
            seen.add(violation)
            found.append(violation)

    for detail in error.errors(include_url=False):
        loc = (*prefix, *detail["loc"])
        for depth in range(1, len(loc)):
            if isinstance(loc[depth - 1], str):
                add(FieldViolation(_path(loc[:depth]), ViolationReason.FAILED_NESTED_VALIDATION))
        reason = (
            ViolationReason.MISSING
            if detail["type"] in _MISSING_ERROR_TYPES
            else ViolationReason.WRONG_TYPE
        )
        add(FieldViolation(_path(loc), reason))
    return found


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
def validate(value: Any, schema: OutputSchema) -> ValidationResult:
    """Validate one record against `schema`."""
    try:
        schema.model_validate(value)
    except ValidationError as e:
        return ValidationResult(ok=False, violations=tuple(_violations(e)))
    return VALID


def validate_field(value: Any, schema: OutputSchema, name: str) -> list[FieldViolation]:
    """Violations for one value of field `name`, paths rooted at the field."""
    try:
        field_adapter(schema, name).validate_python(value)
    except ValidationError as e:
        return _violations(e, prefix=(name,))
    return []


def validate_all(
    items: Sequence[Any], schema: OutputSchema
) -> dict[int, ValidationResult]:
    """Validate a sequence; returns {index: result} for the invalid items only."""
    failures = {}
    for index, item in enumerate(items):
        result = validate(item, schema)
        if not result:
            failures[index] = result
    return failures


def first_violations(
    failures: Mapping[int, ValidationResult], limit: int = 3
) -> list[str]:
    """Short human-readable summary of the first few failures, for logs."""
    lines = []
    for index, result in failures.items():
        for violation in result.violations:
            lines.append(f"item[{index}] {violation}")
            if len(lines) >= limit:
                return lines
    return lines


def project(record: Mapping[str, Any], names: Iterable[str]) -> dict:
    """Copy of `record` restricted to the keys in `names` that it has."""
    return {name: record[name] for name in names if name in record}
