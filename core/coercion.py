# =============================================================================
# core/coercion.py  —  Field Coercer
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns one raw provider record into a record that has every declared
#   field either holding a value of the right type or holding its declared
#   fallback.  Field by field, in this order:
#
#     1. The raw value at the field's own key already validates → copy it.
#     2. It is a nested object (or list of objects) that is merely broken
#        inside → repair it recursively against the nested record model.
#     3. The adapter supplied an extraction function for the field
#        (e.g. "the price lives in optionsByFare[0].options[0]") → try it.
#     4. Otherwise → the adapter's fallback for the field.  MISSING means
#        the key is left out; nothing plausible-looking is ever invented.
#
# Each candidate value is checked with the field's own pydantic TypeAdapter
# and copied as received; the validated (converted) value is never used.
#
# coerce() never raises and never mutates its input.
# =============================================================================

import copy
import logging
from typing import Any, Mapping, Optional

from core.models import MISSING, CoercionRules, Extractor, OutputSchema, RawRecord
from core.schema import field_names, nested_schema, passes_unknown_fields, validate_field

logger = logging.getLogger(__name__)

NO_RULES = CoercionRules()


def dig(record: Any, *path: Any) -> Any:
    """Walk `record` along `path` (str keys, int indices); None on any miss.

    >>> dig({"a": [{"b": 1}]}, "a", 0, "b")
    1
    """
    current = record
    for step in path:
        if isinstance(step, int) and not isinstance(step, bool):
            if not isinstance(current, (list, tuple)) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, Mapping) or step not in current:
                return None
            current = current[step]
    return current


def _repair(value: Any, schema: OutputSchema, name: str) -> Any:
    inner = nested_schema(schema, name)
    if inner is None:
        return MISSING

    if isinstance(value, Mapping):
        repaired: Any = coerce(value, inner)
    elif isinstance(value, (list, tuple)):
        repaired = [
            coerce(element, inner) if isinstance(element, Mapping) else element
            for element in value
        ]
    else:
        return MISSING

    if validate_field(repaired, schema, name):
        return MISSING
    return repaired


def _extract(raw: RawRecord, schema: OutputSchema, name: str, extractor: Extractor) -> Any:
    try:
        value = extractor(raw)
    except (LookupError, TypeError, ValueError, AttributeError):
        logger.debug("extractor for %r failed", name, exc_info=True)
        return MISSING
    if value is None or validate_field(value, schema, name):
        return MISSING
    return value


def coerce_field(
    raw: RawRecord,
    schema: OutputSchema,
    name: str,
    extractor: Optional[Extractor] = None,
    fallback: Any = MISSING,
) -> Any:
    """Best usable value for field `name` from `raw`, or `fallback`."""
    if name in raw:
        value = raw[name]
        if not validate_field(value, schema, name):
            return value
        repaired = _repair(value, schema, name)
        if repaired is not MISSING:
            return repaired

    if extractor is not None:
        extracted = _extract(raw, schema, name, extractor)
        if extracted is not MISSING:
            return extracted

    if fallback is MISSING or fallback is None:
        return fallback
    return copy.deepcopy(fallback)


def coerce(raw: Any, schema: OutputSchema, rules: Optional[CoercionRules] = None) -> dict:
    """Coerce one raw record into the shape of `schema`.

    A raw item that is not a mapping at all (null, a bare string) is treated
    as an empty record, so every field takes its fallback.
    """
    record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    rules = rules or NO_RULES
    names = field_names(schema)

    out: dict = {}
    if passes_unknown_fields(schema):
        known = set(names)
        out.update((key, value) for key, value in record.items() if key not in known)

    for name in names:
        value = coerce_field(
            record,
            schema,
            name,
            rules.extractors.get(name),
            rules.fallbacks.get(name, MISSING),
        )
        if value is not MISSING:
            out[name] = value
    return out
