# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the normalization pipeline)
# =============================================================================
#
# These types define the *shape* of everything that flows through the
# search tools: the output record bases every adapter schema derives from,
# the violations the validator reports, and the per-adapter coercion rules.
#
# RAW vs. OUTPUT:
#   A RawRecord is whatever the provider sent us.  We assume NOTHING about it:
#   keys may be missing, values may have the wrong type, nesting may be
#   arbitrary.  An output record is a plain dict that validates against an
#   OutputSchema (a pydantic model class).  The only way to get from one to
#   the other is through core/normalizer.py.
#
# FIELD DECLARATIONS:
#   Output schemas are pydantic models whose scalar fields use the Strict*
#   types, so "4.5" is never a number and True is never an integer.
#     required            plain annotation, no default
#     optional / null ok  Optional[...] = None
#     nested object       another record model
#     array of objects    list[<record model>]
#   The models only ever validate; records stay plain dicts end to end.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Callable, Literal, Mapping, Type

from pydantic import AfterValidator, BaseModel, ConfigDict, StrictStr, StringConstraints
from pydantic_core import PydanticCustomError, PydanticUndefined


RawRecord = Mapping[str, Any]

# "No value": the key is omitted from the output record.
MISSING = PydanticUndefined


# -----------------------------------------------------------------------------
# Output record bases
# -----------------------------------------------------------------------------
class PassthroughRecord(BaseModel):
    """Output shape whose records keep the vendor fields it does not declare."""

    model_config = ConfigDict(extra="allow")


class ProjectedRecord(BaseModel):
    """Output shape whose records are cut down to the declared fields."""

    model_config = ConfigDict(extra="ignore")


OutputSchema = Type[BaseModel]


def _reject_blank(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError("blank_string", "String should not be blank")
    return value


# A string where "" and whitespace count as no value at all.
NonBlankStr = Annotated[StrictStr, AfterValidator(_reject_blank)]

# Request text: surrounding whitespace removed, then must be non-empty.
TrimmedStr = Annotated[StrictStr, StringConstraints(strip_whitespace=True, min_length=1)]


# -----------------------------------------------------------------------------
# FieldViolation / ValidationResult — what the validator reports
# -----------------------------------------------------------------------------
class ViolationReason(str, Enum):
    MISSING = "missing"
    WRONG_TYPE = "wrong-type"
    FAILED_NESTED_VALIDATION = "failed-nested-validation"


class NormalizationTier(str, Enum):
    STRICT = "strict"        # Tier 1: provider payload already valid
    COERCED = "coerced"      # Tier 2: every item repaired field by field
    FILTERED = "filtered"    # Tier 3: unsalvageable items dropped


@dataclass(frozen=True)
class FieldViolation:
    field: str                         # dotted path, e.g. "legs[0].segments[1].airline"
    reason: ViolationReason

    def __str__(self) -> str:
        return f"{self.field or '<record>'}: {self.reason.value}"


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    violations: tuple[FieldViolation, ...] = ()

    def __bool__(self) -> bool:
        return self.ok


VALID = ValidationResult(ok=True)


# -----------------------------------------------------------------------------
# CoercionRules — the per-adapter strategy handed to the normalizer
# -----------------------------------------------------------------------------
# extractors:  field name -> function(raw record) -> value or None.
#              Consulted in Tier 2 when the raw value at the field's own key
#              is unusable (e.g. the flight price lives in a nested fare).
# fallbacks:   field name -> value used when nothing usable was found.
#              Fields not listed fall back to MISSING (key omitted).
# viable:      Tier 3 predicate deciding whether a repaired record is worth
#              keeping at all.
# -----------------------------------------------------------------------------
Extractor = Callable[[RawRecord], Any]
ViabilityPredicate = Callable[[Mapping[str, Any]], bool]


def _always_viable(record: Mapping[str, Any]) -> bool:
    return True


@dataclass(frozen=True)
class CoercionRules:
    extractors: Mapping[str, Extractor] = field(default_factory=dict)
    fallbacks: Mapping[str, Any] = field(default_factory=dict)
    viable: ViabilityPredicate = _always_viable


# -----------------------------------------------------------------------------
# Tool inputs
# -----------------------------------------------------------------------------
# The request models live next to their adapters (core/flights.py,
# core/hotels.py).  These are the enumerations they validate against.
# -----------------------------------------------------------------------------
FlightSort = Literal[
    "best",
    "earliest_depart",
    "latest_depart",
    "earliest_arrive",
    "latest_arrive",
    "high_price",
    "low_price",
    "slowest",
    "quickest",
]


class LocationKind(str, Enum):
    FREE_TEXT = "free_text"          # "Paris", "Lake Tahoe, CA"
    REGION_ID = "region_id"          # "region:6047843"
    COORDINATES = "coordinates"      # "48.8566,2.3522"
    HOTEL_ID = "hotel_id"            # provider-specific numeric id
