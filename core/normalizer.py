# =============================================================================
# core/normalizer.py  —  Tiered Response Normalizer
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Takes the raw item list a provider returned and hands back a list in
#   which EVERY item satisfies the adapter's OutputSchema.  It never raises;
#   the worst case is an empty list.
#
# THE THREE TIERS (short-circuit on the first one that works):
#
#   Tier 1  strict    Validate the raw items as they are.  All valid?
#                     Return them untouched.  This is the common case for a
#                     healthy provider and costs nothing.
#
#   Tier 2  coerced   Coerce EVERY item (not only the failing ones, so the
#                     output does not depend on which items happened to be
#                     broken) and validate again.  All valid?  Return them.
#
#   Tier 3  filtered  Keep only the coerced items that pass the adapter's
#                     viability predicate and validate.  Items dropped here
#                     are gone; the count is logged.
#
# Failure detail goes to the log, never into the return value.
# =============================================================================

import logging
from typing import Any, Optional, Sequence

from core.coercion import coerce
from core.models import CoercionRules, NormalizationTier, OutputSchema
from core.schema import (
    field_names,
    first_violations,
    passes_unknown_fields,
    project,
    validate,
    validate_all,
)

logger = logging.getLogger(__name__)


def _as_items(raw_items: Any) -> Sequence[Any]:
    if raw_items is None:
        return []
    if isinstance(raw_items, (list, tuple)):
        return raw_items
    logger.warning("expected a list of records, got %s; treating as empty",
                   type(raw_items).__name__)
    return []


class TieredNormalizer:
    """Validator + coercer + viability filter for one OutputSchema.

    Instances hold only immutable configuration, so one instance can serve
    any number of concurrent calls.
    """

    def __init__(
        self,
        schema: OutputSchema,
        rules: Optional[CoercionRules] = None,
        label: Optional[str] = None,
    ):
        self.schema = schema
        self.rules = rules or CoercionRules()
        self.label = label or schema.__name__

    def run(self, raw_items: Any) -> tuple[list, NormalizationTier]:
        """Normalize and also report which tier produced the result."""
        items = _as_items(raw_items)

        # --- Tier 1: strict ---
        failures = validate_all(items, self.schema)
        if not failures:
            logger.debug("%s: %d item(s) valid as received", self.label, len(items))
            if passes_unknown_fields(self.schema):
                return (items if isinstance(items, list) else list(items)), NormalizationTier.STRICT
            names = field_names(self.schema)
            return [project(item, names) for item in items], NormalizationTier.STRICT

        logger.info(
            "%s: %d of %d item(s) failed strict validation; coercing (%s)",
            self.label, len(failures), len(items),
            "; ".join(first_violations(failures)),
        )

        # --- Tier 2: coerced ---
        candidates = [coerce(item, self.schema, self.rules) for item in items]
        failures = validate_all(candidates, self.schema)
        if not failures:
            return candidates, NormalizationTier.COERCED

        logger.debug("%s: still invalid after coercion: %s",
                     self.label, "; ".join(first_violations(failures)))

        # --- Tier 3: filtered salvage ---
        survivors = [
            candidate for candidate in candidates
            if self._is_viable(candidate) and validate(candidate, self.schema)
        ]
        dropped = len(candidates) - len(survivors)
        if dropped:
            logger.warning("%s: dropped %d of %d unsalvageable item(s)",
                           self.label, dropped, len(candidates))
        return survivors, NormalizationTier.FILTERED

    def normalize(self, raw_items: Any) -> list:
        items, _ = self.run(raw_items)
        return items

    def _is_viable(self, candidate: dict) -> bool:
        try:
            return bool(self.rules.viable(candidate))
        except (LookupError, TypeError, ValueError, AttributeError):
            logger.debug("%s: viability check raised", self.label, exc_info=True)
            return False


def normalize(
    raw_items: Any, schema: OutputSchema, rules: Optional[CoercionRules] = None
) -> list:
    """Functional form of TieredNormalizer(schema, rules).normalize(raw_items)."""
    return TieredNormalizer(schema, rules).normalize(raw_items)
