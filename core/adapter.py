# =============================================================================
# core/adapter.py  —  Search Tool Adapter (fetch → normalize, never raise)
# =============================================================================
#
# One invocation walks this state machine:
#
#   Fetching ──(ProviderError)──────────────────────────────▶ Done([])
#      │
#      └─(raw items)─▶ Tier 1 ─(all valid)──────────────────▶ Done(unchanged)
#                        │
#                        └─▶ Tier 2 ─(all valid)────────────▶ Done(coerced)
#                              │
#                              └─▶ Tier 3 ──────────────────▶ Done(filtered)
#
# Every terminal state returns a list.  Input validation happens BEFORE
# run() is called (validate_query, and the pydantic request models in
# flights/hotels), so a bad request is the only error a caller ever sees.
# =============================================================================

import logging
from typing import Any, Callable

from core.errors import ProviderError
from core.models import CoercionRules, OutputSchema
from core.normalizer import TieredNormalizer

logger = logging.getLogger(__name__)


class SearchAdapter:
    """Configuration object binding a schema and coercion rules to a fetch step."""

    def __init__(self, name: str, schema: OutputSchema, rules: CoercionRules):
        self.name = name
        self.normalizer = TieredNormalizer(schema, rules, label=name)

    def run(self, fetch: Callable[[], Any]) -> list:
        """Call `fetch` and normalize its result; [] on transport failure."""
        try:
            raw_items = fetch()
        except ProviderError as e:
            logger.error("%s: provider call failed, returning no results: %s", self.name, e)
            return []

        items, tier = self.normalizer.run(raw_items)
        logger.info("%s: %d result(s) via %s tier", self.name, len(items), tier.value)
        return items
