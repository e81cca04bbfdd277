# =============================================================================
# core/web_search.py  —  Web Search Adapter (Bright Data SERP → results)
# =============================================================================
#
# INPUT CONTRACT:
#   The query must be a single token: trimmed, non-empty, no whitespace
#   anywhere inside.  "  paris  " is accepted as "paris"; "new york" is
#   rejected with QueryValidationError before any request is made.
#
# OUTPUT:
#   A list of {title, link, snippet, position} dicts.  Unknown SERP keys are
#   stripped.  Missing text fields take visible placeholders ("No title",
#   "#", "No snippet") and a missing rank takes 0.
# =============================================================================

import logging
from typing import Any, Optional

from pydantic import StrictFloat

from core.adapter import SearchAdapter
from core.coercion import dig
from core.config import Settings, load_settings
from core.errors import QueryValidationError
from core.models import CoercionRules, NonBlankStr, ProjectedRecord
from core.providers import fetch_serp

logger = logging.getLogger(__name__)


class WebSearchResult(ProjectedRecord):
    title: NonBlankStr
    link: NonBlankStr
    snippet: NonBlankStr
    position: StrictFloat


# Bright Data's parsed SERP calls these "description" and "rank".
WEB_SEARCH_RULES = CoercionRules(
    extractors={
        "snippet": lambda raw: dig(raw, "description"),
        "position": lambda raw: dig(raw, "rank"),
    },
    fallbacks={"title": "No title", "link": "#", "snippet": "No snippet", "position": 0},
    viable=lambda record: bool(record.get("link")),
)

WEB_SEARCH = SearchAdapter("web_search", WebSearchResult, WEB_SEARCH_RULES)


def validate_query(query: Any) -> str:
    """Return the trimmed query, or raise QueryValidationError."""
    if not isinstance(query, str):
        raise QueryValidationError("Query must be a string.")
    query = query.strip()
    if not query:
        raise QueryValidationError("Query cannot be empty after trimming.")
    if any(ch.isspace() for ch in query):
        raise QueryValidationError("Query must be a single token with no spaces.")
    return query


def organic_results(data: Any) -> list:
    """Pull the organic result list out of a SERP response."""
    organic = dig(data, "organic")
    if not isinstance(organic, list):
        logger.warning("No organic results found in the response.")
        return []
    return organic


def search_web(query: str, settings: Optional[Settings] = None) -> list:
    """Search the web for a single-token query; never raises past validation."""
    query = validate_query(query)
    settings = settings or load_settings()
    logger.info("web search for %r", query)
    return WEB_SEARCH.run(lambda: organic_results(fetch_serp(query, settings)))
