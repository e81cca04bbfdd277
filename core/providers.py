# =============================================================================
# core/providers.py  —  Outbound HTTP to the third-party search providers
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   The only code in the project that talks to the network.
#
#     fetch_serp()  — Bright Data SERP API: one Google results page as JSON.
#     run_actor()   — Apify: run a scraping actor synchronously and return
#                     the items of its default dataset.
#
# CONTRACT:
#   Success returns parsed JSON.  EVERY transport-level failure (missing
#   key, connection error, timeout, non-2xx status, body that is not JSON,
#   body of the wrong top-level shape) raises ProviderError.  Nothing here
#   retries; the adapter turns ProviderError into an empty result.
# =============================================================================

import logging
from typing import Any, Optional
from urllib.parse import quote_plus

import requests

from core.config import Settings
from core.errors import ProviderError

logger = logging.getLogger(__name__)

BRIGHTDATA = "brightdata"
APIFY = "apify"


def _post_json(
    provider: str,
    url: str,
    *,
    payload: dict,
    timeout: float,
    headers: Optional[dict] = None,
    params: Optional[dict] = None,
) -> Any:
    try:
        response = requests.post(url, json=payload, headers=headers, params=params, timeout=timeout)
    except requests.Timeout as e:
        raise ProviderError(provider, f"request timed out after {timeout}s") from e
    except requests.RequestException as e:
        raise ProviderError(provider, f"request failed: {e}") from e

    if not response.ok:
        body = (response.text or "")[:500]
        logger.error("%s API error (%s): %s", provider, response.status_code, body)
        raise ProviderError(
            provider,
            f"request failed with status {response.status_code}",
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as e:
        raise ProviderError(provider, "response body is not valid JSON") from e


def google_search_url(query: str) -> str:
    return f"https://www.google.com/search?q={quote_plus(query)}"


def fetch_serp(query: str, settings: Settings) -> dict:
    """Fetch one Google results page for `query` through Bright Data."""
    if not settings.brightdata_api_key:
        raise ProviderError(BRIGHTDATA, "BRIGHTDATA_API_KEY is not set")

    data = _post_json(
        BRIGHTDATA,
        settings.brightdata_endpoint,
        payload={
            "zone": settings.brightdata_zone,
            "url": google_search_url(query),
            "format": "json",
        },
        headers={"Authorization": f"Bearer {settings.brightdata_api_key}"},
        timeout=settings.http_timeout_seconds,
    )
    if not isinstance(data, dict):
        raise ProviderError(BRIGHTDATA, f"expected a JSON object, got {type(data).__name__}")
    return data


def run_actor(actor_id: str, actor_input: dict, settings: Settings) -> list:
    """Run an Apify actor to completion and return its dataset items."""
    if not settings.apify_api_key:
        raise ProviderError(APIFY, "APIFY_API_KEY is not set")

    url = f"{settings.apify_base_url}/acts/{actor_id}/run-sync-get-dataset-items"
    logger.info("running actor %s", actor_id)
    data = _post_json(
        APIFY,
        url,
        payload=actor_input,
        params={"token": settings.apify_api_key, "format": "json", "clean": "true"},
        timeout=settings.actor_timeout_seconds,
    )
    if not isinstance(data, list):
        raise ProviderError(APIFY, f"expected a JSON array of items, got {type(data).__name__}")
    logger.info("actor %s returned %d item(s)", actor_id, len(data))
    return data
