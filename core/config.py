# =============================================================================
# core/config.py  —  Settings from the environment
# =============================================================================
#
# Every knob the tools need (API keys, endpoints, actor ids, timeouts, log
# level, agent model) is read from environment variables here and nowhere
# else.  Entry points (main.py, tools/mcp_server.py) call load_dotenv()
# first, so a local .env file works the same as real environment variables.
#
# Settings is frozen: load it once per call site and pass it down.
# =============================================================================

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the search tools and the agent."""

    # --- Web search (Bright Data SERP API) ---
    brightdata_api_key: Optional[str] = None
    brightdata_zone: str = "serp_api1"
    brightdata_endpoint: str = "https://api.brightdata.com/request"

    # --- Flight / hotel search (Apify actors) ---
    apify_api_key: Optional[str] = None
    apify_base_url: str = "https://api.apify.com/v2"
    flight_actor_id: str = "jupri~kayak-flights"
    hotel_actor_id: str = "pK2iIKVVxERtpwXMy"

    # --- Transport ---
    http_timeout_seconds: float = 30.0
    actor_timeout_seconds: float = 300.0   # actor runs are synchronous and slow

    # --- Process ---
    log_level: str = "INFO"
    agent_model: str = "openrouter/openai/gpt-4o"


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value)
    except ValueError:
        logger.warning("%s=%r is not a number; using %s", name, value, default)
        return default
    if parsed <= 0:
        logger.warning("%s=%r must be positive; using %s", name, value, default)
        return default
    return parsed


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    defaults = Settings()
    return Settings(
        brightdata_api_key=_env_str("BRIGHTDATA_API_KEY", None),
        brightdata_zone=_env_str("BRIGHTDATA_ZONE", defaults.brightdata_zone),
        brightdata_endpoint=_env_str("BRIGHTDATA_ENDPOINT", defaults.brightdata_endpoint),
        apify_api_key=_env_str("APIFY_API_KEY", None),
        apify_base_url=_env_str("APIFY_BASE_URL", defaults.apify_base_url).rstrip("/"),
        flight_actor_id=_env_str("FLIGHT_ACTOR_ID", defaults.flight_actor_id),
        hotel_actor_id=_env_str("HOTEL_ACTOR_ID", defaults.hotel_actor_id),
        http_timeout_seconds=_env_float("HTTP_TIMEOUT_SECONDS", defaults.http_timeout_seconds),
        actor_timeout_seconds=_env_float("ACTOR_TIMEOUT_SECONDS", defaults.actor_timeout_seconds),
        log_level=_env_str("LOG_LEVEL", defaults.log_level).upper(),
        agent_model=_env_str("AGENT_MODEL", defaults.agent_model),
    )
