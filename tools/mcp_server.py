# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the three search adapters in core/ as MCP tools.  Each tool is a
#   thin wrapper: build the validated request, call core/, wrap the list in
#   the tool's output envelope, log the call.
#
# HOW IT WORKS (the flow):
#   1. The ADK agent decides it needs data (e.g. hotels in Lisbon)
#   2. It calls a tool by name via MCP (e.g. "get_hotels")
#   3. FastMCP routes the call to the decorated function below
#   4. The function calls core/ logic and returns a dict
#
# OUTPUT CONTRACT:
#   brightdata_web_search → {"results": [...]}
#   get_flights           → {"flights": [...]}
#   get_hotels            → {"hotels":  [...]}
#   An empty list is the one and only "nothing found / provider down" signal.
#   The ONLY error a tool raises is a ToolError for bad input (a query with
#   spaces, an unknown sort key), and it is raised before any provider call.
#
# RUNNING THIS SERVER:
#     a) Standalone:  python -m tools.mcp_server
#     b) Spawned by the ADK agent over stdio (agent/travel_agent.py)
# =============================================================================

import json
import logging
import sys
from typing import Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import ValidationError

from core.config import load_settings
from core.errors import InputValidationError
from core.flights import FlightSearchRequest, search_flights
from core.hotels import HotelSearchRequest, search_hotels
from core.web_search import search_web

load_dotenv()
settings = load_settings()

# =============================================================================
# Logging Setup
# =============================================================================
# Logs go to STDERR: the MCP server speaks JSON-RPC on STDOUT, and a stray
# log line there would corrupt the protocol stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for response summaries
#     - YELLOW for intermediate status/progress messages
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"     # Reset to default terminal color

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s [MCP] %(name)s %(levelname)s %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger("tools.mcp_server")


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    """Log the size of each result list in GREEN, then return the result.

    Full payloads go out at DEBUG only; scraped listings are large.
    """
    counts = ", ".join(f"{key}={len(value)}" for key, value in result.items())
    logger.info(f"{_GREEN}  ← {tool_name} response: {counts}{_RESET}")
    logger.debug("%s payload: %s", tool_name, json.dumps(result, default=str)[:2000])
    return result


def _describe(error: ValueError) -> str:
    """One-line message for a rejected request."""
    if isinstance(error, ValidationError):
        return "; ".join(
            f"{'.'.join(str(step) for step in detail['loc']) or 'request'}: {detail['msg']}"
            for detail in error.errors(include_url=False)
        )
    return str(error)


def _reject(tool_name: str, error: ValueError) -> ToolError:
    message = _describe(error)
    _log_status(f"{tool_name} rejected input: {message}")
    return ToolError(message)


# =============================================================================
# Create the FastMCP server instance
# =============================================================================
mcp = FastMCP("travel-search-tools")


# =============================================================================
# TOOL 1: brightdata_web_search
# =============================================================================
@mcp.tool()
def brightdata_web_search(query: str) -> dict:
    """Perform a Google web search through the Bright Data SERP API.

    Args:
        query: The search query. Only ONE word is allowed - remove all spaces
            (e.g. "Lisbon", "Lisbon-nightlife"). Leading/trailing spaces are
            trimmed.

    Returns:
        {"results": [{"title", "link", "snippet", "position"}, ...]}.
        An empty list means nothing was found or the search was unavailable.
    """
    _log_request("brightdata_web_search", query=query)
    try:
        results = search_web(query, settings)
    except InputValidationError as e:
        raise _reject("brightdata_web_search", e) from e
    return _log_response("brightdata_web_search", {"results": results})


# =============================================================================
# TOOL 2: get_flights
# =============================================================================
@mcp.tool()
def get_flights(
    origin: str,
    destination: str,
    departure_date: str,
    return_date: Optional[str] = None,
    limit: int = 10,
    currency: str = "USD",
    sort: str = "best",
    non_stop: Optional[bool] = None,
    one_stop: Optional[bool] = None,
    two_plus_stops: Optional[bool] = None,
    adults: int = 1,
) -> dict:
    """Get flights between two places for a departure date, optionally round trip.

    Args:
        origin: Origin airport code (e.g. "SFO") or city.
        destination: Destination airport code (e.g. "JFK") or city.
        departure_date: Departure date in YYYY-MM-DD format.
        return_date: Return date in YYYY-MM-DD format for round trips.
        limit: Number of results to return (default 10).
        currency: Currency for prices (default "USD").
        sort: One of best, earliest_depart, latest_depart, earliest_arrive,
            latest_arrive, high_price, low_price, slowest, quickest.
        non_stop: Only / exclude non-stop flights.
        one_stop: Only / exclude one-stop flights.
        two_plus_stops: Only / exclude flights with two or more stops.
        adults: Number of adult passengers (default 1).

    Returns:
        {"flights": [...]}.  Each flight has a booking `url` and, when
        available, `displayAirline`, `legs`, `price` and `provider`.
    """
    _log_request("get_flights", origin=origin, destination=destination,
                 departure_date=departure_date, return_date=return_date,
                 limit=limit, currency=currency, sort=sort, non_stop=non_stop,
                 one_stop=one_stop, two_plus_stops=two_plus_stops, adults=adults)
    try:
        request = FlightSearchRequest(
            origin=origin,
            destination=destination,
            departure_date=departure_date,
            return_date=return_date,
            limit=limit,
            currency=currency,
            sort=sort,
            non_stop=non_stop,
            one_stop=one_stop,
            two_plus_stops=two_plus_stops,
            adults=adults,
        )
    except ValidationError as e:
        raise _reject("get_flights", e) from e
    return _log_response("get_flights", {"flights": search_flights(request, settings)})


# =============================================================================
# TOOL 3: get_hotels
# =============================================================================
@mcp.tool()
def get_hotels(location: list[str], limit: Optional[int] = None) -> dict:
    """Get hotels for one or more locations.

    Args:
        location: Location list: city/region name ("Lisbon"), region id
            ("region:6047843"), coordinates ("38.72,-9.14"), or hotel ids.
        limit: Number of results per location (default 5).

    Returns:
        {"hotels": [...]}.  Each hotel has `url` and `name`; rating, reviews,
        stars, price, currency, roomType, persons and image are null when
        unknown.
    """
    _log_request("get_hotels", location=location, limit=limit)
    try:
        request = HotelSearchRequest(locations=location, limit=limit)
    except ValidationError as e:
        raise _reject("get_hotels", e) from e
    return _log_response("get_hotels", {"hotels": search_hotels(request, settings)})


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    mcp.run()
