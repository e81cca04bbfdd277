# =============================================================================
# core/errors.py  —  Exception hierarchy
# =============================================================================
#
# Two kinds of failure exist in this system, and they travel differently:
#
#   ProviderError         — the third-party API let us down (no key, timeout,
#                           5xx, garbage body).  Raised in core/providers.py,
#                           caught in core/adapter.py, turned into [].
#
#   InputValidationError  — the caller sent a bad web-search query (empty,
#                           or with spaces).  Raised before any fetch and
#                           turned into an MCP ToolError in tools/mcp_server.py.
#                           Flight and hotel requests are pydantic models;
#                           they raise pydantic.ValidationError (also a
#                           ValueError), which the tool layer treats the same.
#
# Schema violations in provider payloads are NOT exceptions at all; they are
# handled by the normalizer tiers.
# =============================================================================

from typing import Optional


class TravelToolsError(Exception):
    """Base class for errors raised by the search tools."""


class ProviderError(TravelToolsError):
    """A provider call failed at the transport level."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"{provider}: {message}")


class InputValidationError(TravelToolsError, ValueError):
    """A tool was called with input that can never succeed."""


class QueryValidationError(InputValidationError):
    """A web-search query is not a single non-empty token."""
