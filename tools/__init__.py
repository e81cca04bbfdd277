# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between the agent framework and core/.
#   Each tool:
#     1. Builds a validated request from its typed parameters
#     2. Calls one core/ adapter
#     3. Wraps the normalized list in the tool's output envelope
#
#   Bad input becomes an MCP ToolError.  Provider trouble never does: it
#   arrives here as an empty list.
# =============================================================================
