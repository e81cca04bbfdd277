# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent configuration.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer decides WHICH search tool to call and WHEN, and turns
#   the normalized results into an answer.  It holds no search or
#   normalization logic (core/) and no tool wrappers (tools/).
# =============================================================================
