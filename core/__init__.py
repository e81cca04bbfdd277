# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL search and normalization logic.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK, FastMCP, or any orchestration
#   framework.  Third-party imports are pydantic (schemas, request models)
#   and `requests` (providers.py only).
#
# Layout (leaves first):
#   models.py      data model: record bases, FieldViolation, CoercionRules, ...
#   schema.py      Schema Validator
#   coercion.py    Field Coercer
#   normalizer.py  Tiered Normalizer
#   errors.py      ProviderError / InputValidationError
#   config.py      Settings from the environment
#   providers.py   HTTP calls to Bright Data and Apify
#   adapter.py     SearchAdapter: fetch → normalize, never raise
#   web_search.py  flights.py  hotels.py   the three adapters
# =============================================================================
