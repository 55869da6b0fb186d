# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL the Scryfall logic: the rate-limited API client
# and the field-projection formatter.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK or FastMCP, and nothing here
#   reads environment variables.  The only third-party import is httpx (in
#   core/client.py).  Configuration arrives as a ClientConfig.
# =============================================================================
