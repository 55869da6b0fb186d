# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent configuration.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer receives the user's question, decides which Scryfall
#   tools to call, and turns the tool output into an answer.
#
# WHAT THE AGENT IS NOT:
#   - It is NOT the API client or formatter (that's core/)
#   - It is NOT the tool implementations (that's tools/)
# =============================================================================
