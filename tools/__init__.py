# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between the agent framework and core/.
#   Each tool:
#     1. Receives arguments FastMCP has already validated against the
#        tool's type annotations
#     2. Calls one ScryfallClient endpoint method
#     3. Formats the payload with core/formatter.py
#     4. Returns plain text, or raises ToolError for Scryfall API errors
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT talk HTTP themselves (that's core/client.py)
#   - They do NOT decide how a card looks (that's core/formatter.py)
#   - They do NOT know about Google ADK
# =============================================================================
