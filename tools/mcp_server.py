# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines every MCP tool the agent can call.  Each tool is a thin wrapper
#   around one ScryfallClient endpoint method plus a formatter from
#   core/formatter.py.
#
# HOW IT WORKS (the flow):
#   1. The agent decides it needs card data (e.g., "what does Delver do?")
#   2. It calls a tool by name via MCP (e.g., "get_card_by_name")
#   3. FastMCP validates the arguments and routes the call here
#   4. The tool calls core/, formats the payload as text, and returns it
#   5. Scryfall API errors come back as error-flagged text (ToolError);
#      anything else is a bug and propagates
#
# TOOL NAMING CONVENTIONS:
#   - get_*    -> Read-only retrieval of one thing or one list
#   - search_* -> Query with filters
#   - list_* / parse_* -> Reference data
#   Every tool is read-only and safe to retry.
#
# CONTEXT BUDGET DISCIPLINE:
#   Card tools take a `fields` selection (a group such as "minimal" or an
#   explicit list such as ["name", "prices.usd"]) and a `limit`, so the
#   agent pays only for the data it asked for.
#
# RUNNING THIS SERVER:
#     a) Standalone:  python -m tools.mcp_server
#     b) Spawned by the ADK agent over stdio (agent/card_agent.py)
# =============================================================================

import logging
import os
import sys
from typing import Annotated, Optional, Union

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from core.client import MAX_COLLECTION_IDENTIFIERS, ScryfallClient
from core.errors import ScryfallAPIError
from core.fields import FIELDS_REFERENCE_URI, fields_reference, validate_fields
from core.formatter import (
    format_card,
    format_card_summaries,
    format_card_summary,
    format_cards,
    format_catalog,
    format_not_found,
    format_parsed_mana,
    format_rulings,
    format_sets,
    format_symbols,
)
from core.models import (
    Card,
    CatalogType,
    ClientConfig,
    FieldGroup,
    SortDirection,
    SortOrder,
    UniqueMode,
)

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because stdout carries the MCP protocol.  A log line on
# stdout would corrupt the JSON message stream.
#
# Colours: CYAN for incoming calls, YELLOW for status, GREEN for responses.
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    """Log the size of the tool response in GREEN, then return it."""
    logging.info(f"{_GREEN}  ← {tool_name} response: {len(text)} chars{_RESET}")
    return text


# =============================================================================
# Configuration
# =============================================================================
# core/ never reads the environment; this is the one place that does.
# All durations are in seconds.
# =============================================================================
def client_config_from_env() -> ClientConfig:
    """Build a ClientConfig from SCRYFALL_* environment variables."""
    defaults = ClientConfig()
    env = os.environ
    return ClientConfig(
        base_url=env.get("SCRYFALL_BASE_URL", defaults.base_url),
        user_agent=env.get("SCRYFALL_USER_AGENT", defaults.user_agent),
        request_delay=float(env.get("SCRYFALL_REQUEST_DELAY", defaults.request_delay)),
        max_retries=int(env.get("SCRYFALL_MAX_RETRIES", defaults.max_retries)),
        initial_backoff=float(env.get("SCRYFALL_INITIAL_BACKOFF", defaults.initial_backoff)),
        timeout=float(env.get("SCRYFALL_TIMEOUT", defaults.timeout)),
    )


# One client (and therefore one pacer) for the whole server process.
scryfall = ScryfallClient(client_config_from_env())

mcp = FastMCP("scryfall")

Fields = Union[list[str], FieldGroup, None]

_FIELDS_HELP = (
    "Field selection: either an array of field names (e.g. ['name', "
    "'mana_cost', 'prices.usd']) or a predefined group ('minimal', "
    "'gameplay', 'pricing', 'imagery', 'full'). See the 'Available Card "
    f"Fields' resource at {FIELDS_REFERENCE_URI}."
)


# =============================================================================
# Shared helpers
# =============================================================================
def _api_error(prefix: str, error: ScryfallAPIError) -> ToolError:
    _log_status(f"Scryfall error {error.code} (HTTP {error.status}): {error.details}")
    return ToolError(f"{prefix}: {error.details}")


def _check_fields(fields: Fields) -> None:
    """Log unrecognised field names.  Formatting goes ahead regardless."""
    if isinstance(fields, list):
        for warning in validate_fields(fields).warnings:
            _log_status(warning)


def _render_card(card: Card, fields: Fields) -> str:
    _check_fields(fields)
    return format_card(card, fields) or format_card_summary(card)


def _render_cards(cards: list[Card], fields: Fields, limit: int) -> str:
    _check_fields(fields)
    return format_cards(cards, fields, limit) or format_card_summaries(cards, limit)


# =============================================================================
# TOOL 1: search_cards
# =============================================================================
@mcp.tool()
async def search_cards(
    query: str,
    unique: Optional[UniqueMode] = None,
    order: Optional[SortOrder] = None,
    dir: Optional[SortDirection] = None,
    page: Optional[Annotated[int, Field(ge=1)]] = None,
    include_extras: Optional[bool] = None,
    fields: Annotated[Fields, Field(description=_FIELDS_HELP)] = "minimal",
    limit: Annotated[int, Field(ge=1, le=175)] = 10,
) -> str:
    """Search for Magic: The Gathering cards using Scryfall search syntax.

    Common patterns:
      - Name words: "lightning bolt"
      - Type: t:creature, t:"legendary creature"
      - Color: c:red, c:uw, c>=2
      - Oracle text: o:"draw a card"
      - Mana value: mv=3, mv<=2
      - Power/Toughness: pow>=5, tou<3
      - Format / rarity: f:commander, r:mythic
      - Combine terms (AND is implicit), "or", "-" for negation, () to group

    Args:
        query: Scryfall search query.
        unique: Strategy for omitting similar cards ("cards", "art", "prints").
        order: Sort order (name, set, released, rarity, usd, cmc, ...).
        dir: Sort direction ("auto", "asc", "desc").
        page: Result page (Scryfall pages hold up to 175 cards).
        include_extras: Include tokens, emblems and other extras.
        fields: Which card fields to show.  Defaults to "minimal".
        limit: Maximum number of cards to show from the page.

    Returns:
        "Showing N of M cards:" followed by one block per card, separated
        by "---".  A note about the next page is added when one exists.
    """
    _log_request("search_cards", query=query, unique=unique, order=order,
                 dir=dir, page=page, fields=fields, limit=limit)
    try:
        result = await scryfall.search_cards(
            query, unique=unique, order=order, dir=dir, page=page,
            include_extras=include_extras,
        )
    except ScryfallAPIError as e:
        raise _api_error("Scryfall API Error", e) from e

    cards = result.get("data", [])
    _log_status(f"Got {len(cards)} cards (total_cards={result.get('total_cards')})")
    text = _render_cards(cards, fields, limit)

    if result.get("has_more"):
        next_page = (page or 1) + 1
        text += (
            f"\n\n{result.get('total_cards', '?')} total matches. "
            f"Use page={next_page} for the next page of results."
        )
    return _log_response("search_cards", text)


# =============================================================================
# TOOL 2: get_card_details
# =============================================================================
# Many names, ONE request: uses the /cards/collection endpoint.
# =============================================================================
@mcp.tool()
async def get_card_details(
    names: Annotated[list[str], Field(min_length=1, max_length=MAX_COLLECTION_IDENTIFIERS)],
    set_code: Optional[str] = None,
    fields: Annotated[Fields, Field(description=_FIELDS_HELP)] = "gameplay",
) -> str:
    """Get detailed information for one or more cards by exact name.

    Args:
        names: Card names to look up (1 to 75).
        set_code: Set code applied to every name (e.g. "mkm").
        fields: Which card fields to show.  Defaults to "gameplay".

    Returns:
        The formatted cards, followed by a "Not found" list for names
        Scryfall could not match.  It is an error if nothing matched.
    """
    _log_request("get_card_details", names=names, set_code=set_code, fields=fields)

    identifiers = [
        {"name": name, "set": set_code} if set_code else {"name": name}
        for name in names
    ]
    try:
        result = await scryfall.get_collection(identifiers)
    except ScryfallAPIError as e:
        raise _api_error("Error fetching cards", e) from e

    cards = result.get("data", [])
    not_found = result.get("not_found") or []
    _log_status(f"Matched {len(cards)} cards, {len(not_found)} not found")

    if not cards:
        missing = format_not_found(not_found) if not_found else "all requested cards"
        raise ToolError(f"No cards found. Not found:\n{missing}")

    text = _render_cards(cards, fields, MAX_COLLECTION_IDENTIFIERS)
    if not_found:
        text += f"\n\n**Not found ({len(not_found)}):**\n{format_not_found(not_found)}"
    return _log_response("get_card_details", text)


# =============================================================================
# TOOL 3: get_card_by_name
# =============================================================================
@mcp.tool()
async def get_card_by_name(
    name: str,
    fuzzy: bool = False,
    set_code: Optional[str] = None,
    fields: Annotated[Fields, Field(description=_FIELDS_HELP)] = "gameplay",
) -> str:
    """Get a single card by name.

    Args:
        name: The card name.
        fuzzy: Allow partial or misspelled names (e.g. "jac bele").
        set_code: Restrict to a printing from this set.
        fields: Which card fields to show.  Defaults to "gameplay".
    """
    _log_request("get_card_by_name", name=name, fuzzy=fuzzy, set_code=set_code, fields=fields)
    try:
        card = await scryfall.get_card_named(name, fuzzy=fuzzy, set_code=set_code)
    except ScryfallAPIError as e:
        raise _api_error("Error finding card", e) from e
    return _log_response("get_card_by_name", _render_card(card, fields))


# =============================================================================
# TOOL 4: get_card_by_id
# =============================================================================
@mcp.tool()
async def get_card_by_id(
    card_id: str,
    fields: Annotated[Fields, Field(description=_FIELDS_HELP)] = "gameplay",
) -> str:
    """Get a single card by its Scryfall ID (a UUID).

    Args:
        card_id: The Scryfall card ID.
        fields: Which card fields to show.  Defaults to "gameplay".
    """
    _log_request("get_card_by_id", card_id=card_id, fields=fields)
    try:
        card = await scryfall.get_card(card_id)
    except ScryfallAPIError as e:
        raise _api_error("Error fetching card", e) from e
    return _log_response("get_card_by_id", _render_card(card, fields))


# =============================================================================
# TOOL 5: get_random_card
# =============================================================================
@mcp.tool()
async def get_random_card(
    query: Optional[str] = None,
    fields: Annotated[Fields, Field(description=_FIELDS_HELP)] = "gameplay",
) -> str:
    """Get a random card, optionally restricted by a search query.

    Args:
        query: Optional Scryfall query to filter the pool (e.g. "t:creature").
        fields: Which card fields to show.  Defaults to "gameplay".
    """
    _log_request("get_random_card", query=query, fields=fields)
    try:
        card = await scryfall.get_random_card(query)
    except ScryfallAPIError as e:
        raise _api_error("Error getting random card", e) from e
    return _log_response("get_random_card", f"**Random Card**\n\n{_render_card(card, fields)}")


# =============================================================================
# TOOL 6: get_card_rulings
# =============================================================================
# Rulings hang off a card ID.  Given only a name we look the card up first,
# which costs one extra (paced) request.
# =============================================================================
@mcp.tool()
async def get_card_rulings(
    name: Optional[str] = None,
    card_id: Optional[str] = None,
) -> str:
    """Get the official rulings for a card.

    Args:
        name: Card name (fuzzy matched).  Used when card_id is not given.
        card_id: Scryfall card ID.

    Returns:
        Rulings with their publication date and source (wotc or scryfall).
    """
    _log_request("get_card_rulings", name=name, card_id=card_id)
    if not card_id and not name:
        raise ToolError("Provide either a card name or a card_id.")

    heading = ""
    try:
        if not card_id:
            card = await scryfall.get_card_named(name, fuzzy=True)
            card_id = card["id"]
            heading = f"**{card.get('name', name)}**\n\n"
            _log_status(f"Resolved '{name}' to {card_id}")
        result = await scryfall.get_rulings(card_id)
    except ScryfallAPIError as e:
        raise _api_error("Error fetching rulings", e) from e
    return _log_response("get_card_rulings", heading + format_rulings(result.get("data", [])))


# =============================================================================
# TOOL 7: list_sets
# =============================================================================
@mcp.tool()
async def list_sets(
    set_type: Optional[str] = None,
    limit: Annotated[int, Field(ge=1, le=1000)] = 50,
) -> str:
    """List Magic sets, newest first.

    Args:
        set_type: Only sets of this type (e.g. "expansion", "core",
            "commander", "masters").
        limit: Maximum number of sets to show.
    """
    _log_request("list_sets", set_type=set_type, limit=limit)
    try:
        result = await scryfall.get_sets()
    except ScryfallAPIError as e:
        raise _api_error("Error fetching sets", e) from e

    sets = result.get("data", [])
    if set_type:
        sets = [s for s in sets if s.get("set_type") == set_type]
    _log_status(f"{len(sets)} sets after filtering")
    return _log_response("list_sets", format_sets(sets, limit))


# =============================================================================
# TOOL 8: get_symbology
# =============================================================================
@mcp.tool()
async def get_symbology() -> str:
    """List every card symbol ({W}, {2/U}, {T}, ...) with its meaning."""
    _log_request("get_symbology")
    try:
        result = await scryfall.get_symbology()
    except ScryfallAPIError as e:
        raise _api_error("Error fetching symbology", e) from e
    return _log_response("get_symbology", format_symbols(result.get("data", [])))


# =============================================================================
# TOOL 9: parse_mana_cost
# =============================================================================
@mcp.tool()
async def parse_mana_cost(cost: str) -> str:
    """Normalise a mana cost and compute its mana value and colors.

    Args:
        cost: A mana cost such as "{2}{R}{R}" or "2rr".
    """
    _log_request("parse_mana_cost", cost=cost)
    try:
        result = await scryfall.parse_mana(cost)
    except ScryfallAPIError as e:
        raise _api_error("Error parsing mana cost", e) from e
    return _log_response("parse_mana_cost", format_parsed_mana(result))


# =============================================================================
# TOOL 10: get_catalog
# =============================================================================
@mcp.tool()
async def get_catalog(
    catalog_type: CatalogType,
    limit: Annotated[int, Field(ge=1, le=5000)] = 100,
) -> str:
    """Get a Scryfall catalog: creature types, keyword abilities, artist names, ...

    Args:
        catalog_type: Which catalog (e.g. "creature-types", "keyword-abilities").
        limit: Maximum number of values to show.
    """
    _log_request("get_catalog", catalog_type=catalog_type, limit=limit)
    try:
        result = await scryfall.get_catalog(catalog_type)
    except ScryfallAPIError as e:
        raise _api_error("Error fetching catalog", e) from e
    return _log_response("get_catalog", format_catalog(result, limit))


# =============================================================================
# RESOURCE: field reference
# =============================================================================
@mcp.resource(
    FIELDS_REFERENCE_URI,
    name="Available Card Fields",
    description="Field groups and field names accepted by the card tools' `fields` argument.",
    mime_type="text/markdown",
)
def available_card_fields() -> str:
    return fields_reference()


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    mcp.run()
