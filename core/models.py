# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# Two kinds of shapes live here:
#
#   1. DATACLASSES for things WE own: client configuration, an outbound
#      request description, a parsed field path, a validation report.
#
#   2. TYPEDDICTS for things SCRYFALL owns: cards, faces, lists, sets,
#      rulings, symbols, catalogs.  Scryfall payloads are sparse (most card
#      fields are optional and vary by layout), so we keep them as the plain
#      dicts that came off the wire and only DECLARE their expected shape.
#      Every endpoint method in core/client.py returns one of these.
#
# DESIGN PRINCIPLE - "No Phantom Fields":
#   The TypedDicts list the fields the formatter and tools actually read.
#   Scryfall sends more; extra keys pass through untouched.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Literal, Optional, TypedDict


# -----------------------------------------------------------------------------
# ClientConfig - everything a ScryfallClient can be tuned with
# -----------------------------------------------------------------------------
# All durations are in SECONDS.  Scryfall asks for 50-100ms between requests,
# so the default delay sits at the conservative end of that range.
# -----------------------------------------------------------------------------
@dataclass
class ClientConfig:
    """Constructor-time settings for one ScryfallClient instance."""

    base_url: str = "https://api.scryfall.com"
    user_agent: str = "scryfall-mcp-server/0.1.0"
    request_delay: float = 0.1         # Minimum gap between two physical sends
    max_retries: int = 3               # Retries allowed for HTTP 429 only
    initial_backoff: float = 1.0       # First 429 backoff; doubles per attempt
    timeout: float = 30.0              # Per-request network timeout


# -----------------------------------------------------------------------------
# EndpointRequest - one outbound call, built by an endpoint method
# -----------------------------------------------------------------------------
@dataclass
class EndpointRequest:
    """An outbound request description, created and consumed within one call."""

    path: str                          # "/cards/search" or an absolute URL
    method: str = "GET"
    params: dict[str, str] = field(default_factory=dict)
    json: Optional[dict[str, Any]] = None
    headers: dict[str, str] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# FieldPath - "name" or "prices.usd", never deeper
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class FieldPath:
    """A one- or two-segment field path."""

    head: str
    tail: Optional[str] = None

    @property
    def is_nested(self) -> bool:
        return self.tail is not None

    def __str__(self) -> str:
        return self.head if self.tail is None else f"{self.head}.{self.tail}"


@dataclass
class FieldValidation:
    """Diagnostics for a caller-supplied field list.  Never blocks formatting."""

    valid: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# Scryfall payload shapes
# =============================================================================

FieldGroup = Literal["minimal", "gameplay", "pricing", "imagery", "full"]

UniqueMode = Literal["cards", "art", "prints"]

SortOrder = Literal[
    "name", "set", "released", "rarity", "color", "usd", "tix", "eur",
    "cmc", "power", "toughness", "edhrec", "penny", "artist", "review",
]

SortDirection = Literal["auto", "asc", "desc"]

CatalogType = Literal[
    "card-names", "artist-names", "word-bank", "creature-types",
    "planeswalker-types", "land-types", "artifact-types",
    "enchantment-types", "spell-types", "powers", "toughnesses",
    "loyalties", "watermarks", "keyword-abilities", "keyword-actions",
    "ability-words",
]


class ImageUris(TypedDict, total=False):
    small: str
    normal: str
    large: str
    png: str
    art_crop: str
    border_crop: str


class Prices(TypedDict, total=False):
    usd: Optional[str]
    usd_foil: Optional[str]
    usd_etched: Optional[str]
    eur: Optional[str]
    eur_foil: Optional[str]
    tix: Optional[str]


class CardFace(TypedDict, total=False):
    object: str                        # "card_face"
    name: str
    mana_cost: str
    type_line: str
    oracle_text: str
    colors: list[str]
    power: str
    toughness: str
    loyalty: str
    defense: str
    flavor_text: str
    artist: str
    artist_id: str
    illustration_id: str
    image_uris: ImageUris


class Card(TypedDict, total=False):
    object: str                        # "card"
    id: str
    oracle_id: str
    name: str
    lang: str
    released_at: str
    layout: str
    card_faces: list[CardFace]
    image_uris: ImageUris
    mana_cost: str
    cmc: float
    type_line: str
    oracle_text: str
    colors: list[str]
    color_identity: list[str]
    power: str
    toughness: str
    loyalty: str
    legalities: dict[str, str]
    reserved: bool
    digital: bool
    set: str
    set_name: str
    set_type: str
    collector_number: str
    rarity: str
    flavor_text: str
    artist: str
    illustration_id: str
    frame: str
    prices: Prices
    rulings_uri: str


class CardIdentifier(TypedDict, total=False):
    """One entry of a /cards/collection request."""

    id: str
    mtgo_id: int
    multiverse_id: int
    oracle_id: str
    illustration_id: str
    name: str
    set: str
    collector_number: str


class CardList(TypedDict, total=False):
    object: str                        # "list"
    total_cards: int
    has_more: bool
    next_page: str
    data: list[Card]
    warnings: list[str]
    not_found: list[CardIdentifier]    # only on /cards/collection


class Ruling(TypedDict, total=False):
    object: str                        # "ruling"
    oracle_id: str
    source: str                        # "wotc" or "scryfall"
    published_at: str
    comment: str


class RulingList(TypedDict, total=False):
    object: str
    has_more: bool
    data: list[Ruling]


class CardSet(TypedDict, total=False):
    object: str                        # "set"
    id: str
    code: str
    name: str
    released_at: str
    set_type: str
    card_count: int
    digital: bool


class SetList(TypedDict, total=False):
    object: str
    has_more: bool
    data: list[CardSet]


class CardSymbol(TypedDict, total=False):
    object: str                        # "card_symbol"
    symbol: str
    english: str
    represents_mana: bool
    appears_in_mana_costs: bool
    cmc: float
    colors: list[str]


class SymbolList(TypedDict, total=False):
    object: str
    has_more: bool
    data: list[CardSymbol]


class Catalog(TypedDict, total=False):
    object: str                        # "catalog"
    uri: str
    total_values: int
    data: list[str]


class ParsedMana(TypedDict, total=False):
    object: str                        # "mana_cost"
    cost: str
    cmc: float
    colors: list[str]
    colorless: bool
    monocolored: bool
    multicolored: bool
