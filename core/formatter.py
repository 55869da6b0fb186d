# =============================================================================
# core/formatter.py  -  Cards (and other Scryfall objects) as text
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns Scryfall payloads into compact, deterministic text for an agent.
#   The same input always produces the same bytes: no sorting, no
#   timestamps, field order is the caller's order.
#
# TWO RENDERING PATHS FOR CARDS:
#   format_card() / format_cards()  project a caller-chosen field selection
#                                   (see core/fields.py).  With no selection
#                                   they return "" so the caller can switch
#                                   to ...
#   format_card_summary()           a fixed, human-oriented default layout.
#   format_card_summaries()         (same "Showing N of M" header and footer)
#
# MULTI-FACED CARDS:
#   Transform, modal and split cards carry `card_faces`.  Face-level fields
#   (cost, type, text, stats, art) are read from EACH face that carries
#   them.  Card-level fields (ids, set, prices, legality, rarity), and any
#   face-level field that no face carries, are read from the card once and
#   listed under "Card Properties:".  A field never appears in both.
#
# VALUE vs LINE:
#   format_field_value() always returns something printable ("N/A" for
#   absent values).  Line assembly is stricter: a field whose value is
#   absent, null or empty produces no line at all.
# =============================================================================

import json
from typing import Any, Callable, Optional, Sequence

from core.fields import MISSING, FieldSelector, get_field_value, parse_field_path, resolve_fields
from core.models import Card, CardIdentifier, CardSet, CardSymbol, Catalog, ParsedMana, Ruling

# Fields that a card face may carry itself.  On multi-faced cards these are
# read per face whenever at least one face has them.
FACE_FIELDS = frozenset({
    "name",
    "mana_cost",
    "type_line",
    "oracle_text",
    "colors",
    "power",
    "toughness",
    "loyalty",
    "defense",
    "flavor_text",
    "artist",
    "artist_id",
    "illustration_id",
    "image_uris",
})

DIVIDER = "\n---\n"
DEFAULT_CARD_LIMIT = 10


# =============================================================================
# Values
# =============================================================================
def _format_scalar(value: Any) -> str:
    if value is None or value is MISSING:
        return "N/A"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_field_value(value: Any) -> str:
    """Render one field value for embedding in text.

    Lists become comma-separated items, objects become indented JSON, absent
    values become "N/A", everything else its plain string form.
    """
    if isinstance(value, list):
        return ", ".join(
            json.dumps(item, ensure_ascii=False) if isinstance(item, dict)
            else _format_scalar(item)
            for item in value
        )
    if isinstance(value, dict):
        return json.dumps(value, indent=2, ensure_ascii=False)
    return _format_scalar(value)


def _is_blank(value: Any) -> bool:
    if value is None or value is MISSING or value == "":
        return True
    return isinstance(value, (list, dict)) and not value


def _field_lines(source: Any, fields: Sequence[str], indent: str = "") -> list[str]:
    lines = []
    for name in fields:
        value = get_field_value(source, name)
        if not _is_blank(value):
            lines.append(f"{indent}{name}: {format_field_value(value)}")
    return lines


# =============================================================================
# Cards with a field selection
# =============================================================================
def format_card(card: Card, fields: FieldSelector) -> str:
    """Format one card using a field selection.

    Args:
        card: A Scryfall card object.
        fields: A group keyword, an explicit list of field paths, or None.

    Returns:
        The formatted card, or "" when ``fields`` is None (the caller should
        use format_card_summary() instead).
    """
    resolved = resolve_fields(fields)
    if resolved is None:
        return ""

    faces = card.get("card_faces")
    if faces:
        return _format_multi_faced(card, faces, resolved)

    output = [f"**{card.get('name', 'Unknown')}**", ""]
    output += _field_lines(card, [f for f in resolved if f != "name"])
    return "\n".join(output)


def _format_multi_faced(card: Card, faces: list, resolved: list[str]) -> str:
    face_fields = []
    card_fields = []
    for name in resolved:
        head = parse_field_path(name).head
        if head == "name" or head == "card_faces":
            continue
        # A face field no face carries is read from the card instead.
        if head in FACE_FIELDS and any(
            get_field_value(face, name) is not MISSING for face in faces
        ):
            face_fields.append(name)
        else:
            card_fields.append(name)

    output = [f"**{card.get('name', 'Unknown')}**", ""]
    for face in faces:
        output.append(f"Face: {face.get('name', 'Unknown')}")
        output += _field_lines(face, face_fields, indent="  ")
        output.append("")

    properties = _field_lines(card, card_fields, indent="  ")
    if properties:
        output.append("Card Properties:")
        output += properties
    return "\n".join(output)


def _card_list(cards: Sequence[Card], limit: int, render: Callable[[Card], str]) -> str:
    shown = cards[:limit]
    output = [f"Showing {len(shown)} of {len(cards)} cards:\n"]
    for card in shown:
        output.append(render(card))
        output.append(DIVIDER)

    if len(cards) > limit:
        output.append(f"... and {len(cards) - limit} more cards")
    return "\n".join(output)


def format_cards(
    cards: Sequence[Card],
    fields: FieldSelector,
    limit: int = DEFAULT_CARD_LIMIT,
) -> str:
    """Format up to ``limit`` cards, in input order, with a count header.

    Returns "" when ``fields`` is None, like format_card().
    """
    resolved = resolve_fields(fields)
    if resolved is None:
        return ""
    return _card_list(cards, limit, lambda card: format_card(card, resolved))


# =============================================================================
# Default card rendering (no field selection)
# =============================================================================
def _summary_lines(obj: Any) -> list[str]:
    lines = []
    if mana_cost := obj.get("mana_cost"):
        lines.append(f"Mana Cost: {mana_cost}")
    if type_line := obj.get("type_line"):
        lines.append(f"Type: {type_line}")
    if oracle_text := obj.get("oracle_text"):
        lines.append(f"Text: {oracle_text}")
    if power := obj.get("power"):
        lines.append(f"Power/Toughness: {power}/{obj.get('toughness', '?')}")
    if loyalty := obj.get("loyalty"):
        lines.append(f"Loyalty: {loyalty}")
    return lines


def format_card_summary(card: Card) -> str:
    """A fixed, readable layout used when the caller picked no fields."""
    output = [f"**{card.get('name', 'Unknown')}**"]

    faces = card.get("card_faces")
    if faces:
        for face in faces:
            output.append(f"Face: {face.get('name', 'Unknown')}")
            output += [f"  {line}" for line in _summary_lines(face)]
    else:
        output += _summary_lines(card)

    if set_name := card.get("set_name"):
        output.append(f"Set: {set_name} ({str(card.get('set', '')).upper()})")
    if rarity := card.get("rarity"):
        output.append(f"Rarity: {rarity}")
    if price := (card.get("prices") or {}).get("usd"):
        output.append(f"Price (USD): ${price}")
    if legalities := card.get("legalities"):
        legal = [fmt for fmt, status in legalities.items() if status == "legal"]
        if legal:
            output.append(f"Legal in: {', '.join(legal)}")
    return "\n".join(output)


def format_card_summaries(cards: Sequence[Card], limit: int = DEFAULT_CARD_LIMIT) -> str:
    """format_cards() for the no-selection case: same header and footer."""
    return _card_list(cards, limit, format_card_summary)


# =============================================================================
# Other Scryfall objects
# =============================================================================
def format_not_found(identifiers: Sequence[CardIdentifier]) -> str:
    """Bullet list of collection identifiers Scryfall could not match."""
    lines = []
    for ident in identifiers:
        if "name" in ident:
            suffix = f" ({ident['set']})" if ident.get("set") else ""
            lines.append(f'- "{ident["name"]}"{suffix}')
        else:
            lines.append(f"- {json.dumps(ident, ensure_ascii=False)}")
    return "\n".join(lines)


def format_rulings(rulings: Sequence[Ruling]) -> str:
    if not rulings:
        return "No rulings found for this card."
    output = [f"Rulings ({len(rulings)}):", ""]
    for ruling in rulings:
        output.append(
            f"- [{ruling.get('published_at', '?')}] "
            f"({ruling.get('source', '?')}) {ruling.get('comment', '')}"
        )
    return "\n".join(output)


def format_sets(sets: Sequence[CardSet], limit: Optional[int] = None) -> str:
    shown = sets if limit is None else sets[:limit]
    output = [f"Showing {len(shown)} of {len(sets)} sets:", ""]
    for card_set in shown:
        details = ", ".join(
            part for part in (
                card_set.get("released_at"),
                card_set.get("set_type"),
                f"{card_set['card_count']} cards" if "card_count" in card_set else None,
            ) if part
        )
        output.append(
            f"- {str(card_set.get('code', '?')).upper()}: "
            f"{card_set.get('name', 'Unknown')}" + (f" ({details})" if details else "")
        )
    if len(sets) > len(shown):
        output.append(f"... and {len(sets) - len(shown)} more sets")
    return "\n".join(output)


def format_symbols(symbols: Sequence[CardSymbol]) -> str:
    output = [f"{len(symbols)} card symbols:", ""]
    for symbol in symbols:
        line = f"- {symbol.get('symbol', '?')}: {symbol.get('english', '')}"
        if symbol.get("represents_mana"):
            line += f" (mana value {_format_scalar(symbol.get('cmc'))})"
        output.append(line)
    return "\n".join(output)


def format_catalog(catalog: Catalog, limit: Optional[int] = None) -> str:
    values = catalog.get("data", [])
    shown = values if limit is None else values[:limit]
    total = catalog.get("total_values", len(values))
    output = [f"Showing {len(shown)} of {total} values:", ""]
    output += [f"- {value}" for value in shown]
    if total > len(shown):
        output.append(f"... and {total - len(shown)} more values")
    return "\n".join(output)


def format_parsed_mana(result: ParsedMana) -> str:
    colors = result.get("colors") or []
    return "\n".join([
        f"Cost: {result.get('cost', '')}",
        f"Mana value: {_format_scalar(result.get('cmc'))}",
        f"Colors: {', '.join(colors) if colors else 'colorless'}",
    ])
