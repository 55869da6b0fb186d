# =============================================================================
# core/fields.py  -  Field selection: groups, paths, lookup, validation
# =============================================================================
#
# A caller chooses what to see about a card in one of three ways:
#
#   None                         -> "no selection", use the default renderer
#   "minimal" / "gameplay" / ... -> a named, ordered group of field paths
#   ["name", "prices.usd", ...]  -> an explicit ordered list, used verbatim
#
# A field path is either a top-level key ("rarity") or ONE level of nesting
# ("prices.usd", "image_uris.normal").  Nothing deeper is supported.
#
# Lookups never raise.  An unknown key, a missing object, or a non-object in
# the middle of a path all produce the MISSING sentinel, which the formatter
# treats as "omit this line".
# =============================================================================

from typing import Any, Optional, Sequence, Union

from core.models import FieldGroup, FieldPath, FieldValidation

FIELDS_REFERENCE_URI = "scryfall://fields/reference"

FIELD_GROUPS: dict[str, tuple[str, ...]] = {
    "minimal": ("name", "mana_cost", "type_line", "oracle_text"),
    "gameplay": (
        "name",
        "card_faces",
        "mana_cost",
        "cmc",
        "type_line",
        "oracle_text",
        "colors",
        "color_identity",
        "power",
        "toughness",
        "loyalty",
        "legalities",
        "rarity",
    ),
    "pricing": ("name", "prices"),
    "imagery": ("name", "artist", "image_uris", "illustration_id"),
    "full": (
        "id",
        "name",
        "released_at",
        "layout",
        "card_faces",
        "mana_cost",
        "cmc",
        "type_line",
        "oracle_text",
        "colors",
        "color_identity",
        "power",
        "toughness",
        "loyalty",
        "legalities",
        "reserved",
        "set_name",
        "set_type",
        "collector_number",
        "digital",
        "rarity",
        "flavor_text",
        "artist",
        "frame",
        "prices",
    ),
}

# The "full" group doubles as the list of recognised field names.
ALL_VALID_FIELDS: tuple[str, ...] = FIELD_GROUPS["full"]

FieldSelector = Union[FieldGroup, Sequence[str], None]


class _Missing:
    """Marker for "this path does not exist on the object"."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def resolve_fields(selector: FieldSelector) -> Optional[list[str]]:
    """Turn a field selector into a concrete, ordered list of field paths.

    Args:
        selector: None, a group keyword, or an explicit list of paths.

    Returns:
        None when no selection was made (the caller should fall back to the
        default renderer).  Otherwise a new list: the group's fields in
        their fixed order, or the caller's list unchanged (order and
        duplicates kept, no validation).

    Raises:
        KeyError: ``selector`` is a string that is not a known group.
    """
    if selector is None:
        return None
    if isinstance(selector, str):
        return list(FIELD_GROUPS[selector])
    return list(selector)


def parse_field_path(path: str) -> FieldPath:
    """Split ``path`` on its first dot.

    "prices.usd" -> FieldPath("prices", "usd").  Anything after a second dot
    stays inside the tail, which no Scryfall object has as a key, so such
    paths resolve to MISSING.
    """
    head, dot, tail = path.partition(".")
    return FieldPath(head, tail if dot else None)


def _lookup(obj: Any, key: str) -> Any:
    if isinstance(obj, dict) and key in obj:
        return obj[key]
    return MISSING


def get_field_value(obj: Any, path: Union[str, FieldPath]) -> Any:
    """Read a one- or two-level field path from a card or face.

    Returns the stored value (which may be None) or MISSING.
    """
    if isinstance(path, str):
        path = parse_field_path(path)
    value = _lookup(obj, path.head)
    if path.tail is None or value is MISSING:
        return value
    return _lookup(value, path.tail)


def validate_fields(fields: Sequence[str]) -> FieldValidation:
    """Check field names against ALL_VALID_FIELDS, for diagnostics only.

    A dotted path is accepted when its first segment is a valid field
    ("prices.usd" passes because "prices" does).  The result never changes
    what resolve_fields() returns.
    """
    known = set(ALL_VALID_FIELDS)
    report = FieldValidation()
    for name in fields:
        if parse_field_path(name).head in known:
            report.valid.append(name)
        else:
            report.warnings.append(
                f"Field '{name}' is not a recognized field. "
                f"See {FIELDS_REFERENCE_URI} for available fields."
            )
    return report


def fields_reference() -> str:
    """Markdown listing every field group, served as an MCP resource."""
    lines = [
        "# Available Card Fields",
        "",
        "Field selections accept either a predefined group name or a custom",
        "array of field names.",
        "",
        "## Field Groups",
    ]
    for group, fields in FIELD_GROUPS.items():
        lines.append("")
        lines.append(f"### {group}")
        lines.extend(f"- {name}" for name in fields)

    lines += [
        "",
        "## All Valid Fields",
        "",
        'The "full" group contains every recognised field.',
        "",
        "## Usage Examples",
        "",
        'Predefined group: `{ "fields": "minimal" }`',
        "",
        'Custom array: `{ "fields": ["name", "mana_cost", "prices"] }`',
        "",
        'Nested fields: `{ "fields": ["name", "prices.usd", "prices.eur"] }`',
        "",
        'Object fields such as "prices", "legalities" and "image_uris" can be',
        "requested whole or one level deep with dot notation.",
    ]
    return "\n".join(lines) + "\n"
