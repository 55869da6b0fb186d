"""Shared fixtures: sample Scryfall cards, a fake clock, a mocked client."""

import copy

import httpx
import pytest

from core.client import ScryfallClient
from core.models import ClientConfig
from core.pacer import RatePacer


class FakeClock:
    """A monotonic clock that only moves when something sleeps on it."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_client(clock):
    """Factory for a ScryfallClient whose HTTP and time are both fake."""

    def factory(handler, **overrides) -> ScryfallClient:
        config = ClientConfig(**overrides)
        pacer = RatePacer(config.request_delay, clock=clock, sleep=clock.sleep)
        return ScryfallClient(
            config,
            pacer=pacer,
            transport=httpx.MockTransport(handler),
            sleep=clock.sleep,
        )

    return factory


LIGHTNING_BOLT = {
    "object": "card",
    "id": "test-id-1",
    "oracle_id": "oracle-id-1",
    "name": "Lightning Bolt",
    "lang": "en",
    "released_at": "1993-08-05",
    "layout": "normal",
    "mana_cost": "{R}",
    "cmc": 1.0,
    "type_line": "Instant",
    "oracle_text": "Lightning Bolt deals 3 damage to any target.",
    "colors": ["R"],
    "color_identity": ["R"],
    "legalities": {
        "standard": "not_legal",
        "modern": "legal",
        "legacy": "legal",
        "vintage": "legal",
    },
    "reserved": False,
    "digital": False,
    "set": "lea",
    "set_name": "Limited Edition Alpha",
    "set_type": "core",
    "collector_number": "161",
    "rarity": "common",
    "artist": "Christopher Rush",
    "illustration_id": "illustration-id-1",
    "frame": "1993",
    "prices": {
        "usd": "125.00",
        "usd_foil": None,
        "eur": "100.00",
        "eur_foil": None,
        "tix": None,
    },
    "image_uris": {
        "small": "https://cards.scryfall.io/small/test-id-1.jpg",
        "normal": "https://cards.scryfall.io/normal/test-id-1.jpg",
    },
}

TARMOGOYF = {
    "object": "card",
    "id": "test-id-3",
    "name": "Tarmogoyf",
    "layout": "normal",
    "mana_cost": "{1}{G}",
    "cmc": 2.0,
    "type_line": "Creature — Lhurgoyf",
    "oracle_text": (
        "Tarmogoyf's power is equal to the number of card types among cards "
        "in all graveyards and its toughness is equal to that number plus 1."
    ),
    "colors": ["G"],
    "color_identity": ["G"],
    "power": "*",
    "toughness": "*+1",
    "legalities": {"standard": "not_legal", "modern": "legal"},
    "set": "fut",
    "set_name": "Future Sight",
    "collector_number": "153",
    "rarity": "rare",
    "artist": "Ryan Barger",
    "prices": {"usd": "15.00", "usd_foil": "45.00", "eur": "12.00"},
}

DELVER = {
    "object": "card",
    "id": "test-id-2",
    "name": "Delver of Secrets // Insectile Aberration",
    "layout": "transform",
    "cmc": 1.0,
    "type_line": "Creature — Human Wizard // Creature — Human Insect",
    "color_identity": ["U"],
    "legalities": {"standard": "not_legal", "modern": "legal"},
    "set": "isd",
    "set_name": "Innistrad",
    "collector_number": "51",
    "rarity": "common",
    "prices": {"usd": "1.25", "eur": "1.00"},
    "card_faces": [
        {
            "object": "card_face",
            "name": "Delver of Secrets",
            "mana_cost": "{U}",
            "type_line": "Creature — Human Wizard",
            "oracle_text": (
                "At the beginning of your upkeep, look at the top card of "
                "your library. You may reveal that card. If an instant or "
                "sorcery card is revealed this way, transform Delver of Secrets."
            ),
            "colors": ["U"],
            "power": "1",
            "toughness": "1",
            "artist": "Nils Hamm",
            "illustration_id": "illustration-id-2a",
        },
        {
            "object": "card_face",
            "name": "Insectile Aberration",
            "mana_cost": "",
            "type_line": "Creature — Human Insect",
            "oracle_text": "Flying",
            "colors": ["U"],
            "power": "3",
            "toughness": "2",
            "artist": "Nils Hamm",
            "illustration_id": "illustration-id-2b",
        },
    ],
}


@pytest.fixture
def lightning_bolt():
    return copy.deepcopy(LIGHTNING_BOLT)


@pytest.fixture
def tarmogoyf():
    return copy.deepcopy(TARMOGOYF)


@pytest.fixture
def delver():
    return copy.deepcopy(DELVER)


def card_list(cards, has_more=False, total_cards=None):
    """Wrap cards in a Scryfall list object."""
    return {
        "object": "list",
        "total_cards": len(cards) if total_cards is None else total_cards,
        "has_more": has_more,
        "data": cards,
    }


def error_body(status=404, code="not_found", details="No card found."):
    return {"object": "error", "code": code, "status": status, "details": details}


BONECRUSHER_GIANT = {
    "object": "card",
    "id": "test-id-4",
    "name": "Bonecrusher Giant // Stomp",
    "layout": "adventure",
    "mana_cost": "{2}{R} // {1}{R}",
    "cmc": 3.0,
    "type_line": "Creature — Giant // Instant — Adventure",
    "colors": ["R"],
    "set": "eld",
    "rarity": "rare",
    "artist": "Victor Adame Minguez",
    "illustration_id": "illustration-id-4",
    "image_uris": {"normal": "https://cards.scryfall.io/normal/test-id-4.jpg"},
    "card_faces": [
        {
            "object": "card_face",
            "name": "Bonecrusher Giant",
            "mana_cost": "{2}{R}",
            "type_line": "Creature — Giant",
            "oracle_text": (
                "Whenever Bonecrusher Giant becomes the target of a spell, "
                "Bonecrusher Giant deals 2 damage to that spell's controller."
            ),
            "power": "4",
            "toughness": "3",
        },
        {
            "object": "card_face",
            "name": "Stomp",
            "mana_cost": "{1}{R}",
            "type_line": "Instant — Adventure",
            "oracle_text": "Damage can't be prevented this turn. Stomp deals 2 damage to any target.",
        },
    ],
}


@pytest.fixture
def bonecrusher_giant():
    return copy.deepcopy(BONECRUSHER_GIANT)
