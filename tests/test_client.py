import asyncio
import json

import httpx
import pytest

from core.client import MAX_COLLECTION_IDENTIFIERS, ScryfallClient
from core.errors import (
    InputValidationError,
    RateLimitedError,
    ScryfallAPIError,
    TransportError,
    UpstreamError,
)
from core.models import ClientConfig, EndpointRequest
from tests.conftest import LIGHTNING_BOLT, card_list, error_body


class Recorder:
    """MockTransport handler that replays canned responses and logs requests."""

    def __init__(self, *responses, clock=None):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []
        self.sent_at: list[float] = []
        self.clock = clock

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.clock is not None:
            self.sent_at.append(self.clock())
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


def ok(payload=None):
    return httpx.Response(200, json=LIGHTNING_BOLT if payload is None else payload)


def too_many():
    return httpx.Response(429, json=error_body(429, "rate_limited", "Slow down"))


# =============================================================================
# Configuration
# =============================================================================

def test_default_config():
    config = ClientConfig()
    assert config.base_url == "https://api.scryfall.com"
    assert config.request_delay == 0.1
    assert config.max_retries == 3
    assert config.initial_backoff == 1.0
    assert config.timeout == 30.0


def test_default_pacer_uses_request_delay():
    client = ScryfallClient(ClientConfig(request_delay=0.25))
    assert client.pacer.min_interval == 0.25


# =============================================================================
# Pacing
# =============================================================================

def test_sends_are_spaced_by_request_delay(make_client, clock):
    handler = Recorder(ok(), clock=clock)
    client = make_client(handler, request_delay=0.1)

    async def run():
        for _ in range(5):
            await client.get_card("test-id-1")

    asyncio.run(run())

    gaps = [b - a for a, b in zip(handler.sent_at, handler.sent_at[1:])]
    assert len(gaps) == 4
    assert all(gap >= 0.1 - 1e-9 for gap in gaps)


def test_zero_delay_never_sleeps(make_client, clock):
    client = make_client(Recorder(ok()), request_delay=0)

    async def run():
        await client.get_card("a")
        await client.get_card("b")

    asyncio.run(run())
    assert clock.sleeps == []


# =============================================================================
# Retry / backoff
# =============================================================================

@pytest.mark.parametrize("failures, expected_backoff", [
    (1, [1.0]),
    (2, [1.0, 2.0]),
    (3, [1.0, 2.0, 4.0]),
])
def test_429_is_retried_with_exponential_backoff(
    make_client, clock, failures, expected_backoff
):
    handler = Recorder(*([too_many()] * failures), ok())
    client = make_client(handler, max_retries=3, initial_backoff=1.0)

    card = asyncio.run(client.get_card("test-id-1"))

    assert card["name"] == "Lightning Bolt"
    assert len(handler.requests) == failures + 1
    # Each backoff already exceeds request_delay, so the pacer adds nothing.
    assert clock.sleeps == expected_backoff


def test_429_past_max_retries_raises_rate_limited(make_client, clock):
    handler = Recorder(too_many())
    client = make_client(handler, max_retries=3, initial_backoff=1.0)

    with pytest.raises(RateLimitedError) as excinfo:
        asyncio.run(client.get_card("test-id-1"))

    assert len(handler.requests) == 4
    assert clock.sleeps == [1.0, 2.0, 4.0]
    error = excinfo.value
    assert error.code == "rate_limit_error"
    assert error.status == 429
    assert error.details == "Too many requests. Please reduce request frequency."
    assert isinstance(error, ScryfallAPIError)


def test_zero_retries_fails_on_first_429(make_client, clock):
    handler = Recorder(too_many())
    client = make_client(handler, max_retries=0)

    with pytest.raises(RateLimitedError):
        asyncio.run(client.get_card("x"))

    assert len(handler.requests) == 1
    assert clock.sleeps == []


def test_backoff_scales_with_initial_backoff(make_client, clock):
    handler = Recorder(too_many(), too_many(), ok())
    client = make_client(handler, initial_backoff=0.5)

    asyncio.run(client.get_card("x"))

    assert clock.sleeps == [0.5, 1.0]


@pytest.mark.parametrize("status", [500, 502, 503])
def test_server_errors_are_not_retried(make_client, status):
    handler = Recorder(httpx.Response(status, json={"object": "card"}))
    client = make_client(handler)

    with pytest.raises(TransportError):
        asyncio.run(client.get_card("x"))

    assert len(handler.requests) == 1


# =============================================================================
# Response classification
# =============================================================================

def test_error_body_raises_upstream_error(make_client):
    body = error_body(404, "not_found", "No card found with the given ID.")
    client = make_client(Recorder(httpx.Response(404, json=body)))

    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(client.get_card("missing"))

    error = excinfo.value
    assert error.code == "not_found"
    assert error.status == 404
    assert error.details == "No card found with the given ID."
    assert str(error) == "Scryfall API Error: No card found with the given ID."


def test_error_body_wins_over_success_status(make_client):
    body = error_body(400, "bad_request", "Invalid query")
    client = make_client(Recorder(httpx.Response(200, json=body)))

    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(client.search_cards("!!!"))

    assert excinfo.value.code == "bad_request"


def test_non_2xx_without_error_body_is_transport_error(make_client):
    client = make_client(Recorder(httpx.Response(500, json={"object": "card"})))

    with pytest.raises(TransportError) as excinfo:
        asyncio.run(client.get_card("x"))

    assert excinfo.value.status == 500
    assert excinfo.value.reason == "Internal Server Error"
    assert str(excinfo.value) == "HTTP 500: Internal Server Error"


def test_malformed_json_is_transport_error(make_client):
    handler = Recorder(httpx.Response(200, text="<html>not json</html>"))
    client = make_client(handler)

    with pytest.raises(TransportError) as excinfo:
        asyncio.run(client.get_card("x"))

    assert excinfo.value.status == 200
    assert len(handler.requests) == 1


def test_non_json_error_page_reports_the_status(make_client):
    handler = Recorder(httpx.Response(502, text="<html>Bad Gateway</html>"))
    client = make_client(handler)

    with pytest.raises(TransportError) as excinfo:
        asyncio.run(client.get_card("x"))

    assert str(excinfo.value) == "HTTP 502: Bad Gateway"
    assert excinfo.value.status == 502
    assert len(handler.requests) == 1


def test_network_failure_is_transport_error(make_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(TransportError):
        asyncio.run(client.get_card("x"))


# =============================================================================
# Request shape
# =============================================================================

def test_default_headers_are_sent(make_client):
    handler = Recorder(ok())
    client = make_client(handler, user_agent="card-tests/1.0")

    asyncio.run(client.get_card("test-id-1"))

    request = handler.requests[0]
    assert request.headers["User-Agent"] == "card-tests/1.0"
    assert request.headers["Accept"] == "application/json"
    assert request.url.path == "/cards/test-id-1"


def test_request_headers_are_merged_over_defaults(make_client):
    handler = Recorder(ok({"object": "list", "data": []}))
    client = make_client(handler)

    asyncio.run(client.perform(EndpointRequest(
        "/sets", headers={"X-Trace": "abc", "Accept": "application/json;q=0.9"},
    )))

    request = handler.requests[0]
    assert request.headers["X-Trace"] == "abc"
    assert request.headers["Accept"] == "application/json;q=0.9"
    assert "User-Agent" in request.headers


def test_absolute_url_is_used_verbatim(make_client):
    handler = Recorder(ok(card_list([])))
    client = make_client(handler)
    next_page = "https://api.scryfall.com/cards/search?q=bolt&page=2"

    asyncio.run(client.perform(EndpointRequest(next_page)))

    assert str(handler.requests[0].url) == next_page


def test_search_cards_query_params(make_client):
    handler = Recorder(ok(card_list([LIGHTNING_BOLT])))
    client = make_client(handler)

    asyncio.run(client.search_cards(
        "c:red t:instant",
        unique="prints",
        order="usd",
        dir="desc",
        include_extras=True,
        include_multilingual=False,
        page=2,
    ))

    params = handler.requests[0].url.params
    assert handler.requests[0].url.path == "/cards/search"
    assert params["q"] == "c:red t:instant"
    assert params["unique"] == "prints"
    assert params["order"] == "usd"
    assert params["dir"] == "desc"
    assert params["include_extras"] == "true"
    assert params["include_multilingual"] == "false"
    assert params["page"] == "2"
    assert "include_variations" not in params


def test_get_card_named_exact_and_fuzzy(make_client):
    handler = Recorder(ok())
    client = make_client(handler)

    async def run():
        await client.get_card_named("Lightning Bolt")
        await client.get_card_named("lightnin bolt", fuzzy=True, set_code="lea")

    asyncio.run(run())

    exact, fuzzy = (r.url.params for r in handler.requests)
    assert exact["exact"] == "Lightning Bolt"
    assert "fuzzy" not in exact
    assert fuzzy["fuzzy"] == "lightnin bolt"
    assert fuzzy["set"] == "lea"


def test_get_random_card_without_query_sends_no_params(make_client):
    handler = Recorder(ok())
    client = make_client(handler)

    asyncio.run(client.get_random_card())

    assert handler.requests[0].url.path == "/cards/random"
    assert "q" not in handler.requests[0].url.params


def test_collection_posts_identifiers(make_client):
    handler = Recorder(ok(card_list([LIGHTNING_BOLT])))
    client = make_client(handler)
    identifiers = [{"name": "Lightning Bolt"}, {"id": "test-id-3"}]

    result = asyncio.run(client.get_collection(identifiers))

    request = handler.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/cards/collection"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"identifiers": identifiers}
    assert result["data"][0]["name"] == "Lightning Bolt"


@pytest.mark.parametrize("count", [0, MAX_COLLECTION_IDENTIFIERS + 1])
def test_collection_rejects_bad_sizes_without_a_request(make_client, count):
    handler = Recorder(ok())
    client = make_client(handler)
    identifiers = [{"name": f"Card {i}"} for i in range(count)]

    with pytest.raises(InputValidationError):
        asyncio.run(client.get_collection(identifiers))

    assert handler.requests == []


def test_collection_accepts_exactly_75(make_client):
    handler = Recorder(ok(card_list([])))
    client = make_client(handler)
    identifiers = [{"name": f"Card {i}"} for i in range(75)]

    asyncio.run(client.get_collection(identifiers))

    assert len(handler.requests) == 1


def test_endpoint_paths(make_client):
    handler = Recorder(ok({"object": "list", "data": []}))
    client = make_client(handler)

    async def run():
        await client.get_rulings("test-id-1")
        await client.get_sets()
        await client.get_symbology()
        await client.parse_mana("{2}{W}{U}")
        await client.get_catalog("creature-types")

    asyncio.run(run())

    paths = [r.url.path for r in handler.requests]
    assert paths == [
        "/cards/test-id-1/rulings",
        "/sets",
        "/symbology",
        "/symbology/parse-mana",
        "/catalog/creature-types",
    ]
    assert handler.requests[3].url.params["cost"] == "{2}{W}{U}"


def test_context_manager_closes_http_client(make_client):
    client = make_client(Recorder(ok()))

    async def run():
        async with client:
            await client.get_card("x")
            assert client._http is not None
        assert client._http is None

    asyncio.run(run())
