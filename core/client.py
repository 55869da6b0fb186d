# =============================================================================
# core/client.py  -  Rate-limited Scryfall API client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Performs every outbound call to api.scryfall.com.  It is built in three
#   layers, bottom to top:
#
#     _send()     one physical HTTP request (after the pacer lets it through)
#     perform()   retry loop: 429 -> backoff -> _send() again, then classify
#     endpoints   search_cards(), get_card_named(), ... build an
#                 EndpointRequest and call perform()
#
# THE UPSTREAM CONTRACT:
#   - At least `request_delay` seconds between two physical sends.  The
#     interval is measured send-to-send, not response-to-send.
#   - HTTP 429 means "slow down".  We wait initial_backoff * 2**attempt and
#     try again, up to max_retries times.  No jitter, so tests are exact.
#   - Error bodies look like {"object": "error", "code", "status", "details"}.
#     Scryfall may send them with any status code, so the body is checked
#     BEFORE the HTTP status.
#
#   Nothing except 429 is ever retried.
#
# WHAT THIS MODULE DOES NOT DO:
#   It never formats text (core/formatter.py) and never reads environment
#   variables (the tool layer builds the ClientConfig).
# =============================================================================

import asyncio
import logging
from typing import Any, Optional

import httpx

from core.errors import (
    InputValidationError,
    RateLimitedError,
    TransportError,
    UpstreamError,
    is_error_payload,
)
from core.models import (
    Card,
    CardIdentifier,
    CardList,
    Catalog,
    CatalogType,
    ClientConfig,
    EndpointRequest,
    ParsedMana,
    RulingList,
    SetList,
    SortDirection,
    SortOrder,
    SymbolList,
    UniqueMode,
)
from core.pacer import RatePacer, Sleep

log = logging.getLogger(__name__)

# Scryfall rejects larger /cards/collection bodies server-side.
MAX_COLLECTION_IDENTIFIERS = 75


def _flag(value: bool) -> str:
    return "true" if value else "false"


class ScryfallClient:
    """Async client for the Scryfall REST API.

    Example:
        async with ScryfallClient() as client:
            bolt = await client.get_card_named("Lightning Bolt")
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        pacer: Optional[RatePacer] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """Create a client.

        Args:
            config: Connection and retry settings.  Defaults to ClientConfig().
            pacer: The pacer that owns this client's last-send timestamp.
                A fresh one (using config.request_delay) is built if omitted.
            transport: Optional httpx transport, e.g. httpx.MockTransport.
            sleep: Coroutine function used for 429 backoff.
        """
        self.config = config or ClientConfig()
        self.pacer = pacer or RatePacer(self.config.request_delay, sleep=sleep)
        self._transport = transport
        self._sleep = sleep
        self._http: Optional[httpx.AsyncClient] = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------
    @property
    def http(self) -> httpx.AsyncClient:
        """Get or create the underlying httpx client."""
        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                transport=self._transport,
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "ScryfallClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    # -------------------------------------------------------------------------
    # Transport primitive
    # -------------------------------------------------------------------------
    def _url(self, path: str) -> str:
        if path.startswith("http"):
            return path
        return f"{self.config.base_url}{path}"

    async def _send(self, request: EndpointRequest) -> httpx.Response:
        """Wait for the pacer, then issue exactly one HTTP request."""
        await self.pacer.wait()

        headers = {
            "User-Agent": self.config.user_agent,
            "Accept": "application/json",
            **request.headers,
        }
        url = self._url(request.path)
        log.debug("%s %s params=%s", request.method, url, request.params)
        try:
            return await self.http.request(
                request.method,
                url,
                params=request.params or None,
                json=request.json,
                headers=headers,
            )
        except httpx.TransportError as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

    # -------------------------------------------------------------------------
    # Retry / backoff controller
    # -------------------------------------------------------------------------
    async def perform(self, request: EndpointRequest) -> Any:
        """Send a request, absorbing 429s with exponential backoff.

        Returns:
            The parsed JSON payload.

        Raises:
            RateLimitedError: 429 persisted through max_retries retries.
            UpstreamError: The body was a Scryfall error object.
            TransportError: Non-2xx without an error body, malformed JSON,
                or a network failure.
        """
        attempt = 0
        while True:
            response = await self._send(request)
            if response.status_code != 429:
                return self._classify(response)

            if attempt >= self.config.max_retries:
                raise RateLimitedError(self.config.max_retries)

            backoff = self.config.initial_backoff * 2 ** attempt
            log.warning(
                "Rate limit hit (429). Retrying after %.2fs (attempt %d/%d)",
                backoff, attempt + 1, self.config.max_retries,
            )
            await self._sleep(backoff)
            attempt += 1

    @staticmethod
    def _classify(response: httpx.Response) -> Any:
        try:
            payload = response.json()
        except ValueError as exc:
            # A proxy error page is an HTTP failure, not a bad payload.
            if not response.is_success:
                raise ScryfallClient._status_error(response) from exc
            raise TransportError(
                f"Invalid JSON in response (HTTP {response.status_code})",
                status=response.status_code,
                reason=response.reason_phrase,
            ) from exc

        # The error body wins over the status line.
        if is_error_payload(payload):
            raise UpstreamError.from_payload(payload)

        if not response.is_success:
            raise ScryfallClient._status_error(response)
        return payload

    @staticmethod
    def _status_error(response: httpx.Response) -> TransportError:
        return TransportError(
            f"HTTP {response.status_code}: {response.reason_phrase}",
            status=response.status_code,
            reason=response.reason_phrase,
        )

    # -------------------------------------------------------------------------
    # Cards
    # -------------------------------------------------------------------------
    async def search_cards(
        self,
        query: str,
        *,
        unique: Optional[UniqueMode] = None,
        order: Optional[SortOrder] = None,
        dir: Optional[SortDirection] = None,
        include_extras: Optional[bool] = None,
        include_multilingual: Optional[bool] = None,
        include_variations: Optional[bool] = None,
        page: Optional[int] = None,
    ) -> CardList:
        """Full-text search using Scryfall's query syntax.

        A query with no matches comes back as an UpstreamError (not_found).
        """
        params = {"q": query}
        if unique:
            params["unique"] = unique
        if order:
            params["order"] = order
        if dir:
            params["dir"] = dir
        if include_extras is not None:
            params["include_extras"] = _flag(include_extras)
        if include_multilingual is not None:
            params["include_multilingual"] = _flag(include_multilingual)
        if include_variations is not None:
            params["include_variations"] = _flag(include_variations)
        if page is not None:
            params["page"] = str(page)
        return await self.perform(EndpointRequest("/cards/search", params=params))

    async def get_card_named(
        self,
        name: str,
        *,
        fuzzy: bool = False,
        set_code: Optional[str] = None,
    ) -> Card:
        """Look a card up by exact (default) or fuzzy name."""
        params = {"fuzzy" if fuzzy else "exact": name}
        if set_code:
            params["set"] = set_code
        return await self.perform(EndpointRequest("/cards/named", params=params))

    async def get_card(self, card_id: str) -> Card:
        return await self.perform(EndpointRequest(f"/cards/{card_id}"))

    async def get_random_card(self, query: Optional[str] = None) -> Card:
        params = {"q": query} if query else {}
        return await self.perform(EndpointRequest("/cards/random", params=params))

    async def get_collection(self, identifiers: list[CardIdentifier]) -> CardList:
        """Resolve up to 75 identifiers in one request.

        The result's ``data`` holds the matches and ``not_found`` the
        identifiers Scryfall could not resolve.

        Raises:
            InputValidationError: Empty input or more than 75 identifiers.
                No request is sent in that case.
        """
        if not identifiers:
            raise InputValidationError("At least one identifier is required")
        if len(identifiers) > MAX_COLLECTION_IDENTIFIERS:
            raise InputValidationError(
                f"Maximum {MAX_COLLECTION_IDENTIFIERS} identifiers allowed per "
                "request. Use multiple requests for larger collections."
            )
        return await self.perform(EndpointRequest(
            "/cards/collection",
            method="POST",
            json={"identifiers": list(identifiers)},
            headers={"Content-Type": "application/json"},
        ))

    async def get_rulings(self, card_id: str) -> RulingList:
        return await self.perform(EndpointRequest(f"/cards/{card_id}/rulings"))

    # -------------------------------------------------------------------------
    # Sets, symbology, catalogs
    # -------------------------------------------------------------------------
    async def get_sets(self) -> SetList:
        return await self.perform(EndpointRequest("/sets"))

    async def get_symbology(self) -> SymbolList:
        return await self.perform(EndpointRequest("/symbology"))

    async def parse_mana(self, cost: str) -> ParsedMana:
        return await self.perform(
            EndpointRequest("/symbology/parse-mana", params={"cost": cost})
        )

    async def get_catalog(self, catalog_type: CatalogType) -> Catalog:
        return await self.perform(EndpointRequest(f"/catalog/{catalog_type}"))
