# =============================================================================
# core/pacer.py  -  Minimum-interval pacing between outbound requests
# =============================================================================
#
# Scryfall asks clients to leave 50-100ms between requests.  A RatePacer
# remembers when the last physical request went out and, before the next
# one, suspends for whatever is left of the interval.
#
# OWNERSHIP:
#   One pacer per ScryfallClient.  Two independently configured clients never
#   share pacing state, and each test can build a fresh pacer.
#
# CONCURRENCY:
#   The pacer is NOT locked.  Two coroutines that enter wait() together can
#   both read the same stale timestamp and both under-sleep.  Callers that
#   need strict serialisation must queue their calls themselves.
#
# TIME:
#   `clock` and `sleep` are injectable so tests can run on a fake clock.
#   Suspension always goes through an awaitable sleep; the event loop keeps
#   running other work while one caller waits.
# =============================================================================

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

log = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class RatePacer:
    """Enforce a minimum interval between request sends."""

    def __init__(
        self,
        min_interval: float = 0.1,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        """Create a pacer.

        Args:
            min_interval: Minimum seconds between two sends.
            clock: Monotonic time source, in seconds.
            sleep: Coroutine function used to suspend the caller.
        """
        self.min_interval = min_interval
        self.last_request_at: Optional[float] = None
        self._clock = clock
        self._sleep = sleep

    def required_delay(self) -> float:
        """Seconds the next request must wait right now (0 if none)."""
        if self.last_request_at is None:
            return 0.0
        elapsed = self._clock() - self.last_request_at
        return max(0.0, self.min_interval - elapsed)

    async def wait(self) -> None:
        """Suspend until the interval has elapsed, then stamp the send time."""
        delay = self.required_delay()
        if delay > 0:
            log.debug("Pacing: waiting %.3fs before next request", delay)
            await self._sleep(delay)
        self.last_request_at = self._clock()
