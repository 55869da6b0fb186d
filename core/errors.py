# =============================================================================
# core/errors.py  -  Error kinds raised by the Scryfall client
# =============================================================================
#
# Every failure the client can produce has its own type, so the tool layer
# can pattern-match with `except` clauses instead of string-sniffing:
#
#   ScryfallError                      base class, never raised directly
#   ├── ScryfallAPIError               code / status / details
#   │   ├── UpstreamError              Scryfall returned {"object": "error"}
#   │   └── RateLimitedError           HTTP 429 after all retries
#   ├── TransportError                 non-2xx without an error body,
#   │                                  malformed JSON, network failure
#   └── InputValidationError           rejected before any network call
#
# The tool layer turns ScryfallAPIError into a user-visible error message.
# TransportError and InputValidationError propagate further.
# =============================================================================

from typing import Any, Optional


class ScryfallError(Exception):
    """Base class for everything the Scryfall client raises."""


class ScryfallAPIError(ScryfallError):
    """An error the Scryfall API reported in a form we understand."""

    def __init__(self, message: str, code: str, status: int, details: str):
        super().__init__(message)
        self.code = code
        self.status = status
        self.details = details


class UpstreamError(ScryfallAPIError):
    """A structured Scryfall error object (e.g. ``not_found``, ``bad_request``)."""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "UpstreamError":
        details = payload.get("details", "Unknown error")
        return cls(
            f"Scryfall API Error: {details}",
            code=payload.get("code", "unknown"),
            status=payload.get("status", 0),
            details=details,
        )


class RateLimitedError(ScryfallAPIError):
    """Scryfall kept answering 429 after every allowed retry."""

    def __init__(self, max_retries: int):
        super().__init__(
            "Rate limit exceeded and max retries reached",
            code="rate_limit_error",
            status=429,
            details="Too many requests. Please reduce request frequency.",
        )
        self.max_retries = max_retries


class TransportError(ScryfallError):
    """The request failed below the level of Scryfall's error objects."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.reason = reason


class InputValidationError(ScryfallError, ValueError):
    """Caller input that Scryfall would reject anyway."""


def is_error_payload(payload: Any) -> bool:
    """True when a parsed body is a Scryfall error object."""
    return isinstance(payload, dict) and payload.get("object") == "error"
