"""
Exception taxonomy for the game feed pipeline.
"""

from __future__ import annotations


class GameFeedError(Exception):
    """Base exception for game feed failures."""


class RequestError(GameFeedError):
    """Raised when a remote request cannot produce a usable response."""


class TransportError(RequestError):
    """Raised on connection failures and request timeouts."""


class RateLimited(RequestError):
    """Raised when a source keeps answering with HTTP 429."""


class ServerError(RequestError):
    """Raised when a source keeps answering with a 5xx status."""


class ClientError(RequestError):
    """Raised for non-retryable 4xx responses."""


class ParseError(GameFeedError):
    """Raised when a response body does not match the expected payload."""


class InvalidArgument(GameFeedError, ValueError):
    """Raised on invalid pipeline configuration or input."""


class BatchFetchError(GameFeedError):
    """
    Raised when one source of a batch fetch fails.

    Attributes:
        source: Name of the failing source ("games", "votes", "thumbnails").
        reason: Human-readable failure description.
    """

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")
