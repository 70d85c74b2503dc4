"""
gamefeed/connectors package marker.
"""

from gamefeed.connectors.backoff import compute_backoff_seconds, parse_retry_after, rate_limit_hint
from gamefeed.connectors.executor import ResilientRequestExecutor
from gamefeed.connectors.sources import (
    BatchSource,
    GamesSource,
    ThumbnailsSource,
    VotesSource,
    build_sources,
)
from gamefeed.connectors.transport import (
    HTTPResponse,
    ProxyUrlRewriter,
    RequestSpec,
    RequestsTransport,
    Transport,
)

__all__ = [
    "BatchSource",
    "GamesSource",
    "HTTPResponse",
    "ProxyUrlRewriter",
    "RequestSpec",
    "RequestsTransport",
    "ResilientRequestExecutor",
    "ThumbnailsSource",
    "Transport",
    "VotesSource",
    "build_sources",
    "compute_backoff_seconds",
    "parse_retry_after",
    "rate_limit_hint",
]
