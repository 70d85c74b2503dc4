"""
tests/test_batch_fetcher.py

Fan-out/fan-in behaviour of MultiSourceBatchFetcher.
"""

from __future__ import annotations

import random
import threading

import pytest

from fakes import RoutingTransport, SleepRecorder, make_response
from gamefeed.config import FetchSettings
from gamefeed.connectors.executor import ResilientRequestExecutor
from gamefeed.connectors.sources import GamesSource, ThumbnailsSource, VotesSource
from gamefeed.errors import BatchFetchError, ClientError, ParseError, ServerError, TransportError
from gamefeed.services.batch_fetcher import MultiSourceBatchFetcher

GAMES_URL = "https://games.example.test/v1/games"
VOTES_URL = "https://games.example.test/v1/games/votes"
THUMBS_URL = "https://thumbnails.example.test/v1/games/multiget/thumbnails"

GAMES_OK = make_response(
    200,
    {
        "data": [
            {"id": 1, "rootPlaceId": 10, "name": "One", "playing": 5, "visits": 50},
            {"id": 2, "rootPlaceId": 20, "name": "Two", "playing": 7, "visits": 70},
        ]
    },
)
VOTES_OK = make_response(200, {"data": [{"id": 1, "upVotes": 3, "downVotes": 1}]})
THUMBS_OK = make_response(200, {"data": [{"universeId": 2, "thumbnails": [{"imageUrl": "two.png"}]}]})


def _fetcher(transport: RoutingTransport, sleeper: SleepRecorder) -> MultiSourceBatchFetcher:
    executor = ResilientRequestExecutor(
        transport=transport,
        settings=FetchSettings(),
        sleep=sleeper,
        rng=random.Random(0),
    )
    return MultiSourceBatchFetcher(
        executor=executor,
        games=GamesSource(url=GAMES_URL),
        votes=VotesSource(url=VOTES_URL),
        thumbnails=ThumbnailsSource(url=THUMBS_URL),
    )


def test_fetch_batch_returns_three_maps(sleeper: SleepRecorder) -> None:
    transport = RoutingTransport({GAMES_URL: GAMES_OK, VOTES_URL: VOTES_OK, THUMBS_URL: THUMBS_OK})

    payloads = _fetcher(transport, sleeper).fetch_batch([1, 2])

    assert set(payloads.primary) == {1, 2}
    assert payloads.primary[2].name == "Two"
    assert payloads.secondary == {1: 75}
    assert payloads.tertiary == {2: "two.png"}
    assert sorted(request.url for request in transport.calls) == sorted([GAMES_URL, VOTES_URL, THUMBS_URL])
    assert all(request.params["universeIds"] == "1,2" for request in transport.calls)


def test_sources_are_fetched_concurrently(sleeper: SleepRecorder) -> None:
    barrier = threading.Barrier(3, timeout=5)

    def _after_barrier(response):
        def _route(_request):
            # Only passes when all three requests are in flight at once.
            barrier.wait()
            return response

        return _route

    transport = RoutingTransport(
        {
            GAMES_URL: _after_barrier(GAMES_OK),
            VOTES_URL: _after_barrier(VOTES_OK),
            THUMBS_URL: _after_barrier(THUMBS_OK),
        }
    )

    payloads = _fetcher(transport, sleeper).fetch_batch([1, 2])
    assert len(payloads.primary) == 2


@pytest.mark.parametrize(
    "failing_url, failure, source, cause_type",
    [
        (GAMES_URL, make_response(404), "games", ClientError),
        (VOTES_URL, make_response(200, body=b"{broken"), "votes", ParseError),
        (THUMBS_URL, make_response(503), "thumbnails", ServerError),
        (VOTES_URL, TransportError("connection reset"), "votes", TransportError),
    ],
)
def test_any_source_failure_fails_whole_batch(
    sleeper: SleepRecorder,
    failing_url: str,
    failure: object,
    source: str,
    cause_type: type[Exception],
) -> None:
    routes = {GAMES_URL: GAMES_OK, VOTES_URL: VOTES_OK, THUMBS_URL: THUMBS_OK}
    routes[failing_url] = failure
    transport = RoutingTransport(routes)

    with pytest.raises(BatchFetchError) as exc_info:
        _fetcher(transport, sleeper).fetch_batch([1, 2])

    assert exc_info.value.source == source
    assert isinstance(exc_info.value.__cause__, cause_type)


def test_first_failing_source_in_order_is_reported(sleeper: SleepRecorder) -> None:
    transport = RoutingTransport(
        {GAMES_URL: GAMES_OK, VOTES_URL: make_response(400), THUMBS_URL: make_response(401)}
    )

    with pytest.raises(BatchFetchError) as exc_info:
        _fetcher(transport, sleeper).fetch_batch([1])

    assert exc_info.value.source == "votes"


def test_unexpected_exception_is_wrapped(sleeper: SleepRecorder) -> None:
    transport = RoutingTransport(
        {GAMES_URL: RuntimeError("boom"), VOTES_URL: VOTES_OK, THUMBS_URL: THUMBS_OK}
    )

    with pytest.raises(BatchFetchError) as exc_info:
        _fetcher(transport, sleeper).fetch_batch([1])

    assert exc_info.value.source == "games"
    assert "RuntimeError" in exc_info.value.reason
