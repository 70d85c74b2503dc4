"""
gamefeed/connectors/sources.py

Source adapters: request building and payload normalization per endpoint.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from gamefeed.config import SourceSettings
from gamefeed.connectors.transport import HTTPResponse, RequestSpec
from gamefeed.errors import ClientError, ParseError, RateLimited, ServerError
from gamefeed.schemas.roblox import (
    GameDetail,
    GamesPayload,
    ThumbnailsPayload,
    VotesPayload,
)

logger = logging.getLogger(__name__)

ValueT = TypeVar("ValueT")


def raise_for_status(response: HTTPResponse, *, source: str) -> None:
    """
    Map a non-2xx response onto the request error taxonomy.
    """

    status_code = response.status_code
    if response.ok:
        return
    if status_code == 429:
        raise RateLimited(f"{source}: rate limited status={status_code}")
    if 500 <= status_code < 600:
        raise ServerError(f"{source}: server error status={status_code}")
    raise ClientError(f"{source}: request rejected status={status_code}")


class BatchSource(ABC, Generic[ValueT]):
    """
    One remote endpoint that accepts a comma-joined universe id list.
    """

    name: str
    payload_model: type[BaseModel]

    def __init__(self, *, url: str) -> None:
        self.url = url

    def build_request(self, ids: Sequence[int]) -> RequestSpec:
        params = {"universeIds": ",".join(str(game_id) for game_id in ids)}
        params.update(self.extra_params())
        return RequestSpec(url=self.url, params=params)

    def extra_params(self) -> dict[str, Any]:
        return {}

    def parse(self, response: HTTPResponse) -> dict[int, ValueT]:
        """
        Validate the response and return values keyed by universe id.
        """

        raise_for_status(response, source=self.name)
        try:
            raw = response.json()
        except ValueError as exc:
            raise ParseError(f"{self.name}: response was not valid JSON.") from exc
        if not isinstance(raw, dict):
            raise ParseError(f"{self.name}: expected a JSON object, got {type(raw).__name__}.")

        try:
            payload = self.payload_model.model_validate(raw)
        except ValidationError as exc:
            raise ParseError(
                f"{self.name}: payload failed validation ({exc.error_count()} error(s))."
            ) from exc
        return self.normalize(payload)

    @abstractmethod
    def normalize(self, payload: Any) -> dict[int, ValueT]:
        """
        Project a validated payload into an id-keyed mapping.
        """


class GamesSource(BatchSource[GameDetail]):
    name = "games"
    payload_model = GamesPayload

    def normalize(self, payload: GamesPayload) -> dict[int, GameDetail]:
        return {game.id: game for game in payload.data}


class VotesSource(BatchSource[int]):
    name = "votes"
    payload_model = VotesPayload

    def normalize(self, payload: VotesPayload) -> dict[int, int]:
        return {votes.id: votes.like_ratio for votes in payload.data}


class ThumbnailsSource(BatchSource[str]):
    name = "thumbnails"
    payload_model = ThumbnailsPayload

    def __init__(
        self,
        *,
        url: str,
        size: str = "768x432",
        image_format: str = "Png",
        is_circular: bool = False,
    ) -> None:
        super().__init__(url=url)
        self._size = size
        self._image_format = image_format
        self._is_circular = is_circular

    def extra_params(self) -> dict[str, Any]:
        return {
            "size": self._size,
            "format": self._image_format,
            "isCircular": "true" if self._is_circular else "false",
        }

    def normalize(self, payload: ThumbnailsPayload) -> dict[int, str]:
        icons: dict[int, str] = {}
        for row in payload.data:
            universe_id = row.resolved_id
            if universe_id is None:
                logger.debug("Skipping thumbnail row without universe id")
                continue
            icons[universe_id] = row.icon_url
        return icons


def build_sources(settings: SourceSettings) -> tuple[GamesSource, VotesSource, ThumbnailsSource]:
    """
    Build the primary, secondary and tertiary sources from settings.
    """

    return (
        GamesSource(url=settings.games_url),
        VotesSource(url=settings.votes_url),
        ThumbnailsSource(
            url=settings.thumbnails_url,
            size=settings.thumbnail_size,
            image_format=settings.thumbnail_format,
        ),
    )
