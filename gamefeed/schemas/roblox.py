"""Response payload contracts for the games, votes and thumbnails endpoints."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def compute_like_ratio(up_votes: int, down_votes: int) -> int:
    """Percentage of up votes, rounded half-up; 0 when nobody voted."""
    total = up_votes + down_votes
    if total <= 0:
        return 0
    ratio = math.floor(100 * up_votes / total + 0.5)
    return max(0, min(100, ratio))


class _PayloadModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )


def _none_to_empty_list(value: Any) -> Any:
    return [] if value is None else value


class GameDetail(_PayloadModel):
    """One entry of the games endpoint ``data`` array."""

    id: int
    root_place_id: int | None = Field(default=None, alias="rootPlaceId")
    name: str = ""
    playing: int = 0
    visits: int = 0

    @field_validator("playing", "visits", mode="before")
    @classmethod
    def _missing_counter_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("name", mode="before")
    @classmethod
    def _missing_name_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class GameVotes(_PayloadModel):
    """One entry of the votes endpoint ``data`` array."""

    id: int
    up_votes: int = Field(default=0, alias="upVotes")
    down_votes: int = Field(default=0, alias="downVotes")

    @field_validator("up_votes", "down_votes", mode="before")
    @classmethod
    def _missing_votes_are_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @property
    def like_ratio(self) -> int:
        return compute_like_ratio(self.up_votes, self.down_votes)


class ThumbnailImage(_PayloadModel):
    image_url: str | None = Field(default=None, alias="imageUrl")
    state: str | None = None


class GameThumbnails(_PayloadModel):
    """
    One entry of the multiget thumbnails ``data`` array.

    Older responses key the row by ``targetId`` instead of ``universeId``.
    """

    universe_id: int | None = Field(default=None, alias="universeId")
    target_id: int | None = Field(default=None, alias="targetId")
    thumbnails: list[ThumbnailImage | None] = Field(default_factory=list)

    @field_validator("thumbnails", mode="before")
    @classmethod
    def _missing_thumbnails(cls, value: Any) -> Any:
        value = _none_to_empty_list(value)
        if not isinstance(value, list):
            return value
        # Null or malformed image entries count as "no image".
        return [item if isinstance(item, (dict, ThumbnailImage)) else None for item in value]

    @property
    def resolved_id(self) -> int | None:
        return self.universe_id if self.universe_id is not None else self.target_id

    @property
    def icon_url(self) -> str:
        if not self.thumbnails or self.thumbnails[0] is None:
            return ""
        return self.thumbnails[0].image_url or ""


class GamesPayload(_PayloadModel):
    data: list[GameDetail] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _missing_data(cls, value: Any) -> Any:
        return _none_to_empty_list(value)


class VotesPayload(_PayloadModel):
    data: list[GameVotes] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _missing_data(cls, value: Any) -> Any:
        return _none_to_empty_list(value)


class ThumbnailsPayload(_PayloadModel):
    data: list[GameThumbnails] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _missing_data(cls, value: Any) -> Any:
        return _none_to_empty_list(value)
