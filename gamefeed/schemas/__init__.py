"""
gamefeed/schemas package marker.
"""

from gamefeed.schemas.roblox import (
    GameDetail,
    GamesPayload,
    GameThumbnails,
    GameVotes,
    ThumbnailsPayload,
    VotesPayload,
    compute_like_ratio,
)

__all__ = [
    "GameDetail",
    "GamesPayload",
    "GameThumbnails",
    "GameVotes",
    "ThumbnailsPayload",
    "VotesPayload",
    "compute_like_ratio",
]
