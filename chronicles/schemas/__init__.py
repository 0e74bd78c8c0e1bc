"""Typed records for documents read from MongoDB."""

from .game import GAMES_COLLECTION, GameRecord, GameStatus
from .stream import STREAMS_COLLECTION, StreamRecord, StreamStatus
from .valentine_user import VALENTINE_USERS_COLLECTION, ValentineUserRecord

__all__ = [
    "GAMES_COLLECTION",
    "STREAMS_COLLECTION",
    "VALENTINE_USERS_COLLECTION",
    "GameRecord",
    "GameStatus",
    "StreamRecord",
    "StreamStatus",
    "ValentineUserRecord",
]
