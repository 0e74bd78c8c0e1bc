"""Query shapes sent by LiveStateRepository, checked against an in-memory collection."""

from datetime import datetime, timezone
from typing import Any

import pytest
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument

from chronicles.domain.live.stream._repository import LiveStateRepository
from chronicles.schemas import GAMES_COLLECTION, STREAMS_COLLECTION, GameStatus, StreamStatus

BASE = datetime(2026, 2, 14, 18, 0, tzinfo=timezone.utc)


class _FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]):
        self._docs = docs
        self.sort_args: tuple | None = None
        self.limit_arg: int | None = None

    def sort(self, key, direction):
        self.sort_args = (key, direction)
        return self

    def limit(self, n: int):
        self.limit_arg = n
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._docs:
            yield doc


class _FakeCollection:
    """Records every call; returns the canned documents unfiltered."""

    def __init__(self, docs: list[dict[str, Any]] | None = None):
        self.docs = docs or []
        self.calls: list[tuple[str, tuple, dict]] = []
        self.cursor: _FakeCursor | None = None

    def find(self, *args, **kwargs):
        self.calls.append(("find", args, kwargs))
        self.cursor = _FakeCursor(self.docs)
        return self.cursor

    async def find_one(self, *args, **kwargs):
        self.calls.append(("find_one", args, kwargs))
        return self.docs[0] if self.docs else None

    async def find_one_and_update(self, *args, **kwargs):
        self.calls.append(("find_one_and_update", args, kwargs))
        return self.docs[0] if self.docs else None


def make_repository(games=None, streams=None) -> tuple[LiveStateRepository, dict]:
    db = {GAMES_COLLECTION: _FakeCollection(games), STREAMS_COLLECTION: _FakeCollection(streams)}
    return LiveStateRepository(db), db  # type: ignore[arg-type]


class TestFindGamesByStatus:
    async def test_active_filter_includes_long_halftime_spelling(self):
        repository, db = make_repository(
            games=[
                {"_id": "g2", "status": "halftime", "date": BASE},
                {"_id": "g1", "status": "live", "date": BASE},
            ]
        )

        games = await repository.find_games_by_status(GameStatus.active_states())

        name, args, _ = db[GAMES_COLLECTION].calls[0]
        assert name == "find"
        assert args[0] == {"status": {"$in": ["live", "ht", "halftime"]}}
        assert db[GAMES_COLLECTION].cursor.sort_args == ("date", DESCENDING)
        assert [g.status for g in games] == [GameStatus.HALFTIME, GameStatus.LIVE]

    async def test_final_includes_long_spelling(self):
        repository, db = make_repository()

        await repository.find_games_by_status([GameStatus.FINAL])

        assert db[GAMES_COLLECTION].calls[0][1][0] == {"status": {"$in": ["ft", "final"]}}


class TestStreamQueries:
    async def test_find_live_stream(self):
        repository, db = make_repository(
            streams=[{"_id": "s1", "gameId": "g1", "status": "live", "createdAt": BASE}]
        )

        stream = await repository.find_live_stream("g1")

        name, args, kwargs = db[STREAMS_COLLECTION].calls[0]
        assert name == "find_one"
        assert args[0] == {"gameId": "g1", "status": "live"}
        assert kwargs["sort"] == [("createdAt", DESCENDING)]
        assert stream is not None
        assert stream.status == StreamStatus.LIVE

    async def test_find_live_stream_none(self):
        repository, _ = make_repository()

        assert await repository.find_live_stream("g1") is None

    async def test_find_recent_streams(self):
        repository, db = make_repository(
            streams=[
                {"_id": "s2", "gameId": "g2", "status": "live"},
                {"_id": "s1", "gameId": "g1", "status": "ended"},
            ]
        )

        streams = await repository.find_recent_streams(limit=25)

        streams_collection = db[STREAMS_COLLECTION]
        assert streams_collection.calls[0][1][0] == {}
        assert streams_collection.cursor.sort_args == ("createdAt", DESCENDING)
        assert streams_collection.cursor.limit_arg == 25
        assert [s.id for s in streams] == ["s2", "s1"]

    @pytest.mark.parametrize("stream_id", ["s1", str(ObjectId())])
    async def test_update_stream_viewers_raises_peak(self, stream_id: str):
        repository, db = make_repository(
            streams=[{"_id": stream_id, "gameId": "g1", "status": "live", "currentViewers": 3}]
        )

        await repository.update_stream_viewers(stream_id, 3)

        name, args, kwargs = db[STREAMS_COLLECTION].calls[0]
        assert name == "find_one_and_update"
        update = args[1]
        assert update["$set"]["currentViewers"] == 3
        assert update["$max"] == {"viewerPeak": 3}
        assert kwargs["return_document"] == ReturnDocument.AFTER
        if ObjectId.is_valid(stream_id):
            assert args[0] == {"_id": {"$in": [stream_id, ObjectId(stream_id)]}}
        else:
            assert args[0] == {"_id": stream_id}
