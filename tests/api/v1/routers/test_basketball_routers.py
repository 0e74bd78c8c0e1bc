"""Unit tests for the basketball game/stream router endpoints."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from chronicles.api.v1.dependency import get_stream_service
from chronicles.api.v1.errors import app_error_handler, validation_error_handler
from chronicles.api.v1.routers.basketball_games import router as games_router
from chronicles.api.v1.routers.basketball_stream import router as stream_router
from chronicles.domain.live.stream.stream_domain import StreamService
from chronicles.domain.live.stream.stream_models import (
    GameLiveStatus,
    StreamSession,
    StreamTokenResult,
)
from chronicles.schemas import GameStatus, StreamStatus
from chronicles.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


@pytest.fixture
def mock_stream_service() -> AsyncMock:
    """Create a mock StreamService."""
    return AsyncMock(spec=StreamService)


@pytest.fixture
def test_app(mock_stream_service: AsyncMock) -> FastAPI:
    """Create FastAPI test app with dependency overrides."""
    app = FastAPI()

    app.dependency_overrides[get_stream_service] = lambda: mock_stream_service

    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, validation_error_handler  # type: ignore[arg-type]
    )

    app.include_router(games_router)
    app.include_router(stream_router)
    return app


@pytest.fixture
def client(test_app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(test_app)


def make_session(stream_id: str = "s1", game_id: str = "g1") -> StreamSession:
    return StreamSession(
        id=stream_id,
        game_id=game_id,
        status=StreamStatus.LIVE,
        room_id=f"basketball-game-{game_id}",
        viewer_peak=10,
        current_viewers=4,
        started_at="2026-02-14T18:00:00+00:00",
    )


class TestListLiveGames:
    """Tests for GET /basketball/games/live."""

    def test_returns_games_and_total(self, client: TestClient, mock_stream_service: AsyncMock):
        mock_stream_service.list_active_games.return_value = [
            GameLiveStatus(
                id="g1",
                status=GameStatus.LIVE,
                home_score=21,
                away_score=19,
                is_streaming=True,
                date="2026-02-14T18:00:00+00:00",
            ),
            GameLiveStatus(id="g2", status=GameStatus.HALFTIME),
        ]

        response = client.get("/basketball/games/live")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["games"][0]["id"] == "g1"
        assert data["games"][0]["homeScore"] == 21
        assert data["games"][0]["isStreaming"] is True
        assert data["games"][0]["date"] == "2026-02-14T18:00:00+00:00"
        assert data["games"][1]["status"] == "ht"

    def test_empty(self, client: TestClient, mock_stream_service: AsyncMock):
        mock_stream_service.list_active_games.return_value = []

        response = client.get("/basketball/games/live")

        assert response.status_code == 200
        assert response.json() == {"games": [], "total": 0}

    def test_store_unavailable(self, client: TestClient, mock_stream_service: AsyncMock):
        mock_stream_service.list_active_games.side_effect = AppError(
            errcode=AppErrorCode.E_SERVICE_UNAVAILABLE,
            errmesg="Failed to fetch live data",
            status_code=HttpStatusCode.SERVICE_UNAVAILABLE,
        )

        response = client.get("/basketball/games/live")

        assert response.status_code == 503
        data = response.json()
        assert data["success"] is False
        assert data["errcode"] == "E_SERVICE_UNAVAILABLE"
        assert data["error"] == "Failed to fetch live data"
        assert data["erresid"]


class TestGameStream:
    """Tests for GET /basketball/games/stream."""

    def test_live_stream_for_game(self, client: TestClient, mock_stream_service: AsyncMock):
        mock_stream_service.get_active_stream_for_game.return_value = make_session()

        response = client.get("/basketball/games/stream", params={"gameId": "g1"})

        assert response.status_code == 200
        data = response.json()
        assert data["isLive"] is True
        assert data["stream"]["id"] == "s1"
        assert data["stream"]["gameId"] == "g1"
        assert data["stream"]["currentViewers"] == 4
        mock_stream_service.get_active_stream_for_game.assert_awaited_once_with("g1")

    def test_game_not_streaming(self, client: TestClient, mock_stream_service: AsyncMock):
        mock_stream_service.get_active_stream_for_game.return_value = None

        response = client.get("/basketball/games/stream", params={"gameId": "g1"})

        assert response.status_code == 200
        assert response.json() == {"isLive": False, "stream": None}

    def test_recent_streams_without_game(
        self, client: TestClient, mock_stream_service: AsyncMock
    ):
        mock_stream_service.list_recent_streams.return_value = [
            make_session("s2", "g2"),
            make_session("s1", "g1"),
        ]

        response = client.get("/basketball/games/stream")

        assert response.status_code == 200
        assert [s["id"] for s in response.json()["streams"]] == ["s2", "s1"]
        mock_stream_service.list_recent_streams.assert_awaited_once_with(limit=50)

    def test_recent_streams_custom_limit(
        self, client: TestClient, mock_stream_service: AsyncMock
    ):
        mock_stream_service.list_recent_streams.return_value = []

        response = client.get("/basketball/games/stream", params={"limit": 5})

        assert response.status_code == 200
        mock_stream_service.list_recent_streams.assert_awaited_once_with(limit=5)

    def test_non_numeric_limit(self, client: TestClient):
        response = client.get("/basketball/games/stream", params={"limit": "many"})

        assert response.status_code == 422
        assert response.json()["errcode"] == "E_INVALID_PARAMS"


class TestStreamToken:
    """Tests for GET /basketball/stream/{gameId}/token."""

    def test_viewer_token(self, client: TestClient, mock_stream_service: AsyncMock):
        mock_stream_service.issue_token.return_value = StreamTokenResult(
            token="jwt-token",
            url="wss://livekit.test.local",
            room_name="basketball-game-game42",
        )

        response = client.get("/basketball/stream/game42/token", params={"role": "viewer"})

        assert response.status_code == 200
        assert response.json() == {
            "token": "jwt-token",
            "url": "wss://livekit.test.local",
            "roomName": "basketball-game-game42",
        }
        mock_stream_service.issue_token.assert_awaited_once_with(game_id="game42", role="viewer")

    def test_missing_role_is_passed_through(
        self, client: TestClient, mock_stream_service: AsyncMock
    ):
        mock_stream_service.issue_token.side_effect = AppError(
            errcode=AppErrorCode.E_INVALID_ROLE,
            errmesg='Invalid role. Must be "broadcaster" or "viewer".',
            status_code=HttpStatusCode.BAD_REQUEST,
        )

        response = client.get("/basketball/stream/game42/token")

        assert response.status_code == 400
        assert response.json()["errcode"] == "E_INVALID_ROLE"
        mock_stream_service.issue_token.assert_awaited_once_with(game_id="game42", role=None)

    @pytest.mark.parametrize(
        ("errcode", "status_code"),
        [
            (AppErrorCode.E_SERVICE_UNAVAILABLE, 503),
            (AppErrorCode.E_TOKEN_SIGNING_FAILED, 500),
            (AppErrorCode.E_BROADCASTER_ACTIVE, 409),
        ],
    )
    def test_error_mapping(
        self,
        client: TestClient,
        mock_stream_service: AsyncMock,
        errcode: AppErrorCode,
        status_code: int,
    ):
        mock_stream_service.issue_token.side_effect = AppError(
            errcode=errcode, errmesg="failed", status_code=status_code
        )

        response = client.get("/basketball/stream/g1/token", params={"role": "broadcaster"})

        assert response.status_code == status_code
        assert response.json()["errcode"] == errcode.value
