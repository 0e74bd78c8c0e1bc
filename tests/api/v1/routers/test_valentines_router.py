"""Unit tests for POST /valentines/login."""

from unittest.mock import AsyncMock

import bcrypt
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from chronicles.api.v1.dependency import get_login_rate_limiter, get_valentine_auth_service
from chronicles.api.v1.errors import app_error_handler
from chronicles.api.v1.routers.valentines_auth import router
from chronicles.app_config import AppEnvironConfig
from chronicles.domain.valentines._repository import ValentineUserRepository
from chronicles.domain.valentines.auth_domain import ValentineAuthService
from chronicles.schemas import ValentineUserRecord
from chronicles.shared.rate_limiter import RateLimiter
from chronicles.utils.app_errors import AppError

PASSWORD = "correct horse"


@pytest.fixture(scope="module")
def password_hash() -> str:
    return bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt(4)).decode()


@pytest.fixture
def repository(password_hash: str) -> AsyncMock:
    repository = AsyncMock(spec=ValentineUserRepository)
    repository.get_by_enrollment_number.return_value = ValentineUserRecord(
        id="21BCE001",
        enrollment_number="21BCE001",
        full_name="Asha Patel",
        password_hash=password_hash,
        has_spun=False,
    )
    return repository


@pytest.fixture
def auth_service(repository: AsyncMock) -> ValentineAuthService:
    return ValentineAuthService(
        RateLimiter(5, 15 * 60 * 1000),
        repository=repository,
        cfg=AppEnvironConfig(VALENTINES_JWT_SECRET="test-valentines-secret-with-enough-length"),
    )


@pytest.fixture
def client(auth_service: ValentineAuthService) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_login_rate_limiter] = lambda: auth_service.limiter
    app.dependency_overrides[get_valentine_auth_service] = lambda: auth_service
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.include_router(router)
    return TestClient(app)


def test_login_success_sets_cookie(client: TestClient):
    response = client.post(
        "/valentines/login", json={"enrollmentNumber": "21bce001", "password": PASSWORD}
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Login successful",
        "user": {"fullName": "Asha Patel", "enrollmentNumber": "21BCE001", "hasSpun": False},
    }
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("valentine_token=")
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()
    assert "Max-Age=86400" in set_cookie


def test_wrong_password(client: TestClient):
    response = client.post(
        "/valentines/login", json={"enrollmentNumber": "21BCE001", "password": "bad-pass"}
    )

    assert response.status_code == 401
    data = response.json()
    assert data["success"] is False
    assert data["errcode"] == "E_BAD_CREDENTIALS"
    assert "set-cookie" not in response.headers


def test_validation_failure(client: TestClient):
    response = client.post("/valentines/login", json={"enrollmentNumber": "21BCE001"})

    assert response.status_code == 400
    data = response.json()
    assert data["errcode"] == "E_INVALID_PARAMS"
    assert "password" in data["details"]["fields"]


def test_rate_limited_after_five_failures(client: TestClient):
    for _ in range(5):
        response = client.post(
            "/valentines/login", json={"enrollmentNumber": "21BCE001", "password": "bad-pass"}
        )
        assert response.status_code == 401

    response = client.post(
        "/valentines/login", json={"enrollmentNumber": "21BCE001", "password": PASSWORD}
    )

    assert response.status_code == 429
    data = response.json()
    assert data["errcode"] == "E_RATE_LIMITED"
    assert data["error"] == "Too many login attempts. Please try again in 15 minutes."
    assert data["details"]["resetInMs"] > 0
    assert "retry-after" in response.headers


def test_forwarded_addresses_are_limited_separately(client: TestClient):
    for _ in range(5):
        client.post(
            "/valentines/login",
            json={"enrollmentNumber": "21BCE001", "password": "bad-pass"},
            headers={"x-forwarded-for": "203.0.113.7, 10.0.0.1"},
        )

    blocked = client.post(
        "/valentines/login",
        json={"enrollmentNumber": "21BCE001", "password": PASSWORD},
        headers={"x-forwarded-for": "203.0.113.7"},
    )
    other = client.post(
        "/valentines/login",
        json={"enrollmentNumber": "21BCE001", "password": PASSWORD},
        headers={"x-forwarded-for": "198.51.100.9"},
    )

    assert blocked.status_code == 429
    assert other.status_code == 200
