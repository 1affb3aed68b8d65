import pytest
from fastapi.testclient import TestClient

from signvote.core.config import Settings, get_settings
from signvote.main import app


def test_health_is_open(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert data["environment"] == "test"


def test_version_is_open(client: TestClient):
    response = client.get("/version")

    assert response.status_code == 200
    assert response.json()["version"] == "2.0.0"


@pytest.mark.parametrize(
    "headers,reason",
    [
        ({}, "missing Authorization header"),
        ({"Authorization": "Token abc"}, "Bearer scheme"),
        ({"Authorization": "Bearer wrong"}, "invalid token"),
    ],
)
def test_protected_endpoints_reject(client: TestClient, headers, reason):
    response = client.get("/statistics", headers=headers)

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    body = response.json()
    assert body["code"] == "UNAUTHORIZED"
    assert body["status"] == 401
    assert reason in body["detail"]
    assert body["correlation_id"] == response.headers["X-Correlation-Id"]


def test_valid_token_accepted(client: TestClient, auth_headers):
    assert client.get("/statistics", headers=auth_headers).status_code == 200


def test_auth_can_be_disabled(client: TestClient):
    app.dependency_overrides[get_settings] = lambda: Settings(AUTH_REQUIRED=False)

    response = client.get("/all-signatures")

    assert response.status_code == 200


def test_target_comes_from_settings(client: TestClient, auth_headers, create_signature):
    app.dependency_overrides[get_settings] = lambda: Settings(API_TOKEN="test-token-for-testing-only",
                                                             SIGNATURE_TARGET=10)
    create_signature()

    body = client.get("/statistics", headers=auth_headers).json()

    assert body["target_signatures"] == 10
    assert body["progress"] == 10.0


def test_correlation_id_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Correlation-Id": "abc-123"})

    assert response.headers["X-Correlation-Id"] == "abc-123"


def test_unknown_route_is_problem_details(client: TestClient, auth_headers):
    response = client.get("/no-such-endpoint", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"
