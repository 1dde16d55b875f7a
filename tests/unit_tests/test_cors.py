import pytest
from fastapi import status
from fastapi.testclient import TestClient

from tests.consts import ALLOWED_ORIGIN, DISALLOWED_ORIGIN, PREVIEW_ORIGIN


def preflight(client: TestClient, origin: str):
    return client.options(
        "/upload",
        headers={
            "Origin": origin,
            "Access-Control-Request-Method": "POST",
        },
    )


@pytest.mark.parametrize("origin", [ALLOWED_ORIGIN, PREVIEW_ORIGIN])
def test_preflight_from_allowed_origins(client: TestClient, origin):
    response = preflight(client, origin)

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["access-control-allow-origin"] == origin
    assert "POST" in response.headers["access-control-allow-methods"]


def test_preflight_from_disallowed_origin_is_rejected(client: TestClient):
    response = preflight(client, DISALLOWED_ORIGIN)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "access-control-allow-origin" not in response.headers


def test_preview_pattern_is_anchored(client: TestClient):
    response = preflight(client, "https://engagment-zozo-yoyo-x.vercel.app.evil.com")

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_upload_from_allowed_origin(client: TestClient):
    response = client.post(
        "/upload",
        files=[("files", ("a.png", b"a", "image/png"))],
        headers={"Origin": PREVIEW_ORIGIN},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["access-control-allow-origin"] == PREVIEW_ORIGIN


def test_simple_request_from_disallowed_origin_gets_no_cors_grant(client: TestClient):
    response = client.get("/", headers={"Origin": DISALLOWED_ORIGIN})

    assert "access-control-allow-origin" not in response.headers


def test_request_without_origin_is_allowed(client: TestClient):
    response = client.get("/")

    assert response.status_code == status.HTTP_200_OK


def test_error_responses_carry_cors_headers(client: TestClient):
    response = client.post("/upload", headers={"Origin": ALLOWED_ORIGIN})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
