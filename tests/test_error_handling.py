"""
Integration Tests for Error Responses

Exceptions outside the application hierarchy still produce the structured
error body.
"""

import pytest
from fastapi.testclient import TestClient

from ridewitus.api.dependencies import get_pricing_catalog
from ridewitus.config.settings import settings


@pytest.fixture
def broken_client(app, make_account, password):
    """Signed-in client whose pricing dependency raises a plain exception."""

    def broken_catalog():
        raise RuntimeError("catalog backend exploded")

    app.dependency_overrides[get_pricing_catalog] = broken_catalog
    make_account()
    client = TestClient(app, raise_server_exceptions=False)
    response = client.post("/api/auth/login", json={"email": "rider@example.com", "password": password})
    assert response.status_code == 200
    return client


class TestUnexpectedErrors:

    def test_structured_unknown_error(self, broken_client):
        response = broken_client.get("/api/pricing")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Internal server error",
            "errorCode": "UNKNOWN_ERROR",
        }

    def test_details_only_in_debug(self, broken_client, monkeypatch):
        monkeypatch.setattr(settings, "debug", True)

        body = broken_client.get("/api/pricing").json()

        assert body["errorCode"] == "UNKNOWN_ERROR"
        assert "catalog backend exploded" in body["details"]["original_error"]
