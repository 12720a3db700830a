"""
Integration Tests for the Session Cookie Gateway

Unauthenticated page requests are redirected to sign-in; unauthenticated
API requests get a 401 JSON body; public paths pass through.
"""

import pytest

from ridewitus.api.middleware import is_public_path


class TestPublicPaths:

    @pytest.mark.parametrize(
        "path",
        ["/", "/health", "/signin", "/signup", "/api/auth/login", "/api/auth/register",
         "/api/auth/signout", "/docs", "/openapi.json", "/static/app.css", "/favicon.ico"],
    )
    def test_public(self, path):
        assert is_public_path(path)

    @pytest.mark.parametrize("path", ["/dashboard", "/api/auth/me", "/api/activities", "/staticfiles"])
    def test_protected(self, path):
        assert not is_public_path(path)


class TestGateway:

    def test_health_is_public(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_page_request_redirects_to_signin(self, client):
        response = client.get("/dashboard", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/signin?from=/dashboard"

    def test_api_request_gets_401(self, client):
        response = client.get("/api/activities")
        assert response.status_code == 401
        assert response.json()["errorCode"] == "NOT_AUTHENTICATED"

    def test_invalid_cookie_is_treated_as_absent(self, client):
        client.cookies.set("auth_token", "not-a-token")
        response = client.get("/dashboard", follow_redirects=False)
        assert response.status_code == 307

    def test_valid_cookie_passes_through(self, login):
        rider = login()
        response = rider.get("/dashboard", follow_redirects=False)
        # No page is served here; the gateway let the request reach routing.
        assert response.status_code == 404

    @pytest.mark.parametrize("cookie", ["not-a-token", "a.b.c"])
    def test_invalid_cookie_on_api_reports_not_authenticated(self, client, cookie):
        client.cookies.set("auth_token", cookie)
        response = client.get("/api/activities")
        assert response.status_code == 401
        assert response.json()["errorCode"] == "NOT_AUTHENTICATED"
