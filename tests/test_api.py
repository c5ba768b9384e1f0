"""End-to-end tests of the HTTP surface through FastAPI's TestClient."""

from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from shorting_urls.core.exceptions import DatabaseError
from shorting_urls.core.rate_limit import limiter
from shorting_urls.main import create_app
from shorting_urls.services.url_service import SHORT_CODE_ALPHABET

TEST_BASE_URL = "http://short.test"


def shorten(client, long_url="https://example.com", **extra):
    return client.post("/api/urls", json={"longUrl": long_url, **extra})


class TestCreate:

    def test_create_short_url(self, client):
        response = shorten(client)

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"shortUrl", "longUrl", "shortCode"}
        assert body["longUrl"] == "https://example.com"
        assert len(body["shortCode"]) == 8
        assert set(body["shortCode"]) <= set(SHORT_CODE_ALPHABET)
        assert body["shortUrl"] == f"{TEST_BASE_URL}/{body['shortCode']}"

    def test_custom_code(self, client):
        response = shorten(client, customCode="abc")

        assert response.status_code == 201
        assert response.json()["shortCode"] == "abc"
        assert response.json()["shortUrl"] == f"{TEST_BASE_URL}/abc"

    def test_duplicate_custom_code(self, client):
        assert shorten(client, customCode="abc").status_code == 201

        response = shorten(client, customCode="abc")

        assert response.status_code == 400
        assert response.json() == {"error": "Custom code already exists"}

    def test_missing_long_url(self, client):
        response = client.post("/api/urls", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "longUrl is required"}

    def test_invalid_long_url(self, client):
        response = shorten(client, long_url="not-a-url")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid URL provided"}

    def test_invalid_custom_code(self, client):
        response = shorten(client, customCode="health")

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid custom code")

    def test_custom_code_with_punctuation(self, client):
        for code in ["my.page", "~me"]:
            assert shorten(client, customCode=code).status_code == 201

            redirect = client.get(f"/{code}")

            assert redirect.status_code == 302
            assert redirect.headers["location"] == "https://example.com"

    def test_custom_code_with_trailing_newline(self, client):
        response = shorten(client, customCode="abc\n")

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid custom code")
        assert client.get("/api/urls").json() == []

    def test_generation_exhausted(self, client):
        shorten(client, customCode="taken")
        client.app.state.url_service.code_generator = lambda length: "taken"

        response = shorten(client)

        assert response.status_code == 400
        assert response.json() == {"error": "Failed to generate unique short code"}

    def test_malformed_body(self, client):
        response = client.post(
            "/api/urls", content="{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_wrong_type(self, client):
        response = client.post("/api/urls", json={"longUrl": 42})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_form_body(self, client):
        response = client.post("/api/urls", data={"longUrl": "https://example.com"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}


class TestRedirectAndStats:

    def test_redirect_then_stats(self, client):
        short_code = shorten(client).json()["shortCode"]

        redirect = client.get(f"/{short_code}")
        assert redirect.status_code == 302
        assert redirect.headers["location"] == "https://example.com"

        stats = client.get(f"/api/urls/{short_code}/stats")
        assert stats.status_code == 200
        body = stats.json()
        assert body["clicks"] == 1
        assert body["shortCode"] == short_code
        assert body["longUrl"] == "https://example.com"
        assert {"id", "createdAt", "updatedAt"} <= set(body)

    def test_stats_do_not_count_clicks(self, client):
        shorten(client, customCode="quiet")

        client.get("/api/urls/quiet/stats")
        client.get("/api/urls/quiet/stats")

        assert client.get("/api/urls/quiet/stats").json()["clicks"] == 0

    def test_unknown_redirect(self, client):
        response = client.get("/nonexistent-code")

        assert response.status_code == 404
        assert response.json() == {"error": "Short URL not found"}

    def test_unknown_stats(self, client):
        response = client.get("/api/urls/nonexistent-code/stats")

        assert response.status_code == 404
        assert response.json() == {"error": "Short URL not found"}

    def test_blank_code(self, client):
        response = client.get("/%20")

        assert response.status_code == 400
        assert response.json() == {"error": "shortCode is required"}


class TestListing:

    def test_empty(self, client):
        response = client.get("/api/urls")

        assert response.status_code == 200
        assert response.json() == []

    def test_lists_every_url(self, client):
        shorten(client, long_url="https://one.example.com", customCode="one")
        shorten(client, long_url="https://two.example.com", customCode="two")
        client.get("/two")

        body = client.get("/api/urls").json()

        assert {item["shortCode"] for item in body} == {"one", "two"}
        clicks = {item["shortCode"]: item["clicks"] for item in body}
        assert clicks == {"one": 0, "two": 1}

    def test_store_failure_is_opaque(self, client):
        client.app.state.url_service.repository.find_all = AsyncMock(
            side_effect=DatabaseError("disk on fire")
        )

        response = client.get("/api/urls")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


class TestAppSurface:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert "T" in body["timestamp"]

    def test_unknown_route(self, client):
        response = client.get("/api/urls/abc/unknown")

        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}

    def test_unknown_method(self, client):
        response = client.delete("/api/urls")

        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}

    def test_security_headers(self, client):
        response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "X-Process-Time" in response.headers

    def test_cors(self, client):
        response = client.get("/health", headers={"Origin": "https://elsewhere.example"})

        assert response.headers["access-control-allow-origin"] == "*"


def test_rate_limits_follow_app_settings(test_settings):
    strict = create_app(
        test_settings.model_copy(update={"RATE_LIMIT_ENABLED": True, "RATE_LIMIT_SHORTEN": "3/minute"})
    )
    relaxed = create_app(test_settings)
    limiter.reset()
    try:
        with TestClient(strict) as client:
            strict_statuses = [shorten(client).status_code for _ in range(4)]
        with TestClient(relaxed) as client:
            relaxed_statuses = [shorten(client).status_code for _ in range(4)]
    finally:
        limiter.reset()

    assert strict_statuses == [201, 201, 201, 429]
    assert relaxed_statuses == [201] * 4
