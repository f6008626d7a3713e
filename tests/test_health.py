# =============================================================================
# tests/test_health.py - Health, Root & Upload Endpoint Tests
# =============================================================================

from unittest.mock import patch

from app.config import settings


class TestHealth:
    """Tests for the /api/health endpoints."""

    def test_health(self, anon_client):
        data = anon_client.get("/api/health").json()

        assert data["status"] == "healthy"
        assert data["environment"] == settings.ENVIRONMENT

    def test_liveness(self, anon_client):
        assert anon_client.get("/api/health/live").json()["status"] == "alive"

    def test_ready_when_database_answers(self, anon_client, monkeypatch):
        monkeypatch.setattr(settings, "RAZORPAY_KEY_ID", "")

        with patch("app.routers.health.MongoClient.ping", return_value=True):
            data = anon_client.get("/api/health/ready").json()

        assert data["status"] == "ready"
        assert data["checks"]["database"] == "healthy"
        assert data["checks"]["storage"] == "healthy"
        assert data["checks"]["payments"] == "not configured"

    def test_degraded_without_database(self, anon_client):
        with patch("app.routers.health.MongoClient.ping", return_value=False):
            data = anon_client.get("/api/health/ready").json()

        assert data["status"] == "degraded"
        assert data["checks"]["database"] == "unhealthy"

    def test_root(self, anon_client):
        assert anon_client.get("/").json()["health"] == "/api/health"


class TestImageUpload:
    """Tests for POST /api/uploads/image."""

    def test_upload_returns_url(self, client, storage_dirs):
        response = client.post(
            "/api/uploads/image", files={"file": ("kitchen.jpg", b"\xff\xd8\xff", "image/jpeg")}
        )

        body = response.json()
        assert response.status_code == 201
        assert body["url"] == f"/uploads/images/{body['filename']}"
        assert (storage_dirs["uploads"] / "images" / body["filename"]).exists()

    def test_rejects_non_image(self, client):
        response = client.post(
            "/api/uploads/image", files={"file": ("notes.txt", b"hello", "text/plain")}
        )

        assert response.status_code == 400

    def test_rejects_html_posing_as_image(self, client, storage_dirs):
        response = client.post(
            "/api/uploads/image", files={"file": ("x.html", b"<script>alert(1)</script>", "image/png")}
        )

        assert response.status_code == 400
        assert not (storage_dirs["uploads"] / "images").exists()

    def test_requires_auth(self, anon_client):
        response = anon_client.post(
            "/api/uploads/image", files={"file": ("kitchen.jpg", b"\xff\xd8\xff", "image/jpeg")}
        )

        assert response.status_code == 401
