# =============================================================================
# tests/test_galleries.py - Photo & Video Gallery Tests
# =============================================================================
# Endpoint tests for both galleries plus the StorageService helpers they use.
# Photo files are written to a per-test temp directory.
# =============================================================================

import pytest

from app.exceptions import FileTooLargeError, InvalidFileTypeError, ResourceNotFoundError
from core.services.storage_service import StorageService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def video(**overrides) -> dict:
    data = {
        "video_title": "Annadaan Day 2024",
        "category": "Events",
        "video_url": "https://www.youtube.com/watch?v=abc123",
    }
    data.update(overrides)
    return data


# =============================================================================
# Videos
# =============================================================================

@pytest.fixture
def add_video(client):
    def _add(**overrides) -> dict:
        response = client.post("/api/video-gallery", json=video(**overrides))
        assert response.status_code == 201
        return response.json()["data"]
    return _add


class TestVideoGallery:
    """Tests for /api/video-gallery."""

    def test_create_defaults(self, add_video):
        created = add_video()

        assert created["view_count"] == 0
        assert created["status"] == "active"
        assert created["publish_date"]

    def test_each_get_counts_a_view(self, add_video, anon_client):
        created = add_video()

        anon_client.get(f"/api/video-gallery/{created['id']}")
        response = anon_client.get(f"/api/video-gallery/{created['id']}")

        assert response.json()["data"]["view_count"] == 2

    def test_unknown_category_is_400(self, client):
        assert client.post("/api/video-gallery", json=video(category="Sports")).status_code == 400

    def test_featured_only_active(self, add_video, anon_client):
        add_video(video_title="Shown", featured=True)
        add_video(video_title="Draft", featured=True, status="inactive")
        add_video(video_title="Plain")

        titles = [v["video_title"] for v in anon_client.get("/api/video-gallery/featured").json()["data"]]

        assert titles == ["Shown"]

    def test_by_category(self, add_video, anon_client):
        add_video(category="Festivals", video_title="Janmashtami")
        add_video()

        data = anon_client.get("/api/video-gallery/category/Festivals").json()["data"]

        assert [v["video_title"] for v in data] == ["Janmashtami"]

    def test_stats(self, add_video, anon_client):
        first = add_video(featured=True)
        add_video(category="Festivals")
        add_video(status="inactive")
        anon_client.get(f"/api/video-gallery/{first['id']}")

        data = anon_client.get("/api/video-gallery/stats").json()["data"]

        assert data == {"total": 2, "featured": 1, "total_views": 1, "total_categories": 2}

    def test_update_and_delete(self, add_video, client):
        created = add_video()

        updated = client.put(f"/api/video-gallery/{created['id']}", json={"featured": True}).json()["data"]
        client.delete(f"/api/video-gallery/{created['id']}")

        assert updated["featured"] is True
        assert updated["video_title"] == "Annadaan Day 2024"
        assert client.get(f"/api/video-gallery/{created['id']}").status_code == 404

    def test_create_requires_auth(self, anon_client):
        assert anon_client.post("/api/video-gallery", json=video()).status_code == 401


# =============================================================================
# Photos
# =============================================================================

@pytest.fixture
def upload_photo(client):
    def _upload(content: bytes = PNG_BYTES, content_type: str = "image/png", **fields) -> dict:
        data = {"image_title": "Diwali Deepotsav", "category": "Festivals", **fields}
        return client.post(
            "/api/photo-gallery",
            data=data,
            files={"image": ("Diwali.PNG", content, content_type)},
        )
    return _upload


class TestPhotoGallery:
    """Tests for /api/photo-gallery."""

    def test_upload_stores_file(self, upload_photo, storage_dirs):
        response = upload_photo(featured="true")

        photo = response.json()["data"]
        assert response.status_code == 201
        assert photo["image_url"].startswith("/uploads/photos/photo-")
        assert photo["image_url"].endswith(".png")
        assert photo["featured"] is True
        stored = storage_dirs["uploads"] / photo["image_url"][len("/uploads/"):]
        assert stored.read_bytes() == PNG_BYTES

    def test_non_image_is_400(self, upload_photo, storage_dirs):
        response = upload_photo(content=b"%PDF-1.4", content_type="application/pdf")

        assert response.status_code == 400
        assert not (storage_dirs["uploads"] / "photos").exists()

    def test_missing_image_is_400(self, client):
        response = client.post(
            "/api/photo-gallery", data={"image_title": "No file", "category": "Events"}
        )

        assert response.status_code == 400

    def test_invalid_metadata_is_400(self, upload_photo):
        response = upload_photo(category="Sports")

        body = response.json()
        assert response.status_code == 400
        assert "category" in body["details"]["errors"]

    def test_replace_image_removes_old_file(self, upload_photo, client, storage_dirs):
        photo = upload_photo().json()["data"]
        old_path = storage_dirs["uploads"] / photo["image_url"][len("/uploads/"):]

        response = client.put(
            f"/api/photo-gallery/{photo['id']}",
            data={"image_title": "Deepotsav 2024"},
            files={"image": ("new.jpg", PNG_BYTES, "image/jpeg")},
        )

        updated = response.json()["data"]
        assert updated["image_title"] == "Deepotsav 2024"
        assert updated["image_url"] != photo["image_url"]
        assert not old_path.exists()

    @pytest.mark.parametrize("photo_id,status_code", [("65a1c0ffee0ddba11c0ffee0", 404), ("not-an-id", 400)])
    def test_replace_on_unknown_photo_writes_nothing(self, client, storage_dirs, photo_id, status_code):
        response = client.put(
            f"/api/photo-gallery/{photo_id}",
            data={"image_title": "Orphan"},
            files={"image": ("new.jpg", PNG_BYTES, "image/jpeg")},
        )

        assert response.status_code == status_code
        photos = storage_dirs["uploads"] / "photos"
        assert not photos.exists() or not any(photos.iterdir())

    def test_failed_insert_removes_file(self, upload_photo, storage_dirs, monkeypatch):
        def fail(meta, image_url):
            raise ResourceNotFoundError("Photo", "new")

        monkeypatch.setattr("app.routers.photo_gallery.PhotoService.create_photo", fail)

        response = upload_photo()

        assert response.status_code == 404
        assert not any((storage_dirs["uploads"] / "photos").iterdir())

    def test_delete_removes_file(self, upload_photo, client, storage_dirs):
        photo = upload_photo().json()["data"]
        path = storage_dirs["uploads"] / photo["image_url"][len("/uploads/"):]

        client.delete(f"/api/photo-gallery/{photo['id']}")

        assert not path.exists()
        assert client.get(f"/api/photo-gallery/{photo['id']}").status_code == 404


# =============================================================================
# Storage Helpers
# =============================================================================

class TestStorageService:
    """Tests for file validation and URL mapping."""

    def test_unique_filename(self):
        name = StorageService.unique_filename("photo", "Diwali.JPG")

        assert name.startswith("photo-")
        assert name.endswith(".jpg")

    def test_validate_image(self):
        with pytest.raises(InvalidFileTypeError):
            StorageService.validate_image("cv.pdf", "application/pdf", 10)

        with pytest.raises(FileTooLargeError):
            StorageService.validate_image("big.png", "image/png", 50 * 1024 * 1024)

    def test_validate_pdf_by_extension(self):
        StorageService.validate_pdf("resume.PDF", "application/octet-stream", 10)

        with pytest.raises(InvalidFileTypeError):
            StorageService.validate_pdf("resume.docx", "application/msword", 10)

        with pytest.raises(InvalidFileTypeError):
            StorageService.validate_pdf("cv.html", "application/pdf", 10)

    def test_image_extension_must_be_allowed(self):
        for name in ("x.html", "logo.svg", "noext"):
            with pytest.raises(InvalidFileTypeError):
                StorageService.validate_image(name, "image/png", 10)

    def test_unknown_extension_is_not_written(self):
        assert "." not in StorageService.unique_filename("image", "x.html")

    def test_path_for_url_stays_inside_root(self, storage_dirs):
        assert StorageService.path_for_url("https://youtube.com/x") is None
        assert StorageService.path_for_url("/uploads/../../etc/passwd") is None
        assert StorageService.path_for_url("/uploads/photos/a.png").name == "a.png"

    def test_delete_missing_file(self, storage_dirs):
        assert StorageService.delete("/uploads/photos/missing.png") is False
        assert StorageService.delete(None) is False
