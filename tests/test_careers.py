# =============================================================================
# tests/test_careers.py - Career Application Tests
# =============================================================================

import pytest

PDF_BYTES = b"%PDF-1.4\n%test cv\n"

APPLICANT = {
    "name": "Meera Iyer",
    "email": "meera@example.com",
    "phone": "9876543210",
    "position": "Teacher",
}


@pytest.fixture
def apply(anon_client):
    def _apply(fields: dict | None = None, cv=("Meera_CV.pdf", PDF_BYTES, "application/pdf")):
        files = {"cv": cv} if cv else None
        return anon_client.post("/api/career/apply", data=fields or APPLICANT, files=files)
    return _apply


class TestApply:
    """Tests for POST /api/career/apply."""

    def test_stores_cv_and_application(self, apply, storage_dirs):
        response = apply()

        data = response.json()["data"]
        assert response.status_code == 201
        assert data["status"] == "new"
        assert data["pdf_url"].startswith("/uploads/cv/cv-")
        stored = storage_dirs["uploads"] / data["pdf_url"][len("/uploads/"):]
        assert stored.read_bytes() == PDF_BYTES

    def test_non_pdf_is_400(self, apply, mongo):
        response = apply(cv=("cv.docx", b"PK\x03\x04", "application/msword"))

        assert response.status_code == 400
        assert mongo["career_applications"].count_documents({}) == 0

    def test_html_sent_as_pdf_is_400(self, apply, mongo, storage_dirs):
        response = apply(cv=("cv.html", b"<script>alert(1)</script>", "application/pdf"))

        assert response.status_code == 400
        assert mongo["career_applications"].count_documents({}) == 0
        assert not (storage_dirs["uploads"] / "cv").exists()

    def test_missing_cv_is_400(self, apply):
        response = apply(cv=None)

        assert response.status_code == 400
        assert response.json()["code"] == "FILE_REQUIRED"

    def test_invalid_email_is_400(self, apply):
        response = apply(fields={**APPLICANT, "email": "not-an-email"})

        assert response.status_code == 400
        assert "email" in response.json()["details"]["errors"]


class TestApplicants:
    """Tests for the admin applicant views."""

    def test_list_and_filter(self, apply, client):
        apply()
        apply(fields={**APPLICANT, "name": "Ravi Kumar", "email": "ravi@example.com", "position": "Cook"})

        teachers = client.get("/api/career/applicants", params={"position": "Teacher"}).json()
        search = client.get("/api/career/applicants", params={"search": "ravi"}).json()

        assert [a["name"] for a in teachers["data"]] == ["Meera Iyer"]
        assert [a["name"] for a in search["data"]] == ["Ravi Kumar"]

    def test_status_update(self, apply, client):
        application = apply().json()["data"]

        response = client.patch(
            f"/api/career/applicants/{application['id']}/status", json={"status": "shortlisted"}
        )
        shortlisted = client.get("/api/career/applicants", params={"status": "shortlisted"}).json()

        assert response.json()["data"]["status"] == "shortlisted"
        assert shortlisted["pagination"]["total_items"] == 1

    def test_delete_removes_cv(self, apply, client, storage_dirs):
        application = apply().json()["data"]
        path = storage_dirs["uploads"] / application["pdf_url"][len("/uploads/"):]

        client.delete(f"/api/career/applicants/{application['id']}")

        assert not path.exists()
        assert client.get(f"/api/career/applicants/{application['id']}").status_code == 404

    def test_requires_auth(self, anon_client):
        assert anon_client.get("/api/career/applicants").status_code == 401
