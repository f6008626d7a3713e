# =============================================================================
# tests/test_forms.py - Dynamic Form API Tests
# =============================================================================
# Endpoint tests for form definitions, submissions and notifications.
# The rules engine itself is covered in test_form_engine.py.
# =============================================================================

from unittest.mock import patch

import pytest
from bson import ObjectId

from core.services.form_service import fill_placeholders
from lib.mailer import MailResult


@pytest.fixture
def volunteer_form(client, volunteer_form_payload):
    response = client.post("/api/forms", json=volunteer_form_payload)
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
def sent_mail():
    with patch(
        "core.services.form_service.send_email",
        return_value=MailResult(True, "Email sent successfully"),
    ) as mock_send:
        yield mock_send


WORKING_VOLUNTEER = {
    "full_name": "Asha Rao",
    "email": "asha@example.com",
    "status": "working",
    "college": "Should not be stored",
}


# =============================================================================
# Definitions
# =============================================================================

class TestFormDefinitions:
    """Tests for form CRUD."""

    def test_create_records_author(self, volunteer_form, admin_user):
        assert volunteer_form["created_by"] == admin_user.id
        assert len(volunteer_form["fields"]) == 4

    def test_duplicate_field_names_are_400(self, client):
        fields = [
            {"name": "email", "label": "Email", "type": "email"},
            {"name": "email", "label": "Email 2", "type": "email"},
        ]

        response = client.post("/api/forms", json={"title": "Contact", "page": "contact", "fields": fields})

        assert response.status_code == 400

    def test_public_get(self, volunteer_form, anon_client):
        response = anon_client.get(f"/api/forms/{volunteer_form['id']}")

        assert response.json()["data"]["title"] == "Volunteer Sign-up"

    def test_form_for_page_skips_inactive(self, client, anon_client, volunteer_form, volunteer_form_payload):
        client.post("/api/forms", json={**volunteer_form_payload, "title": "Old", "is_active": False})

        response = anon_client.get("/api/forms/page/volunteer")

        assert response.json()["data"]["id"] == volunteer_form["id"]

    def test_form_for_unknown_page_is_404(self, anon_client):
        assert anon_client.get("/api/forms/page/nowhere").status_code == 404

    def test_list_includes_submission_count(self, client, anon_client, volunteer_form):
        anon_client.post(f"/api/forms/{volunteer_form['id']}/submit", json={"data": WORKING_VOLUNTEER})

        forms = client.get("/api/forms").json()["data"]

        assert forms[0]["submission_count"] == 1

    def test_update(self, client, volunteer_form):
        response = client.put(f"/api/forms/{volunteer_form['id']}", json={"title": "Volunteers 2025"})

        data = response.json()["data"]
        assert data["title"] == "Volunteers 2025"
        assert data["page"] == "volunteer"

    def test_delete_cascades_to_submissions(self, client, anon_client, volunteer_form, mongo):
        anon_client.post(f"/api/forms/{volunteer_form['id']}/submit", json={"data": WORKING_VOLUNTEER})
        anon_client.post(f"/api/forms/{volunteer_form['id']}/submit", json={"data": WORKING_VOLUNTEER})

        response = client.delete(f"/api/forms/{volunteer_form['id']}")

        assert response.json()["deleted_submissions"] == 2
        assert mongo["form_submissions"].count_documents({}) == 0

    def test_create_requires_auth(self, anon_client, volunteer_form_payload):
        assert anon_client.post("/api/forms", json=volunteer_form_payload).status_code == 401


# =============================================================================
# Submissions
# =============================================================================

class TestSubmissions:
    """Tests for submit / validate and the admin submission views."""

    def test_stores_only_visible_fields(self, anon_client, volunteer_form, mongo):
        # Act
        response = anon_client.post(
            f"/api/forms/{volunteer_form['id']}/submit",
            json={"data": WORKING_VOLUNTEER},
            headers={"User-Agent": "pytest-browser"},
        )

        # Assert
        assert response.status_code == 201
        stored = mongo["form_submissions"].find_one()
        assert stored["data"] == {"full_name": "Asha Rao", "email": "asha@example.com", "status": "working"}
        assert stored["form_id"] == ObjectId(volunteer_form["id"])
        assert stored["user_agent"] == "pytest-browser"
        assert response.json()["data"]["email_sent"] is False

    def test_invalid_submission_is_400_with_errors(self, anon_client, volunteer_form, mongo):
        response = anon_client.post(
            f"/api/forms/{volunteer_form['id']}/submit",
            json={"data": {"full_name": "Asha", "email": "asha@example.com", "status": "student"}},
        )

        body = response.json()
        assert response.status_code == 400
        assert body["details"]["errors"] == {"college": "College is required"}
        assert mongo["form_submissions"].count_documents({}) == 0

    def test_inactive_form_is_404(self, client, anon_client, volunteer_form):
        client.put(f"/api/forms/{volunteer_form['id']}", json={"is_active": False})

        response = anon_client.post(f"/api/forms/{volunteer_form['id']}/submit", json={"data": WORKING_VOLUNTEER})

        assert response.status_code == 404

    def test_validate_dry_run(self, anon_client, volunteer_form, mongo):
        response = anon_client.post(
            f"/api/forms/{volunteer_form['id']}/validate",
            json={"data": {"full_name": "A", "status": "student"}},
        )

        data = response.json()
        assert data["valid"] is False
        assert set(data["errors"]) == {"full_name", "email", "college"}
        assert "college" in data["visible_fields"]
        assert mongo["form_submissions"].count_documents({}) == 0

    def test_list_get_and_delete_submission(self, client, anon_client, volunteer_form):
        anon_client.post(f"/api/forms/{volunteer_form['id']}/submit", json={"data": WORKING_VOLUNTEER})

        listed = client.get(f"/api/forms/{volunteer_form['id']}/submissions").json()
        submission_id = listed["data"][0]["id"]
        fetched = client.get(f"/api/forms/submissions/{submission_id}").json()["data"]
        client.delete(f"/api/forms/submissions/{submission_id}")

        assert listed["pagination"]["total_items"] == 1
        assert fetched["form_id"] == volunteer_form["id"]
        assert client.get(f"/api/forms/submissions/{submission_id}").status_code == 404


# =============================================================================
# Notifications
# =============================================================================

class TestNotifications:
    """Tests for submission emails."""

    def test_default_notification(self, client, anon_client, volunteer_form, sent_mail):
        client.put(f"/api/forms/{volunteer_form['id']}", json={"email_settings": {
            "send_email_on_submission": True,
            "recipient_emails": ["seva@harekrishnavidya.org"],
        }})

        response = anon_client.post(f"/api/forms/{volunteer_form['id']}/submit", json={"data": WORKING_VOLUNTEER})

        assert response.json()["data"]["email_sent"] is True
        to, subject, body = sent_mail.call_args.args
        assert to == ["seva@harekrishnavidya.org"]
        assert subject == "New submission: Volunteer Sign-up"
        assert "Full Name" in body and "Asha Rao" in body

    def test_template_notification(self, client, anon_client, volunteer_form, sent_mail):
        template = client.post("/api/forms/email-templates", json={
            "name": "Volunteer",
            "subject": "Volunteer: {{full_name}}",
            "body": "<p>{{ full_name }} ({{email}}) is {{status}}. {{missing}}</p>",
        }).json()["data"]
        client.put(f"/api/forms/{volunteer_form['id']}", json={"email_settings": {
            "send_email_on_submission": True,
            "email_template_id": template["id"],
            "recipient_emails": ["seva@harekrishnavidya.org"],
        }})

        anon_client.post(f"/api/forms/{volunteer_form['id']}/submit", json={"data": WORKING_VOLUNTEER})

        _, subject, body = sent_mail.call_args.args
        assert subject == "Volunteer: Asha Rao"
        assert body == "<p>Asha Rao (asha@example.com) is working. </p>"

    def test_no_recipients_no_email(self, anon_client, volunteer_form, sent_mail):
        anon_client.post(f"/api/forms/{volunteer_form['id']}/submit", json={"data": WORKING_VOLUNTEER})

        sent_mail.assert_not_called()

    def test_list_templates(self, client):
        client.post("/api/forms/email-templates", json={"name": "T", "subject": "S", "body": "B"})

        assert [t["name"] for t in client.get("/api/forms/email-templates").json()["data"]] == ["T"]


class TestFillPlaceholders:

    def test_escapes_values(self):
        assert fill_placeholders("<b>{{name}}</b>", {"name": "<i>x</i>"}) == "<b>&lt;i&gt;x&lt;/i&gt;</b>"

    def test_plain_text_and_lists(self):
        text = fill_placeholders("{{a}} / {{b}}", {"a": "R&D", "b": ["x", "y"]}, escape=False)

        assert text == "R&D / x, y"
