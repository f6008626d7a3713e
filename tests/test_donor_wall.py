# =============================================================================
# tests/test_donor_wall.py - Donor Wall Tests
# =============================================================================
# Endpoint tests for tiering, the public wall and admin edits.
# =============================================================================

import pytest


def donor(**overrides) -> dict:
    data = {"full_name": "Asha Rao", "email": "asha@example.com", "amount": 60000, "phone": "9876543210"}
    data.update(overrides)
    return data


@pytest.fixture
def add_donor(client):
    def _add(**overrides) -> dict:
        response = client.post("/api/donor-wall", json=donor(**overrides))
        assert response.status_code == 201
        return response.json()["data"]
    return _add


class TestCreateDonor:
    """Tests for POST /api/donor-wall."""

    def test_tier_from_amount(self, add_donor):
        entry = add_donor()

        assert entry["tier"] == "Gold"
        assert entry["avatar_initials"] == "AR"
        assert entry["avatar_color"].startswith("#")
        assert entry["display_name"] == "Asha Rao"

    def test_explicit_tier_wins(self, add_donor):
        entry = add_donor(amount=500, tier="Platinum")

        assert entry["tier"] == "Platinum"

    def test_requires_auth(self, anon_client):
        assert anon_client.post("/api/donor-wall", json=donor()).status_code == 401


class TestPublicWall:
    """Tests for the public views."""

    def test_grouped_by_tier_with_every_key(self, add_donor, anon_client):
        add_donor(full_name="Big Giver", amount=150000)
        add_donor(full_name="Small Giver", amount=100)

        data = anon_client.get("/api/donor-wall/public").json()["data"]

        assert list(data) == ["Platinum", "Gold", "Silver", "Bronze", "Supporter"]
        assert [d["display_name"] for d in data["Platinum"]] == ["Big Giver"]
        assert data["Gold"] == []

    def test_hides_private_fields(self, add_donor, anon_client):
        add_donor(show_amount=False)

        entry = anon_client.get("/api/donor-wall/public").json()["data"]["Gold"][0]

        assert entry["amount"] is None
        assert "email" not in entry
        assert "phone" not in entry

    def test_anonymous_donor(self, add_donor, anon_client):
        add_donor(is_anonymous=True)

        entry = anon_client.get("/api/donor-wall/public").json()["data"]["Gold"][0]

        assert entry["display_name"] == "Anonymous Donor"
        assert entry["avatar_initials"] == "AD"

    def test_hidden_and_inactive_excluded(self, add_donor, anon_client):
        add_donor(is_visible=False)
        add_donor(full_name="Paused", status="inactive")

        data = anon_client.get("/api/donor-wall/tier/Gold").json()

        assert data["data"] == []
        assert data["pagination"]["total_items"] == 0

    def test_by_campaign(self, add_donor, anon_client):
        add_donor(campaign="Annadaan")
        add_donor(full_name="Other", campaign="Vidya")

        data = anon_client.get("/api/donor-wall/campaign/Annadaan").json()["data"]

        assert [d["display_name"] for d in data] == ["Asha Rao"]

    def test_unknown_tier_is_400(self, anon_client):
        assert anon_client.get("/api/donor-wall/tier/Diamond").status_code == 400


class TestAdminDonorWall:
    """Tests for admin edits and stats."""

    def test_toggle_visibility(self, add_donor, client):
        entry = add_donor()

        first = client.put(f"/api/donor-wall/{entry['id']}/toggle-visibility").json()
        second = client.put(f"/api/donor-wall/{entry['id']}/toggle-visibility").json()

        assert first["message"] == "Donor is now hidden"
        assert first["data"]["is_visible"] is False
        assert second["data"]["is_visible"] is True

    def test_new_amount_re_tiers(self, add_donor, client):
        entry = add_donor()

        updated = client.put(f"/api/donor-wall/{entry['id']}", json={"amount": 12000}).json()["data"]

        assert updated["tier"] == "Bronze"

    def test_update_ignores_nulls(self, add_donor, client):
        entry = add_donor()

        updated = client.put(
            f"/api/donor-wall/{entry['id']}", json={"full_name": None, "amount": None}
        ).json()["data"]

        assert updated["full_name"] == "Asha Rao"
        assert updated["amount"] == entry["amount"]
        assert updated["tier"] == "Gold"
        assert updated["display_name"] == "Asha Rao"

    def test_new_name_regenerates_initials(self, add_donor, client):
        entry = add_donor()

        updated = client.put(f"/api/donor-wall/{entry['id']}", json={"full_name": "Meera Iyer"}).json()["data"]

        assert updated["avatar_initials"] == "MI"

    def test_list_filters(self, add_donor, client):
        add_donor()
        add_donor(full_name="Hidden", is_visible=False)

        response = client.get("/api/donor-wall", params={"is_visible": "false"})

        assert [d["full_name"] for d in response.json()["data"]] == ["Hidden"]

    def test_sort_by_amount(self, add_donor, client):
        add_donor(full_name="Low", amount=100)
        add_donor(full_name="High", amount=200000)

        data = client.get("/api/donor-wall", params={"sort_by": "amount", "sort_order": "asc"}).json()["data"]

        assert [d["full_name"] for d in data] == ["Low", "High"]

    def test_stats(self, add_donor, client):
        add_donor(amount=150000, campaign="Vidya")
        add_donor(amount=100, is_visible=False)
        add_donor(amount=500, status="inactive")

        data = client.get("/api/donor-wall/stats").json()["data"]

        assert data["total_donors"] == 2
        assert data["visible_donors"] == 1
        assert data["hidden_donors"] == 1
        assert data["total_raised"] == 150100
        assert data["tier_counts"]["Platinum"] == 1
        assert data["tier_counts"]["Gold"] == 0
        assert data["total_campaigns"] == 2

    def test_delete(self, add_donor, client):
        entry = add_donor()

        client.delete(f"/api/donor-wall/{entry['id']}")

        assert client.get(f"/api/donor-wall/{entry['id']}").status_code == 404
