"""Tests for User and Participant endpoints."""
from tests.conftest import create_test_user, create_test_participant


class TestUserCRUD:
    """User create / get / list."""

    def test_create_user(self, client):
        data = create_test_user(client, name="Alice", email="alice@example.com")
        assert data["display_name"] == "Alice"
        assert data["email"] == "alice@example.com"
        assert "user_id" in data

    def test_create_user_duplicate_email(self, client):
        create_test_user(client, email="dup@example.com")
        resp = client.post("/api/users/", json={"display_name": "Again", "email": "dup@example.com"})
        assert resp.status_code == 409

    def test_get_user(self, client):
        user = create_test_user(client)
        resp = client.get(f"/api/users/{user['user_id']}")
        assert resp.status_code == 200
        assert resp.json()["display_name"] == "Test User"

    def test_get_user_not_found(self, client):
        resp = client.get("/api/users/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404

    def test_list_users(self, client):
        create_test_user(client, name="Alice")
        create_test_user(client, name="Bob")
        resp = client.get("/api/users/")
        assert resp.status_code == 200
        names = [u["display_name"] for u in resp.json()]
        assert "Alice" in names
        assert "Bob" in names


class TestParticipants:
    """Participants are owned by a user and may carry a default payor."""

    def test_create_participant(self, client):
        parent = create_test_user(client, name="Parent")
        child = create_test_participant(client, parent["user_id"], name="Kid")
        assert child["owner_user_id"] == parent["user_id"]
        assert child["display_name"] == "Kid"

    def test_create_participant_unknown_owner(self, client):
        resp = client.post("/api/participants/", json={
            "owner_user_id": "00000000-0000-0000-0000-000000000000",
            "display_name": "Nobody",
        })
        assert resp.status_code == 404

    def test_list_participants_by_owner(self, client):
        a = create_test_user(client, name="A")
        b = create_test_user(client, name="B")
        create_test_participant(client, a["user_id"], name="A1")
        create_test_participant(client, a["user_id"], name="A2")
        create_test_participant(client, b["user_id"], name="B1")
        resp = client.get("/api/participants/", params={"owner_user_id": a["user_id"]})
        assert resp.status_code == 200
        assert sorted(p["display_name"] for p in resp.json()) == ["A1", "A2"]

    def test_set_and_clear_default_payor(self, client):
        owner = create_test_user(client, name="Owner")
        sponsor = create_test_user(client, name="Sponsor")
        participant = create_test_participant(client, owner["user_id"])
        pid = participant["participant_id"]

        resp = client.put(f"/api/participants/{pid}/default-payor", json={"payor_user_id": sponsor["user_id"]})
        assert resp.status_code == 200
        assert resp.json()["payor_user_id"] == sponsor["user_id"]

        resp = client.put(f"/api/participants/{pid}/default-payor", json={"payor_user_id": owner["user_id"]})
        assert resp.status_code == 200
        assert resp.json()["payor_user_id"] == owner["user_id"]

        resp = client.delete(f"/api/participants/{pid}/default-payor")
        assert resp.status_code == 204
