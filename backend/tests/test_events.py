"""Tests for Event CRUD and its sub-resources.

Covers:
- Event create (DRAFT, hosts, cutoff before start) / update / list
- Host set add / remove
- Event participants and attendance
- Payor overrides and shared costs
- Menus
"""
from datetime import datetime, timedelta, timezone

from tests.conftest import (
    add_test_event_participant,
    create_test_event,
    create_test_menu_item,
    create_test_participant,
    create_test_user,
    transition,
)


class TestEventCreate:
    """Event creation and initial state."""

    def test_create_event(self, client):
        host = create_test_user(client, name="Host")
        data = create_test_event(client, host["user_id"], name="Dinner", exemption=True)
        assert data["name"] == "Dinner"
        assert data["state"] == "DRAFT"
        assert data["version"] == 1
        assert data["payor_exemption_enabled"] is True
        assert [h["user_id"] for h in data["hosts"]] == [host["user_id"]]

    def test_create_event_with_cohosts(self, client):
        host = create_test_user(client, name="Host")
        cohost = create_test_user(client, name="Cohost")
        data = create_test_event(client, host["user_id"], host_ids=[cohost["user_id"], host["user_id"]])
        assert sorted(h["user_id"] for h in data["hosts"]) == sorted([host["user_id"], cohost["user_id"]])

    def test_cutoff_after_start_rejected(self, client):
        host = create_test_user(client)
        start = datetime.now(timezone.utc) + timedelta(hours=1)
        resp = client.post("/api/events/", json={
            "name": "Late",
            "host_user_id": host["user_id"],
            "starts_at_utc": start.isoformat(),
            "cutoff_at_utc": (start + timedelta(minutes=5)).isoformat(),
        })
        assert resp.status_code == 400

    def test_unknown_host(self, client):
        start = datetime.now(timezone.utc) + timedelta(hours=1)
        resp = client.post("/api/events/", json={
            "name": "Ghost",
            "host_user_id": "00000000-0000-0000-0000-000000000000",
            "starts_at_utc": start.isoformat(),
            "cutoff_at_utc": start.isoformat(),
        })
        assert resp.status_code == 404


class TestEventUpdate:
    def test_update_bumps_version(self, client):
        host = create_test_user(client)
        event = create_test_event(client, host["user_id"])
        resp = client.patch(f"/api/events/{event['event_id']}", json={
            "name": "Brunch",
            "payor_exemption_enabled": True,
        })
        assert resp.status_code == 200
        assert resp.json()["name"] == "Brunch"
        assert resp.json()["payor_exemption_enabled"] is True
        assert resp.json()["version"] == event["version"] + 1

    def test_update_cutoff_after_start_rejected(self, client):
        host = create_test_user(client)
        event = create_test_event(client, host["user_id"])
        late = datetime.now(timezone.utc) + timedelta(days=3)
        resp = client.patch(f"/api/events/{event['event_id']}", json={"cutoff_at_utc": late.isoformat()})
        assert resp.status_code == 400
        assert client.get(f"/api/events/{event['event_id']}").json()["version"] == event["version"]

    def test_list_by_state(self, client):
        host = create_test_user(client)
        draft = create_test_event(client, host["user_id"], name="Draft")
        opened = create_test_event(client, host["user_id"], name="Opened")
        transition(client, opened["event_id"], "OPEN")

        resp = client.get("/api/events/", params={"state": "OPEN"})
        assert resp.status_code == 200
        ids = [e["event_id"] for e in resp.json()]
        assert opened["event_id"] in ids
        assert draft["event_id"] not in ids
        assert client.get("/api/events/", params={"state": "nope"}).status_code == 400

    def test_get_not_found(self, client):
        resp = client.get("/api/events/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404


class TestHosts:
    def test_add_and_remove_host(self, client):
        host = create_test_user(client)
        cohost = create_test_user(client)
        event = create_test_event(client, host["user_id"])
        eid = event["event_id"]

        resp = client.post(f"/api/events/{eid}/hosts", json={"user_id": cohost["user_id"]})
        assert resp.status_code == 201
        assert len(resp.json()["hosts"]) == 2
        assert client.post(f"/api/events/{eid}/hosts", json={"user_id": cohost["user_id"]}).status_code == 409

        resp = client.delete(f"/api/events/{eid}/hosts/{cohost['user_id']}")
        assert resp.status_code == 200
        assert [h["user_id"] for h in resp.json()["hosts"]] == [host["user_id"]]
        assert client.delete(f"/api/events/{eid}/hosts/{cohost['user_id']}").status_code == 404


class TestEventParticipants:
    def test_add_defaults_manager_to_owner(self, client):
        host = create_test_user(client)
        parent = create_test_user(client)
        kid = create_test_participant(client, parent["user_id"])
        event = create_test_event(client, host["user_id"])
        row = add_test_event_participant(client, event["event_id"], kid["participant_id"])
        assert row["managing_user_id"] == parent["user_id"]
        assert row["attendance_status"] == "ATTENDING"

        resp = client.post(f"/api/events/{event['event_id']}/participants", json={
            "participant_id": kid["participant_id"],
        })
        assert resp.status_code == 409

    def test_attendance(self, client):
        host = create_test_user(client)
        kid = create_test_participant(client, host["user_id"])
        event = create_test_event(client, host["user_id"])
        eid, pid = event["event_id"], kid["participant_id"]
        add_test_event_participant(client, eid, pid, attendance="TENTATIVE")

        resp = client.patch(f"/api/events/{eid}/participants/{pid}/attendance", json={"attendance_status": "DECLINED"})
        assert resp.status_code == 200
        assert resp.json()["attendance_status"] == "DECLINED"
        resp = client.patch(f"/api/events/{eid}/participants/{pid}/attendance", json={"attendance_status": "MAYBE"})
        assert resp.status_code == 400

        listed = client.get(f"/api/events/{eid}/participants").json()
        assert [(p["participant_id"], p["attendance_status"]) for p in listed] == [(pid, "DECLINED")]

    def test_list_payor_overrides(self, client):
        host = create_test_user(client)
        sponsor = create_test_user(client)
        kid = create_test_participant(client, host["user_id"])
        event = create_test_event(client, host["user_id"])
        eid, pid = event["event_id"], kid["participant_id"]
        add_test_event_participant(client, eid, pid)
        assert client.get(f"/api/events/{eid}/payor-overrides").json() == []

        resp = client.put(f"/api/events/{eid}/payor-overrides/{pid}", json={"payor_user_id": sponsor["user_id"]})
        assert resp.status_code == 200
        resp = client.get(f"/api/events/{eid}/payor-overrides")
        assert resp.status_code == 200
        assert resp.json() == [{"event_id": eid, "participant_id": pid, "payor_user_id": sponsor["user_id"]}]

        assert client.delete(f"/api/events/{eid}/payor-overrides/{pid}").status_code == 204
        assert client.get(f"/api/events/{eid}/payor-overrides").json() == []
        assert client.get("/api/events/00000000-0000-0000-0000-000000000000/payor-overrides").status_code == 404

    def test_override_requires_event_participant(self, client):
        host = create_test_user(client)
        kid = create_test_participant(client, host["user_id"])
        event = create_test_event(client, host["user_id"])
        resp = client.put(
            f"/api/events/{event['event_id']}/payor-overrides/{kid['participant_id']}",
            json={"payor_user_id": host["user_id"]},
        )
        assert resp.status_code == 404


class TestSharedCosts:
    def test_create_list_delete(self, client):
        host = create_test_user(client)
        event = create_test_event(client, host["user_id"])
        eid = event["event_id"]

        resp = client.post(f"/api/events/{eid}/shared-costs", json={"name": "Venue", "amount_irr": 5000})
        assert resp.status_code == 201
        cost = resp.json()
        assert cost["split_method"] == "EQUAL_ALL_ATTENDING"
        assert [c["shared_cost_id"] for c in client.get(f"/api/events/{eid}/shared-costs").json()] == [
            cost["shared_cost_id"]
        ]

        assert client.delete(f"/api/events/{eid}/shared-costs/{cost['shared_cost_id']}").status_code == 204
        assert client.get(f"/api/events/{eid}/shared-costs").json() == []
        assert client.delete(f"/api/events/{eid}/shared-costs/{cost['shared_cost_id']}").status_code == 404

    def test_invalid_shared_cost(self, client):
        host = create_test_user(client)
        eid = create_test_event(client, host["user_id"])["event_id"]
        assert client.post(f"/api/events/{eid}/shared-costs", json={"name": "X", "amount_irr": -1}).status_code == 400
        resp = client.post(f"/api/events/{eid}/shared-costs", json={
            "name": "X", "amount_irr": 10, "split_method": "BY_AGE",
        })
        assert resp.status_code == 400


class TestMenus:
    def test_create_and_list(self, client):
        host = create_test_user(client)
        eid = create_test_event(client, host["user_id"])["event_id"]
        item = create_test_menu_item(client, eid, name="Soup", price=250)
        menus = client.get(f"/api/events/{eid}/menus").json()
        assert [m["menu_id"] for m in menus] == [item["menu_id"]]
        items = client.get(f"/api/menus/{item['menu_id']}/items").json()
        assert [(i["name"], i["price_irr"]) for i in items] == [("Soup", 250)]

    def test_list_menus_unknown_event(self, client):
        resp = client.get("/api/events/00000000-0000-0000-0000-000000000000/menus")
        assert resp.status_code == 404
