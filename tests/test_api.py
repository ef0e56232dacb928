"""
HTTP API tests.
Covers: Integration | RBAC | error mapping for the shipment, tracking and
agent endpoints.
"""

import re
from unittest.mock import MagicMock, patch

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework import status
from rest_framework.test import APIClient

from apps.shipments.models import Agent, Shipment

TRACKING_RE = re.compile(r"^SHIP-[A-Z0-9]{5}-\d{4}$")


@pytest.fixture
def shipment(coordinator, agent_account, payload):
    """A shipment assigned to the logged-in agent fixture."""
    assigned = {**payload, "agent_id": str(agent_account.pk)}
    return coordinator.shipments.get(coordinator.create_shipment(assigned))


# ═══════════════════════════════════════════════════════════════════════════════
# CREATE + LIST
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestShipmentCreate:

    def test_admin_creates_shipment(self, admin_client, agents, payload):
        payload["agent_id"] = "agent-1"
        resp = admin_client.post("/api/shipments/", payload, format="json")

        assert resp.status_code == status.HTTP_201_CREATED
        assert TRACKING_RE.match(resp.data["tracking_id"])
        assert resp.data["status"] == "created"
        assert Agent.objects.get(pk="agent-1").status == "busy"

    def test_unknown_agent_rejected(self, admin_client, payload):
        payload["agent_id"] = "ghost"
        resp = admin_client.post("/api/shipments/", payload, format="json")
        assert resp.status_code == 400
        assert "agent_id" in resp.data

    def test_delivery_before_pickup_rejected(self, admin_client, payload):
        payload.update(pickup_date="2026-05-10", expected_delivery_date="2026-05-01")
        resp = admin_client.post("/api/shipments/", payload, format="json")
        assert resp.status_code == 400

    def test_agent_cannot_create(self, agent_client, payload):
        resp = agent_client.post("/api/shipments/", payload, format="json")
        assert resp.status_code == 403

    def test_unauthenticated_cannot_create(self, payload, db):
        resp = APIClient().post("/api/shipments/", payload, format="json")
        assert resp.status_code == 401

    def test_mirror_failure_maps_to_502(self, admin_client, payload):
        from apps.shipments import views

        broken = MagicMock()
        broken.set.side_effect = ConnectionError("mirror down")
        with patch.object(views.coordinator, "mirror", broken):
            resp = admin_client.post("/api/shipments/", payload, format="json")

        assert resp.status_code == 502
        assert resp.data == {"error": "Realtime sync failed."}
        assert Shipment.objects.count() == 1


@pytest.mark.django_db
class TestShipmentList:

    def test_admin_sees_all_and_filters(self, admin_client, coordinator, agents, payload):
        coordinator.create_shipment({**payload, "agent_id": "agent-1"})
        second = coordinator.create_shipment(payload)
        coordinator.update_status(second, "in_transit")

        resp = admin_client.get("/api/shipments/")
        assert resp.data["count"] == 2
        resp = admin_client.get("/api/shipments/?status=in_transit")
        assert [s["id"] for s in resp.data["results"]] == [second]
        resp = admin_client.get("/api/shipments/?agent_id=agent-1")
        assert resp.data["count"] == 1

    def test_agent_sees_only_assigned(self, agent_client, shipment, coordinator, payload):
        coordinator.create_shipment(payload)
        resp = agent_client.get("/api/shipments/")
        assert resp.status_code == 200
        assert [s["tracking_id"] for s in resp.data["results"]] == [shipment["tracking_id"]]

    def test_customer_cannot_list(self, customer_client):
        assert customer_client.get("/api/shipments/").status_code == 403


# ═══════════════════════════════════════════════════════════════════════════════
# EDIT + DELETE
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestShipmentEditDelete:

    def test_edit_delivered_frees_agent(self, admin_client, shipment, agent_account):
        resp = admin_client.patch(f"/api/shipments/{shipment['id']}/", {"status": "delivered"}, format="json")
        assert resp.status_code == 200
        assert resp.data["status"] == "delivered"
        assert Agent.objects.get(pk=str(agent_account.pk)).status == "free"

    def test_tracking_id_change_rejected(self, admin_client, shipment):
        resp = admin_client.patch(f"/api/shipments/{shipment['id']}/",
                                  {"tracking_id": "SHIP-ZZZZZ-2026"}, format="json")
        assert resp.status_code == 400
        assert Shipment.objects.get(pk=shipment["id"]).tracking_id == shipment["tracking_id"]

    def test_edit_missing_returns_404(self, admin_client):
        resp = admin_client.patch("/api/shipments/00000000-0000-0000-0000-000000000000/",
                                  {"status": "delivered"}, format="json")
        assert resp.status_code == 404

    def test_agent_cannot_edit(self, agent_client, shipment):
        resp = agent_client.patch(f"/api/shipments/{shipment['id']}/", {"receiver_name": "Q"}, format="json")
        assert resp.status_code == 403

    def test_delete_is_idempotent(self, admin_client, shipment):
        url = f"/api/shipments/{shipment['id']}/"
        assert admin_client.delete(url).status_code == 204
        assert admin_client.delete(url).status_code == 204
        assert not Shipment.objects.filter(pk=shipment["id"]).exists()


# ═══════════════════════════════════════════════════════════════════════════════
# AGENT ACTIONS — status + proof
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestAgentActions:

    def test_assigned_agent_updates_status(self, agent_client, shipment):
        resp = agent_client.post(f"/api/shipments/{shipment['id']}/status/", {
            "status": "in_transit",
            "location": {"lat": 19.076, "lng": 72.8777, "address": "Mumbai"},
        }, format="json")
        assert resp.status_code == 200
        assert resp.data["status"] == "in_transit"
        assert resp.data["last_location"]["address"] == "Mumbai"

        history = agent_client.get(f"/api/shipments/{shipment['id']}/updates/")
        assert [u["status"] for u in history.data["updates"]] == ["in_transit"]

    def test_other_agent_forbidden(self, shipment, make_account):
        other = make_account(role="agent")
        client = APIClient()
        client.force_authenticate(user=other)
        resp = client.post(f"/api/shipments/{shipment['id']}/status/", {"status": "in_transit"}, format="json")
        assert resp.status_code == 403

    def test_invalid_status_rejected(self, agent_client, shipment):
        resp = agent_client.post(f"/api/shipments/{shipment['id']}/status/", {"status": "lost"}, format="json")
        assert resp.status_code == 400

    def test_linear_policy_violation_maps_to_400(self, agent_client, shipment):
        from apps.shipments import views
        from apps.shipments.transitions import LinearPolicy

        with patch.object(views.coordinator, "policy", LinearPolicy()):
            agent_client.post(f"/api/shipments/{shipment['id']}/status/", {"status": "delivered"}, format="json")
            resp = agent_client.post(f"/api/shipments/{shipment['id']}/status/", {"status": "in_transit"}, format="json")
        assert resp.status_code == 400
        assert "delivered" in resp.data["error"]

    def test_history_unknown_or_malformed_id_404(self, admin_client):
        assert admin_client.get("/api/shipments/not-a-uuid/updates/").status_code == 404
        missing = "/api/shipments/00000000-0000-0000-0000-000000000000/updates/"
        assert admin_client.get(missing).status_code == 404

    def test_history_other_agent_forbidden(self, shipment, make_account):
        other = make_account(role="agent")
        client = APIClient()
        client.force_authenticate(user=other)
        resp = client.get(f"/api/shipments/{shipment['id']}/updates/")
        assert resp.status_code == 403

    def test_history_customer_forbidden(self, customer_client, shipment):
        assert customer_client.get(f"/api/shipments/{shipment['id']}/updates/").status_code == 403

    def test_proof_upload(self, agent_client, shipment, settings, tmp_path):
        settings.MEDIA_ROOT = str(tmp_path)
        upload = SimpleUploadedFile("pod.jpg", b"\xff\xd8\xff\xe0jpeg", content_type="image/jpeg")

        resp = agent_client.post(f"/api/shipments/{shipment['id']}/proof/", {"proof": upload}, format="multipart")

        assert resp.status_code == 201
        assert f"pods/{shipment['id']}/" in resp.data["url"]
        assert Shipment.objects.get(pk=shipment["id"]).status == "delivered"
        assert (tmp_path / "pods" / shipment["id"]).is_dir()


# ═══════════════════════════════════════════════════════════════════════════════
# CUSTOMER TRACKING — public
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestCustomerTracking:

    def test_track_by_tracking_id(self, shipment, coordinator):
        coordinator.update_status(shipment["id"], "picked_up")
        resp = APIClient().get(f"/api/track/{shipment['tracking_id']}/")
        assert resp.status_code == 200
        assert resp.data["status"] == "picked_up"
        assert [u["status"] for u in resp.data["updates"]] == ["picked_up"]

    def test_unknown_tracking_id_404(self, db):
        resp = APIClient().get("/api/track/SHIP-NOPE0-2026/")
        assert resp.status_code == 404

    def test_feedback(self, shipment):
        client = APIClient()
        resp = client.post(f"/api/track/{shipment['tracking_id']}/feedback/",
                           {"rating": 4, "comments": "Friendly agent"}, format="json")
        assert resp.status_code == 201
        assert resp.data["rating"] == 4

    def test_feedback_rating_bounds(self, shipment):
        resp = APIClient().post(f"/api/track/{shipment['tracking_id']}/feedback/",
                                {"rating": 6}, format="json")
        assert resp.status_code == 400

    def test_live_tracking_reads_mirror(self, shipment):
        resp = APIClient().get(f"/api/tracking/{shipment['tracking_id']}/live/")
        assert resp.status_code == 200
        assert resp.data["tracking_id"] == shipment["tracking_id"]
        assert isinstance(resp.data["created_at"], int)

    def test_live_tracking_unknown(self, db):
        assert APIClient().get("/api/tracking/SHIP-NOPE0-2026/live/").status_code == 404


# ═══════════════════════════════════════════════════════════════════════════════
# AGENT MANAGEMENT
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestAgentManagement:

    def test_admin_creates_and_lists_agents(self, admin_client):
        resp = admin_client.post("/api/agents/", {
            "name": "Ravi Kumar", "email": "ravi@shiptrack.test", "password": "secret123",
        }, format="json")
        assert resp.status_code == 201
        assert resp.data["status"] == "free"

        resp = admin_client.get("/api/agents/")
        assert [a["email"] for a in resp.data] == ["ravi@shiptrack.test"]

    def test_duplicate_agent_email(self, admin_client, make_account):
        make_account(email="ravi@shiptrack.test")
        resp = admin_client.post("/api/agents/", {
            "name": "Ravi", "email": "ravi@shiptrack.test", "password": "secret123",
        }, format="json")
        assert resp.status_code == 400

    def test_delete_agent(self, admin_client, agents):
        assert admin_client.delete("/api/agents/agent-1/").status_code == 204
        assert not Agent.objects.filter(pk="agent-1").exists()

    def test_non_admin_forbidden(self, agent_client):
        assert agent_client.get("/api/agents/").status_code == 403
        assert agent_client.delete("/api/agents/agent-1/").status_code == 403


# ═══════════════════════════════════════════════════════════════════════════════
# ROUTE — geocoded endpoints
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestRoute:

    def test_route_geocodes_both_addresses(self, admin_client, shipment):
        with patch("apps.shipments.views.geocoder.geocode",
                   side_effect=[{"latitude": 1.0, "longitude": 2.0, "display_name": "X"}, None]):
            resp = admin_client.get(f"/api/shipments/{shipment['id']}/route/")
        assert resp.status_code == 200
        assert resp.data["pickup"]["latitude"] == 1.0
        assert resp.data["delivery"] is None
