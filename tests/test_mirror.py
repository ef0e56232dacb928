"""Unit tests for the realtime mirror: projections, writer and dual-write helper."""

import logging
from datetime import date, datetime, timezone as dt_timezone
from unittest.mock import MagicMock

import pytest

from apps.shipments.exceptions import MirrorSyncError
from apps.tracking.mirror import (
    RealtimeMirror, dual_write, group_name, project_agent, project_shipment, shipment_path,
)


RECORD = {
    "id":                     "3f1c2a9e-0000-4000-8000-000000000001",
    "tracking_id":            "SHIP-AB12C-2026",
    "sender_name":            "A",
    "receiver_name":          "B",
    "pickup_address":         "X",
    "delivery_address":       "Y",
    "contact_number":         "123",
    "customer_email":         "",
    "agent_id":               None,
    "status":                 "created",
    "last_location":          None,
    "pickup_date":            date(2026, 3, 1),
    "expected_delivery_date": None,
    "created_at":             datetime(2026, 3, 1, 10, 0, tzinfo=dt_timezone.utc),
}


# ═══════════════════════════════════════════════════════════════════════════════
# PROJECTIONS
# ═══════════════════════════════════════════════════════════════════════════════

class TestShipmentSnapshot:

    def test_closed_field_list(self):
        snapshot = project_shipment({**RECORD, "internal_note": "not mirrored"})
        assert "internal_note" not in snapshot
        assert set(snapshot) == set(RECORD)

    def test_optional_values_normalised(self):
        snapshot = project_shipment(RECORD)
        assert snapshot["agent_id"] == ""
        assert snapshot["expected_delivery_date"] == ""
        assert snapshot["pickup_date"] == "2026-03-01"
        assert snapshot["last_location"] is None

    def test_created_at_epoch_millis(self):
        assert project_shipment(RECORD)["created_at"] == 1772359200000

    def test_missing_created_at_uses_now(self):
        snapshot = project_shipment({k: v for k, v in RECORD.items() if k != "created_at"})
        assert snapshot["created_at"] > 1772359200000

    def test_agent_snapshot(self):
        agent = {"id": "agent-1", "name": "One", "email": "one@x.test", "status": "busy", "extra": 1}
        assert project_agent(agent) == {"id": "agent-1", "name": "One", "email": "one@x.test", "status": "busy"}


# ═══════════════════════════════════════════════════════════════════════════════
# WRITER
# ═══════════════════════════════════════════════════════════════════════════════

class TestRealtimeMirror:

    def test_set_get_remove(self):
        mirror = RealtimeMirror()
        mirror.set("shipments/SHIP-1", {"status": "created"})
        assert mirror.get("shipments/SHIP-1") == {"status": "created"}
        mirror.remove("shipments/SHIP-1")
        assert mirror.get("shipments/SHIP-1") is None

    def test_paths_track_held_nodes(self):
        mirror = RealtimeMirror()
        mirror.set("shipments/SHIP-2", {"status": "created"})
        mirror.set("shipments/SHIP-1", {"status": "created"})
        mirror.set("agents/a1", {"status": "free"})
        mirror.remove("shipments/SHIP-2")

        assert mirror.paths() == ["agents/a1", "shipments/SHIP-1"]
        assert mirror.paths("shipments/") == ["shipments/SHIP-1"]

    def test_set_replaces_whole_node(self):
        mirror = RealtimeMirror()
        mirror.set("agents/a1", {"id": "a1", "status": "free", "name": "x"})
        mirror.set("agents/a1", {"id": "a1", "status": "busy"})
        assert mirror.get("agents/a1") == {"id": "a1", "status": "busy"}

    def test_writes_fan_out_to_path_group(self):
        layer = MagicMock()

        async def group_send(group, event):
            layer.sent.append((group, event))
        layer.sent = []
        layer.group_send = group_send

        mirror = RealtimeMirror(channel_layer=layer)
        path = shipment_path("SHIP-AB12C-2026")
        mirror.set(path, {"status": "in_transit"})
        mirror.remove(path)

        assert layer.sent == [
            ("mirror_shipments_SHIP-AB12C-2026",
             {"type": "mirror.update", "path": path, "snapshot": {"status": "in_transit"}}),
            ("mirror_shipments_SHIP-AB12C-2026", {"type": "mirror.remove", "path": path}),
        ]

    def test_group_name_has_no_slash(self):
        assert group_name("agents/abc") == "mirror_agents_abc"


# ═══════════════════════════════════════════════════════════════════════════════
# DUAL WRITE
# ═══════════════════════════════════════════════════════════════════════════════

class TestDualWrite:

    def test_mirror_receives_primary_result(self):
        mirror = MagicMock()
        assert dual_write(lambda: "rec", mirror, "op") == "rec"
        mirror.assert_called_once_with("rec")

    def test_primary_failure_skips_mirror(self):
        mirror = MagicMock()

        def primary():
            raise RuntimeError("db down")

        with pytest.raises(RuntimeError):
            dual_write(primary, mirror, "op")
        mirror.assert_not_called()

    def test_mirror_failure_logged_and_raised(self, caplog):
        primary = MagicMock(return_value="rec")
        mirror  = MagicMock(side_effect=TimeoutError("mirror slow"))

        with caplog.at_level(logging.ERROR, logger="shiptrack.mirror"):
            with pytest.raises(MirrorSyncError) as excinfo:
                dual_write(primary, mirror, "edit shipment SHIP-1")

        primary.assert_called_once()
        assert isinstance(excinfo.value.__cause__, TimeoutError)
        assert "edit shipment SHIP-1" in caplog.text
        assert caplog.records[-1].exc_info is not None
