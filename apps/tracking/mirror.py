"""
Realtime mirror sync.

The mirror is a derived, non-authoritative copy of shipment and agent
records, keyed by path:

    shipments/<tracking_id>
    agents/<agent_id>

Snapshots live in the cache named by MIRROR_CACHE_ALIAS (no expiry) and every
write is fanned out to the Channels group of its path, so WebSocket
subscribers see the new snapshot as soon as it lands. Writes always replace
the whole node.
"""

import logging
from datetime import date, datetime

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.core.cache import caches
from django.utils import timezone
from rest_framework import serializers

from apps.shipments.exceptions import MirrorSyncError

logger = logging.getLogger("shiptrack.mirror")

KEY_PREFIX = "mirror:"
# Paths currently held, so a rebuild can find nodes whose primary record is gone
INDEX_KEY  = KEY_PREFIX + "_paths"


def shipment_path(tracking_id: str) -> str:
    return f"shipments/{tracking_id}"


def agent_path(agent_id: str) -> str:
    return f"agents/{agent_id}"


def group_name(path: str) -> str:
    """Channels group for a mirror path (group names may not contain '/')."""
    return "mirror_" + path.replace("/", "_")


def epoch_ms(value) -> int:
    if isinstance(value, datetime):
        return int(value.timestamp() * 1000)
    if isinstance(value, (int, float)):
        return int(value)
    return int(timezone.now().timestamp() * 1000)


# ── Typed projections ─────────────────────────────────────────────────────────

class _Snapshot(serializers.Serializer):
    """Closed field list; optional strings are written as "" rather than null."""
    optional_strings = ()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        for name in self.optional_strings:
            if data.get(name) is None:
                data[name] = ""
        return dict(data)


class ShipmentSnapshot(_Snapshot):
    optional_strings = ("customer_email", "agent_id", "pickup_date", "expected_delivery_date")

    id                     = serializers.CharField()
    tracking_id            = serializers.CharField()
    sender_name            = serializers.CharField()
    receiver_name          = serializers.CharField()
    pickup_address         = serializers.CharField()
    delivery_address       = serializers.CharField()
    contact_number         = serializers.CharField()
    customer_email         = serializers.CharField(default="")
    agent_id               = serializers.CharField(default="")
    status                 = serializers.CharField()
    last_location          = serializers.JSONField(default=None)
    pickup_date            = serializers.SerializerMethodField()
    expected_delivery_date = serializers.SerializerMethodField()
    created_at             = serializers.SerializerMethodField()

    def _iso(self, value):
        if isinstance(value, date):
            return value.isoformat()
        return value or ""

    def get_pickup_date(self, obj):
        return self._iso(obj.get("pickup_date"))

    def get_expected_delivery_date(self, obj):
        return self._iso(obj.get("expected_delivery_date"))

    def get_created_at(self, obj):
        return epoch_ms(obj.get("created_at"))


class AgentSnapshot(_Snapshot):
    id     = serializers.CharField()
    name   = serializers.CharField()
    email  = serializers.CharField()
    status = serializers.CharField()


def project_shipment(record: dict) -> dict:
    return ShipmentSnapshot(record).data


def project_agent(record: dict) -> dict:
    return AgentSnapshot(record).data


# ── Mirror writer ─────────────────────────────────────────────────────────────

class RealtimeMirror:
    """Write side of the mirror. Readers use get(); the coordinator never does."""

    def __init__(self, cache_alias: str = None, channel_layer=None):
        self.cache_alias   = cache_alias or getattr(settings, "MIRROR_CACHE_ALIAS", "default")
        self.channel_layer = channel_layer

    @property
    def cache(self):
        return caches[self.cache_alias]

    def _layer(self):
        return self.channel_layer or get_channel_layer()

    def _broadcast(self, path: str, event: dict) -> None:
        layer = self._layer()
        if layer is None:
            return
        async_to_sync(layer.group_send)(group_name(path), event)

    def set(self, path: str, value: dict) -> None:
        self.cache.set(KEY_PREFIX + path, value, timeout=None)
        self._index(add=path)
        self._broadcast(path, {"type": "mirror.update", "path": path, "snapshot": value})

    def remove(self, path: str) -> None:
        self.cache.delete(KEY_PREFIX + path)
        self._index(discard=path)
        self._broadcast(path, {"type": "mirror.remove", "path": path})

    def get(self, path: str):
        return self.cache.get(KEY_PREFIX + path)

    def paths(self, prefix: str = "") -> list:
        """Indexed paths, optionally limited to one node type such as "shipments/"."""
        return sorted(p for p in self.cache.get(INDEX_KEY, ()) if p.startswith(prefix))

    def _index(self, add=None, discard=None) -> None:
        # Read-modify-write without a lock
        held = set(self.cache.get(INDEX_KEY, ()))
        if add:
            held.add(add)
        if discard:
            held.discard(discard)
        self.cache.set(INDEX_KEY, sorted(held), timeout=None)


def dual_write(primary, mirror, description: str):
    """
    Run the primary write, then the mirror write with its result.

    The primary result is kept even when the mirror write fails: there is no
    rollback. The failure is logged with its stack trace and re-raised as
    MirrorSyncError so the caller sees the divergence.
    """
    result = primary()
    try:
        mirror(result)
    except Exception as exc:
        logger.error("Mirror write failed after primary write: %s", description, exc_info=True)
        raise MirrorSyncError(f"Realtime sync failed: {description}") from exc
    return result
