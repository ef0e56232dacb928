"""
Primary-store adapters.

Thin, single-attempt reads and writes over the shipment and agent tables.
Records come back as plain dicts keyed by field name; ids are strings.
Failures propagate to the caller.
"""

import uuid

from django.db import transaction

from .models import Agent, Feedback, ProofOfDelivery, Shipment, StatusUpdate


def _is_uuid(value) -> bool:
    try:
        uuid.UUID(str(value))
    except (TypeError, ValueError):
        return False
    return True


def _record(row):
    if row is None:
        return None
    row["id"] = str(row["id"])
    return row


class ShipmentStore:

    def create(self, data: dict) -> str:
        # Savepoint so a unique-key clash leaves the surrounding transaction usable
        with transaction.atomic():
            return str(Shipment.objects.create(**data).pk)

    def get(self, shipment_id):
        if not _is_uuid(shipment_id):
            return None
        return _record(Shipment.objects.filter(pk=shipment_id).values().first())

    def all(self) -> list:
        return [_record(row) for row in Shipment.objects.values()]

    def filter_by(self, **lookup) -> list:
        return [_record(row) for row in Shipment.objects.filter(**lookup).values()]

    def for_agent(self, agent_id: str) -> list:
        return self.filter_by(agent_id=agent_id)

    def find_by_tracking_id(self, tracking_id: str):
        return _record(Shipment.objects.filter(tracking_id=tracking_id).values().first())

    def tracking_id_exists(self, tracking_id: str) -> bool:
        return Shipment.objects.filter(tracking_id=tracking_id).exists()

    def update(self, shipment_id, **fields) -> bool:
        if not _is_uuid(shipment_id):
            return False
        rows = Shipment.objects.filter(pk=shipment_id)
        if not fields:
            return rows.exists()
        return rows.update(**fields) > 0

    def delete(self, shipment_id) -> bool:
        if not _is_uuid(shipment_id):
            return False
        deleted, _ = Shipment.objects.filter(pk=shipment_id).delete()
        return deleted > 0

    # ── Append-only subcollections ────────────────────────────────────────────
    def append_update(self, shipment_id, status: str, location=None) -> StatusUpdate:
        return StatusUpdate.objects.create(shipment_id=shipment_id, status=status, location=location)

    def append_proof(self, shipment_id, url: str) -> ProofOfDelivery:
        return ProofOfDelivery.objects.create(shipment_id=shipment_id, url=url)

    def append_feedback(self, shipment_id, rating: int, comments: str) -> Feedback:
        return Feedback.objects.create(shipment_id=shipment_id, rating=rating, comments=comments)

    def updates(self, shipment_id) -> list:
        if not _is_uuid(shipment_id):
            return []
        return list(StatusUpdate.objects.filter(shipment_id=shipment_id).values("status", "location", "at"))

    def proofs(self, shipment_id) -> list:
        if not _is_uuid(shipment_id):
            return []
        return list(ProofOfDelivery.objects.filter(shipment_id=shipment_id).values("url", "at"))

    def feedback(self, shipment_id) -> list:
        if not _is_uuid(shipment_id):
            return []
        return list(Feedback.objects.filter(shipment_id=shipment_id).values("rating", "comments", "at"))


class AgentStore:

    def create(self, agent_id: str, name: str, email: str, status=Agent.Status.FREE) -> dict:
        Agent.objects.create(id=agent_id, name=name, email=email, status=status)
        return self.get(agent_id)

    def get(self, agent_id):
        return Agent.objects.filter(pk=agent_id).values().first()

    def all(self) -> list:
        return list(Agent.objects.values())

    def update(self, agent_id, **fields) -> bool:
        return Agent.objects.filter(pk=agent_id).update(**fields) > 0

    def delete(self, agent_id) -> bool:
        deleted, _ = Agent.objects.filter(pk=agent_id).delete()
        return deleted > 0
