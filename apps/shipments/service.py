"""
LifecycleCoordinator — the central orchestrator.

Every multi-step operation on shipments and agents goes through here:

    create_shipment  →  primary insert  →  mirror snapshot  →  agent busy
    edit_shipment    →  primary patch   →  mirror snapshot  →  free old / busy new
    update_status    →  primary status  →  audit row        →  mirror merge

Writes to the primary store and the realtime mirror are sequential with no
rollback between them (see tracking.mirror.dual_write). Operations run to
completion in the calling request; there is no locking, so concurrent edits
are last-write-wins.
"""

import logging
import os
import random
import string

from django.db import IntegrityError
from django.utils import timezone

from apps.authentication.accounts import AccountDirectory
from apps.authentication.models import Profile
from apps.tracking.mirror import (
    RealtimeMirror, agent_path, dual_write, project_agent, project_shipment, shipment_path,
)
from .exceptions import ImmutableFieldError
from .models import Agent, Shipment
from .storage import ProofStorage
from .stores import AgentStore, ShipmentStore
from .transitions import get_transition_policy

logger = logging.getLogger("shiptrack.lifecycle")

S = Shipment.Status

TRACKING_ID_CHARS = string.ascii_uppercase + string.digits
TRACKING_ID_ATTEMPTS = 5


def generate_tracking_id() -> str:
    suffix = "".join(random.choices(TRACKING_ID_CHARS, k=5))
    return f"SHIP-{suffix}-{timezone.localdate().year}"


class LifecycleCoordinator:
    """
    Shipment and agent lifecycle orchestration.
    Dependencies are injected so they can be swapped in tests.
    """

    def __init__(
        self,
        shipment_store=None,
        agent_store=None,
        mirror=None,
        proof_storage=None,
        accounts=None,
        transition_policy=None,
    ):
        self.shipments = shipment_store    or ShipmentStore()
        self.agents    = agent_store       or AgentStore()
        self.mirror    = mirror            or RealtimeMirror()
        self.storage   = proof_storage     or ProofStorage()
        self.accounts  = accounts          or AccountDirectory()
        self.policy    = transition_policy or get_transition_policy()

    def _mirror_shipment(self, tracking_id):
        return lambda record: self.mirror.set(shipment_path(tracking_id), project_shipment(record))

    def _unused_tracking_id(self) -> str:
        tracking_id = generate_tracking_id()
        while self.shipments.tracking_id_exists(tracking_id):
            tracking_id = generate_tracking_id()
        return tracking_id

    # ── Shipments ─────────────────────────────────────────────────────────────
    def create_shipment(self, payload: dict) -> str:
        """
        Insert a shipment, mirror it, then mark its agent busy.
        Returns the store-assigned id.
        """
        data = {k: v for k, v in payload.items() if v is not None}
        generated = not data.get("tracking_id")
        if generated:
            data["tracking_id"] = self._unused_tracking_id()
        data["status"] = S.CREATED

        def _insert():
            for attempt in range(1, TRACKING_ID_ATTEMPTS + 1):
                try:
                    shipment_id = self.shipments.create(data)
                except IntegrityError:
                    # A concurrent create took the same generated id between check and insert
                    if not generated or attempt == TRACKING_ID_ATTEMPTS:
                        raise
                    logger.warning("Tracking ID %s taken on insert; regenerating", data["tracking_id"])
                    data["tracking_id"] = self._unused_tracking_id()
                    continue
                return self.shipments.get(shipment_id)

        record = dual_write(
            _insert,
            lambda rec: self.mirror.set(shipment_path(rec["tracking_id"]), project_shipment(rec)),
            f"create shipment {data['tracking_id']}",
        )
        logger.info("Shipment %s created (agent=%s)", record["tracking_id"], record.get("agent_id"))

        if record.get("agent_id"):
            self.set_agent_status(record["agent_id"], Agent.Status.BUSY)
        return record["id"]

    def edit_shipment(self, shipment_id, tracking_id: str, patch: dict):
        """
        Apply a partial update and rewrite the full mirror snapshot from a fresh read.

        Marking a shipment delivered frees the agent it had before the edit;
        assigning a different agent marks the new one busy. Both may fire, in
        that order.
        """
        current = self.shipments.get(shipment_id)
        if current is None:
            logger.info("Edit skipped: shipment %s not found", shipment_id)
            return None

        patch = dict(patch)
        if "tracking_id" in patch:
            if patch["tracking_id"] != current["tracking_id"]:
                raise ImmutableFieldError("tracking_id cannot be changed.")
            del patch["tracking_id"]
        if "status" in patch:
            self.policy.check(current["status"], patch["status"])

        old_agent = current.get("agent_id")
        new_agent = patch.get("agent_id")

        def _apply():
            self.shipments.update(shipment_id, **patch)
            return self.shipments.get(shipment_id)

        fresh = dual_write(_apply, self._mirror_shipment(tracking_id), f"edit shipment {tracking_id}")
        logger.info("Shipment %s edited: %s", tracking_id, sorted(patch))

        if patch.get("status") == S.DELIVERED and old_agent:
            self.set_agent_status(old_agent, Agent.Status.FREE)
        if new_agent and new_agent != old_agent:
            self.set_agent_status(new_agent, Agent.Status.BUSY)
        return fresh

    def update_status(self, shipment_id, status: str, location: dict = None):
        """
        Agent status update: write status + last location, append to the audit
        trail, then overwrite the mirror with the previous snapshot merged with
        the new status and location. Agent availability is left alone.
        """
        current = self.shipments.get(shipment_id)
        if current is None:
            logger.info("Status update skipped: shipment %s not found", shipment_id)
            return None
        self.policy.check(current["status"], status)

        snapshot = project_shipment(current)
        snapshot["status"]        = status
        snapshot["last_location"] = location

        def _apply():
            self.shipments.update(shipment_id, status=status, last_location=location)
            self.shipments.append_update(shipment_id, status, location)
            return {**current, "status": status, "last_location": location}

        record = dual_write(
            _apply,
            lambda _: self.mirror.set(shipment_path(current["tracking_id"]), snapshot),
            f"status {status} for {current['tracking_id']}",
        )
        logger.info("Shipment %s: %s → %s", current["tracking_id"], current["status"], status)
        return record

    def upload_proof(self, shipment_id, file):
        """
        Store a proof-of-delivery file and mark the shipment delivered.

        Unlike update_status this skips the transition policy, writes no
        StatusUpdate row and leaves the mirror untouched.
        """
        current = self.shipments.get(shipment_id)
        if current is None:
            logger.info("Proof upload skipped: shipment %s not found", shipment_id)
            return None

        name = os.path.basename(getattr(file, "name", "") or "") or "proof"
        url  = self.storage.upload(f"pods/{shipment_id}/{name}", file)
        self.shipments.append_proof(shipment_id, url)
        self.shipments.update(shipment_id, status=S.DELIVERED)
        logger.info("Proof of delivery stored for %s", current["tracking_id"])
        return url

    def submit_feedback(self, shipment_id, rating: int, comments: str):
        if self.shipments.get(shipment_id) is None:
            return None
        return self.shipments.append_feedback(shipment_id, rating, comments)

    def delete_shipment(self, shipment_id) -> None:
        """Delete the primary record, then its mirror entry. Missing shipments are a no-op."""
        current = self.shipments.get(shipment_id)
        tracking_id = current["tracking_id"] if current else None
        dual_write(
            lambda: self.shipments.delete(shipment_id),
            lambda _: tracking_id and self.mirror.remove(shipment_path(tracking_id)),
            f"delete shipment {tracking_id or shipment_id}",
        )
        if tracking_id:
            logger.info("Shipment %s deleted", tracking_id)

    # ── Reads ─────────────────────────────────────────────────────────────────
    def list_shipments(self) -> list:
        return self.shipments.all()

    def list_for_agent(self, agent_id: str) -> list:
        return self.shipments.for_agent(agent_id)

    def find_by_tracking_id(self, tracking_id: str):
        return self.shipments.find_by_tracking_id(tracking_id)

    def list_agents(self) -> list:
        return self.agents.all()

    # ── Agents ────────────────────────────────────────────────────────────────
    def create_agent(self, name: str, email: str, password: str) -> dict:
        """Account + display name + agent profile + agent record + mirror snapshot."""
        account = self.accounts.create_account(email, password)
        self.accounts.update_display_name(account, name)
        self.accounts.save_profile(account, name, Profile.Role.AGENT)

        agent_id = str(account.pk)
        record = dual_write(
            lambda: self.agents.create(agent_id, name, email),
            lambda rec: self.mirror.set(agent_path(agent_id), project_agent(rec)),
            f"create agent {agent_id}",
        )
        logger.info("Agent %s created (%s)", agent_id, email)
        return record

    def delete_agent(self, agent_id: str) -> None:
        """Remove the agent record and its mirror entry. The account itself stays."""
        dual_write(
            lambda: self.agents.delete(agent_id),
            lambda _: self.mirror.remove(agent_path(agent_id)),
            f"delete agent {agent_id}",
        )
        logger.info("Agent %s deleted", agent_id)

    def set_agent_status(self, agent_id: str, status: str):
        def _apply():
            if not self.agents.update(agent_id, status=status):
                return None
            return self.agents.get(agent_id)

        def _sync(record):
            if record is not None:
                self.mirror.set(agent_path(agent_id), project_agent(record))

        record = dual_write(_apply, _sync, f"agent {agent_id} → {status}")
        if record is None:
            logger.warning("Agent %s not found; status %s not applied", agent_id, status)
        return record
