"""Celery tasks for the realtime mirror."""

import logging
from celery import shared_task

logger = logging.getLogger("shiptrack.tasks")


@shared_task
def rebuild_mirror():
    """
    Rewrite every shipment and agent snapshot from the primary store, then
    remove indexed nodes that no longer have a primary record.
    Operator-triggered (ops endpoint or admin shell) after a mirror outage;
    lifecycle operations never enqueue it.
    """
    from apps.shipments.stores import AgentStore, ShipmentStore
    from apps.tracking.mirror import (
        RealtimeMirror, agent_path, project_agent, project_shipment, shipment_path,
    )

    mirror = RealtimeMirror()
    written = set()
    shipments = ShipmentStore().all()
    for record in shipments:
        path = shipment_path(record["tracking_id"])
        mirror.set(path, project_shipment(record))
        written.add(path)
    agents = AgentStore().all()
    for record in agents:
        path = agent_path(record["id"])
        mirror.set(path, project_agent(record))
        written.add(path)

    stale = [p for p in mirror.paths() if p not in written]
    for path in stale:
        mirror.remove(path)

    logger.info("Mirror rebuilt: %d shipments, %d agents, %d stale nodes pruned",
                len(shipments), len(agents), len(stale))
    return {"shipments": len(shipments), "agents": len(agents), "pruned": len(stale)}
