"""
Live shipment tracking over WebSocket.

A client connects to ws/tracking/<tracking_id>/ and receives the current
mirror snapshot, then every subsequent mirror write for that shipment.
The socket is read-only: agents post updates through the REST API, which
writes the mirror, which fans out here.
"""

import logging
from asgiref.sync import sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .mirror import RealtimeMirror, group_name, shipment_path

logger = logging.getLogger("shiptrack.tracking")


class ShipmentTrackingConsumer(AsyncJsonWebsocketConsumer):

    async def connect(self):
        self.tracking_id = self.scope["url_route"]["kwargs"]["tracking_id"]
        self.path        = shipment_path(self.tracking_id)
        self.group_name  = group_name(self.path)

        snapshot = await sync_to_async(RealtimeMirror().get)(self.path)
        if snapshot is None:
            # Close after accept; a rejected handshake reaches the client as HTTP 403, not 4004
            await self.accept()
            await self.close(code=4004)
            logger.info("WS closed: no snapshot for %s", self.tracking_id)
            return

        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        await self.send_json({"event": "snapshot", "snapshot": snapshot})
        logger.info("WS connected: %s", self.tracking_id)

    async def disconnect(self, code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
        logger.info("WS disconnected: %s (code=%s)", getattr(self, "tracking_id", "?"), code)

    async def receive_json(self, content, **kwargs):
        # Read-only stream; client messages are ignored
        pass

    async def mirror_update(self, event):
        await self.send_json({"event": "update", "snapshot": event["snapshot"]})

    async def mirror_remove(self, event):
        await self.send_json({"event": "removed", "tracking_id": self.tracking_id})
        await self.close()
