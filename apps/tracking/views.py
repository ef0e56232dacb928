"""
Live tracking REST view.
Reads the realtime mirror, not the primary store: this is the fast path the
tracking page polls when it cannot hold a WebSocket open.
"""

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from drf_spectacular.utils import extend_schema

from .mirror import RealtimeMirror, shipment_path

mirror = RealtimeMirror()


@extend_schema(tags=["Tracking"], summary="Latest mirrored snapshot for a tracking ID")
class LiveTrackingView(APIView):
    """GET /api/tracking/{tracking_id}/live/"""
    permission_classes = [AllowAny]

    def get(self, request, tracking_id):
        snapshot = mirror.get(shipment_path(tracking_id))
        if snapshot is None:
            return Response({"error": "Not found"}, status=404)
        return Response(snapshot)
