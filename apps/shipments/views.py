"""Shipment, customer tracking and agent API views."""

import logging
from rest_framework import generics, status, permissions
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema
from django_filters.rest_framework import DjangoFilterBackend

from apps.authentication.accounts import AccountError
from apps.authentication.profiles import role_of
from apps.geocoding.connectors import NominatimConnector
from .exceptions import InvalidTransition, ImmutableFieldError, MirrorSyncError
from .models import Shipment
from .service import LifecycleCoordinator
from . import serializers as sz

logger = logging.getLogger("shiptrack.shipments")
coordinator = LifecycleCoordinator()
geocoder    = NominatimConnector()


class LifecycleAPIView(APIView):
    """Maps lifecycle errors onto HTTP responses."""

    def handle_exception(self, exc):
        if isinstance(exc, MirrorSyncError):
            return Response({"error": "Realtime sync failed."}, status=status.HTTP_502_BAD_GATEWAY)
        if isinstance(exc, (InvalidTransition, ImmutableFieldError)):
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return super().handle_exception(exc)


# ── GET/POST /api/shipments/ ──────────────────────────────────────────────────
@extend_schema(tags=["Shipments"], summary="List shipments (admin: all, agent: assigned) or create one")
class ShipmentListCreateView(LifecycleAPIView, generics.ListAPIView):
    serializer_class   = sz.ShipmentSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends    = [DjangoFilterBackend]
    filterset_fields   = ["status", "agent_id"]

    def get_queryset(self):
        role = role_of(self.request.user)
        if role == "admin":
            return Shipment.objects.all()
        if role == "agent":
            return Shipment.objects.filter(agent_id=str(self.request.user.pk))
        return Shipment.objects.none()

    def list(self, request, *args, **kwargs):
        if role_of(request.user) == "customer":
            return Response({"error": "Customers track shipments by tracking ID."}, status=403)
        return super().list(request, *args, **kwargs)

    @extend_schema(request=sz.ShipmentCreateSerializer, responses=sz.ShipmentSerializer)
    def post(self, request):
        if role_of(request.user) != "admin":
            return Response({"error": "Admin only."}, status=403)
        ser = sz.ShipmentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        shipment_id = coordinator.create_shipment(ser.validated_data)
        record = coordinator.shipments.get(shipment_id)
        return Response(sz.ShipmentSerializer(record).data, status=status.HTTP_201_CREATED)


# ── GET/PATCH/DELETE /api/shipments/{id}/ ─────────────────────────────────────
@extend_schema(tags=["Shipments"], summary="Retrieve, edit or delete a shipment")
class ShipmentDetailView(LifecycleAPIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        role   = role_of(request.user)
        record = coordinator.shipments.get(pk)
        if record is None:
            return Response({"error": "Shipment not found."}, status=404)
        if role == "customer" or (role == "agent" and record.get("agent_id") != str(request.user.pk)):
            return Response({"error": "Not permitted."}, status=403)
        return Response(sz.ShipmentSerializer(record).data)

    @extend_schema(request=sz.ShipmentEditSerializer, responses=sz.ShipmentSerializer)
    def patch(self, request, pk):
        if role_of(request.user) != "admin":
            return Response({"error": "Admin only."}, status=403)
        current = coordinator.shipments.get(pk)
        if current is None:
            return Response({"error": "Shipment not found."}, status=404)
        ser = sz.ShipmentEditSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        fresh = coordinator.edit_shipment(pk, current["tracking_id"], ser.validated_data)
        if fresh is None:
            return Response({"error": "Shipment not found."}, status=404)
        return Response(sz.ShipmentSerializer(fresh).data)

    def delete(self, request, pk):
        if role_of(request.user) != "admin":
            return Response({"error": "Admin only."}, status=403)
        coordinator.delete_shipment(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


def _agent_may_touch(request, record) -> bool:
    role = role_of(request.user)
    if role == "admin":
        return True
    return role == "agent" and record.get("agent_id") == str(request.user.pk)


# ── POST /api/shipments/{id}/status/ ──────────────────────────────────────────
@extend_schema(tags=["Shipments"], summary="Agent status update with optional location",
               request=sz.StatusChangeSerializer, responses=sz.ShipmentSerializer)
class ShipmentStatusView(LifecycleAPIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        record = coordinator.shipments.get(pk)
        if record is None:
            return Response({"error": "Shipment not found."}, status=404)
        if not _agent_may_touch(request, record):
            return Response({"error": "Not assigned to this shipment."}, status=403)

        ser = sz.StatusChangeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        location = ser.validated_data.get("location")
        updated  = coordinator.update_status(
            pk, ser.validated_data["status"], dict(location) if location else None,
        )
        if updated is None:
            return Response({"error": "Shipment not found."}, status=404)
        return Response(sz.ShipmentSerializer(updated).data)


# ── POST /api/shipments/{id}/proof/ ───────────────────────────────────────────
@extend_schema(tags=["Shipments"], summary="Upload proof of delivery (marks the shipment delivered)",
               request={"multipart/form-data": sz.ProofUploadSerializer})
class ProofUploadView(LifecycleAPIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes     = [MultiPartParser, FormParser]

    def post(self, request, pk):
        record = coordinator.shipments.get(pk)
        if record is None:
            return Response({"error": "Shipment not found."}, status=404)
        if not _agent_may_touch(request, record):
            return Response({"error": "Not assigned to this shipment."}, status=403)

        ser = sz.ProofUploadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        url = coordinator.upload_proof(pk, ser.validated_data["proof"])
        return Response({"url": url, "status": Shipment.Status.DELIVERED}, status=status.HTTP_201_CREATED)


# ── GET /api/shipments/{id}/updates/ ──────────────────────────────────────────
@extend_schema(tags=["Shipments"], summary="Status audit trail, proofs and feedback for a shipment")
class ShipmentHistoryView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        if role_of(request.user) == "customer":
            return Response({"error": "Not permitted."}, status=403)
        store  = coordinator.shipments
        record = store.get(pk)
        if record is None:
            return Response({"error": "Shipment not found."}, status=404)
        if not _agent_may_touch(request, record):
            return Response({"error": "Not assigned to this shipment."}, status=403)
        return Response({
            "updates":  sz.StatusUpdateSerializer(store.updates(pk), many=True).data,
            "proofs":   sz.ProofSerializer(store.proofs(pk), many=True).data,
            "feedback": sz.FeedbackSerializer(store.feedback(pk), many=True).data,
        })


# ── GET /api/shipments/{id}/route/ ────────────────────────────────────────────
@extend_schema(tags=["Shipments"], summary="Geocoded pickup and delivery points")
class ShipmentRouteView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        record = coordinator.shipments.get(pk)
        if record is None:
            return Response({"error": "Shipment not found."}, status=404)
        if role_of(request.user) == "customer":
            return Response({"error": "Not permitted."}, status=403)
        return Response({
            "tracking_id": record["tracking_id"],
            "pickup":      geocoder.geocode(record["pickup_address"]),
            "delivery":    geocoder.geocode(record["delivery_address"]),
        })


# ── GET /api/track/{tracking_id}/ ─────────────────────────────────────────────
@extend_schema(tags=["Tracking"], summary="Customer lookup by tracking ID")
class TrackShipmentView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, tracking_id):
        record = coordinator.find_by_tracking_id(tracking_id.strip())
        if record is None:
            return Response({"error": "Shipment not found."}, status=404)
        data = sz.ShipmentSerializer(record).data
        data["updates"] = sz.StatusUpdateSerializer(
            coordinator.shipments.updates(record["id"]), many=True,
        ).data
        return Response(data)


# ── POST /api/track/{tracking_id}/feedback/ ───────────────────────────────────
@extend_schema(tags=["Tracking"], summary="Customer feedback on a shipment",
               request=sz.FeedbackSerializer, responses=sz.FeedbackSerializer)
class FeedbackView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request, tracking_id):
        record = coordinator.find_by_tracking_id(tracking_id)
        if record is None:
            return Response({"error": "Shipment not found."}, status=404)
        ser = sz.FeedbackSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        feedback = coordinator.submit_feedback(
            record["id"], ser.validated_data["rating"], ser.validated_data.get("comments", ""),
        )
        return Response(sz.FeedbackSerializer(feedback).data, status=status.HTTP_201_CREATED)


# ── GET/POST /api/agents/ ─────────────────────────────────────────────────────
@extend_schema(tags=["Agents"], summary="List agents or create one (account + agent record)")
class AgentListCreateView(LifecycleAPIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(responses=sz.AgentSerializer(many=True))
    def get(self, request):
        if role_of(request.user) != "admin":
            return Response({"error": "Admin only."}, status=403)
        return Response(sz.AgentSerializer(coordinator.list_agents(), many=True).data)

    @extend_schema(request=sz.AgentCreateSerializer, responses=sz.AgentSerializer)
    def post(self, request):
        if role_of(request.user) != "admin":
            return Response({"error": "Admin only."}, status=403)
        ser = sz.AgentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            agent = coordinator.create_agent(**ser.validated_data)
        except AccountError:
            return Response({"error": "Agent account could not be created."}, status=400)
        return Response(sz.AgentSerializer(agent).data, status=status.HTTP_201_CREATED)


# ── DELETE /api/agents/{id}/ ──────────────────────────────────────────────────
@extend_schema(tags=["Agents"], summary="Delete an agent record (the login account is kept)")
class AgentDetailView(LifecycleAPIView):
    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, agent_id):
        if role_of(request.user) != "admin":
            return Response({"error": "Admin only."}, status=403)
        coordinator.delete_agent(agent_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
