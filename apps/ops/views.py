"""
Operations views:
  - Deep health check (DB, primary cache, mirror cache)
  - Prometheus-formatted metrics
  - Admin dashboard summary
  - Operator-triggered mirror rebuild
"""

import logging

from django.conf import settings
from django.core.cache import caches
from django.db import connection
from django.db.models import Count
from django.http import HttpResponse
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from drf_spectacular.utils import extend_schema

from apps.authentication.profiles import role_of
from apps.shipments.models import Agent, Shipment

logger = logging.getLogger("shiptrack.ops")


def _counts_by_status(model) -> dict:
    return dict(model.objects.order_by().values_list("status").annotate(c=Count("pk")))


# ── GET /api/health/deep/ ─────────────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Deep health check — database and caches")
class DeepHealthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        checks = {}

        try:
            with connection.cursor() as cur:
                cur.execute("SELECT 1")
            checks["database"] = "ok"
        except Exception as exc:
            logger.error("Health check: database unreachable: %s", exc)
            checks["database"] = f"error: {exc}"

        aliases = {"cache": "default", "mirror": getattr(settings, "MIRROR_CACHE_ALIAS", "default")}
        for name, alias in aliases.items():
            try:
                store = caches[alias]
                store.set("healthcheck", "1", 5)
                checks[name] = "ok" if store.get("healthcheck") == "1" else "miss"
            except Exception as exc:
                logger.error("Health check: %s cache unreachable: %s", name, exc)
                checks[name] = f"error: {exc}"

        overall = "ok" if all(v == "ok" for v in checks.values()) else "degraded"
        return Response({"status": overall, "checks": checks}, status=200 if overall == "ok" else 503)


# ── GET /api/ops/metrics/ ────────────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Prometheus-formatted operational metrics")
class MetricsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        lines = [
            "# HELP shiptrack_shipments_total Shipments by status",
            "# TYPE shiptrack_shipments_total gauge",
        ]
        for status, count in sorted(_counts_by_status(Shipment).items()):
            lines.append(f'shiptrack_shipments_total{{status="{status}"}} {count}')
        lines += [
            "",
            "# HELP shiptrack_agents_total Agents by availability",
            "# TYPE shiptrack_agents_total gauge",
        ]
        for status, count in sorted(_counts_by_status(Agent).items()):
            lines.append(f'shiptrack_agents_total{{status="{status}"}} {count}')
        return HttpResponse("\n".join(lines) + "\n", content_type="text/plain; version=0.0.4")


# ── GET /api/admin/dashboard/summary/ ────────────────────────────────────────
@extend_schema(tags=["Admin"], summary="Control tower — shipment and agent overview")
class DashboardSummaryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if role_of(request.user) != "admin":
            return Response({"error": "Admin only."}, status=403)

        by_status = _counts_by_status(Shipment)
        agents    = _counts_by_status(Agent)
        return Response({
            "total_shipments":     sum(by_status.values()),
            "in_transit":          by_status.get(Shipment.Status.IN_TRANSIT.value, 0),
            "delivered":           by_status.get(Shipment.Status.DELIVERED.value, 0),
            "delayed":             by_status.get(Shipment.Status.DELAYED.value, 0),
            "free_agents":         agents.get(Agent.Status.FREE.value, 0),
            "busy_agents":         agents.get(Agent.Status.BUSY.value, 0),
            "shipments_by_status": by_status,
        })


# ── POST /api/ops/mirror/rebuild/ ────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Rebuild the realtime mirror from the primary store (Admin only)")
class MirrorRebuildView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        if role_of(request.user) != "admin":
            return Response({"error": "Admin only."}, status=403)
        from apps.tracking.tasks import rebuild_mirror
        result = rebuild_mirror.delay()
        logger.info("Mirror rebuild queued by %s (task %s)", request.user.email, result.id)
        return Response({"queued": True, "task_id": result.id}, status=202)
