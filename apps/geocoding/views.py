"""Geocoding proxy view."""

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .connectors import NominatimConnector

geocoder = NominatimConnector()


# ── GET /api/geo/search/?q= ───────────────────────────────────────────────────
@extend_schema(
    tags=["Geocoding"],
    summary="Resolve an address to coordinates",
    parameters=[OpenApiParameter("q", str, description="Free-text address")],
)
class GeocodeSearchView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        q = request.query_params.get("q", "").strip()
        if not q:
            return Response({"error": "Query parameter 'q' is required."}, status=400)
        result = geocoder.geocode(q)
        if result is None:
            return Response({"error": "Location not found."}, status=404)
        return Response(result)
