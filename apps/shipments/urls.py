from django.urls import path
from .views import (
    ShipmentListCreateView, ShipmentDetailView, ShipmentStatusView, ProofUploadView,
    ShipmentHistoryView, ShipmentRouteView, TrackShipmentView, FeedbackView,
    AgentListCreateView, AgentDetailView,
)

urlpatterns = [
    path("shipments/",                     ShipmentListCreateView.as_view(), name="shipment-list"),
    path("shipments/<str:pk>/",            ShipmentDetailView.as_view(),     name="shipment-detail"),
    path("shipments/<str:pk>/status/",     ShipmentStatusView.as_view(),     name="shipment-status"),
    path("shipments/<str:pk>/proof/",      ProofUploadView.as_view(),        name="shipment-proof"),
    path("shipments/<str:pk>/updates/",    ShipmentHistoryView.as_view(),    name="shipment-updates"),
    path("shipments/<str:pk>/route/",      ShipmentRouteView.as_view(),      name="shipment-route"),
    path("track/<str:tracking_id>/",          TrackShipmentView.as_view(),   name="track"),
    path("track/<str:tracking_id>/feedback/", FeedbackView.as_view(),        name="track-feedback"),
    path("agents/",                        AgentListCreateView.as_view(),    name="agent-list"),
    path("agents/<str:agent_id>/",         AgentDetailView.as_view(),        name="agent-detail"),
]
