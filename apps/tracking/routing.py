"""WebSocket URL routing for tracking."""
from django.urls import re_path
from .consumers import ShipmentTrackingConsumer

websocket_urlpatterns = [
    re_path(r"^ws/tracking/(?P<tracking_id>[A-Za-z0-9\-]+)/$", ShipmentTrackingConsumer.as_asgi()),
]
