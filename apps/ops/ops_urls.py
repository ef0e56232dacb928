from django.urls import path
from .views import MetricsView, MirrorRebuildView

urlpatterns = [
    path("metrics/",         MetricsView.as_view(),       name="ops-metrics"),
    path("mirror/rebuild/",  MirrorRebuildView.as_view(), name="ops-mirror-rebuild"),
]
