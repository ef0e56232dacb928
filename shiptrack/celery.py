"""
Celery application.
Only operator-triggered maintenance runs here; lifecycle operations never enqueue work.
"""

import os
from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "shiptrack.settings")

app = Celery("shiptrack")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
