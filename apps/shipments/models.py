"""
Shipment models.
Shipment and Agent are the primary records; StatusUpdate, ProofOfDelivery and
Feedback are append-only subcollections that outlive their shipment.
"""

import uuid
from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator


class Agent(models.Model):
    """Delivery agent record. id is the backing account id."""

    class Status(models.TextChoices):
        FREE = "free", "Free"
        BUSY = "busy", "Busy"

    id     = models.CharField(primary_key=True, max_length=64)
    name   = models.CharField(max_length=120)
    email  = models.EmailField()
    status = models.CharField(max_length=4, choices=Status.choices, default=Status.FREE)

    class Meta:
        ordering = ["name"]
        indexes  = [models.Index(fields=["status"], name="shipments_agent_status_idx")]

    def __str__(self):
        return f"{self.name} [{self.status}]"


class Shipment(models.Model):
    """Core shipment record."""

    class Status(models.TextChoices):
        CREATED          = "created",          "Created"
        PICKED_UP        = "picked_up",        "Picked Up"
        IN_TRANSIT       = "in_transit",       "In Transit"
        OUT_FOR_DELIVERY = "out_for_delivery", "Out for Delivery"
        DELIVERED        = "delivered",        "Delivered"
        DELAYED          = "delayed",          "Delayed"

    id               = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tracking_id      = models.CharField(max_length=32, unique=True)
    sender_name      = models.CharField(max_length=120)
    receiver_name    = models.CharField(max_length=120)
    pickup_address   = models.CharField(max_length=255)
    delivery_address = models.CharField(max_length=255)
    contact_number   = models.CharField(max_length=20)
    customer_email   = models.EmailField(blank=True)
    # Plain reference: agents are deleted without touching their shipments
    agent_id         = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    status           = models.CharField(max_length=16, choices=Status.choices, default=Status.CREATED)
    last_location    = models.JSONField(null=True, blank=True)   # {"lat", "lng", "address"?}
    pickup_date           = models.DateField(null=True, blank=True)
    expected_delivery_date = models.DateField(null=True, blank=True)
    created_at       = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes  = [
            models.Index(fields=["status"], name="shipments_status_idx"),
            models.Index(fields=["created_at"], name="shipments_created_idx"),
        ]

    def __str__(self):
        return f"{self.tracking_id} [{self.status}]"


class StatusUpdate(models.Model):
    """Immutable audit trail — one row per status change made by an agent."""
    shipment = models.ForeignKey(Shipment, on_delete=models.DO_NOTHING, db_constraint=False,
                                 related_name="updates")
    status   = models.CharField(max_length=16, choices=Shipment.Status.choices)
    location = models.JSONField(null=True, blank=True)
    at       = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["at", "id"]


class ProofOfDelivery(models.Model):
    shipment = models.ForeignKey(Shipment, on_delete=models.DO_NOTHING, db_constraint=False,
                                 related_name="proofs")
    url      = models.CharField(max_length=500)
    at       = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["at", "id"]
        verbose_name_plural = "proofs of delivery"


class Feedback(models.Model):
    shipment = models.ForeignKey(Shipment, on_delete=models.DO_NOTHING, db_constraint=False,
                                 related_name="feedback")
    rating   = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comments = models.TextField(blank=True)
    at       = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["at", "id"]
        verbose_name_plural = "feedback"
