"""Shipment and agent serializers."""

from rest_framework import serializers
from .models import Agent, Shipment, StatusUpdate, ProofOfDelivery, Feedback


class LocationSerializer(serializers.Serializer):
    lat     = serializers.FloatField(min_value=-90, max_value=90)
    lng     = serializers.FloatField(min_value=-180, max_value=180)
    address = serializers.CharField(required=False, allow_blank=True)


class AgentSerializer(serializers.ModelSerializer):
    class Meta:
        model  = Agent
        fields = ["id", "name", "email", "status"]


class AgentCreateSerializer(serializers.Serializer):
    name     = serializers.CharField(max_length=120)
    email    = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)


class StatusUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model  = StatusUpdate
        fields = ["status", "location", "at"]


class ProofSerializer(serializers.ModelSerializer):
    class Meta:
        model  = ProofOfDelivery
        fields = ["url", "at"]


class FeedbackSerializer(serializers.ModelSerializer):
    class Meta:
        model  = Feedback
        fields = ["rating", "comments", "at"]
        read_only_fields = ["at"]
        extra_kwargs = {"comments": {"required": False, "default": ""}}


class ShipmentSerializer(serializers.ModelSerializer):
    """Read representation; works on model instances and store dicts alike."""

    class Meta:
        model  = Shipment
        fields = [
            "id", "tracking_id", "sender_name", "receiver_name",
            "pickup_address", "delivery_address", "contact_number",
            "customer_email", "agent_id", "status", "last_location",
            "pickup_date", "expected_delivery_date", "created_at",
        ]


class _ShipmentWriteSerializer(serializers.ModelSerializer):
    last_location = LocationSerializer(required=False, allow_null=True)

    def validate_agent_id(self, value):
        if value and not Agent.objects.filter(pk=value).exists():
            raise serializers.ValidationError("Unknown agent.")
        return value

    def validate(self, data):
        pickup   = data.get("pickup_date")
        expected = data.get("expected_delivery_date")
        if pickup and expected and expected < pickup:
            raise serializers.ValidationError(
                {"expected_delivery_date": "Cannot be before the pickup date."}
            )
        if data.get("last_location") is not None:
            data["last_location"] = dict(data["last_location"])
        return data


class ShipmentCreateSerializer(_ShipmentWriteSerializer):
    class Meta:
        model  = Shipment
        fields = [
            "tracking_id", "sender_name", "receiver_name",
            "pickup_address", "delivery_address", "contact_number",
            "customer_email", "agent_id", "last_location",
            "pickup_date", "expected_delivery_date",
        ]
        extra_kwargs = {"tracking_id": {"required": False}}


class ShipmentEditSerializer(_ShipmentWriteSerializer):
    # Declared explicitly so the model's unique validator does not run on edits
    tracking_id = serializers.CharField(max_length=32, required=False)

    class Meta:
        model  = Shipment
        fields = [
            "tracking_id", "sender_name", "receiver_name",
            "pickup_address", "delivery_address", "contact_number",
            "customer_email", "agent_id", "status", "last_location",
            "pickup_date", "expected_delivery_date",
        ]


class StatusChangeSerializer(serializers.Serializer):
    status   = serializers.ChoiceField(choices=Shipment.Status.choices)
    location = LocationSerializer(required=False, allow_null=True)


class ProofUploadSerializer(serializers.Serializer):
    proof = serializers.FileField()
