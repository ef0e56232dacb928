from django.contrib import admin
from .models import Agent, Shipment, StatusUpdate, ProofOfDelivery, Feedback


@admin.register(Agent)
class AgentAdmin(admin.ModelAdmin):
    list_display  = ("name", "email", "status")
    list_filter   = ("status",)
    search_fields = ("name", "email")


@admin.register(Shipment)
class ShipmentAdmin(admin.ModelAdmin):
    list_display  = ("tracking_id", "status", "sender_name", "receiver_name", "agent_id", "created_at")
    list_filter   = ("status",)
    search_fields = ("tracking_id", "sender_name", "receiver_name", "customer_email")
    readonly_fields = ("id", "tracking_id", "created_at")
    ordering      = ("-created_at",)


@admin.register(StatusUpdate)
class StatusUpdateAdmin(admin.ModelAdmin):
    list_display  = ("shipment_id", "status", "at")
    list_filter   = ("status",)
    readonly_fields = ("at",)


@admin.register(ProofOfDelivery)
class ProofOfDeliveryAdmin(admin.ModelAdmin):
    list_display  = ("shipment_id", "url", "at")
    readonly_fields = ("at",)


@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    list_display  = ("shipment_id", "rating", "at")
    list_filter   = ("rating",)
    readonly_fields = ("at",)
