"""
Management command: seed a demo admin, two agents and sample shipments.

Usage:
    python manage.py seed_demo_data [--admin-email admin@shiptrack.local] [--password demo1234]

Everything goes through the lifecycle coordinator so the realtime mirror is
populated along with the primary store. Re-running skips accounts that
already exist.
"""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from apps.authentication.accounts import AccountDirectory
from apps.authentication.models import Profile
from apps.shipments.models import Agent
from apps.shipments.service import LifecycleCoordinator


AGENTS = [
    ("Ravi Kumar",   "ravi.agent@shiptrack.local"),
    ("Priya Sharma", "priya.agent@shiptrack.local"),
]

SHIPMENTS = [
    # sender,          receiver,         pickup,                         delivery,                        phone
    ("Asha Traders",   "Vikram Rao",     "MG Road, Bengaluru",           "Banjara Hills, Hyderabad",      "9876543210"),
    ("Kerala Spices",  "Meera Iyer",     "Fort Kochi, Kochi",            "T. Nagar, Chennai",             "9812345678"),
    ("Delhi Textiles", "Arjun Mehta",    "Chandni Chowk, Delhi",         "Andheri East, Mumbai",          "9900112233"),
]


class Command(BaseCommand):
    help = "Seed a demo admin, agents and shipments"

    def add_arguments(self, parser):
        parser.add_argument("--admin-email", default="admin@shiptrack.local")
        parser.add_argument("--password", default="demo1234")

    def handle(self, *args, **options):
        accounts    = AccountDirectory()
        coordinator = LifecycleCoordinator(accounts=accounts)
        password    = options["password"]
        Account     = get_user_model()

        admin_email = options["admin_email"]
        if not Account.objects.filter(email__iexact=admin_email).exists():
            admin = accounts.create_account(admin_email, password)
            accounts.update_display_name(admin, "Demo Admin")
            accounts.save_profile(admin, "Demo Admin", Profile.Role.ADMIN)
            self.stdout.write(f"Created admin {admin_email}")

        agent_ids = []
        for name, email in AGENTS:
            existing = Account.objects.filter(email__iexact=email).first()
            if existing and Agent.objects.filter(pk=str(existing.pk)).exists():
                agent_ids.append(str(existing.pk))
                continue
            if existing:
                self.stdout.write(self.style.WARNING(f"{email} exists without an agent record; skipped"))
                continue
            agent = coordinator.create_agent(name, email, password)
            agent_ids.append(agent["id"])
            self.stdout.write(f"Created agent {email}")

        created = 0
        for i, (sender, receiver, pickup, delivery, phone) in enumerate(SHIPMENTS):
            if coordinator.shipments.filter_by(sender_name=sender, receiver_name=receiver):
                continue
            coordinator.create_shipment({
                "sender_name":      sender,
                "receiver_name":    receiver,
                "pickup_address":   pickup,
                "delivery_address": delivery,
                "contact_number":   phone,
                # Last shipment stays unassigned
                "agent_id":         agent_ids[i] if i < len(agent_ids) else None,
            })
            created += 1

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {len(agent_ids)} agents and {created} shipments."
        ))
