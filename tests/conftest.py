"""Shared fixtures for the ShipTrack test suite."""

import uuid

import pytest


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def make_account(db):
    """Account + profile document. role=None leaves the profile blank."""
    def _make(email=None, role="customer", name="Test User", password="Test@1234", profile=True):
        from apps.authentication.models import Account, Profile
        email = email or f"user-{uuid.uuid4().hex[:8]}@shiptrack.test"
        account = Account.objects.create_user(email=email, password=password, display_name=name)
        if profile:
            Profile.objects.create(account=account, name=name if role else "", role=role or "")
        return account
    return _make


@pytest.fixture
def admin(make_account):
    return make_account(email="admin@shiptrack.test", role="admin", name="Admin Alice")


@pytest.fixture
def customer(make_account):
    return make_account(email="customer@shiptrack.test", role="customer", name="Carol Customer")


@pytest.fixture
def agent_account(make_account):
    """An agent login with its matching agent record (id = account id)."""
    from apps.shipments.models import Agent
    account = make_account(email="dave.agent@shiptrack.test", role="agent", name="Driver Dave")
    Agent.objects.create(id=str(account.pk), name="Driver Dave", email=account.email)
    return account


@pytest.fixture
def make_agent(db):
    """Bare agent record with a readable id such as 'agent-1'."""
    def _make(agent_id, name=None, status="free"):
        from apps.shipments.models import Agent
        return Agent.objects.create(
            id=agent_id, name=name or agent_id.title(),
            email=f"{agent_id}@shiptrack.test", status=status,
        )
    return _make


@pytest.fixture
def agents(make_agent):
    return make_agent("agent-1", "Agent One"), make_agent("agent-2", "Agent Two")


@pytest.fixture
def coordinator(db):
    from apps.shipments.service import LifecycleCoordinator
    return LifecycleCoordinator()


@pytest.fixture
def admin_client(api_client, admin):
    api_client.force_authenticate(user=admin)
    return api_client


@pytest.fixture
def agent_client(agent_account):
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=agent_account)
    return client


@pytest.fixture
def customer_client(customer):
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=customer)
    return client


SHIPMENT_PAYLOAD = {
    "sender_name":      "A",
    "receiver_name":    "B",
    "pickup_address":   "X",
    "delivery_address": "Y",
    "contact_number":   "123",
}


@pytest.fixture
def payload():
    return dict(SHIPMENT_PAYLOAD)
