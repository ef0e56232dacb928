"""
ShipTrack Load Test — Locust Script
====================================
Simulates a festive-season peak: many customers polling tracking pages while
agents push status updates and an admin creates shipments.

Usage:
    python manage.py seed_demo_data
    locust -f locust_tests/locustfile.py --host=http://localhost:8000 \
           --users=1000 --spawn-rate=50 --run-time=5m --headless

Target: p95 under 300ms on the tracking read paths at 1,000 users.
"""

import random
from locust import HttpUser, task, between, events
from locust.exception import StopUser

# Accounts created by `manage.py seed_demo_data`
ADMIN_EMAIL    = "admin@shiptrack.local"
AGENT_EMAILS   = ["ravi.agent@shiptrack.local", "priya.agent@shiptrack.local"]
DEMO_PASSWORD  = "demo1234"

STATUSES = ["picked_up", "in_transit", "out_for_delivery", "delayed"]
CITIES   = [
    (12.9716, 77.5946, "Bengaluru"),
    (17.3850, 78.4867, "Hyderabad"),
    (13.0827, 80.2707, "Chennai"),
    (19.0760, 72.8777, "Mumbai"),
]


def _login(client, email):
    resp = client.post("/api/auth/login/", json={"email": email, "password": DEMO_PASSWORD},
                       name="/api/auth/login/")
    if resp.status_code != 200:
        raise StopUser()
    return resp.json()["access"]


class TrackingCustomer(HttpUser):
    """Anonymous customer refreshing the tracking page. The bulk of traffic."""
    wait_time = between(1, 3)
    weight    = 8
    tracking_ids = []

    def on_start(self):
        if not TrackingCustomer.tracking_ids:
            token = _login(self.client, ADMIN_EMAIL)
            resp = self.client.get("/api/shipments/", headers={"Authorization": f"Bearer {token}"},
                                   name="/api/shipments/")
            TrackingCustomer.tracking_ids = [s["tracking_id"] for s in resp.json().get("results", [])]
        if not TrackingCustomer.tracking_ids:
            raise StopUser()

    @task(5)
    def live_snapshot(self):
        code = random.choice(self.tracking_ids)
        self.client.get(f"/api/tracking/{code}/live/", name="/api/tracking/[id]/live/")

    @task(3)
    def track(self):
        code = random.choice(self.tracking_ids)
        self.client.get(f"/api/track/{code}/", name="/api/track/[id]/")

    @task(1)
    def health_check(self):
        self.client.get("/api/health/deep/", name="/api/health/deep/")


class DeliveryAgent(HttpUser):
    """Agent walking assigned shipments through their statuses."""
    wait_time = between(2, 6)
    weight    = 2

    def on_start(self):
        self.token = _login(self.client, random.choice(AGENT_EMAILS))
        resp = self.client.get("/api/shipments/", headers=self._h(), name="/api/shipments/")
        self.shipment_ids = [s["id"] for s in resp.json().get("results", [])]
        if not self.shipment_ids:
            raise StopUser()

    def _h(self):
        return {"Authorization": f"Bearer {self.token}"}

    @task(3)
    def update_status(self):
        lat, lng, city = random.choice(CITIES)
        self.client.post(
            f"/api/shipments/{random.choice(self.shipment_ids)}/status/",
            json={"status": random.choice(STATUSES), "location": {"lat": lat, "lng": lng, "address": city}},
            headers=self._h(),
            name="/api/shipments/[id]/status/",
        )

    @task(1)
    def my_shipments(self):
        self.client.get("/api/shipments/", headers=self._h(), name="/api/shipments/")


class ControlTowerOperator(HttpUser):
    """Admin creating shipments and watching the dashboard (fewer, heavier)."""
    wait_time = between(3, 8)
    weight    = 1

    def on_start(self):
        self.token = _login(self.client, ADMIN_EMAIL)

    def _h(self):
        return {"Authorization": f"Bearer {self.token}"}

    @task(2)
    def dashboard(self):
        self.client.get("/api/admin/dashboard/summary/", headers=self._h(), name="/api/admin/dashboard/")

    @task(1)
    def create_shipment(self):
        n = random.randint(1000, 9999)
        self.client.post(
            "/api/shipments/",
            json={
                "sender_name":      f"Load Sender {n}",
                "receiver_name":    f"Load Receiver {n}",
                "pickup_address":   random.choice(CITIES)[2],
                "delivery_address": random.choice(CITIES)[2],
                "contact_number":   f"98{random.randint(10000000, 99999999)}",
            },
            headers=self._h(),
            name="/api/shipments/ [create]",
        )


# ── Custom events for Locust reporting ────────────────────────────────────────
@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    print("\n=== ShipTrack Load Test Complete ===")
    stats = environment.stats.total
    print(f"Total requests:      {stats.num_requests}")
    print(f"Failures:            {stats.num_failures}")
    print(f"Avg response time:   {stats.avg_response_time:.0f}ms")
    print(f"95th percentile:     {stats.get_response_time_percentile(0.95):.0f}ms")
    print(f"Requests/sec:        {stats.current_rps:.1f}")
    if stats.num_failures / max(stats.num_requests, 1) > 0.01:
        print("⚠ FAILURE RATE > 1%")
    else:
        print("✓ System stable under load")
