"""
Locust Load Test Suite

Tokens are minted locally with the identity provider's shared secret
(JWT_SECRET), so the service under test must run with the same value.

Run scenarios:
  locust -f locustfile.py --tags subscriptions  # Weekly fan-out writes
  locust -f locustfile.py --tags throughput     # Calendar cache
  locust -f locustfile.py --tags edge           # Bad input
  locust -f locustfile.py                       # All tests
"""

import os
import random
from datetime import date, timedelta

import jwt
from locust import HttpUser, task, between, tag, events

JWT_SECRET = os.environ.get("JWT_SECRET", "identity-provider-shared-secret")

# Shared state
GROUP_IDS = []


def make_headers(role: str = "member") -> dict:
    user_id = f"load_{random.randint(10000, 99999)}"
    token = jwt.encode({"sub": user_id, "name": user_id, "role": role}, JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


def random_slot() -> dict:
    day = date.today() + timedelta(days=random.randint(1, 60))
    hour = random.randint(7, 19)
    return {
        "arena": random.choice(["indoor", "outdoor"]),
        "date": day.isoformat(),
        "start_time": f"{hour:02d}:00",
        "end_time": f"{hour + 1:02d}:00",
    }


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"Target: {environment.host}  (tokens signed with JWT_SECRET)")
    print("=" * 60)


class SubscriptionUser(HttpUser):
    """
    TEST 1: Weekly subscriptions - every request fans out to ~13 rows

    Run: locust -f locustfile.py --tags subscriptions -u 50 -r 10 --run-time 60s

    Each 201 should list all weeks; a 207 means some weeks were not stored.
    """
    wait_time = between(0.5, 2)

    def on_start(self):
        self.headers = make_headers()

    @tag("subscriptions")
    @task
    def book_quarter(self):
        slot = random_slot()
        start = date.fromisoformat(slot["date"])
        body = {
            **slot,
            "is_subscription": True,
            "subscription_end_date": (start + timedelta(weeks=12)).isoformat(),
        }
        with self.client.post("/api/v1/bookings/", json=body, headers=self.headers,
                              catch_response=True) as resp:
            if resp.status_code == 201:
                GROUP_IDS.append(resp.json()["group_id"])
                resp.success()
            elif resp.status_code == 207:
                resp.failure(f"Partial subscription: {resp.json().get('failed')}")
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class AdminUser(HttpUser):
    """
    TEST 2: Approval fan-out

    Run alongside SubscriptionUser with a small weight of admins.
    """
    wait_time = between(1, 3)
    weight = 1

    def on_start(self):
        self.headers = make_headers(role="admin")

    @tag("subscriptions")
    @task(3)
    def approve_subscription(self):
        if not GROUP_IDS:
            return
        group_id = GROUP_IDS.pop(0)
        self.client.post(f"/api/v1/admin/bookings/{group_id}/approve",
                         json={"shared_riding": random.random() < 0.3},
                         headers=self.headers,
                         name="/api/v1/admin/bookings/{id}/approve")

    @tag("subscriptions")
    @task(1)
    def pending_queue(self):
        self.client.get("/api/v1/admin/bookings/pending", headers=self.headers)


class ThroughputUser(HttpUser):
    """
    TEST 3: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        self.headers = make_headers()

    @tag("throughput", "read")
    @task(10)
    def calendar_cached(self):
        """A handful of month ranges, so most reads hit the cache."""
        start = date.today().replace(day=1) + timedelta(days=31 * random.randint(0, 2))
        end = start + timedelta(days=30)
        self.client.get(f"/api/v1/bookings/calendar?start={start.isoformat()}&end={end.isoformat()}",
                        headers=self.headers,
                        name="/api/v1/bookings/calendar [cached]")

    @tag("throughput", "read")
    @task(3)
    def notices(self):
        self.client.get("/api/v1/messages/", headers=self.headers)

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 4: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = make_headers()

    def expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def too_short(self):
        with self.client.post("/api/v1/bookings/", json={**random_slot(), "start_time": "10:00", "end_time": "10:15"},
                              headers=self.headers, catch_response=True) as resp:
            self.expect(resp, [422])

    @tag("edge")
    @task
    def subscription_over_a_year(self):
        slot = random_slot()
        end = date.fromisoformat(slot["date"]) + timedelta(weeks=60)
        body = {**slot, "is_subscription": True, "subscription_end_date": end.isoformat()}
        with self.client.post("/api/v1/bookings/", json=body,
                              headers=self.headers, catch_response=True) as resp:
            self.expect(resp, [422])

    @tag("edge")
    @task
    def unknown_booking(self):
        with self.client.delete("/api/v1/bookings/booking_missing", headers=self.headers,
                                catch_response=True) as resp:
            self.expect(resp, [404])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/bookings/", data="not json at all",
                              headers=self.headers, catch_response=True) as resp:
            self.expect(resp, [400, 422])

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/api/v1/bookings/", json=random_slot(),
                              catch_response=True) as resp:
            self.expect(resp, [401])

    @tag("edge")
    @task
    def member_on_admin_route(self):
        with self.client.get("/api/v1/admin/bookings/pending", headers=self.headers,
                             catch_response=True) as resp:
            self.expect(resp, [403])


class RealisticUser(HttpUser):
    """
    TEST 5: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Mostly calendar and notice reads, some single bookings, few deletions.
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = make_headers()
        self.booking_ids = []

    @task(50)
    def browse_calendar(self):
        self.client.get("/api/v1/bookings/calendar", headers=self.headers)

    @task(20)
    def my_bookings(self):
        self.client.get("/api/v1/bookings/", headers=self.headers)

    @task(10)
    def book_single(self):
        resp = self.client.post("/api/v1/bookings/", json=random_slot(), headers=self.headers)
        if resp.status_code == 201:
            self.booking_ids.append(resp.json()["created"][0]["id"])

    @task(3)
    def cancel(self):
        if self.booking_ids:
            booking_id = self.booking_ids.pop()
            self.client.delete(f"/api/v1/bookings/{booking_id}", headers=self.headers,
                               name="/api/v1/bookings/{id}")
