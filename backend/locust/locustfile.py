"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Same desk, same dates, many users
  locust -f locustfile.py --tags throughput   # Previews and cached analytics
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests

Set ADMIN_SECRET in the environment if the API has ADMIN_PASSWORD configured.
"""

import os
import random
import string
from datetime import date, timedelta

from locust import HttpUser, task, between, tag, events

ADMIN_HEADERS = {"X-Admin-Secret": os.environ.get("ADMIN_SECRET", "")}

CONTESTED_SEAT_ID = "LOAD-CONTESTED"
SEAT_IDS = [f"LOAD-{n:02d}" for n in range(1, 21)]
# Far enough out that load runs do not collide with real bookings
BASE_DATE = date.today() + timedelta(days=400)


def random_user_name():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


def random_day(spread: int = 60) -> str:
    return (BASE_DATE + timedelta(days=random.randint(0, spread))).isoformat()


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("SETUP: Creating load test desks...")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - every user books the same desk for the same week

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT date, COUNT(*) FROM bookings WHERE seat_id = 'LOAD-CONTESTED' GROUP BY date;
    Every count should be 1
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        # 201 for the first user, 409 for the rest
        self.client.post(
            "/api/v1/seats/",
            json={"id": CONTESTED_SEAT_ID, "x": 50, "y": 50, "label": "Contested desk"},
            headers=ADMIN_HEADERS,
            name="/api/v1/seats/ [setup]",
        )

    @tag("concurrency")
    @task
    def book_contested_week(self):
        """All users race for the same five days; only one series can win each date."""
        with self.client.post(
            "/api/v1/bookings/",
            json={
                "seatId": CONTESTED_SEAT_ID,
                "date": BASE_DATE.isoformat(),
                "userName": random_user_name(),
                "recurrence": {"frequency": "daily", "count": 5},
            },
            catch_response=True,
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: already booked or revision retries exhausted
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("concurrency")
    @task
    def book_remaining_dates(self):
        """Partial bookings interleaved with the full-week attempts."""
        with self.client.post(
            "/api/v1/bookings/",
            json={
                "seatId": CONTESTED_SEAT_ID,
                "date": BASE_DATE.isoformat(),
                "userName": random_user_name(),
                "recurrence": {"frequency": "weekday", "count": 10},
                "skipConflicts": True,
            },
            catch_response=True,
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - plan computation and analytics cache

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. With REDIS_ENABLED=false, run again

    Compare:
      - Avg response time of /analytics/summary
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        for seat_id in SEAT_IDS:
            self.client.post(
                "/api/v1/seats/",
                json={"id": seat_id, "x": random.uniform(0, 100), "y": random.uniform(0, 100)},
                headers=ADMIN_HEADERS,
                name="/api/v1/seats/ [setup]",
            )

    @tag("throughput", "read")
    @task(10)
    def analytics_summary_cached(self):
        """Hammer the cached endpoint."""
        self.client.get("/api/v1/analytics/summary", name="/api/v1/analytics/summary [cached]")

    @tag("throughput", "read")
    @task(5)
    def preview_series(self):
        """Recurrence expansion plus suggestions, no writes."""
        self.client.post(
            "/api/v1/bookings/preview",
            json={
                "seatId": random.choice(SEAT_IDS),
                "date": random_day(),
                "recurrence": {
                    "frequency": random.choice(["daily", "weekday", "weekly"]),
                    "count": random.randint(2, 52),
                },
            },
            name="/api/v1/bookings/preview",
        )

    @tag("throughput", "read")
    @task(3)
    def day_view(self):
        self.client.get(f"/api/v1/bookings/?date={random_day()}", name="/api/v1/bookings/?date")

    @tag("throughput")
    @task(2)
    def book_random_desk(self):
        """Writes invalidate the analytics cache."""
        with self.client.post(
            "/api/v1/bookings/",
            json={"seatId": random.choice(SEAT_IDS), "date": random_day(), "userName": random_user_name()},
            catch_response=True,
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        """Monitor system health."""
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_seat(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"seatId": "NO-SUCH-DESK", "date": random_day(), "userName": "edge"},
            catch_response=True,
        ) as resp:
            self._expect(resp, (404,))

    @tag("edge")
    @task
    def unknown_frequency(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={
                "seatId": CONTESTED_SEAT_ID,
                "date": random_day(),
                "userName": "edge",
                "recurrence": {"frequency": "monthly", "count": 3},
            },
            catch_response=True,
        ) as resp:
            self._expect(resp, (400, 404))

    @tag("edge")
    @task
    def huge_series(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={
                "seatId": CONTESTED_SEAT_ID,
                "date": random_day(),
                "userName": "edge",
                "recurrence": {"frequency": "daily", "count": 999999},
            },
            catch_response=True,
        ) as resp:
            self._expect(resp, (400, 404))

    @tag("edge")
    @task
    def inverted_analytics_range(self):
        with self.client.get(
            "/api/v1/analytics/summary?from=2030-02-01&to=2030-01-01",
            catch_response=True,
        ) as resp:
            self._expect(resp, (400,))

    @tag("edge")
    @task
    def malformed_json(self):
        """Send garbage data."""
        with self.client.post(
            "/api/v1/bookings/",
            data="not json at all",
            catch_response=True,
        ) as resp:
            self._expect(resp, (400, 422))

    @tag("edge")
    @task
    def missing_admin_secret(self):
        """Seat edits without the secret (401 only when a password is configured)."""
        with self.client.post(
            "/api/v1/seats/",
            json={"id": "EDGE", "x": 1, "y": 1},
            headers={"X-Admin-Secret": "wrong"},
            catch_response=True,
        ) as resp:
            self._expect(resp, (401, 201, 409))
