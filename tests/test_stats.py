"""Tests for the dashboard timeline."""

from __future__ import annotations

import datetime
import unittest

from eventhub.stats.services import DashboardService, day_key, merge_daily_counts
from tests.conftest import make_mock_db
from tests.helpers import build_app


class DayKeyTestCase(unittest.TestCase):
    def test_values(self) -> None:
        moment = datetime.datetime(2024, 5, 1, 23, 59, tzinfo=datetime.timezone.utc)
        self.assertEqual(day_key(moment), "2024-05-01")
        self.assertEqual(day_key(datetime.date(2024, 5, 2)), "2024-05-02")
        self.assertEqual(day_key("2024-05-03"), "2024-05-03")
        self.assertEqual(day_key("2024-05-04T08:30:00.000Z"), "2024-05-04")
        self.assertEqual(day_key("Next Friday"), "Next Friday")
        self.assertIsNone(day_key(None))
        self.assertIsNone(day_key(""))


class MergeDailyCountsTestCase(unittest.TestCase):
    def test_outer_join_with_zero_fill(self) -> None:
        rows = merge_daily_counts(
            {"2024-05-01": 2, "2024-05-03": 1},
            {"2024-05-01": 1, "2024-05-02": 4},
        )
        self.assertEqual(
            rows,
            [
                {"date": "2024-05-01", "users": 2, "groups": 1},
                {"date": "2024-05-02", "users": 0, "groups": 4},
                {"date": "2024-05-03", "users": 1, "groups": 0},
            ],
        )

    def test_empty(self) -> None:
        self.assertEqual(merge_daily_counts({}, {}), [])


class DashboardStatsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_mock_db()
        users = self.db.collection("users")
        users.document("u1").set(
            {"email": "a@example.com", "createdAt": datetime.datetime(2024, 5, 1, 9)}
        )
        users.document("u2").set(
            {"email": "b@example.com", "createdAt": datetime.datetime(2024, 5, 1, 17)}
        )
        users.document("u3").set({"email": "c@example.com"})
        groups = self.db.collection("groups")
        groups.document("g1").set({"groupName": "Run", "formattedDate": "2024-05-02"})
        groups.document("g2").set({"groupName": "Read"})

    def test_service(self) -> None:
        self.assertEqual(
            DashboardService.get_dashboard_stats(self.db),
            [
                {"date": "2024-05-01", "users": 2, "groups": 0},
                {"date": "2024-05-02", "users": 0, "groups": 1},
            ],
        )

    def test_route(self) -> None:
        client = build_app(self.db).test_client()
        response = client.get("/dashboard-stats")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json), 2)
        self.assertEqual(response.json[0]["users"], 2)


if __name__ == "__main__":
    unittest.main()
