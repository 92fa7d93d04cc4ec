"""Dashboard aggregation over users and groups."""

from __future__ import annotations

import datetime
from collections import Counter
from typing import TYPE_CHECKING, Any, Mapping

from eventhub.constants import GROUPS_COLLECTION, USERS_COLLECTION

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


def day_key(value: Any) -> str | None:
    """Reduce a stored timestamp or date string to ``YYYY-MM-DD``.

    Strings that are not ISO dates are returned unchanged so they still form
    their own bucket; missing values yield None.
    """
    if isinstance(value, datetime.datetime):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, datetime.date):
        return value.isoformat()
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%Y-%m-%d")


def merge_daily_counts(
    users_per_day: Mapping[str, int], groups_per_day: Mapping[str, int]
) -> list[dict[str, Any]]:
    """Outer-join two per-day series into ``{date, users, groups}`` rows."""
    dates = sorted(set(users_per_day) | set(groups_per_day))
    return [
        {
            "date": date,
            "users": users_per_day.get(date, 0),
            "groups": groups_per_day.get(date, 0),
        }
        for date in dates
    ]


class DashboardService:
    """Service class for dashboard statistics."""

    @staticmethod
    def count_per_day(db: Client, collection: str, field: str) -> Counter[str]:
        """Count documents in ``collection`` by the day stored in ``field``."""
        counts: Counter[str] = Counter()
        for doc in db.collection(collection).stream():
            if not doc.exists:
                continue
            key = day_key((doc.to_dict() or {}).get(field))
            if key is not None:
                counts[key] += 1
        return counts

    @staticmethod
    def get_dashboard_stats(db: Client) -> list[dict[str, Any]]:
        """Users created and groups scheduled per day, oldest first."""
        users_per_day = DashboardService.count_per_day(
            db, USERS_COLLECTION, "createdAt"
        )
        groups_per_day = DashboardService.count_per_day(
            db, GROUPS_COLLECTION, "formattedDate"
        )
        return merge_daily_counts(users_per_day, groups_per_day)
