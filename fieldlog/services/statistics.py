from collections import Counter
from datetime import datetime
from typing import Dict, Iterable

from pydantic import BaseModel

from fieldlog.models.activity import Activity, ActivityType


class StatisticsResult(BaseModel):
    totalActivities: int
    byType: Dict[str, int]
    byMonth: Dict[str, int]
    byUser: Dict[str, int]
    recentTrend: float # Percentage change from last month


def month_key(value: datetime) -> str:
    """
    Bucket key for a calendar month, e.g. "2024-3".
    The month is 1-based and NOT zero padded. Every bucket and every trend
    lookup must go through this function.
    """
    return f"{value.year}-{value.month}"


def previous_month_key(now: datetime) -> str:
    if now.month == 1:
        return month_key(datetime(now.year - 1, 12, 1))
    return month_key(datetime(now.year, now.month - 1, 1))


class StatisticsAggregator:
    """
    Reduces an already scoped list of activities into dashboard statistics.

    Stateless: `now` is passed in so that the same input always gives the
    same result.
    """

    @staticmethod
    def trend(by_month: Dict[str, int], now: datetime) -> float:
        current_count = by_month.get(month_key(now), 0)
        previous_count = by_month.get(previous_month_key(now), 0)
        if previous_count == 0:
            return 0.0
        return ((current_count - previous_count) / previous_count) * 100

    @staticmethod
    def aggregate(activities: Iterable[Activity], now: datetime) -> StatisticsResult:
        by_type: Counter = Counter()
        by_month: Counter = Counter()
        by_user: Counter = Counter()
        total = 0

        for activity in activities:
            total += 1
            activity_type = activity.type.value if isinstance(activity.type, ActivityType) else activity.type
            by_type[activity_type] += 1
            by_month[month_key(activity.date)] += 1
            by_user[str(activity.userId)] += 1

        return StatisticsResult(
            totalActivities=total,
            byType=dict(by_type),
            byMonth=dict(by_month),
            byUser=dict(by_user),
            recentTrend=StatisticsAggregator.trend(by_month, now),
        )
