import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from fieldlog.core.dates import as_naive_utc, end_of_day, is_date_only, parse_datetime
from fieldlog.models.activity import Activity, ActivityType
from fieldlog.services.visibility import RequesterContext, visible_activities

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityFilters:
    type: Optional[ActivityType] = None
    # Both bounds or neither; see build_filters
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    owner_id: Optional[int] = None

    @property
    def has_date_range(self) -> bool:
        return self.start is not None and self.end is not None


def parse_type_filter(value: Optional[str]) -> Optional[ActivityType]:
    if not value:
        return None
    try:
        return ActivityType(value)
    except ValueError:
        logger.debug(f"Ignoring unknown activity type filter '{value}'")
        return None


def parse_date_bound(value: Optional[str]) -> Optional[datetime]:
    parsed = parse_datetime(value)
    if value and parsed is None:
        logger.debug(f"Ignoring unparsable date filter '{value}'")
    return parsed


def build_filters(
    type: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    owner_id: Optional[int] = None,
) -> ActivityFilters:
    """
    Turns raw query parameters into ActivityFilters.

    Unknown types and unparsable dates are dropped rather than rejected.
    A date-only end bound covers the whole day; the date range is kept only
    when both bounds parse.
    """
    start = parse_date_bound(start_date)
    end = parse_date_bound(end_date)
    if end is not None and is_date_only(end_date):
        end = end_of_day(end)
    if start is None or end is None:
        start = end = None

    return ActivityFilters(
        type=parse_type_filter(type),
        start=start,
        end=end,
        owner_id=owner_id,
    )


def matches(activity: Activity, filters: ActivityFilters) -> bool:
    if filters.type is not None and activity.type != filters.type.value:
        return False
    if filters.has_date_range:
        activity_date = as_naive_utc(activity.date)
        if activity_date < filters.start or activity_date > filters.end:
            return False
    if filters.owner_id is not None and activity.userId != filters.owner_id:
        return False
    return True


def apply_filters(activities: Iterable[Activity], filters: ActivityFilters) -> List[Activity]:
    return [a for a in activities if matches(a, filters)]


def scope_activities(
    activities: Iterable[Activity],
    requester: RequesterContext,
    filters: Optional[ActivityFilters] = None,
) -> List[Activity]:
    """Visibility first, then the secondary filters (logical AND)."""
    visible = visible_activities(activities, requester)
    if filters is None:
        return visible
    return apply_filters(visible, filters)
