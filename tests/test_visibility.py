from datetime import datetime

import pytest

from fieldlog.models.activity import Activity
from fieldlog.models.user import UserRole
from fieldlog.services.filters import ActivityFilters, build_filters, scope_activities
from fieldlog.services.visibility import RequesterContext, can_modify, can_view, visible_activities


def _activity(activity_id: int, owner_id: int, type: str = "training", date: datetime | None = None) -> Activity:
    return Activity(
        id=activity_id,
        type=type,
        description="Capacitação de equipe municipal",
        date=date or datetime(2024, 2, 10),
        userId=owner_id,
    )


@pytest.fixture()
def mixed_records():
    # Owners interleaved on purpose
    return [
        _activity(1, 5),
        _activity(2, 7, type="support"),
        _activity(3, 5, type="event"),
        _activity(4, 9),
        _activity(5, 7),
    ]


def test_server_sees_only_own_records(mixed_records):
    requester = RequesterContext(role=UserRole.SERVER, user_id=5)

    visible = visible_activities(mixed_records, requester)

    assert [a.id for a in visible] == [1, 3]
    assert all(a.userId == 5 for a in visible)


def test_server_with_no_records_sees_nothing(mixed_records):
    requester = RequesterContext(role=UserRole.SERVER, user_id=42)
    assert visible_activities(mixed_records, requester) == []


@pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.MANAGER])
def test_admin_and_manager_see_everything(mixed_records, role):
    requester = RequesterContext(role=role, user_id=1)
    assert visible_activities(mixed_records, requester) == mixed_records


def test_unknown_role_sees_nothing(mixed_records):
    requester = RequesterContext(role=UserRole.parse("auditor"), user_id=5)

    assert requester.role is None
    assert visible_activities(mixed_records, requester) == []


def test_owner_filter_cannot_widen_server_view(mixed_records):
    requester = RequesterContext(role=UserRole.SERVER, user_id=5)

    scoped = scope_activities(mixed_records, requester, ActivityFilters(owner_id=7))

    assert scoped == []


def test_server_scope_ignores_other_owner_whatever_the_filters():
    records = [_activity(1, 5), _activity(2, 5, type="support"), _activity(3, 7)]
    requester = RequesterContext(role=UserRole.SERVER, user_id=5)

    for filters in (
        build_filters(),
        build_filters(type="training"),
        build_filters(start_date="2024-01-01", end_date="2024-12-31"),
        build_filters(owner_id=7),
    ):
        assert all(a.userId == 5 for a in scope_activities(records, requester, filters))

    assert [a.id for a in scope_activities(records, requester, build_filters())] == [1, 2]


def test_manager_owner_filter_narrows(mixed_records):
    requester = RequesterContext(role=UserRole.MANAGER, user_id=1)

    scoped = scope_activities(mixed_records, requester, ActivityFilters(owner_id=7))

    assert [a.id for a in scoped] == [2, 5]


def test_can_view_single_record():
    record = _activity(1, 5)

    assert can_view(record, RequesterContext(UserRole.SERVER, 5))
    assert not can_view(record, RequesterContext(UserRole.SERVER, 7))
    assert can_view(record, RequesterContext(UserRole.MANAGER, 7))
    assert can_view(record, RequesterContext(UserRole.ADMIN, 7))
    assert not can_view(record, RequesterContext(None, 5))


def test_can_modify_owner_or_admin_only():
    record = _activity(1, 5)

    assert can_modify(record, RequesterContext(UserRole.SERVER, 5))
    assert can_modify(record, RequesterContext(UserRole.ADMIN, 1))
    assert not can_modify(record, RequesterContext(UserRole.MANAGER, 1))
    assert not can_modify(record, RequesterContext(UserRole.SERVER, 7))
