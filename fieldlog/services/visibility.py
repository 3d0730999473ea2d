from dataclasses import dataclass
from typing import Iterable, List, Optional

from fieldlog.models.activity import Activity
from fieldlog.models.user import UserRole


@dataclass(frozen=True)
class RequesterContext:
    """
    Who is asking. Built once per request at the authentication boundary.

    `role` is None when the stored role string is not a known UserRole;
    such a requester sees nothing.
    """
    role: Optional[UserRole]
    user_id: int


def can_view(activity: Activity, requester: RequesterContext) -> bool:
    if requester.role is UserRole.SERVER:
        return activity.userId == requester.user_id
    if requester.role in (UserRole.ADMIN, UserRole.MANAGER):
        return True
    return False


def can_modify(activity: Activity, requester: RequesterContext) -> bool:
    """Owners may edit or delete their own activities; admins may edit any."""
    if requester.role is None:
        return False
    return activity.userId == requester.user_id or requester.role is UserRole.ADMIN


def visible_activities(activities: Iterable[Activity], requester: RequesterContext) -> List[Activity]:
    """
    Restricts a candidate set to what the requester may observe.

    - server: only records they own
    - manager / admin: the whole candidate set
    - anything else: nothing
    """
    if requester.role is UserRole.SERVER:
        return [a for a in activities if a.userId == requester.user_id]
    if requester.role in (UserRole.ADMIN, UserRole.MANAGER):
        return list(activities)
    return []
