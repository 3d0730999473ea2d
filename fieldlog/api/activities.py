from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fieldlog.api import deps
from fieldlog.database import get_db
from fieldlog.models.activity import (
    ActivityCreate,
    ActivityRead,
    ActivityType,
    ActivityTypeOption,
    ActivityUpdate,
)
from fieldlog.services.activity_store import ActivityQueryService, SqlActivityStore
from fieldlog.services.audit import AuditAction, record_action
from fieldlog.services.filters import build_filters
from fieldlog.services.visibility import RequesterContext, can_modify, can_view

router = APIRouter()

@router.get("/activities", response_model=List[ActivityRead])
async def list_activities(
    type: Optional[str] = None,
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    user_id: Optional[int] = Query(default=None, alias="userId"),
    requester: RequesterContext = Depends(deps.get_requester),
    queries: ActivityQueryService = Depends(deps.get_activity_queries)
) -> Any:
    """
    Activities visible to the current user.
    Unknown types and unparsable dates are ignored; the date range only
    applies when both startDate and endDate are valid.
    """
    filters = build_filters(type=type, start_date=start_date, end_date=end_date, owner_id=user_id)
    return await queries.list_activities(requester, filters)

@router.post("/activities", response_model=ActivityRead, status_code=201)
async def create_activity(
    activity_in: ActivityCreate,
    requester: RequesterContext = Depends(deps.get_requester),
    store: SqlActivityStore = Depends(deps.get_activity_store),
    db: AsyncSession = Depends(get_db)
) -> Any:
    activity = await store.create(activity_in, owner_id=requester.user_id)

    await record_action(db, requester.user_id, AuditAction.CREATE_ACTIVITY, {
        "activityId": activity.id,
        "activityType": activity.type
    })
    return activity

@router.get("/activities/{activity_id}", response_model=ActivityRead)
async def get_activity(
    activity_id: int,
    requester: RequesterContext = Depends(deps.get_requester),
    store: SqlActivityStore = Depends(deps.get_activity_store)
) -> Any:
    activity = await store.get(activity_id)
    if not activity:
        raise HTTPException(status_code=404, detail="Activity not found")

    if not can_view(activity, requester):
        raise HTTPException(status_code=403, detail="Not authorized to access this activity")
    return activity

@router.patch("/activities/{activity_id}", response_model=ActivityRead)
async def update_activity(
    activity_id: int,
    activity_in: ActivityUpdate,
    requester: RequesterContext = Depends(deps.get_requester),
    store: SqlActivityStore = Depends(deps.get_activity_store),
    db: AsyncSession = Depends(get_db)
) -> Any:
    activity = await store.get(activity_id)
    if not activity:
        raise HTTPException(status_code=404, detail="Activity not found")

    # Only owner or admin can edit
    if not can_modify(activity, requester):
        raise HTTPException(status_code=403, detail="Not authorized to edit this activity")

    changes = activity_in.model_dump(mode="json", exclude_unset=True)
    # Required columns cannot be cleared
    for field in ("type", "description", "date"):
        if field in changes and changes[field] is None:
            del changes[field]
    if not changes:
        raise HTTPException(status_code=400, detail="No valid field to update")

    audit_details = {"activityId": activity_id, "activityType": activity.type, "updates": dict(changes)}
    if "date" in changes:
        changes["date"] = activity_in.date

    activity = await store.update(activity, changes)

    await record_action(db, requester.user_id, AuditAction.UPDATE_ACTIVITY, audit_details)
    return activity

@router.delete("/activities/{activity_id}")
async def delete_activity(
    activity_id: int,
    requester: RequesterContext = Depends(deps.get_requester),
    store: SqlActivityStore = Depends(deps.get_activity_store),
    db: AsyncSession = Depends(get_db)
) -> Any:
    activity = await store.get(activity_id)
    if not activity:
        raise HTTPException(status_code=404, detail="Activity not found")

    # Only owner or admin can delete
    if not can_modify(activity, requester):
        raise HTTPException(status_code=403, detail="Not authorized to delete this activity")

    activity_type = activity.type
    await store.delete(activity)

    await record_action(db, requester.user_id, AuditAction.DELETE_ACTIVITY, {
        "activityId": activity_id,
        "activityType": activity_type
    })
    return {"message": "Activity deleted successfully"}

@router.get("/activity-types", response_model=List[ActivityTypeOption])
async def list_activity_types() -> Any:
    return [{"value": t.value, "label": t.label} for t in ActivityType]
