from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from fieldlog.models.activity import Activity, ActivityCreate, ActivityType
from fieldlog.models.user import UserRole
from fieldlog.services.filters import ActivityFilters, scope_activities
from fieldlog.services.statistics import StatisticsAggregator, StatisticsResult
from fieldlog.services.visibility import RequesterContext


class ActivityStore(ABC):
    """
    Read/write access to activity records.
    """

    @abstractmethod
    async def all(self) -> List[Activity]:
        pass

    @abstractmethod
    async def by_owner(self, user_id: int) -> List[Activity]:
        pass

    @abstractmethod
    async def by_type(self, activity_type: ActivityType) -> List[Activity]:
        pass

    @abstractmethod
    async def by_date_range(self, start: datetime, end: datetime) -> List[Activity]:
        """Activities whose date falls within [start, end]"""
        pass

    @abstractmethod
    async def get(self, activity_id: int) -> Optional[Activity]:
        pass

    @abstractmethod
    async def create(self, data: ActivityCreate, owner_id: int) -> Activity:
        pass

    @abstractmethod
    async def update(self, activity: Activity, changes: Dict[str, Any]) -> Activity:
        pass

    @abstractmethod
    async def delete(self, activity: Activity) -> None:
        pass


class SqlActivityStore(ActivityStore):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fetch(self, query) -> List[Activity]:
        result = await self.session.execute(query.order_by(Activity.date.desc(), Activity.id.desc()))
        return list(result.scalars().all())

    async def all(self) -> List[Activity]:
        return await self._fetch(select(Activity))

    async def by_owner(self, user_id: int) -> List[Activity]:
        return await self._fetch(select(Activity).where(Activity.userId == user_id))

    async def by_type(self, activity_type: ActivityType) -> List[Activity]:
        return await self._fetch(select(Activity).where(Activity.type == activity_type.value))

    async def by_date_range(self, start: datetime, end: datetime) -> List[Activity]:
        return await self._fetch(
            select(Activity).where(Activity.date >= start, Activity.date <= end)
        )

    async def get(self, activity_id: int) -> Optional[Activity]:
        return await self.session.get(Activity, activity_id)

    async def create(self, data: ActivityCreate, owner_id: int) -> Activity:
        activity_data = data.model_dump(mode="json", exclude={"date"})
        activity = Activity(**activity_data, date=data.date, userId=owner_id)
        self.session.add(activity)
        await self.session.commit()
        await self.session.refresh(activity)
        return activity

    async def update(self, activity: Activity, changes: Dict[str, Any]) -> Activity:
        for key, value in changes.items():
            setattr(activity, key, value)
        self.session.add(activity)
        await self.session.commit()
        await self.session.refresh(activity)
        return activity

    async def delete(self, activity: Activity) -> None:
        await self.session.delete(activity)
        await self.session.commit()


class ActivityQueryService:
    """
    Reads activities through a store and scopes them for one requester.
    """

    def __init__(self, store: ActivityStore):
        self.store = store

    async def _candidates(self, requester: RequesterContext) -> List[Activity]:
        if requester.role is UserRole.SERVER:
            return await self.store.by_owner(requester.user_id)
        if requester.role is None:
            return []
        return await self.store.all()

    async def list_activities(
        self,
        requester: RequesterContext,
        filters: Optional[ActivityFilters] = None,
    ) -> List[Activity]:
        candidates = await self._candidates(requester)
        # Visibility is re-applied in memory whatever the store returned
        return scope_activities(candidates, requester, filters)

    async def statistics(self, requester: RequesterContext, now: datetime) -> StatisticsResult:
        activities = await self.list_activities(requester)
        return StatisticsAggregator.aggregate(activities, now)
