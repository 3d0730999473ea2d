from typing import Any
from fastapi import APIRouter, Depends

from fieldlog.api import deps
from fieldlog.core.dates import utcnow
from fieldlog.services.activity_store import ActivityQueryService
from fieldlog.services.statistics import StatisticsResult
from fieldlog.services.visibility import RequesterContext

router = APIRouter()

@router.get("", response_model=StatisticsResult)
async def get_statistics(
    requester: RequesterContext = Depends(deps.get_requester),
    queries: ActivityQueryService = Depends(deps.get_activity_queries)
) -> Any:
    """
    Dashboard statistics over every activity the current user may see.
    recentTrend is left unrounded.
    """
    return await queries.statistics(requester, now=utcnow())
