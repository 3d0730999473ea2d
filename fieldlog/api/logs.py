from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fieldlog.api import deps
from fieldlog.database import get_db
from fieldlog.models.log import AuditLog
from fieldlog.models.user import User, UserRole
from fieldlog.services.audit import list_logs

router = APIRouter()

@router.get("", response_model=List[AuditLog])
async def get_logs(
    user_id: Optional[int] = Query(default=None, alias="userId"),
    current_user: User = Depends(deps.require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Audit trail, newest first.
    """
    return await list_logs(db, user_id=user_id)
