import logging
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from fieldlog.models.log import AuditLog

logger = logging.getLogger(__name__)


class AuditAction:
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    CREATE_USER = "CREATE_USER"
    UPDATE_USER = "UPDATE_USER"
    RESET_USER_PASSWORD = "RESET_USER_PASSWORD"
    CREATE_ACTIVITY = "CREATE_ACTIVITY"
    UPDATE_ACTIVITY = "UPDATE_ACTIVITY"
    DELETE_ACTIVITY = "DELETE_ACTIVITY"


async def record_action(
    db: AsyncSession,
    user_id: int,
    action: str,
    details: Optional[dict[str, Any]] = None,
) -> AuditLog:
    entry = AuditLog(userId=user_id, action=action, details=details or {})
    db.add(entry)
    await db.commit()
    logger.info(f"Audit {action} by user {user_id}: {details or {}}")
    return entry


async def list_logs(db: AsyncSession, user_id: Optional[int] = None) -> List[AuditLog]:
    query = select(AuditLog)
    if user_id is not None:
        query = query.where(AuditLog.userId == user_id)
    result = await db.execute(query.order_by(AuditLog.createdAt.desc(), AuditLog.id.desc()))
    return list(result.scalars().all())
