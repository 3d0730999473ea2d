from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from fieldlog.api import deps
from fieldlog.api.auth import get_user_by_email
from fieldlog.core import security
from fieldlog.database import get_db
from fieldlog.models.user import User, UserCreate, UserRead, UserRole, UserUpdate, PasswordReset
from fieldlog.services.audit import AuditAction, record_action

router = APIRouter()

get_current_admin_user = deps.require_roles(UserRole.ADMIN)

@router.get("", response_model=List[UserRead])
async def list_users(
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    result = await db.execute(select(User).order_by(User.id))
    return result.scalars().all()

@router.get("/pending", response_model=List[UserRead])
async def list_pending_users(
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Users who registered themselves and still wait for approval.
    """
    result = await db.execute(
        select(User).where(User.approved == False).order_by(User.createdAt)  # noqa: E712
    )
    return result.scalars().all()

@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    user_in: UserCreate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    if await get_user_by_email(db, user_in.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        email=user_in.email,
        password=security.get_password_hash(user_in.password),
        name=user_in.name,
        role=user_in.role.value,
        active=user_in.active,
        approved=user_in.approved
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    await record_action(db, current_user.id, AuditAction.CREATE_USER, {
        "targetUserId": user.id,
        "targetEmail": user.email
    })
    return user

@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    user_in: UserUpdate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    updates = user_in.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No valid field to update")

    for key, value in updates.items():
        setattr(user, key, value)

    db.add(user)
    await db.commit()
    await db.refresh(user)

    await record_action(db, current_user.id, AuditAction.UPDATE_USER, {
        "targetUserId": user_id,
        "updates": updates
    })
    return user

@router.post("/{user_id}/reset-password")
async def reset_password(
    user_id: int,
    password_in: PasswordReset,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.password = security.get_password_hash(password_in.password)
    db.add(user)
    await db.commit()

    await record_action(db, current_user.id, AuditAction.RESET_USER_PASSWORD, {"targetUserId": user_id})
    return {"message": "Password reset successfully"}
