from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Request, Response
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, func

from fieldlog.api import deps
from fieldlog.core import security
from fieldlog.core.config import settings
from fieldlog.database import get_db
from fieldlog.models.user import User, UserRead, UserRole
from fieldlog.services.audit import AuditAction, record_action

router = APIRouter()

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    remember: Optional[bool] = None

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)

class UserResponse(BaseModel):
    message: str
    user: UserRead

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    query = select(User).where(func.lower(User.email) == email.lower())
    result = await db.execute(query)
    return result.scalars().first()

@router.post("/login", response_model=UserResponse)
async def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db)
) -> Any:
    # 1. Verify User
    user = await get_user_by_email(db, login_data.email)

    if not user or not security.verify_password(login_data.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    if not user.active:
        raise HTTPException(status_code=403, detail="User is deactivated. Contact an administrator.")

    if not user.approved and user.role != UserRole.ADMIN.value:
        raise HTTPException(status_code=403, detail="Awaiting approval")

    # 2. Create JWT
    access_token = security.create_access_token(subject=user.id)

    # 3. Set Cookie
    response.set_cookie(
        key="access_token",
        value=f"{access_token}",
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        expires=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
        secure=settings.COOKIE_SECURE
    )

    client_ip = request.client.host if request.client else None
    await record_action(db, user.id, AuditAction.LOGIN, {"ip": client_ip})

    return {
        "message": "Login successful",
        "user": user
    }

@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    db: AsyncSession = Depends(get_db)
) -> Any:
    # 1. Check existing
    if await get_user_by_email(db, register_data.email):
        raise HTTPException(
            status_code=400,
            detail="Email already registered"
        )

    # 2. Create User; public registrations are always servers awaiting approval
    user = User(
        email=register_data.email,
        password=security.get_password_hash(register_data.password),
        name=register_data.name,
        role=UserRole.SERVER.value,
        active=True,
        approved=False
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    return {
        "message": "Registration successful. Wait for an administrator to approve your account.",
        "user": user
    }

@router.get("/me", response_model=UserResponse)
async def read_users_me(
    current_user: User = Depends(deps.get_current_user)
) -> Any:
    return {
        "message": "User retrieved successfully",
        "user": current_user
    }

@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    current_user: Optional[User] = Depends(deps.get_optional_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    if current_user:
        client_ip = request.client.host if request.client else None
        await record_action(db, current_user.id, AuditAction.LOGOUT, {"ip": client_ip})
    response.delete_cookie(key="access_token")
    return {"message": "Logged out successfully"}
