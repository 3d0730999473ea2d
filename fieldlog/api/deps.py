from typing import Callable, Optional
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
import jwt
from sqlalchemy.ext.asyncio import AsyncSession
from fieldlog.core import security
from fieldlog.core.config import settings
from fieldlog.database import get_db
from fieldlog.models.user import User, UserRole
from fieldlog.services.activity_store import ActivityQueryService, SqlActivityStore
from fieldlog.services.visibility import RequesterContext

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login",
    auto_error=False
)

def _read_token(request: Request, token: Optional[str]) -> Optional[str]:
    # Try to get token from cookie if not in header
    if not token:
        token = request.cookies.get("access_token")
        if token and token.startswith("Bearer "):
            token = token.split(" ")[1]
    return token or None

def _user_id_from_token(token: str) -> Optional[int]:
    try:
        return int(security.decode_access_token(token))
    except (jwt.InvalidTokenError, TypeError, ValueError):
        return None

async def get_optional_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    token: str = Depends(reusable_oauth2)
) -> User | None:
    """Resolves the caller when a valid token is present, otherwise None."""
    token = _read_token(request, token)
    if not token:
        return None
    user_id = _user_id_from_token(token)
    if user_id is None:
        return None
    return await db.get(User, user_id)

async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    token: str = Depends(reusable_oauth2)
) -> User:
    token = _read_token(request, token)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    user_id = _user_id_from_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    if not user.active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is deactivated")
    return user

async def get_requester(
    current_user: User = Depends(get_current_user),
) -> RequesterContext:
    # The only place a stored role string is interpreted
    return RequesterContext(role=UserRole.parse(current_user.role), user_id=current_user.id)

def require_roles(*roles: UserRole) -> Callable:
    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if UserRole.parse(current_user.role) not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="The user doesn't have enough privileges")
        return current_user
    return checker

def get_activity_store(db: AsyncSession = Depends(get_db)) -> SqlActivityStore:
    return SqlActivityStore(db)

def get_activity_queries(
    store: SqlActivityStore = Depends(get_activity_store),
) -> ActivityQueryService:
    return ActivityQueryService(store)
