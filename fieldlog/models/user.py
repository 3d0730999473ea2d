from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import EmailStr
from sqlmodel import SQLModel, Field


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    SERVER = "server"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["UserRole"]:
        """
        Converts a stored role string into the enum.
        Unknown or missing values give None (no visibility downstream).
        """
        try:
            return cls(value)
        except ValueError:
            return None


class UserBase(SQLModel):
    email: str = Field(unique=True, index=True)
    name: str
    role: str = Field(default=UserRole.SERVER.value)
    active: bool = Field(default=True)
    approved: bool = Field(default=False)


class User(UserBase, table=True):
    __tablename__ = "users"
    id: Optional[int] = Field(default=None, primary_key=True)
    password: str
    createdAt: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"name": "created_at"})


class UserRead(SQLModel):
    id: int
    name: str
    email: str
    role: str
    active: bool
    approved: bool
    createdAt: Optional[datetime] = None


class UserCreate(SQLModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    role: UserRole = UserRole.SERVER
    active: bool = True
    approved: bool = True


class UserUpdate(SQLModel):
    name: Optional[str] = None
    role: Optional[UserRole] = None
    active: Optional[bool] = None
    approved: Optional[bool] = None


class PasswordReset(SQLModel):
    password: str = Field(min_length=6)
