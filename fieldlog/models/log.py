from typing import Optional, Any
from datetime import datetime
from sqlmodel import SQLModel, Field, JSON
from sqlalchemy import Column


class AuditLog(SQLModel, table=True):
    __tablename__ = "logs"
    id: Optional[int] = Field(default=None, primary_key=True)
    userId: int = Field(foreign_key="users.id", index=True, sa_column_kwargs={"name": "user_id"})
    action: str
    details: Optional[Any] = Field(default=None, sa_column=Column("details", JSON))
    createdAt: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"name": "created_at"})
