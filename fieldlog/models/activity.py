from enum import Enum
from typing import Optional, List
from datetime import datetime
from pydantic import field_validator
from sqlmodel import SQLModel, Field, JSON
from sqlalchemy import Column

from fieldlog.core.dates import as_naive_utc


class ActivityType(str, Enum):
    TRAINING = "training"
    SUPPORT = "support"
    PUBLICATION = "publication"
    EVENT = "event"
    TRAVEL = "travel"
    COURSE = "course"
    INTERVIEW = "interview"
    OMBUDSMAN = "ombudsman"
    COMMUNICATION = "communication"
    OTHER = "other"

    @property
    def label(self) -> str:
        return ACTIVITY_TYPE_LABELS[self]


ACTIVITY_TYPE_LABELS = {
    ActivityType.TRAINING: "Capacitação",
    ActivityType.SUPPORT: "Suporte",
    ActivityType.PUBLICATION: "Publicação",
    ActivityType.EVENT: "Evento",
    ActivityType.TRAVEL: "Viagem",
    ActivityType.COURSE: "Curso",
    ActivityType.INTERVIEW: "Entrevista",
    ActivityType.OMBUDSMAN: "Ouvidoria",
    ActivityType.COMMUNICATION: "Comunicação",
    ActivityType.OTHER: "Outra",
}


class FileData(SQLModel):
    name: str
    type: str
    size: int
    content: str # Base64 encoded


class Activity(SQLModel, table=True):
    __tablename__ = "activities"
    id: Optional[int] = Field(default=None, primary_key=True)
    type: str = Field(index=True)
    description: str
    date: datetime = Field(index=True)
    userId: int = Field(foreign_key="users.id", index=True, sa_column_kwargs={"name": "user_id"})
    municipalities: Optional[List[str]] = Field(default=None, sa_column=Column("municipalities", JSON))
    files: Optional[List[dict]] = Field(default=None, sa_column=Column("files", JSON))
    observations: Optional[str] = None
    createdAt: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"name": "created_at"})


class ActivityCreate(SQLModel):
    type: ActivityType
    description: str = Field(min_length=10)
    date: datetime
    municipalities: Optional[List[str]] = None
    files: Optional[List[FileData]] = None
    observations: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return as_naive_utc(v)


class ActivityUpdate(SQLModel):
    # id, userId and createdAt are not editable
    type: Optional[ActivityType] = None
    description: Optional[str] = Field(default=None, min_length=10)
    date: Optional[datetime] = None
    municipalities: Optional[List[str]] = None
    files: Optional[List[FileData]] = None
    observations: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_naive_utc(v) if v is not None else v


class ActivityRead(SQLModel):
    id: int
    type: str
    description: str
    date: datetime
    userId: int
    municipalities: Optional[List[str]] = None
    files: Optional[List[dict]] = None
    observations: Optional[str] = None
    createdAt: Optional[datetime] = None


class ActivityTypeOption(SQLModel):
    value: str
    label: str
