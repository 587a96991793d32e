# mantenimiento/models/task.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from typing import Optional, List
from mantenimiento.models.common import TaskStatus, TaskPriority


class StateEvent(BaseModel):
    from_status: Optional[str] = None
    to_status: str
    at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    by: Optional[str] = None


class Comment(BaseModel):
    id: int
    author: str
    text: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Task(BaseModel):
    id: int
    title: str
    description: str = ""
    assignee: str
    assignee_id: Optional[int] = None
    status: TaskStatus = "Asignada"
    priority: TaskPriority = "Media"
    due_date: Optional[datetime] = None
    comments: List[Comment] = Field(default_factory=list)
    photo: Optional[str] = None          # payload opaco (p. ej. data URL)
    incident_id: Optional[int] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None
    state_history: List[StateEvent] = Field(default_factory=list)


class TaskCreate(BaseModel):
    title: str
    description: str = ""
    assignee: str
    priority: TaskPriority = "Media"
    due_date: Optional[datetime] = None
    photo: Optional[str] = None

    @field_validator("title", "assignee")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("campo obligatorio")
        return v.strip()


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    assignee: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    photo: Optional[str] = None

    @field_validator("title", "assignee")
    @classmethod
    def _not_blank(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError("campo obligatorio")
        return v.strip()
