# mantenimiento/models/incident.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from typing import Optional
from mantenimiento.models.common import IncidentStatus


class Incident(BaseModel):
    id: int
    category: str = "Mantenimiento"
    description: str
    reported_by: str
    status: IncidentStatus = "Nuevo"
    photo: Optional[str] = None
    task_id: Optional[int] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class IncidentCreate(BaseModel):
    category: str = "Mantenimiento"
    description: str
    reported_by: str
    photo: Optional[str] = None

    @field_validator("description", "reported_by")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("campo obligatorio")
        return v.strip()

    @field_validator("category")
    @classmethod
    def _default_category(cls, v: str) -> str:
        return (v or "").strip() or "Otro"
