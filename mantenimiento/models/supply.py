# mantenimiento/models/supply.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from typing import List, Optional
from mantenimiento.models.common import SupplyStatus
from mantenimiento.models.task import StateEvent


class SupplyRequest(BaseModel):
    id: int
    item_name: str
    requested_by: str
    requested_by_id: Optional[int] = None
    status: SupplyStatus = "Pendiente"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    state_history: List[StateEvent] = Field(default_factory=list)


class SupplyRequestCreate(BaseModel):
    item_name: str
    requested_by: str

    @field_validator("item_name", "requested_by")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("campo obligatorio")
        return v.strip()
