# mantenimiento/models/staff.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from typing import Optional
from mantenimiento.models.common import StaffRole, StaffShift, StaffStatus


def _required(v: str) -> str:
    if v is None or not str(v).strip():
        raise ValueError("campo obligatorio")
    return str(v).strip()


class StaffMember(BaseModel):
    id: int
    name: str
    phone: str
    password: str
    email: Optional[str] = None
    role: StaffRole = "General"
    shift: StaffShift = "Matutino"
    status: StaffStatus = "Activo"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class StaffCreate(BaseModel):
    name: str
    phone: str
    password: str
    email: Optional[str] = None
    role: StaffRole = "General"
    shift: StaffShift = "Matutino"
    status: StaffStatus = "Activo"

    @field_validator("name", "phone")
    @classmethod
    def _not_blank(cls, v):
        return _required(v)

    @field_validator("password")
    @classmethod
    def _password_required(cls, v):
        if not v or not v.strip():
            raise ValueError("campo obligatorio")
        return v


class StaffUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None   # vacío = no cambiar
    email: Optional[str] = None
    role: Optional[StaffRole] = None
    shift: Optional[StaffShift] = None
    status: Optional[StaffStatus] = None

    @field_validator("name", "phone")
    @classmethod
    def _not_blank(cls, v):
        if v is None:
            return v
        return _required(v)


class Credentials(BaseModel):
    # trabajador: phone + password; administrador: username + password
    username: Optional[str] = None
    phone: Optional[str] = None
    password: str = ""


class AdminSession(BaseModel):
    username: str
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
