# mantenimiento/models/common.py
from typing import Dict, Literal, Optional, Set

from mantenimiento.core.errors import InvalidTransition

StaffRole = Literal["Limpieza","Mantenimiento","Jardinería","Electricista","General"]
StaffShift = Literal["Matutino","Vespertino","Nocturno"]
StaffStatus = Literal["Activo","De vacaciones","Inactivo"]

TaskStatus = Literal["Asignada","En Progreso","Completada"]
TaskPriority = Literal["Baja","Media","Alta"]
IncidentStatus = Literal["Nuevo","Asignado","En Revisión","Resuelto"]
SupplyStatus = Literal["Pendiente","Aprobado","Entregado"]

OPEN_TASK_STATES = ["Asignada","En Progreso"]

# Transiciones de trabajador (hacia adelante). El atajo de completar/reabrir
# del administrador va por toggle_completion, no por esta tabla.
TASK_TRANSITIONS: Dict[str, Set[str]] = {
  "Asignada": {"En Progreso","Completada"},
  "En Progreso": {"Completada"},
  "Completada": set(),
}

INCIDENT_TRANSITIONS: Dict[str, Set[str]] = {
  "Nuevo": {"Asignado"},
  "Asignado": {"En Revisión","Resuelto"},
  "En Revisión": {"Resuelto"},
  "Resuelto": set(),
}

SUPPLY_TRANSITIONS: Dict[str, Set[str]] = {
  "Pendiente": {"Aprobado"},
  "Aprobado": {"Entregado"},
  "Entregado": set(),
}

SUPPLY_FLOW = ["Pendiente","Aprobado","Entregado"]


def ensure_transition(table: Dict[str, Set[str]], old: str, new: str):
    if new not in table.get(old, set()):
        raise InvalidTransition(old, new)


def next_supply_status(status: str) -> Optional[str]:
    """Único paso siguiente válido de una solicitud de suministro (None si es terminal)."""
    nxt = SUPPLY_TRANSITIONS.get(status) or set()
    return next(iter(nxt), None)
