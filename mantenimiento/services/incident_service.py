# mantenimiento/services/incident_service.py
import logging
from collections import Counter
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from mantenimiento.core.errors import NotFound, from_pydantic
from mantenimiento.models.common import INCIDENT_TRANSITIONS, ensure_transition
from mantenimiento.models.incident import Incident, IncidentCreate
from mantenimiento.models.metrics import CategoryShare
from mantenimiento.repositories.incidents_repo import IncidentsRepo
from mantenimiento.services.task_service import utcnow

logger = logging.getLogger(__name__)


def category_breakdown(incidents: Iterable[Incident]) -> List[CategoryShare]:
    """Conteo por categoría (orden de primera aparición) y porcentaje sobre el total."""
    counts = Counter(i.category for i in incidents)
    total = sum(counts.values())
    return [
        CategoryShare(
            category=cat,
            count=n,
            percentage=round(n / total * 100, 2) if total else 0.0,
        )
        for cat, n in counts.items()
    ]


class IncidentRegistry:
    def __init__(self, repo: IncidentsRepo, clock: Callable[[], datetime] = utcnow):
        self.repo = repo
        self.clock = clock

    def get_incident(self, incident_id: int) -> Incident:
        incident = self.repo.find_by_id(incident_id)
        if incident is None:
            raise NotFound("Incidente no encontrado")
        return incident

    def list_incidents(self, new_only: bool = False) -> List[Incident]:
        if new_only:
            return self.repo.list_by_status("Nuevo")
        return self.repo.all()

    def new_count(self) -> int:
        return self.repo.count(lambda i: i.status == "Nuevo")

    def create_incident(
        self,
        category: str,
        description: str,
        reported_by: str,
        photo: Optional[str] = None,
    ) -> Incident:
        try:
            data = IncidentCreate(category=category, description=description, reported_by=reported_by, photo=photo)
        except PydanticValidationError as e:
            raise from_pydantic(e)
        now = self.clock()
        incident = Incident(id=self.repo.next_id(), status="Nuevo", created_at=now, updated_at=now, **data.model_dump())
        self.repo.insert(incident)
        logger.info("create_incident: id=%d [%s] por %s", incident.id, incident.category, incident.reported_by)
        return incident

    def mark_assigned(self, incident_id: int, task_id: Optional[int] = None) -> Incident:
        """Solo lo invoca el coordinador al crear la tarea derivada."""
        return self._transition(incident_id, "Asignado", task_id=task_id)

    def start_review(self, incident_id: int) -> Incident:
        return self._transition(incident_id, "En Revisión")

    def resolve_incident(self, incident_id: int) -> Incident:
        return self._transition(incident_id, "Resuelto")

    def _transition(self, incident_id: int, new_status: str, **extra) -> Incident:
        incident = self.get_incident(incident_id)
        ensure_transition(INCIDENT_TRANSITIONS, incident.status, new_status)
        changes = {"status": new_status, "updated_at": self.clock()}
        changes.update({k: v for k, v in extra.items() if v is not None})
        updated = self.repo.update_by_id(incident_id, changes)
        logger.info("transition_incident: id=%d %s → %s", incident_id, incident.status, new_status)
        return updated
