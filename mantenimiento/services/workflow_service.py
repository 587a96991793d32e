# mantenimiento/services/workflow_service.py
"""
Coordinador del flujo de trabajo.

Es el único componente que opera sobre más de un registro: asignación
incidente → tarea, métricas del tablero y resolución de responsables.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from mantenimiento.core.config import Settings, get_settings
from mantenimiento.core.security import AdminCredentialProvider, SettingsAdminCredentials
from mantenimiento.core.store import Store
from mantenimiento.models.common import INCIDENT_TRANSITIONS, ensure_transition
from mantenimiento.models.incident import Incident
from mantenimiento.models.metrics import DashboardMetrics, StaffWorkload
from mantenimiento.models.staff import StaffMember
from mantenimiento.models.supply import SupplyRequest
from mantenimiento.models.task import Task, TaskUpdate
from mantenimiento.repositories.incidents_repo import IncidentsRepo
from mantenimiento.repositories.staff_repo import StaffRepo
from mantenimiento.repositories.supplies_repo import SuppliesRepo
from mantenimiento.repositories.tasks_repo import TasksRepo
from mantenimiento.services import metrics_service
from mantenimiento.services.identity_service import IdentityDirectory
from mantenimiento.services.incident_service import IncidentRegistry
from mantenimiento.services.supply_service import SupplyRegistry
from mantenimiento.services.task_service import TaskRegistry, utcnow

logger = logging.getLogger(__name__)

ELLIPSIS = "…"


def preview(text: str, length: int) -> str:
    """Recorta a `length` caracteres agregando elipsis si hizo falta."""
    text = (text or "").strip()
    if len(text) <= length:
        return text
    return text[:length].rstrip() + ELLIPSIS


class WorkflowCoordinator:
    def __init__(
        self,
        store: Optional[Store] = None,
        settings: Optional[Settings] = None,
        admin_credentials: Optional[AdminCredentialProvider] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store or Store()
        self.settings = settings or get_settings()
        self.clock = clock
        self.identity = IdentityDirectory(
            StaffRepo(self.store),
            admin_credentials or SettingsAdminCredentials(self.settings),
        )
        self.tasks = TaskRegistry(TasksRepo(self.store), clock)
        self.incidents = IncidentRegistry(IncidentsRepo(self.store), clock)
        self.supplies = SupplyRegistry(SuppliesRepo(self.store), clock)

    # ---- responsables ----
    def _assignee_id(self, name: str) -> Optional[int]:
        member = self.identity.find_by_name((name or "").strip())
        return member.id if member else None

    def resolve_assignee(self, task: Task) -> str:
        """Nombre actual del responsable; si ya no existe, el último nombre conocido."""
        if task.assignee_id is not None:
            member = self.identity.repo.find_by_id(task.assignee_id)
            if member is not None:
                return member.name
        return task.assignee

    def tasks_for(self, member: StaffMember) -> List[Task]:
        return [t for t in self.tasks.list_tasks() if metrics_service.task_belongs_to(t, member)]

    def delete_staff(self, staff_id: int) -> None:
        """
        Elimina al miembro y suelta sus referencias por id.
        Tareas y solicitudes conservan el nombre; el id puede reutilizarse.
        """
        with self.store.transaction():
            self.identity.delete_staff(staff_id)
            tasks = [t for t in self.tasks.repo.all() if t.assignee_id == staff_id]
            for t in tasks:
                self.tasks.repo.update_by_id(t.id, {"assignee_id": None})
            requests = [r for r in self.supplies.repo.all() if r.requested_by_id == staff_id]
            for r in requests:
                self.supplies.repo.update_by_id(r.id, {"requested_by_id": None})
        logger.info("delete_staff: id=%d, %d tareas y %d solicitudes desvinculadas",
                    staff_id, len(tasks), len(requests))

    # ---- tareas con responsable ----
    def create_task(
        self,
        title: str,
        description: str = "",
        assignee: str = "",
        priority: str = "Media",
        due_date: Optional[datetime] = None,
        by: Optional[str] = None,
    ) -> Task:
        return self.tasks.create_task(
            title, description, assignee, priority, due_date,
            assignee_id=self._assignee_id(assignee), by=by,
        )

    def update_task(self, task_id: int, partial: Union[TaskUpdate, Dict[str, Any]], by: Optional[str] = None) -> Task:
        data = partial if isinstance(partial, TaskUpdate) else dict(partial)
        name = data.assignee if isinstance(data, TaskUpdate) else data.get("assignee")
        return self.tasks.update_task(task_id, data, by=by, assignee_id=self._assignee_id(name) if name else None)

    # ---- incidente → tarea ----
    def assign_incident_to_staff(self, incident: Union[Incident, int], assignee_name: str) -> Task:
        incident_id = incident.id if isinstance(incident, Incident) else incident
        source = self.incidents.get_incident(incident_id)
        ensure_transition(INCIDENT_TRANSITIONS, source.status, "Asignado")
        with self.store.transaction():
            task = self.tasks.create_task(
                title=preview(source.description, self.settings.task_title_preview_length),
                description=source.description,
                assignee=assignee_name,
                priority=self.settings.default_incident_priority,
                due_date=None,
                photo=source.photo,
                assignee_id=self._assignee_id(assignee_name),
                incident_id=source.id,
            )
            self.incidents.mark_assigned(source.id, task_id=task.id)
        logger.info("assign_incident: incidente %d → tarea %d (%s)", source.id, task.id, task.assignee)
        return task

    # ---- tablero ----
    def compute_dashboard_metrics(
        self,
        tasks: List[Task],
        incidents: List[Incident],
        staff: List[StaffMember],
    ) -> DashboardMetrics:
        return metrics_service.compute_dashboard_metrics(tasks, incidents, staff, now=self.clock())

    def dashboard(self) -> DashboardMetrics:
        snap = self.store.snapshot
        return self.compute_dashboard_metrics(list(snap.tasks), list(snap.incidents), list(snap.staff))

    def team_status(self) -> List[StaffWorkload]:
        snap = self.store.snapshot
        return metrics_service.workload(snap.staff, snap.tasks)

    # ---- suministros ----
    def request_supply(self, item_name: str, member: StaffMember) -> SupplyRequest:
        return self.supplies.create_request(item_name, member.name, requested_by_id=member.id)

    def supply_requests_for(self, member: StaffMember) -> List[SupplyRequest]:
        return self.supplies.list_requests(requested_by=member)
