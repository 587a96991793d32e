# mantenimiento/api/views.py
"""
Vistas por rol.

``login`` devuelve una ``Session``: ``AdminView`` o ``WorkerView``. Cada vista
expone solo los comandos de su rol; el renderer decide qué pantalla mostrar
según ``session.kind``.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from mantenimiento.api.navigation import AdminNavigation, WorkerNavigation
from mantenimiento.core.errors import InvalidCredentials, NotFound
from mantenimiento.models.common import next_supply_status
from mantenimiento.models.incident import Incident
from mantenimiento.models.metrics import DashboardMetrics, StaffWorkload
from mantenimiento.models.staff import AdminSession, Credentials, StaffMember
from mantenimiento.models.supply import SupplyRequest
from mantenimiento.models.task import Comment, Task
from mantenimiento.services.workflow_service import WorkflowCoordinator


class AdminView:
    kind: Literal["admin"] = "admin"

    def __init__(self, coordinator: WorkflowCoordinator, session: AdminSession):
        self.coordinator = coordinator
        self.session = session
        self.nav = AdminNavigation()

    @property
    def actor(self) -> str:
        return self.session.username

    # ---- tablero ----
    def dashboard(self) -> DashboardMetrics:
        return self.coordinator.dashboard()

    def team_status(self) -> List[StaffWorkload]:
        return self.coordinator.team_status()

    def open_metric(self, metric: str) -> None:
        self.nav.open_metric(metric)

    def change_tab(self, tab: str) -> None:
        self.nav.change_tab(tab)

    # ---- tareas ----
    def tasks(self) -> List[Task]:
        return self.nav.visible_tasks(self.coordinator.tasks.list_tasks())

    def create_task(self, title: str, description: str, assignee: str,
                    priority: str = "Media", due_date: Optional[datetime] = None) -> Task:
        return self.coordinator.create_task(title, description, assignee, priority, due_date, by=self.actor)

    def update_task(self, task_id: int, partial: Dict[str, Any]) -> Task:
        return self.coordinator.update_task(task_id, partial, by=self.actor)

    def reassign_task(self, task_id: int, assignee: str) -> Task:
        return self.coordinator.update_task(task_id, {"assignee": assignee}, by=self.actor)

    def toggle_completion(self, task_id: int) -> Task:
        return self.coordinator.tasks.toggle_completion(task_id, by=self.actor)

    def add_comment(self, task_id: int, text: str) -> Comment:
        return self.coordinator.tasks.add_comment(task_id, text, self.actor)

    def assignee_of(self, task: Task) -> str:
        return self.coordinator.resolve_assignee(task)

    # ---- incidentes ----
    def categories(self) -> List[str]:
        return list(self.coordinator.settings.incident_categories)

    def incidents(self) -> List[Incident]:
        return self.nav.visible_incidents(self.coordinator.incidents.list_incidents())

    def report_incident(self, category: str, description: str, photo: Optional[str] = None) -> Incident:
        reporter = self.coordinator.settings.admin_incident_reporter
        return self.coordinator.incidents.create_incident(category, description, reporter, photo)

    def assign_incident(self, incident_id: int, assignee_name: str) -> Task:
        return self.coordinator.assign_incident_to_staff(incident_id, assignee_name)

    def review_incident(self, incident_id: int) -> Incident:
        return self.coordinator.incidents.start_review(incident_id)

    def resolve_incident(self, incident_id: int) -> Incident:
        return self.coordinator.incidents.resolve_incident(incident_id)

    # ---- personal ----
    def staff(self) -> List[StaffMember]:
        return self.coordinator.identity.list_staff()

    def add_staff(self, details: Dict[str, Any]) -> StaffMember:
        return self.coordinator.identity.add_staff(details)

    def update_staff(self, staff_id: int, details: Dict[str, Any]) -> StaffMember:
        return self.coordinator.identity.update_staff(staff_id, details)

    def delete_staff(self, staff_id: int) -> None:
        self.coordinator.delete_staff(staff_id)

    # ---- suministros ----
    def supply_requests(self) -> List[SupplyRequest]:
        return self.coordinator.supplies.list_requests()

    def next_supply_step(self, request: SupplyRequest) -> Optional[str]:
        return next_supply_status(request.status)

    def approve_supply(self, request_id: int) -> SupplyRequest:
        return self.coordinator.supplies.approve(request_id, by=self.actor)

    def deliver_supply(self, request_id: int) -> SupplyRequest:
        return self.coordinator.supplies.deliver(request_id, by=self.actor)


class WorkerView:
    kind: Literal["worker"] = "worker"

    def __init__(self, coordinator: WorkflowCoordinator, member: StaffMember):
        self.coordinator = coordinator
        self.member = member
        self.nav = WorkerNavigation()

    def change_tab(self, tab: str) -> None:
        self.nav.change_tab(tab)

    def profile(self) -> StaffMember:
        # refleja ediciones hechas por el administrador durante la sesión
        return self.coordinator.identity.get_staff(self.member.id)

    # ---- mis tareas ----
    def my_tasks(self) -> List[Task]:
        return self.coordinator.tasks_for(self.member)

    def _own_task(self, task_id: int) -> Task:
        task = self.coordinator.tasks.get_task(task_id)
        if all(t.id != task.id for t in self.my_tasks()):
            raise NotFound("Tarea no encontrada")
        return task

    def start_task(self, task_id: int) -> Task:
        self._own_task(task_id)
        return self.coordinator.tasks.start_task(task_id, by=self.member.name)

    def complete_task(self, task_id: int, photo: Optional[str] = None, note: Optional[str] = None) -> Task:
        self._own_task(task_id)
        return self.coordinator.tasks.complete_task(task_id, by=self.member.name, photo=photo, note=note)

    def toggle_completion(self, task_id: int) -> Task:
        self._own_task(task_id)
        return self.coordinator.tasks.toggle_completion(task_id, by=self.member.name)

    def add_comment(self, task_id: int, text: str) -> Comment:
        self._own_task(task_id)
        return self.coordinator.tasks.add_comment(task_id, text, self.member.name)

    # ---- incidentes ----
    def categories(self) -> List[str]:
        return list(self.coordinator.settings.incident_categories)

    def report_incident(self, category: str, description: str, photo: Optional[str] = None) -> Incident:
        return self.coordinator.incidents.create_incident(category, description, self.member.name, photo)

    # ---- suministros ----
    def request_supply(self, item_name: str) -> SupplyRequest:
        return self.coordinator.request_supply(item_name, self.member)

    def my_supply_requests(self) -> List[SupplyRequest]:
        return self.coordinator.supply_requests_for(self.member)


Session = Union[AdminView, WorkerView]


def login(coordinator: WorkflowCoordinator, role: str, credentials: Union[Credentials, Dict[str, Any]]) -> Session:
    principal = coordinator.identity.authenticate(role, credentials)
    if isinstance(principal, AdminSession):
        return AdminView(coordinator, principal)
    if isinstance(principal, StaffMember):
        return WorkerView(coordinator, principal)
    raise InvalidCredentials("Credenciales inválidas")
