# mantenimiento/services/metrics_service.py
from __future__ import annotations
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from mantenimiento.models.incident import Incident
from mantenimiento.models.metrics import DashboardMetrics, StaffWorkload
from mantenimiento.models.staff import StaffMember
from mantenimiento.models.task import Task
from mantenimiento.services.incident_service import category_breakdown
from mantenimiento.services.task_service import is_overdue

OPEN_SET = {"Asignada", "En Progreso"}


def completion_percentage(completed: int, total: int) -> int:
    """Porcentaje entero de avance; 0 si no hay tareas."""
    if total <= 0:
        return 0
    return int(round(completed / total * 100))


def task_belongs_to(task: Task, member: StaffMember) -> bool:
    if task.assignee_id is not None:
        return task.assignee_id == member.id
    return task.assignee == member.name


def workload(staff: Iterable[StaffMember], tasks: Sequence[Task]) -> List[StaffWorkload]:
    """Tareas activas por persona y si tiene alguna En Progreso."""
    out: List[StaffWorkload] = []
    for member in staff:
        active = [t for t in tasks if t.status in OPEN_SET and task_belongs_to(t, member)]
        out.append(StaffWorkload(
            staff_id=member.id,
            name=member.name,
            task_count=len(active),
            in_progress=any(t.status == "En Progreso" for t in active),
        ))
    return out


def compute_dashboard_metrics(
    tasks: Sequence[Task],
    incidents: Sequence[Incident],
    staff: Sequence[StaffMember],
    now: Optional[datetime] = None,
) -> DashboardMetrics:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status == "Completada")
    return DashboardMetrics(
        pending_tasks_count=total - completed,
        new_incidents_count=sum(1 for i in incidents if i.status == "Nuevo"),
        active_staff_count=sum(1 for m in staff if m.status == "Activo"),
        completed_tasks_count=completed,
        total_tasks_count=total,
        completion_percentage=completion_percentage(completed, total),
        overdue_tasks_count=sum(1 for t in tasks if is_overdue(t, now)),
        incident_breakdown=category_breakdown(incidents),
        team_status=workload(staff, tasks),
    )
