# mantenimiento/api/navigation.py
from typing import Dict, List, Literal

from mantenimiento.core.errors import ValidationError
from mantenimiento.models.incident import Incident
from mantenimiento.models.task import Task

AdminTab = Literal["dashboard","tasks","incidents","staff","supplies","chat"]
WorkerTab = Literal["my-tasks","report","supplies","chat","profile"]
Metric = Literal["pendingTasks","newIncidents","staff"]
TaskFilter = Literal["all","pending"]
IncidentFilter = Literal["all","new"]

ADMIN_TITLES: Dict[str, str] = {
    "dashboard": "Panel de Control",
    "tasks": "Tareas",
    "incidents": "Incidentes",
    "staff": "Gestión de Personal",
    "supplies": "Suministros",
    "chat": "Chat",
}

WORKER_TITLES: Dict[str, str] = {
    "my-tasks": "Mis Tareas",
    "report": "Reportar Incidente",
    "supplies": "Suministros",
    "chat": "Chat",
    "profile": "Mi Perfil",
}

METRIC_TARGETS: Dict[str, tuple] = {
    # métrica -> (pestaña, título, filtro)
    "pendingTasks": ("tasks", "Tareas Pendientes", "pending"),
    "newIncidents": ("incidents", "Incidentes Nuevos", "new"),
    "staff": ("staff", "Gestión de Personal", None),
}


class AdminNavigation:
    """Pestaña activa y filtros transitorios de las listas del administrador."""

    def __init__(self):
        self.active_tab: str = "dashboard"
        self.title: str = ADMIN_TITLES["dashboard"]
        self.task_filter: TaskFilter = "all"
        self.incident_filter: IncidentFilter = "all"

    def change_tab(self, tab: str, title: str = None) -> None:
        if tab not in ADMIN_TITLES:
            raise ValidationError(f"Pestaña desconocida: {tab}")
        self.active_tab = tab
        self.title = title or ADMIN_TITLES[tab]
        # el filtro solo vive mientras su lista está activa
        if tab != "tasks":
            self.task_filter = "all"
        if tab != "incidents":
            self.incident_filter = "all"

    def open_metric(self, metric: str) -> None:
        if metric not in METRIC_TARGETS:
            raise ValidationError(f"Métrica desconocida: {metric}")
        tab, title, flt = METRIC_TARGETS[metric]
        self.change_tab(tab, title)
        if tab == "tasks":
            self.task_filter = flt
        elif tab == "incidents":
            self.incident_filter = flt

    def visible_tasks(self, tasks: List[Task]) -> List[Task]:
        if self.task_filter == "pending":
            return [t for t in tasks if t.status != "Completada"]
        return list(tasks)

    def visible_incidents(self, incidents: List[Incident]) -> List[Incident]:
        if self.incident_filter == "new":
            return [i for i in incidents if i.status == "Nuevo"]
        return list(incidents)


class WorkerNavigation:
    def __init__(self):
        self.active_tab: str = "my-tasks"
        self.title: str = WORKER_TITLES["my-tasks"]

    def change_tab(self, tab: str) -> None:
        if tab not in WORKER_TITLES:
            raise ValidationError(f"Pestaña desconocida: {tab}")
        self.active_tab = tab
        self.title = WORKER_TITLES[tab]
