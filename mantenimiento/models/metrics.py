# mantenimiento/models/metrics.py
from pydantic import BaseModel
from typing import List


class CategoryShare(BaseModel):
    category: str
    count: int
    percentage: float


class StaffWorkload(BaseModel):
    staff_id: int
    name: str
    task_count: int       # tareas no completadas
    in_progress: bool


class DashboardMetrics(BaseModel):
    pending_tasks_count: int
    new_incidents_count: int
    active_staff_count: int
    completed_tasks_count: int
    total_tasks_count: int
    completion_percentage: int
    overdue_tasks_count: int
    incident_breakdown: List[CategoryShare]
    team_status: List[StaffWorkload]
