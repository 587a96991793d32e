# mantenimiento/services/task_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from mantenimiento.core.errors import NotFound, ValidationError, from_pydantic
from mantenimiento.models.common import OPEN_TASK_STATES, TASK_TRANSITIONS, ensure_transition
from mantenimiento.models.task import Comment, StateEvent, Task, TaskCreate, TaskUpdate
from mantenimiento.repositories.base import next_id
from mantenimiento.repositories.tasks_repo import TasksRepo

logger = logging.getLogger(__name__)

EVIDENCE_COMMENT = "Tarea completada con evidencia fotográfica."


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_overdue(task: Task, now: Optional[datetime] = None) -> bool:
    if task.due_date is None or task.status == "Completada":
        return False
    now = now or utcnow()
    due = task.due_date
    # fechas sin zona se interpretan en UTC
    if due.tzinfo is None and now.tzinfo is not None:
        due = due.replace(tzinfo=timezone.utc)
    elif due.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return due < now


class TaskRegistry:
    def __init__(self, repo: TasksRepo, clock: Callable[[], datetime] = utcnow):
        self.repo = repo
        self.clock = clock

    # ---- consultas ----
    def get_task(self, task_id: int) -> Task:
        task = self.repo.find_by_id(task_id)
        if task is None:
            raise NotFound("Tarea no encontrada")
        return task

    def list_tasks(self, pending_only: bool = False) -> List[Task]:
        if pending_only:
            return self.repo.list_by_status(*OPEN_TASK_STATES)
        return self.repo.all()

    def pending_count(self) -> int:
        return self.repo.count(lambda t: t.status != "Completada")

    def overdue(self) -> List[Task]:
        now = self.clock()
        return self.repo.find(lambda t: is_overdue(t, now))

    # ---- comandos ----
    def create_task(
        self,
        title: str,
        description: str = "",
        assignee: str = "",
        priority: str = "Media",
        due_date: Optional[datetime] = None,
        photo: Optional[str] = None,
        assignee_id: Optional[int] = None,
        incident_id: Optional[int] = None,
        by: Optional[str] = None,
    ) -> Task:
        try:
            data = TaskCreate(
                title=title, description=description or "", assignee=assignee,
                priority=priority, due_date=due_date, photo=photo,
            )
        except PydanticValidationError as e:
            raise from_pydantic(e)
        now = self.clock()
        task = Task(
            id=self.repo.next_id(),
            status="Asignada",
            assignee_id=assignee_id,
            incident_id=incident_id,
            created_at=now,
            updated_at=now,
            state_history=[StateEvent(to_status="Asignada", at=now, by=by)],
            **data.model_dump(),
        )
        self.repo.insert(task)
        logger.info("create_task: id=%d '%s' → %s", task.id, task.title, task.assignee)
        return task

    def update_task(
        self,
        task_id: int,
        partial: Union[TaskUpdate, Dict[str, Any]],
        by: Optional[str] = None,
        assignee_id: Optional[int] = None,
    ) -> Task:
        """Setter directo del administrador: no valida el orden de estados."""
        try:
            data = partial if isinstance(partial, TaskUpdate) else TaskUpdate(**partial)
        except PydanticValidationError as e:
            raise from_pydantic(e)
        task = self.get_task(task_id)
        changes = data.model_dump(exclude_unset=True)
        # due_date y photo aceptan None para limpiar
        changes = {k: v for k, v in changes.items() if v is not None or k in ("due_date", "photo")}
        if "assignee" in changes:
            changes["assignee_id"] = assignee_id
        if "status" in changes and changes["status"] != task.status:
            changes.update(self._status_changes(task, changes["status"], by))
        changes["updated_at"] = self.clock()
        updated = self.repo.update_by_id(task_id, changes)
        logger.info("update_task: id=%d campos=%s", task_id, sorted(k for k in changes if k != "updated_at"))
        return updated

    def start_task(self, task_id: int, by: Optional[str] = None) -> Task:
        return self._transition(task_id, "En Progreso", by)

    def complete_task(
        self,
        task_id: int,
        by: Optional[str] = None,
        photo: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Task:
        task = self.get_task(task_id)
        ensure_transition(TASK_TRANSITIONS, task.status, "Completada")
        text = (note or "").strip() or (EVIDENCE_COMMENT if photo else "")
        with self.repo.store.transaction():
            if photo:
                self.repo.update_by_id(task_id, {"photo": photo})
            if text:
                self.add_comment(task_id, text, by or task.assignee)
            return self._transition(task_id, "Completada", by)

    def toggle_completion(self, task_id: int, by: Optional[str] = None) -> Task:
        """Atajo explícito: Completada → Asignada, cualquier otro → Completada."""
        task = self.get_task(task_id)
        new_status = "Asignada" if task.status == "Completada" else "Completada"
        changes = self._status_changes(task, new_status, by)
        changes["updated_at"] = self.clock()
        updated = self.repo.update_by_id(task_id, changes)
        logger.info("toggle_completion: id=%d %s → %s", task_id, task.status, new_status)
        return updated

    def add_comment(self, task_id: int, text: str, author: str) -> Comment:
        if not text or not text.strip():
            raise ValidationError("El comentario no puede estar vacío")
        task = self.get_task(task_id)
        now = self.clock()
        comment = Comment(id=next_id(task.comments), author=author, text=text.strip(), created_at=now)
        self.repo.update_by_id(task_id, {"comments": [*task.comments, comment], "updated_at": now})
        logger.info("add_comment: tarea=%d comentario=%d (%s)", task_id, comment.id, author)
        return comment

    # ---- internos ----
    def _transition(self, task_id: int, new_status: str, by: Optional[str]) -> Task:
        task = self.get_task(task_id)
        ensure_transition(TASK_TRANSITIONS, task.status, new_status)
        changes = self._status_changes(task, new_status, by)
        changes["updated_at"] = self.clock()
        updated = self.repo.update_by_id(task_id, changes)
        logger.info("transition_task: id=%d %s → %s", task_id, task.status, new_status)
        return updated

    def _status_changes(self, task: Task, new_status: str, by: Optional[str]) -> Dict[str, Any]:
        now = self.clock()
        event = StateEvent(from_status=task.status, to_status=new_status, at=now, by=by)
        return {
            "status": new_status,
            "completed_at": now if new_status == "Completada" else None,
            "state_history": [*task.state_history, event],
        }
