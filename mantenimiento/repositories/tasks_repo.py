# mantenimiento/repositories/tasks_repo.py
from typing import List

from mantenimiento.models.task import Task
from mantenimiento.repositories.base import CollectionRepo


class TasksRepo(CollectionRepo[Task]):
    collection = "tasks"

    def list_by_status(self, *statuses: str) -> List[Task]:
        return self.find(lambda t: t.status in statuses)
