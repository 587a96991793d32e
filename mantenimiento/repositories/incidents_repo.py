# mantenimiento/repositories/incidents_repo.py
from typing import List

from mantenimiento.models.incident import Incident
from mantenimiento.repositories.base import CollectionRepo


class IncidentsRepo(CollectionRepo[Incident]):
    collection = "incidents"

    def list_by_status(self, *statuses: str) -> List[Incident]:
        return self.find(lambda i: i.status in statuses)
