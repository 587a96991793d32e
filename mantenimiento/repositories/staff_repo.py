# mantenimiento/repositories/staff_repo.py
from typing import Optional

from mantenimiento.models.staff import StaffMember
from mantenimiento.repositories.base import CollectionRepo


class StaffRepo(CollectionRepo[StaffMember]):
    collection = "staff"

    def find_by_name(self, name: str) -> Optional[StaffMember]:
        return next((m for m in self.all() if m.name == name), None)
