# mantenimiento/repositories/supplies_repo.py
from typing import List, Optional

from mantenimiento.models.supply import SupplyRequest
from mantenimiento.repositories.base import CollectionRepo


class SuppliesRepo(CollectionRepo[SupplyRequest]):
    collection = "supply_requests"

    def list_by_requester(self, staff_id: Optional[int], name: str) -> List[SupplyRequest]:
        # por id si la solicitud lo tiene; si no, por el nombre guardado
        return self.find(
            lambda r: r.requested_by_id == staff_id if r.requested_by_id is not None else r.requested_by == name
        )
