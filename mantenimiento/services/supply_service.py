# mantenimiento/services/supply_service.py
import logging
from datetime import datetime
from typing import Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from mantenimiento.core.errors import NotFound, ValidationError, from_pydantic
from mantenimiento.models.common import SUPPLY_FLOW, SUPPLY_TRANSITIONS, ensure_transition, next_supply_status
from mantenimiento.models.staff import StaffMember
from mantenimiento.models.supply import SupplyRequest, SupplyRequestCreate
from mantenimiento.models.task import StateEvent
from mantenimiento.repositories.supplies_repo import SuppliesRepo
from mantenimiento.services.task_service import utcnow

logger = logging.getLogger(__name__)


class SupplyRegistry:
    def __init__(self, repo: SuppliesRepo, clock: Callable[[], datetime] = utcnow):
        self.repo = repo
        self.clock = clock

    def get_request(self, request_id: int) -> SupplyRequest:
        req = self.repo.find_by_id(request_id)
        if req is None:
            raise NotFound("Solicitud de suministro no encontrada")
        return req

    def list_requests(self, requested_by: Optional[StaffMember] = None) -> List[SupplyRequest]:
        if requested_by is not None:
            return self.repo.list_by_requester(requested_by.id, requested_by.name)
        return self.repo.all()

    def create_request(
        self,
        item_name: str,
        requested_by: str,
        requested_by_id: Optional[int] = None,
    ) -> SupplyRequest:
        try:
            data = SupplyRequestCreate(item_name=item_name, requested_by=requested_by)
        except PydanticValidationError as e:
            raise from_pydantic(e)
        now = self.clock()
        req = SupplyRequest(
            id=self.repo.next_id(),
            requested_by_id=requested_by_id,
            status="Pendiente",
            timestamp=now,
            updated_at=now,
            state_history=[StateEvent(to_status="Pendiente", at=now, by=data.requested_by)],
            **data.model_dump(),
        )
        self.repo.insert(req)
        logger.info("create_request: id=%d '%s' por %s", req.id, req.item_name, req.requested_by)
        return req

    def advance_status(self, request_id: int, new_status: str, by: Optional[str] = None) -> SupplyRequest:
        if new_status not in SUPPLY_FLOW:
            raise ValidationError(f"Estado de suministro desconocido: {new_status}")
        req = self.get_request(request_id)
        # solo el siguiente paso; retrocesos, saltos y repeticiones se rechazan
        ensure_transition(SUPPLY_TRANSITIONS, req.status, new_status)
        now = self.clock()
        event = StateEvent(from_status=req.status, to_status=new_status, at=now, by=by)
        updated = self.repo.update_by_id(
            request_id,
            {"status": new_status, "updated_at": now, "state_history": [*req.state_history, event]},
        )
        logger.info("advance_status: suministro=%d %s → %s", request_id, req.status, new_status)
        return updated

    def approve(self, request_id: int, by: Optional[str] = None) -> SupplyRequest:
        return self.advance_status(request_id, "Aprobado", by)

    def deliver(self, request_id: int, by: Optional[str] = None) -> SupplyRequest:
        return self.advance_status(request_id, "Entregado", by)

    def next_step(self, request_id: int) -> Optional[str]:
        return next_supply_status(self.get_request(request_id).status)
