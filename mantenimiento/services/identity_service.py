# mantenimiento/services/identity_service.py
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from mantenimiento.core.errors import InvalidCredentials, NotFound, from_pydantic
from mantenimiento.core.security import AdminCredentialProvider
from mantenimiento.models.staff import AdminSession, Credentials, StaffCreate, StaffMember, StaffUpdate
from mantenimiento.repositories.staff_repo import StaffRepo

logger = logging.getLogger(__name__)


class IdentityDirectory:
    """Registro de personal y verificación de credenciales."""

    def __init__(self, repo: StaffRepo, admin_credentials: AdminCredentialProvider):
        self.repo = repo
        self.admin_credentials = admin_credentials

    def authenticate(self, role: str, credentials: Union[Credentials, Dict[str, Any]]) -> Union[StaffMember, AdminSession]:
        try:
            creds = credentials if isinstance(credentials, Credentials) else Credentials(**(credentials or {}))
        except PydanticValidationError:
            raise InvalidCredentials("Credenciales inválidas")
        if role == "worker":
            # comparación exacta, sin hash
            member = next(
                (m for m in self.repo.all() if m.phone == creds.phone and m.password == creds.password),
                None,
            )
            if member is None:
                raise InvalidCredentials("Teléfono o contraseña incorrectos")
            return member
        if role == "admin":
            if creds.username and self.admin_credentials.verify(creds.username, creds.password):
                return AdminSession(username=creds.username)
            raise InvalidCredentials("Usuario o contraseña de administrador incorrectos")
        raise InvalidCredentials(f"Rol desconocido: {role}")

    def add_staff(self, details: Union[StaffCreate, Dict[str, Any]]) -> StaffMember:
        try:
            data = details if isinstance(details, StaffCreate) else StaffCreate(**details)
        except PydanticValidationError as e:
            raise from_pydantic(e)
        member = StaffMember(id=self.repo.next_id(), **data.model_dump())
        self.repo.insert(member)
        logger.info("add_staff: %s (id=%d)", member.name, member.id)
        return member

    def update_staff(self, staff_id: int, details: Union[StaffUpdate, Dict[str, Any]]) -> StaffMember:
        try:
            data = details if isinstance(details, StaffUpdate) else StaffUpdate(**details)
        except PydanticValidationError as e:
            raise from_pydantic(e)
        if self.repo.find_by_id(staff_id) is None:
            raise NotFound("Miembro del personal no encontrado")
        changes = data.model_dump(exclude_unset=True)
        # contraseña vacía = no cambiar
        if not (changes.get("password") or "").strip():
            changes.pop("password", None)
        changes = {k: v for k, v in changes.items() if v is not None or k == "email"}
        member = self.repo.update_by_id(staff_id, changes)
        logger.info("update_staff: id=%d campos=%s", staff_id, sorted(changes))
        return member

    def delete_staff(self, staff_id: int) -> None:
        # sin cascada: tareas e incidentes conservan el nombre
        if not self.repo.delete_by_id(staff_id):
            raise NotFound("Miembro del personal no encontrado")
        logger.info("delete_staff: id=%d", staff_id)

    def get_staff(self, staff_id: int) -> StaffMember:
        member = self.repo.find_by_id(staff_id)
        if member is None:
            raise NotFound("Miembro del personal no encontrado")
        return member

    def list_staff(self) -> List[StaffMember]:
        return self.repo.all()

    def find_by_name(self, name: str) -> Optional[StaffMember]:
        return self.repo.find_by_name(name)

