import pytest

from mantenimiento.core.errors import InvalidCredentials, NotFound, ValidationError
from mantenimiento.core.security import SettingsAdminCredentials, hash_password
from mantenimiento.models.staff import AdminSession


def test_add_staff_assigns_sequential_ids_most_recent_first(coordinator):
    """El id es max + 1 (o 1) y el nuevo miembro queda al inicio."""
    first = coordinator.identity.add_staff({"name": "Ana", "phone": "1", "password": "a"})
    second = coordinator.identity.add_staff({"name": "Luis", "phone": "2", "password": "b"})
    assert first.id == 1
    assert second.id == 2
    assert [m.name for m in coordinator.identity.list_staff()] == ["Luis", "Ana"]


def test_add_staff_after_delete_uses_max_plus_one(coordinator, ana, luis):
    """Tras borrar, el siguiente id sigue siendo max(id) + 1."""
    coordinator.identity.delete_staff(ana.id)
    third = coordinator.identity.add_staff({"name": "Eva", "phone": "3", "password": "c"})
    assert third.id == luis.id + 1


def test_add_staff_defaults_classification(ana):
    """Rol, turno y estado tienen valores por defecto."""
    assert (ana.role, ana.shift, ana.status) == ("General", "Matutino", "Activo")


def test_add_staff_requires_name_phone_password(coordinator):
    """Campos obligatorios vacíos bloquean el alta sin tocar el estado."""
    with pytest.raises(ValidationError) as exc:
        coordinator.identity.add_staff({"name": "  ", "phone": "1", "password": "x"})
    assert exc.value.status_code == 422
    assert coordinator.store.snapshot.staff == ()


def test_add_staff_rejects_unknown_role(coordinator):
    """Los roles fuera del catálogo se rechazan."""
    with pytest.raises(ValidationError):
        coordinator.identity.add_staff({"name": "Ana", "phone": "1", "password": "x", "role": "Chef"})


def test_update_staff_empty_password_keeps_previous(coordinator, ana):
    """Contraseña vacía = sin cambio."""
    coordinator.identity.update_staff(ana.id, {"password": "", "shift": "Nocturno"})
    member = coordinator.identity.get_staff(ana.id)
    assert member.password == "pw-ana"
    assert member.shift == "Nocturno"


def test_update_staff_non_empty_password_overwrites(coordinator, ana):
    """Una contraseña no vacía reemplaza la anterior."""
    coordinator.identity.update_staff(ana.id, {"password": "nueva"})
    assert coordinator.identity.get_staff(ana.id).password == "nueva"


def test_update_staff_unknown_id_is_not_found(coordinator):
    with pytest.raises(NotFound):
        coordinator.identity.update_staff(99, {"name": "X"})


def test_delete_staff_does_not_touch_tasks(coordinator, ana):
    """Borrar personal no reescribe las tareas que lo referencian."""
    task = coordinator.create_task("Limpiar", "", "Ana")
    coordinator.identity.delete_staff(ana.id)
    kept = coordinator.tasks.get_task(task.id)
    assert kept.assignee == "Ana"
    assert coordinator.resolve_assignee(kept) == "Ana"
    with pytest.raises(NotFound):
        coordinator.identity.delete_staff(ana.id)


def test_worker_authentication_is_exact(coordinator, ana):
    """Teléfono y contraseña deben coincidir exactamente (distingue mayúsculas)."""
    member = coordinator.identity.authenticate("worker", {"phone": "5551", "password": "pw-ana"})
    assert member.id == ana.id
    with pytest.raises(InvalidCredentials) as exc:
        coordinator.identity.authenticate("worker", {"phone": "5551", "password": "PW-ANA"})
    assert exc.value.status_code == 401


def test_admin_authentication_uses_provider(coordinator):
    """El administrador se valida contra el proveedor de credenciales."""
    session = coordinator.identity.authenticate("admin", {"username": "admin", "password": "secreto"})
    assert isinstance(session, AdminSession)
    with pytest.raises(InvalidCredentials):
        coordinator.identity.authenticate("admin", {"username": "admin", "password": "otra"})


def test_unknown_role_fails(coordinator):
    with pytest.raises(InvalidCredentials):
        coordinator.identity.authenticate("root", {"username": "admin", "password": "secreto"})


def test_admin_password_may_be_a_hash(settings):
    """ADMIN_PASSWORD acepta un hash de passlib."""
    hashed = settings.model_copy(update={"admin_password": hash_password("s3cr3t")})
    provider = SettingsAdminCredentials(hashed)
    assert provider.verify("admin", "s3cr3t")
    assert not provider.verify("admin", "otra")
    assert not provider.verify("root", "s3cr3t")


@pytest.mark.parametrize("credentials", [
    {"phone": 5551, "password": "pw-ana"},
    {"phone": "5551", "password": None},
])
def test_malformed_credentials_are_rejected(coordinator, ana, credentials):
    """Credenciales con tipos inválidos se rechazan como credenciales incorrectas."""
    with pytest.raises(InvalidCredentials) as exc:
        coordinator.identity.authenticate("worker", credentials)
    assert exc.value.status_code == 401
