import pytest

from mantenimiento.core.errors import InvalidTransition, NotFound, ValidationError
from mantenimiento.services.metrics_service import completion_percentage, compute_dashboard_metrics
from mantenimiento.services.workflow_service import ELLIPSIS, preview


def test_assign_incident_scenario(coordinator, luis):
    """Incidente Nuevo → asignado a Luis crea la tarea y marca Asignado."""
    incident = coordinator.incidents.create_incident("Mantenimiento", "Leaky faucet", "Ana")
    assert incident.status == "Nuevo"

    task = coordinator.assign_incident_to_staff(incident, "Luis")

    assert task.assignee == "Luis"
    assert task.assignee_id == luis.id
    assert task.priority == "Media"
    assert task.due_date is None
    assert "Leaky faucet" in task.description
    assert task.incident_id == incident.id
    updated = coordinator.incidents.get_incident(incident.id)
    assert updated.status == "Asignado"
    assert updated.task_id == task.id


def test_assign_incident_to_unknown_name_keeps_free_text(coordinator):
    """Se puede asignar a un nombre que no está en el directorio."""
    incident = coordinator.incidents.create_incident("Daño", "Vidrio roto", "Ana")
    task = coordinator.assign_incident_to_staff(incident.id, "Externo")
    assert task.assignee == "Externo"
    assert task.assignee_id is None


def test_assign_incident_is_published_as_one_snapshot(coordinator):
    """Tarea e incidente se ven juntos: un solo snapshot nuevo."""
    incident = coordinator.incidents.create_incident("Mantenimiento", "Leaky faucet", "Ana")
    seen = []
    coordinator.store.subscribe(seen.append)

    coordinator.assign_incident_to_staff(incident, "Luis")

    assert len(seen) == 1
    snap = seen[0]
    assert len(snap.tasks) == 1
    assert snap.tasks[0].incident_id == incident.id
    assert snap.incidents[0].status == "Asignado"


def test_assign_incident_only_once(coordinator):
    """Un incidente pasa a Asignado una sola vez; el segundo intento no crea tarea."""
    incident = coordinator.incidents.create_incident("Otro", "Puerta trabada", "Ana")
    coordinator.assign_incident_to_staff(incident, "Luis")
    with pytest.raises(InvalidTransition):
        coordinator.assign_incident_to_staff(incident, "Ana")
    assert len(coordinator.tasks.list_tasks()) == 1


def test_assign_incident_rolls_back_when_task_is_invalid(coordinator):
    """Si la tarea no se puede crear el incidente sigue Nuevo."""
    incident = coordinator.incidents.create_incident("Otro", "Puerta trabada", "Ana")
    with pytest.raises(ValidationError):
        coordinator.assign_incident_to_staff(incident, "   ")
    assert coordinator.incidents.get_incident(incident.id).status == "Nuevo"
    assert coordinator.tasks.list_tasks() == []


def test_assign_missing_incident(coordinator):
    with pytest.raises(NotFound):
        coordinator.assign_incident_to_staff(7, "Luis")


def test_assigned_task_title_is_truncated_preview(coordinator, settings):
    """El título es un recorte de la descripción con elipsis."""
    long_text = "Fuga de agua en el techo del gimnasio junto a las gradas del lado norte"
    incident = coordinator.incidents.create_incident("Mantenimiento", long_text, "Ana", photo="img-b64")
    task = coordinator.assign_incident_to_staff(incident, "Luis")
    assert task.title.endswith(ELLIPSIS)
    assert len(task.title) <= settings.task_title_preview_length + 1
    assert task.description == long_text
    assert task.photo == "img-b64"


def test_preview_keeps_short_text():
    assert preview("Grifo", 40) == "Grifo"
    assert preview("abcdef", 3) == "abc" + ELLIPSIS


def test_completion_percentage():
    """0 tareas → 0; 3 de 4 → 75."""
    assert completion_percentage(0, 0) == 0
    assert completion_percentage(3, 4) == 75


def test_dashboard_metrics(coordinator, ana, luis):
    coordinator.identity.update_staff(luis.id, {"status": "De vacaciones"})
    tasks = [coordinator.create_task(f"T{n}", "", "Ana") for n in range(4)]
    for t in tasks[:3]:
        coordinator.tasks.toggle_completion(t.id)
    coordinator.incidents.create_incident("Mantenimiento", "Grifo", "Ana")
    coordinator.incidents.create_incident("Mantenimiento", "Luz", "Ana")
    coordinator.incidents.create_incident("Daño", "Vidrio", "Luis")
    coordinator.incidents.create_incident("Suministros", "Papel", "Luis")

    metrics = coordinator.dashboard()

    assert metrics.pending_tasks_count == 1
    assert metrics.completion_percentage == 75
    assert metrics.new_incidents_count == 4
    assert metrics.active_staff_count == 1
    shares = {s.category: (s.count, s.percentage) for s in metrics.incident_breakdown}
    assert shares == {"Suministros": (1, 25.0), "Daño": (1, 25.0), "Mantenimiento": (2, 50.0)}
    assert sum(s.percentage for s in metrics.incident_breakdown) == pytest.approx(100.0)


def test_dashboard_empty(coordinator):
    metrics = compute_dashboard_metrics([], [], [])
    assert metrics.completion_percentage == 0
    assert metrics.incident_breakdown == []
    assert metrics.team_status == []


def test_team_status(coordinator, ana, luis):
    """Carga activa por persona y bandera En Progreso."""
    a = coordinator.create_task("A", "", "Ana")
    coordinator.create_task("B", "", "Ana")
    done = coordinator.create_task("C", "", "Luis")
    coordinator.tasks.start_task(a.id)
    coordinator.tasks.toggle_completion(done.id)

    status = {w.name: (w.task_count, w.in_progress) for w in coordinator.team_status()}
    assert status == {"Ana": (2, True), "Luis": (0, False)}


def test_renamed_staff_keeps_their_tasks(coordinator, ana):
    """Las tareas se resuelven por id: renombrar no las pierde."""
    task = coordinator.create_task("A", "", "Ana")
    coordinator.identity.update_staff(ana.id, {"name": "Ana María"})
    member = coordinator.identity.get_staff(ana.id)
    assert [t.id for t in coordinator.tasks_for(member)] == [task.id]
    assert coordinator.resolve_assignee(task) == "Ana María"


def test_deleted_staff_id_reused_does_not_inherit_tasks(coordinator, ana, luis):
    """Un id reutilizado no hereda las tareas del miembro borrado."""
    task = coordinator.create_task("Barrer", "", "Luis")
    coordinator.delete_staff(luis.id)
    pedro = coordinator.identity.add_staff({"name": "Pedro", "phone": "5553", "password": "pw-pedro"})

    assert pedro.id == luis.id
    assert coordinator.tasks_for(pedro) == []
    kept = coordinator.tasks.get_task(task.id)
    assert kept.assignee == "Luis"
    assert kept.assignee_id is None
    assert coordinator.resolve_assignee(kept) == "Luis"
    status = {w.name: w.task_count for w in coordinator.team_status()}
    assert status == {"Pedro": 0, "Ana": 0}


def test_delete_staff_is_published_as_one_snapshot(coordinator, ana):
    coordinator.create_task("A", "", "Ana")
    coordinator.request_supply("Mop", ana)
    seen = []
    coordinator.store.subscribe(seen.append)

    coordinator.delete_staff(ana.id)

    assert len(seen) == 1
    snap = seen[0]
    assert snap.staff == ()
    assert snap.tasks[0].assignee_id is None
    assert snap.supply_requests[0].requested_by_id is None


def test_delete_missing_staff_changes_nothing(coordinator, ana):
    coordinator.create_task("A", "", "Ana")
    before = coordinator.store.snapshot
    with pytest.raises(NotFound):
        coordinator.delete_staff(99)
    assert coordinator.store.snapshot is before


def test_renamed_staff_keeps_their_supply_requests(coordinator, ana):
    """Las solicitudes también se resuelven por id."""
    req = coordinator.request_supply("Mop", ana)
    assert req.requested_by_id == ana.id
    coordinator.identity.update_staff(ana.id, {"name": "Ana María"})
    member = coordinator.identity.get_staff(ana.id)
    assert [r.id for r in coordinator.supply_requests_for(member)] == [req.id]


def test_supply_requests_without_id_match_by_name(coordinator, ana):
    """Solicitudes cargadas sin id se asocian por el nombre guardado."""
    req = coordinator.supplies.create_request("Cloro", "Ana")
    assert req.requested_by_id is None
    assert [r.id for r in coordinator.supply_requests_for(ana)] == [req.id]
