# mantenimiento/core/seed.py
import logging

logger = logging.getLogger(__name__)

DEMO_STAFF = [
    {"name": "Luis García", "phone": "5210987654321", "password": "password456", "role": "Electricista"},
    {"name": "Ana Pérez", "phone": "5211234567890", "password": "password123", "role": "Limpieza"},
]

DEMO_TASKS = [
    # (título, responsable, estado final)
    ("Desinfectar baños del 2do piso", "Luis García", "Asignada"),
    ("Vaciar papeleras del patio", "Ana Pérez", "Asignada"),
    ("Revisar luces del pasillo B", "Luis García", "En Progreso"),
    ("Limpiar Salón A-101", "Ana Pérez", "Completada"),
]

DEMO_INCIDENTS = [
    # (categoría, descripción, reportado por, estado final)
    ("Suministros", "Falta papel higiénico en el 3er piso", "Luis García", "Resuelto"),
    ("Mantenimiento", "Grifo goteando en baño de hombres", "Ana Pérez", "Nuevo"),
]


def seed_demo_data(coordinator) -> bool:
    """
    Carga datos de ejemplo si el store está vacío.
    Idempotente: devuelve False sin tocar nada si ya hay personal, tareas o incidentes.
    """
    snap = coordinator.store.snapshot
    if snap.staff or snap.tasks or snap.incidents:
        logger.info("seed_demo_data: store con datos, no se modifica.")
        return False

    with coordinator.store.transaction():
        for s in DEMO_STAFF:
            coordinator.identity.add_staff(s)
        for title, assignee, status in DEMO_TASKS:
            task = coordinator.create_task(title, "", assignee, "Media", None, by="seed")
            if status == "En Progreso":
                coordinator.tasks.start_task(task.id, by="seed")
            elif status == "Completada":
                coordinator.tasks.toggle_completion(task.id, by="seed")
        for category, description, reporter, status in DEMO_INCIDENTS:
            incident = coordinator.incidents.create_incident(category, description, reporter)
            if status == "Resuelto":
                task = coordinator.assign_incident_to_staff(incident.id, reporter)
                coordinator.tasks.toggle_completion(task.id, by="seed")
                coordinator.incidents.resolve_incident(incident.id)

    logger.info("seed_demo_data: %d personas, %d tareas, %d incidentes",
                len(DEMO_STAFF), len(DEMO_TASKS), len(DEMO_INCIDENTS))
    return True
