# mantenimiento/main.py
import logging
from typing import Optional

from mantenimiento.core.config import Settings, get_settings
from mantenimiento.core.logging_config import configure_logging
from mantenimiento.core.security import AdminCredentialProvider
from mantenimiento.core.seed import seed_demo_data
from mantenimiento.core.store import Store
from mantenimiento.services.workflow_service import WorkflowCoordinator

logger = logging.getLogger(__name__)


def create_coordinator(
    settings: Optional[Settings] = None,
    store: Optional[Store] = None,
    admin_credentials: Optional[AdminCredentialProvider] = None,
) -> WorkflowCoordinator:
    """
    Punto de arranque para el host: configura logging, crea el store de la
    sesión y, si SEED_DEMO_DATA está activo, carga los datos de ejemplo.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    coordinator = WorkflowCoordinator(store=store, settings=settings, admin_credentials=admin_credentials)
    if settings.seed_demo_data:
        seed_demo_data(coordinator)
    logger.info("create_coordinator: store v%d listo", coordinator.store.snapshot.version)
    return coordinator
