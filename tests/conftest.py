from datetime import datetime, timedelta, timezone

import pytest

from mantenimiento.core.config import Settings
from mantenimiento.core.store import Store
from mantenimiento.services.workflow_service import WorkflowCoordinator


class FixedClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 5, 6, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        admin_username="admin",
        admin_password="secreto",
        seed_demo_data=False,
    )


@pytest.fixture
def store():
    return Store()


@pytest.fixture
def coordinator(store, settings, clock):
    return WorkflowCoordinator(store=store, settings=settings, clock=clock)


@pytest.fixture
def ana(coordinator):
    return coordinator.identity.add_staff({"name": "Ana", "phone": "5551", "password": "pw-ana"})


@pytest.fixture
def luis(coordinator):
    return coordinator.identity.add_staff({"name": "Luis", "phone": "5552", "password": "pw-luis"})
