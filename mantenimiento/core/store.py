# mantenimiento/core/store.py
"""
Estado en memoria de la sesión.

El Store guarda un Snapshot inmutable con las cuatro colecciones. Cada
escritura reemplaza colecciones completas y publica un Snapshot nuevo a los
suscriptores (el renderer). Dentro de ``transaction()`` las escrituras se
acumulan y se publican juntas al salir del bloque.
"""
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from mantenimiento.models.incident import Incident
from mantenimiento.models.staff import StaffMember
from mantenimiento.models.supply import SupplyRequest
from mantenimiento.models.task import Task

logger = logging.getLogger(__name__)

COLLECTIONS = ("staff", "tasks", "incidents", "supply_requests")


class Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    staff: Tuple[StaffMember, ...] = ()
    tasks: Tuple[Task, ...] = ()
    incidents: Tuple[Incident, ...] = ()
    supply_requests: Tuple[SupplyRequest, ...] = ()
    version: int = 0


Listener = Callable[[Snapshot], None]


class Store:
    def __init__(self, snapshot: Optional[Snapshot] = None):
        self._snapshot = snapshot or Snapshot()
        self._staged: Optional[Dict[str, Tuple[Any, ...]]] = None
        self._depth = 0
        self._listeners: List[Listener] = []

    # ---- lectura ----
    @property
    def snapshot(self) -> Snapshot:
        """Snapshot publicado (lo que ve el renderer)."""
        return self._snapshot

    def read(self, collection: str) -> Tuple[Any, ...]:
        """Lee una colección incluyendo lo escrito en la transacción en curso."""
        _check(collection)
        if self._staged is not None and collection in self._staged:
            return self._staged[collection]
        return getattr(self._snapshot, collection)

    # ---- escritura ----
    def commit(self, **collections) -> None:
        for name in collections:
            _check(name)
        staged = {k: tuple(v) for k, v in collections.items()}
        if self._staged is not None:
            self._staged.update(staged)
            return
        self._publish(staged)

    @contextmanager
    def transaction(self) -> Iterator["Store"]:
        """Agrupa escrituras; si el bloque falla no se publica nada."""
        outer = self._depth == 0
        if outer:
            self._staged = {}
        self._depth += 1
        try:
            yield self
        except BaseException:
            if outer:
                self._staged = None
            raise
        finally:
            self._depth -= 1
        if outer:
            staged, self._staged = self._staged, None
            if staged:
                self._publish(staged)

    def _publish(self, staged: Dict[str, Tuple[Any, ...]]) -> None:
        self._snapshot = self._snapshot.model_copy(
            update={**staged, "version": self._snapshot.version + 1}
        )
        logger.debug("store: snapshot v%d (%s)", self._snapshot.version, ", ".join(sorted(staged)))
        for listener in list(self._listeners):
            listener(self._snapshot)

    # ---- suscripción ----
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- frontera de persistencia ----
    def export(self) -> Dict[str, Dict[int, dict]]:
        snap = self._snapshot
        return {
            name: {item.id: item.model_dump(mode="json") for item in getattr(snap, name)}
            for name in COLLECTIONS
        }

    @classmethod
    def from_export(cls, data: Dict[str, Dict[Any, dict]]) -> "Store":
        models = {
            "staff": StaffMember,
            "tasks": Task,
            "incidents": Incident,
            "supply_requests": SupplyRequest,
        }
        loaded = {
            name: tuple(models[name].model_validate(doc) for doc in (data.get(name) or {}).values())
            for name in COLLECTIONS
        }
        return cls(Snapshot(**loaded))


def _check(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise KeyError(f"Colección desconocida: {collection}")
