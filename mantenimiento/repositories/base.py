# mantenimiento/repositories/base.py
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from mantenimiento.core.store import Store

M = TypeVar("M", bound=BaseModel)


def next_id(items) -> int:
    """max(id) + 1, o 1 si la colección está vacía."""
    return max((i.id for i in items), default=0) + 1


class CollectionRepo(Generic[M]):
    """Acceso a una colección del Store. Cada escritura reemplaza la colección completa."""
    collection: str = ""

    def __init__(self, store: Store):
        self.store = store

    def all(self) -> List[M]:
        return list(self.store.read(self.collection))

    def find_by_id(self, item_id: int) -> Optional[M]:
        return next((i for i in self.store.read(self.collection) if i.id == item_id), None)

    def find(self, pred: Callable[[M], bool]) -> List[M]:
        return [i for i in self.store.read(self.collection) if pred(i)]

    def count(self, pred: Optional[Callable[[M], bool]] = None) -> int:
        items = self.store.read(self.collection)
        if pred is None:
            return len(items)
        return sum(1 for i in items if pred(i))

    def next_id(self) -> int:
        return next_id(self.store.read(self.collection))

    def insert(self, item: M) -> M:
        # más reciente primero (convención de presentación)
        self.store.commit(**{self.collection: (item, *self.store.read(self.collection))})
        return item

    def update_by_id(self, item_id: int, changes: Dict[str, Any]) -> Optional[M]:
        updated: Optional[M] = None
        items = []
        for i in self.store.read(self.collection):
            if i.id == item_id:
                i = i.model_copy(update=changes)
                updated = i
            items.append(i)
        if updated is not None:
            self.store.commit(**{self.collection: items})
        return updated

    def delete_by_id(self, item_id: int) -> bool:
        items = self.store.read(self.collection)
        kept = [i for i in items if i.id != item_id]
        if len(kept) == len(items):
            return False
        self.store.commit(**{self.collection: kept})
        return True
