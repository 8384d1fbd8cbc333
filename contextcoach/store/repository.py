"""In-memory repositories keyed by generated hex identifiers."""
from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class InMemoryRepository(Generic[T]):
    """Simple dictionary-backed store for one entity type.

    Entities are dataclasses carrying ``id`` and ``created_at`` attributes.
    Those with an ``updated_at`` attribute have it refreshed on every save.
    """

    def __init__(self) -> None:
        self._items: Dict[str, T] = {}

    def save(self, entity: T) -> T:
        now = datetime.now(timezone.utc)
        if getattr(entity, "id", None) is None:
            entity.id = secrets.token_hex(12)  # type: ignore[attr-defined]
        if getattr(entity, "created_at", None) is None:
            entity.created_at = now  # type: ignore[attr-defined]
        if hasattr(entity, "updated_at"):
            entity.updated_at = now  # type: ignore[attr-defined]
        self._items[entity.id] = entity  # type: ignore[attr-defined]
        return entity

    def get(self, entity_id: str) -> Optional[T]:
        return self._items.get(entity_id)

    def exists(self, entity_id: str) -> bool:
        return entity_id in self._items

    def list(self) -> List[T]:
        return list(self._items.values())

    def find(self, predicate: Callable[[T], bool]) -> List[T]:
        return [item for item in self._items.values() if predicate(item)]

    def delete(self, entity_id: str) -> bool:
        return self._items.pop(entity_id, None) is not None
