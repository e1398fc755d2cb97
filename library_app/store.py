"""Record storage.

``Store`` is the contract the lending service and the resolvers depend on;
``MemoryStore`` is the dict-backed implementation used by the application.
Lookups are exact matches on the record id: callers normalize ids first.
"""
from __future__ import annotations

import logging
from typing import Dict, Generic, Iterable, List, Optional, Protocol, Tuple, TypeVar

logger = logging.getLogger(__name__)


class Identifiable(Protocol):
    FIELDS: Tuple[str, ...]
    id: str

    def replace(self, **changes): ...


T = TypeVar("T", bound=Identifiable)


class Store(Protocol[T]):
    def get(self, id: str) -> Optional[T]: ...
    def get_all(self) -> List[T]: ...
    def create(self, record: T) -> T: ...
    def update(self, record_id: str, **fields) -> Optional[T]: ...
    def delete(self, id: str) -> bool: ...
    def exists(self, id: str) -> bool: ...


class MemoryStore(Generic[T]):
    """In-memory store keyed by record id.

    Not synchronized: concurrent writers must be serialized by the caller
    (``LibraryService`` holds a lock around each operation).
    """

    def __init__(self, initial: Optional[Iterable[T]] = None) -> None:
        self._records: Dict[str, T] = {}
        for record in initial or ():
            self.create(record)

    def get(self, id: str) -> Optional[T]:
        return self._records.get(id)

    def get_all(self) -> List[T]:
        return list(self._records.values())

    def create(self, record: T) -> T:
        """Insert ``record``, overwriting any record with the same id."""
        self._records[record.id] = record
        return record

    def update(self, record_id: str, **fields) -> Optional[T]:
        """Shallow-merge ``fields`` into the record stored under ``record_id``.

        The stored record is replaced by a new instance; records handed out
        earlier keep their old values.  Returns None, without writing, when
        ``record_id`` is unknown.
        """
        existing = self._records.get(record_id)
        if existing is None:
            return None

        if "id" in fields:
            raise ValueError("Record id cannot be changed by update.")
        unknown = sorted(set(fields) - set(existing.FIELDS))
        if unknown:
            raise ValueError(f"Unknown field(s) for {type(existing).__name__}: {', '.join(unknown)}")

        updated = existing.replace(**fields)
        self._records[record_id] = updated
        logger.debug("Updated %s %s: %s", type(existing).__name__, record_id, sorted(fields))
        return updated

    def delete(self, id: str) -> bool:
        return self._records.pop(id, None) is not None

    def exists(self, id: str) -> bool:
        return id in self._records

    def __contains__(self, id: object) -> bool:
        return id in self._records

    def __len__(self) -> int:
        return len(self._records)
