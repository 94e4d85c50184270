"""In-memory record store for tests and embedded use"""

import copy
from typing import Any, Dict, List, Optional

from bassline_ledger.infrastructure.store.interface import KINDS, RecordStore, check_kind


class InMemoryRecordStore(RecordStore):
    """
    Dict-backed store holding deep copies of every record.

    Callers never share objects with the store, so mutating a returned
    record has no effect until it is written back with upsert_by_key.
    """

    def __init__(self) -> None:
        super().__init__()
        self._collections: Dict[str, List[Any]] = {kind: [] for kind in KINDS}
        self._session: Optional[dict] = None
        self._snapshot = None

    def list(self, kind: str) -> List[Any]:
        check_kind(kind)
        with self._lock:
            return copy.deepcopy(self._collections[kind])

    def upsert_by_key(self, kind: str, key: str, record: Any) -> None:
        check_kind(kind)
        with self._lock:
            # Replace the whole collection so readers never see a half-applied write
            records = list(self._collections[kind])
            stored = copy.deepcopy(record)
            for index, existing in enumerate(records):
                if existing.id == key:
                    records[index] = stored
                    break
            else:
                records.append(stored)
            self._collections[kind] = records

    def get_session(self) -> Optional[dict]:
        return copy.deepcopy(self._session)

    def set_session(self, value: dict) -> None:
        with self._lock:
            self._session = copy.deepcopy(value)

    def clear_session(self) -> None:
        with self._lock:
            self._session = None

    def _begin(self) -> None:
        self._snapshot = (dict(self._collections), self._session)

    def _commit(self) -> None:
        self._snapshot = None

    def _rollback(self) -> None:
        self._collections, self._session = self._snapshot
        self._snapshot = None
