"""
Abstract record store.

The ledger engines only talk to this interface, so the same business rules
run against the in-memory store in tests and the SQL store in production.
Records are domain dataclasses keyed by their ``id`` attribute; the store
knows nothing about how users, transactions and loans relate.
"""

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional

USERS = "users"
TRANSACTIONS = "transactions"
LOANS = "loans"
KINDS = (USERS, TRANSACTIONS, LOANS)

Predicate = Callable[[Any], bool]


class RecordStore(ABC):
    """Keyed collections of users, transactions and loans plus a session slot"""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._depth = 0

    @abstractmethod
    def list(self, kind: str) -> List[Any]:
        """All records of a kind, in insertion order"""

    @abstractmethod
    def upsert_by_key(self, kind: str, key: str, record: Any) -> None:
        """Insert the record, or replace the one stored under key in place"""

    @abstractmethod
    def get_session(self) -> Optional[dict]:
        """Current session value, or None"""

    @abstractmethod
    def set_session(self, value: dict) -> None:
        """Replace the current session value"""

    @abstractmethod
    def clear_session(self) -> None:
        """Empty the session slot"""

    @abstractmethod
    def _begin(self) -> None:
        """Start an outermost atomic block"""

    @abstractmethod
    def _commit(self) -> None:
        """Make the outermost block's writes durable"""

    @abstractmethod
    def _rollback(self) -> None:
        """Discard every write since the outermost block began"""

    def find_one(self, kind: str, predicate: Predicate) -> Optional[Any]:
        """First record matching predicate, in insertion order"""
        for record in self.list(kind):
            if predicate(record):
                return record
        return None

    def filter(self, kind: str, predicate: Predicate) -> List[Any]:
        """All records matching predicate, in insertion order"""
        return [record for record in self.list(kind) if predicate(record)]

    @property
    def in_atomic(self) -> bool:
        return self._depth > 0

    @contextmanager
    def atomic(self) -> Iterator["RecordStore"]:
        """
        Group writes so they all land or none do.

        Holds the store lock for the whole block. Nested blocks join the
        outermost one; an exception anywhere inside rolls everything back
        and propagates.
        """
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                self._begin()
            self._depth += 1
            try:
                yield self
            except BaseException:
                self._depth -= 1
                if outermost:
                    self._rollback()
                raise
            self._depth -= 1
            if outermost:
                self._commit()


def check_kind(kind: str) -> None:
    """Reject collection names the store does not hold"""
    if kind not in KINDS:
        raise ValueError(f"Unknown record kind: {kind!r}")
