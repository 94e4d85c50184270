"""Record store backed by a SQLAlchemy session"""

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from sqlalchemy.orm import Session

from bassline_ledger.domain.models import Loan, Payment, Transaction, User
from bassline_ledger.infrastructure.database.models import (
    Base,
    LoanRow,
    SessionSlotRow,
    TransactionRow,
    UserRow,
)
from bassline_ledger.infrastructure.store.interface import (
    LOANS,
    TRANSACTIONS,
    USERS,
    RecordStore,
    check_kind,
)

SESSION_SLOT_ID = 1

# Stores are created per request; they share one lock so read-modify-write
# cycles serialize across the whole process.
_PROCESS_LOCK = threading.RLock()


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops tzinfo on the way back; everything is stored as UTC"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _user_to_columns(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "password_hash": user.password_hash,
        "balance": user.balance,
        "created_at": user.created_at,
    }


def _user_from_row(row: UserRow) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        phone=row.phone,
        password_hash=row.password_hash,
        balance=row.balance,
        created_at=_as_utc(row.created_at),
    )


def _transaction_to_columns(tx: Transaction) -> Dict[str, Any]:
    return {
        "id": tx.id,
        "user_id": tx.user_id,
        "service": tx.service,
        "amount": tx.amount,
        "method": tx.method,
        "term": tx.term,
        "interest_rate": tx.interest_rate,
        "status": tx.status,
        "created_at": tx.created_at,
        "bank_reference": tx.bank_reference,
    }


def _transaction_from_row(row: TransactionRow) -> Transaction:
    return Transaction(
        id=row.id,
        user_id=row.user_id,
        service=row.service,
        amount=row.amount,
        method=row.method,
        term=row.term,
        interest_rate=row.interest_rate,
        status=row.status,
        created_at=_as_utc(row.created_at),
        bank_reference=row.bank_reference,
    )


def _loan_to_columns(loan: Loan) -> Dict[str, Any]:
    return {
        "id": loan.id,
        "user_id": loan.user_id,
        "transaction_id": loan.transaction_id,
        "original_amount": loan.original_amount,
        "total_amount": loan.total_amount,
        "interest_rate": loan.interest_rate,
        "monthly_payment": loan.monthly_payment,
        "term": loan.term,
        "remaining_term": loan.remaining_term,
        "status": loan.status,
        "start_date": loan.start_date,
        "next_payment_date": loan.next_payment_date,
        "payments": [
            {"paid_at": p.paid_at.isoformat(), "amount": p.amount} for p in loan.payments
        ],
    }


def _loan_from_row(row: LoanRow) -> Loan:
    return Loan(
        id=row.id,
        user_id=row.user_id,
        transaction_id=row.transaction_id,
        original_amount=row.original_amount,
        total_amount=row.total_amount,
        interest_rate=row.interest_rate,
        monthly_payment=row.monthly_payment,
        term=row.term,
        remaining_term=row.remaining_term,
        status=row.status,
        start_date=_as_utc(row.start_date),
        next_payment_date=_as_utc(row.next_payment_date),
        payments=[
            Payment(paid_at=_as_utc(datetime.fromisoformat(p["paid_at"])), amount=p["amount"])
            for p in (row.payments or [])
        ],
    )


# kind -> (row class, record -> columns, row -> record)
_MAPPINGS: Dict[str, Tuple[Type[Base], Callable[[Any], Dict[str, Any]], Callable[[Any], Any]]] = {
    USERS: (UserRow, _user_to_columns, _user_from_row),
    TRANSACTIONS: (TransactionRow, _transaction_to_columns, _transaction_from_row),
    LOANS: (LoanRow, _loan_to_columns, _loan_from_row),
}


class SqlRecordStore(RecordStore):
    """
    RecordStore over one SQLAlchemy session.

    Writes are flushed immediately and committed either on their own or,
    inside atomic(), once the outermost block exits. Reads inside atomic()
    take row locks (SELECT ... FOR UPDATE) on databases that support them.
    """

    def __init__(self, db: Session):
        super().__init__()
        self._lock = _PROCESS_LOCK
        self.db = db

    def list(self, kind: str) -> List[Any]:
        check_kind(kind)
        row_cls, _, from_row = _MAPPINGS[kind]
        query = self.db.query(row_cls).order_by(row_cls.seq)
        if self.in_atomic:
            query = query.with_for_update()
        return [from_row(row) for row in query.all()]

    def upsert_by_key(self, kind: str, key: str, record: Any) -> None:
        check_kind(kind)
        row_cls, to_columns, _ = _MAPPINGS[kind]
        columns = to_columns(record)
        row = self.db.query(row_cls).filter(row_cls.id == key).first()
        if row is None:
            self.db.add(row_cls(**columns))
        else:
            for name, value in columns.items():
                setattr(row, name, value)
        self._write_through()

    def get_session(self) -> Optional[dict]:
        slot = self.db.get(SessionSlotRow, SESSION_SLOT_ID)
        return dict(slot.payload) if slot is not None else None

    def set_session(self, value: dict) -> None:
        slot = self.db.get(SessionSlotRow, SESSION_SLOT_ID)
        if slot is None:
            self.db.add(SessionSlotRow(id=SESSION_SLOT_ID, payload=value))
        else:
            slot.payload = value
        self._write_through()

    def clear_session(self) -> None:
        slot = self.db.get(SessionSlotRow, SESSION_SLOT_ID)
        if slot is not None:
            self.db.delete(slot)
        self._write_through()

    def _write_through(self) -> None:
        if self.in_atomic:
            # atomic() rolls back on the way out if the flush fails
            self.db.flush()
            return
        try:
            self.db.flush()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _begin(self) -> None:
        pass

    def _commit(self) -> None:
        self.db.commit()

    def _rollback(self) -> None:
        self.db.rollback()
