"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from bassline_ledger.domain.loans import LoanEngine
from bassline_ledger.domain.reporting import LedgerReporter
from bassline_ledger.domain.transactions import TransactionEngine
from bassline_ledger.domain.users import UserDirectory
from bassline_ledger.infrastructure.database.session import get_db
from bassline_ledger.infrastructure.store.interface import RecordStore
from bassline_ledger.infrastructure.store.sql import SqlRecordStore


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    """Record store bound to this request's database session"""
    return SqlRecordStore(db)


def get_loan_engine(store: RecordStore = Depends(get_store)) -> LoanEngine:
    return LoanEngine(store)


def get_transaction_engine(
    store: RecordStore = Depends(get_store),
    loan_engine: LoanEngine = Depends(get_loan_engine),
) -> TransactionEngine:
    return TransactionEngine(store, loan_engine)


def get_reporter(store: RecordStore = Depends(get_store)) -> LedgerReporter:
    return LedgerReporter(store)


def get_user_directory(store: RecordStore = Depends(get_store)) -> UserDirectory:
    return UserDirectory(store)
