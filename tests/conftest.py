"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from bassline_ledger.api.main import create_app
from bassline_ledger.config import settings
from bassline_ledger.domain.loans import LoanEngine
from bassline_ledger.domain.reporting import LedgerReporter
from bassline_ledger.domain.transactions import TransactionEngine
from bassline_ledger.domain.users import UserDirectory
from bassline_ledger.infrastructure.database.models import Base
from bassline_ledger.infrastructure.database.session import get_db
from bassline_ledger.infrastructure.store.memory import InMemoryRecordStore


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FrozenClock:
    """Callable clock that only moves when told to"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    """Create FastAPI test client with test database"""
    monkeypatch.setattr(settings, "password_hash_rounds", 4)
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc))


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def loan_engine(store: InMemoryRecordStore, clock: FrozenClock) -> LoanEngine:
    return LoanEngine(store, clock=clock)


@pytest.fixture
def transaction_engine(
    store: InMemoryRecordStore, loan_engine: LoanEngine, clock: FrozenClock
) -> TransactionEngine:
    return TransactionEngine(store, loan_engine, clock=clock, reference_prefix="BLC")


@pytest.fixture
def reporter(store: InMemoryRecordStore) -> LedgerReporter:
    return LedgerReporter(store)


@pytest.fixture
def user_directory(store: InMemoryRecordStore, clock: FrozenClock) -> UserDirectory:
    # Minimum bcrypt cost keeps the suite fast
    return UserDirectory(store, clock=clock, hash_rounds=4)
