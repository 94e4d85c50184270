"""SQLAlchemy ORM models for ledger records"""

from sqlalchemy import Column, Integer, Float, DateTime, Text, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class UserRow(Base):
    """Registered user"""

    __tablename__ = "ledger_user"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Text, nullable=False, unique=True, index=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True, index=True)
    phone = Column(Text, nullable=False, default="")
    password_hash = Column(Text, nullable=False)
    balance = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), nullable=False)


class TransactionRow(Base):
    """Purchase record; bank_reference is NULL unless method is bank"""

    __tablename__ = "ledger_transaction"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Text, nullable=False, unique=True, index=True)
    user_id = Column(Text, nullable=False, index=True)
    service = Column(Text, nullable=False, default="")
    amount = Column(Float, nullable=False)
    method = Column(Text, nullable=False)
    term = Column(Integer, nullable=False, default=0)
    interest_rate = Column(Float, nullable=False, default=0.0)
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False)
    bank_reference = Column(Text, nullable=True)


class LoanRow(Base):
    """Amortizing loan with its payment history stored as JSON"""

    __tablename__ = "ledger_loan"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Text, nullable=False, unique=True, index=True)
    user_id = Column(Text, nullable=False, index=True)
    transaction_id = Column(Text, nullable=True, index=True)
    original_amount = Column(Float, nullable=False)
    total_amount = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False)
    monthly_payment = Column(Float, nullable=False)
    term = Column(Integer, nullable=False)
    remaining_term = Column(Integer, nullable=False)
    status = Column(Text, nullable=False, default="active")
    start_date = Column(DateTime(timezone=True), nullable=False)
    next_payment_date = Column(DateTime(timezone=True), nullable=False)
    payments = Column(JSON, nullable=False, default=list)


class SessionSlotRow(Base):
    """Single-row table holding the current session value"""

    __tablename__ = "ledger_session"

    id = Column(Integer, primary_key=True)
    payload = Column(JSON, nullable=False)
