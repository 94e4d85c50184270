"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

METHOD_FULL = "full"
METHOD_INSTALLMENT = "installment"
METHOD_BANK = "bank"
PAYMENT_METHODS = (METHOD_FULL, METHOD_INSTALLMENT, METHOD_BANK)

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"

LOAN_ACTIVE = "active"
LOAN_COMPLETED = "completed"


@dataclass
class User:
    """Registered account holder"""

    id: str
    name: str
    email: str
    phone: str
    password_hash: str
    balance: float
    created_at: datetime

    def public_view(self) -> dict:
        """User fields safe to hand to a session or a client"""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "balance": self.balance,
        }


@dataclass
class Transaction:
    """A single purchase; only status and bank_reference change after creation"""

    id: str
    user_id: str
    service: str
    amount: float
    method: str  # "full", "installment" or "bank"
    term: int
    interest_rate: float
    status: str
    created_at: datetime
    bank_reference: Optional[str] = None


@dataclass
class TransactionDetails:
    """Caller-supplied input for recording a transaction"""

    amount: float
    method: str
    service: str = ""
    term: Optional[int] = None
    interest_rate: Optional[float] = None
    status: Optional[str] = None


@dataclass
class Payment:
    """Single payment applied against a loan"""

    paid_at: datetime
    amount: float


@dataclass
class LoanTerms:
    """Amortization figures derived from principal, rate and term"""

    principal: float
    interest_rate: float
    term_months: int
    interest: float
    total_amount: float
    monthly_payment: float


@dataclass
class Loan:
    """Fixed-term, fixed-payment loan opened from an installment purchase"""

    id: str
    user_id: str
    transaction_id: Optional[str]
    original_amount: float
    total_amount: float
    interest_rate: float
    monthly_payment: float
    term: int
    remaining_term: int
    status: str  # "active" or "completed"
    start_date: datetime
    next_payment_date: datetime
    payments: List[Payment] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.status == LOAN_ACTIVE


@dataclass
class AccountSummary:
    """Aggregated view over a user's transactions and loans"""

    total_spent: float
    transaction_count: int
    active_loans: int
    outstanding_balance: float
    last_transaction: Optional[Transaction]


@dataclass
class MonthlySummary:
    """Transactions created within one calendar month"""

    year: int
    month: int
    transactions: List[Transaction]
    total_amount: float


@dataclass
class MerchantAccount:
    """Bank account that receives transfer payments"""

    account_name: str
    bank_name: str
    account_number: str
    branch_code: str


@dataclass
class PaymentInstructions:
    """What a bank-transfer customer needs to pay and be reconciled"""

    account_name: str
    bank_name: str
    account_number: str
    branch_code: str
    reference: str
