"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer


class UserCreateRequest(BaseModel):
    """Request body for POST /v1/users"""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, description="Unique, case-sensitive login key")
    phone: str = ""
    password: str = Field(..., min_length=1, description="At most 72 bytes once UTF-8 encoded")


class LoginRequest(BaseModel):
    """Request body for POST /v1/sessions"""

    email: str
    password: str


class UserResponse(BaseModel):
    """Public view of a user (no credential hash)"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str
    balance: float


class BalanceAdjustmentRequest(BaseModel):
    """Request body for POST /v1/users/{user_id}/balance-adjustments"""

    delta: float = Field(..., description="Signed amount added to the balance")


class TransactionCreateRequest(BaseModel):
    """Request body for POST /v1/users/{user_id}/transactions"""

    amount: float = Field(..., ge=0)
    method: Literal["full", "installment", "bank"]
    service: str = ""
    term: Optional[int] = Field(None, description="Months; required for installment")
    interest_rate: Optional[float] = Field(None, description="Fraction; required for installment")
    status: Optional[str] = None


class PaymentInstructionsSchema(BaseModel):
    """Where a bank-transfer customer sends the money"""

    model_config = ConfigDict(from_attributes=True)

    account_name: str
    bank_name: str
    account_number: str
    branch_code: str
    reference: str


class TransactionResponse(BaseModel):
    """Stored transaction; bank fields only appear for bank transfers"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    service: str
    amount: float
    method: str
    term: int
    interest_rate: float
    status: str
    created_at: datetime
    bank_reference: Optional[str] = None
    payment_instructions: Optional[PaymentInstructionsSchema] = None

    @model_serializer(mode="wrap")
    def _omit_bank_fields(self, handler):
        # Holds wherever the model is nested, e.g. inside summaries
        data = handler(self)
        for name in ("bank_reference", "payment_instructions"):
            if data.get(name) is None:
                data.pop(name, None)
        return data


class StatusUpdateRequest(BaseModel):
    """Request body for PATCH /v1/transactions/{transaction_id}/status"""

    status: str = Field(..., min_length=1)


class LoanCreateRequest(BaseModel):
    """Request body for POST /v1/loans"""

    user_id: str = Field(..., min_length=1)
    transaction_id: Optional[str] = None
    principal: float = Field(..., ge=0)
    interest_rate: float = Field(..., ge=0)
    term_months: int


class PaymentSchema(BaseModel):
    """Single applied loan payment"""

    model_config = ConfigDict(from_attributes=True)

    paid_at: datetime
    amount: float


class LoanResponse(BaseModel):
    """Loan with its full payment history"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    transaction_id: Optional[str] = None
    original_amount: float
    total_amount: float
    interest_rate: float
    monthly_payment: float
    term: int
    remaining_term: int
    status: str
    start_date: datetime
    next_payment_date: datetime
    payments: List[PaymentSchema]


class PaymentRequest(BaseModel):
    """Request body for POST /v1/loans/{loan_id}/payments"""

    amount: float


class AccountSummaryResponse(BaseModel):
    """Response for GET /v1/users/{user_id}/summary"""

    model_config = ConfigDict(from_attributes=True)

    total_spent: float
    transaction_count: int
    active_loans: int
    outstanding_balance: float
    last_transaction: Optional[TransactionResponse] = None


class MonthlySummaryResponse(BaseModel):
    """Response for GET /v1/users/{user_id}/summary/{year}/{month}"""

    model_config = ConfigDict(from_attributes=True)

    year: int
    month: int
    transactions: List[TransactionResponse]
    total_amount: float
