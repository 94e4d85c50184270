"""Transaction engine: recording purchases and their status changes"""

from dataclasses import replace
from typing import List, Optional

from bassline_ledger.config import settings
from bassline_ledger.domain.exceptions import (
    InvalidAmountError,
    InvalidTermError,
    InvalidTransactionDataError,
    NotFoundError,
)
from bassline_ledger.domain.loans import LoanEngine
from bassline_ledger.domain.models import (
    METHOD_BANK,
    METHOD_INSTALLMENT,
    PAYMENT_METHODS,
    STATUS_PENDING,
    MerchantAccount,
    PaymentInstructions,
    Transaction,
    TransactionDetails,
)
from bassline_ledger.infrastructure.observability.logging import log_transaction_recorded
from bassline_ledger.infrastructure.observability.metrics import record_transaction
from bassline_ledger.infrastructure.store.interface import TRANSACTIONS, RecordStore
from bassline_ledger.utils.date_utils import Clock, utc_now
from bassline_ledger.utils.ids import generate_id


def generate_bank_reference(transaction_id: str, prefix: str) -> str:
    """
    Reconciliation tag for bank transfers.

    Example:
        ("id_9f2c...a1b2c3d4", "BLC") -> "BLC-a1b2c3d4"
    """
    return f"{prefix}-{transaction_id[-8:]}"


def default_merchant_account() -> MerchantAccount:
    return MerchantAccount(
        account_name=settings.merchant_account_name,
        bank_name=settings.merchant_bank_name,
        account_number=settings.merchant_account_number,
        branch_code=settings.merchant_branch_code,
    )


def validate_details(details: TransactionDetails) -> None:
    """Reject details that cannot produce a consistent transaction"""
    if details.amount is None or details.amount < 0:
        raise InvalidAmountError(f"Transaction amount must be non-negative, got {details.amount}")
    if details.method not in PAYMENT_METHODS:
        raise InvalidTransactionDataError(
            f"Payment method must be one of {', '.join(PAYMENT_METHODS)}, got {details.method!r}"
        )
    if details.method == METHOD_INSTALLMENT:
        term = details.term
        if isinstance(term, bool) or not isinstance(term, int) or term < 1:
            raise InvalidTermError(f"Installment term must be a whole number of months >= 1, got {term!r}")
        if details.interest_rate is None or details.interest_rate <= 0:
            raise InvalidTransactionDataError(
                f"Installment interest rate must be greater than zero, got {details.interest_rate!r}"
            )


class TransactionEngine:
    """Creates transactions and opens loans for installment purchases"""

    def __init__(
        self,
        store: RecordStore,
        loan_engine: LoanEngine,
        clock: Clock = utc_now,
        id_factory=generate_id,
        reference_prefix: str | None = None,
        merchant: MerchantAccount | None = None,
    ):
        self.store = store
        self.loan_engine = loan_engine
        self.clock = clock
        self.id_factory = id_factory
        if reference_prefix is None:
            reference_prefix = settings.bank_reference_prefix
        self.reference_prefix = reference_prefix
        self.merchant = merchant or default_merchant_account()

    def record_transaction(self, user_id: str, details: TransactionDetails) -> Transaction:
        """
        Record a purchase for a user.

        Flow:
        1. Validate details (nothing is written if this fails)
        2. Append the transaction with status "pending" unless given
        3. Bank transfers get a bank reference derived from the new id
        4. Installment purchases open a linked loan

        Steps 2-4 commit together: if the loan cannot be opened the
        transaction is rolled back too.

        The user id is trusted; callers authenticate before recording.
        """
        validate_details(details)
        installment = details.method == METHOD_INSTALLMENT

        transaction = Transaction(
            id=self.id_factory(),
            user_id=user_id,
            service=details.service or "",
            amount=details.amount,
            method=details.method,
            term=details.term if installment else 0,
            interest_rate=details.interest_rate if installment else 0.0,
            status=details.status or STATUS_PENDING,
            created_at=self.clock(),
        )

        loan_id = None
        with self.store.atomic():
            self.store.upsert_by_key(TRANSACTIONS, transaction.id, transaction)

            if transaction.method == METHOD_BANK:
                transaction.bank_reference = generate_bank_reference(transaction.id, self.reference_prefix)
                self.store.upsert_by_key(TRANSACTIONS, transaction.id, transaction)

            if installment:
                loan = self.loan_engine.open_loan(
                    user_id,
                    transaction.id,
                    transaction.amount,
                    transaction.interest_rate,
                    transaction.term,
                )
                loan_id = loan.id

        record_transaction(transaction.method)
        log_transaction_recorded(transaction.id, user_id, transaction.method, transaction.amount, loan_id)
        return transaction

    def get_transaction(self, transaction_id: str) -> Transaction:
        """Look a transaction up across all users"""
        transaction = self.store.find_one(TRANSACTIONS, lambda t: t.id == transaction_id)
        if transaction is None:
            raise NotFoundError("Transaction", transaction_id)
        return transaction

    def set_transaction_status(self, transaction_id: str, new_status: str) -> Transaction:
        """
        Overwrite a transaction's status.

        The linked loan, if any, is tracked independently and left alone.
        """
        if not isinstance(new_status, str) or not new_status.strip():
            raise InvalidTransactionDataError("Transaction status must be a non-empty string")

        with self.store.atomic():
            transaction = self.get_transaction(transaction_id)
            updated = replace(transaction, status=new_status)
            self.store.upsert_by_key(TRANSACTIONS, updated.id, updated)
        return updated

    def transactions_for_user(self, user_id: str) -> List[Transaction]:
        """All of a user's transactions in the order they were recorded"""
        return self.store.filter(TRANSACTIONS, lambda t: t.user_id == user_id)

    def payment_instructions(self, transaction: Transaction) -> Optional[PaymentInstructions]:
        """Merchant account details for a bank transfer, None for other methods"""
        if transaction.method != METHOD_BANK or transaction.bank_reference is None:
            return None
        return PaymentInstructions(
            account_name=self.merchant.account_name,
            bank_name=self.merchant.bank_name,
            account_number=self.merchant.account_number,
            branch_code=self.merchant.branch_code,
            reference=transaction.bank_reference,
        )
