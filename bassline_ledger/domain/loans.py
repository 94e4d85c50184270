"""Loan amortization engine: opening loans and applying payments"""

import logging
from dataclasses import replace
from typing import List, Optional

from bassline_ledger.config import settings
from bassline_ledger.domain.amortization import calculate_loan_terms, next_payment_date
from bassline_ledger.domain.exceptions import (
    InvalidAmountError,
    LoanAlreadyCompletedError,
    NotFoundError,
)
from bassline_ledger.domain.models import LOAN_ACTIVE, LOAN_COMPLETED, Loan, Payment
from bassline_ledger.infrastructure.observability.logging import log_loan_opened, log_payment_applied
from bassline_ledger.infrastructure.observability.metrics import loans_opened_counter, record_payment
from bassline_ledger.infrastructure.store.interface import LOANS, RecordStore
from bassline_ledger.utils.date_utils import Clock, utc_now
from bassline_ledger.utils.ids import generate_id


class LoanEngine:
    """Derives repayment schedules and tracks them to completion"""

    def __init__(
        self,
        store: RecordStore,
        clock: Clock = utc_now,
        id_factory=generate_id,
        enforce_non_negative_payments: bool | None = None,
    ):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory
        if enforce_non_negative_payments is None:
            enforce_non_negative_payments = settings.enforce_non_negative_payments
        self.enforce_non_negative_payments = enforce_non_negative_payments

    def open_loan(
        self,
        user_id: str,
        transaction_id: Optional[str],
        principal: float,
        interest_rate: float,
        term_months: int,
    ) -> Loan:
        """
        Open an active loan with a fixed monthly payment.

        The first payment falls due one calendar month after opening.

        Raises:
            InvalidTermError: term_months < 1
            InvalidAmountError: negative principal or interest rate
        """
        terms = calculate_loan_terms(principal, interest_rate, term_months)
        now = self.clock()

        loan = Loan(
            id=self.id_factory(),
            user_id=user_id,
            transaction_id=transaction_id,
            original_amount=terms.principal,
            total_amount=terms.total_amount,
            interest_rate=terms.interest_rate,
            monthly_payment=terms.monthly_payment,
            term=terms.term_months,
            remaining_term=terms.term_months,
            status=LOAN_ACTIVE,
            start_date=now,
            next_payment_date=next_payment_date(now),
            payments=[],
        )

        with self.store.atomic():
            self.store.upsert_by_key(LOANS, loan.id, loan)

        loans_opened_counter.inc()
        log_loan_opened(loan.id, user_id, loan.total_amount, loan.term)
        return loan

    def apply_payment(self, loan_id: str, amount: float) -> bool:
        """
        Record one scheduled payment against a loan.

        The amount is stored as given; it is not compared to the monthly
        payment. Each call consumes exactly one month of the term.

        Returns:
            False if the loan does not exist, True once the payment is stored

        Raises:
            LoanAlreadyCompletedError: the loan has no remaining term
            InvalidAmountError: negative amount while enforcement is enabled
        """
        with self.store.atomic():
            loan = self.store.find_one(LOANS, lambda l: l.id == loan_id)
            if loan is None:
                record_payment("not_found")
                logging.warning("Payment for unknown loan", extra={"loan_id": loan_id})
                return False

            if loan.status == LOAN_COMPLETED or loan.remaining_term <= 0:
                record_payment("rejected")
                raise LoanAlreadyCompletedError(f"Loan {loan_id} is already completed")

            if self.enforce_non_negative_payments and amount < 0:
                record_payment("rejected")
                raise InvalidAmountError(f"Payment amount must be non-negative, got {amount}")

            remaining = loan.remaining_term - 1
            updated = replace(
                loan,
                payments=loan.payments + [Payment(paid_at=self.clock(), amount=amount)],
                remaining_term=remaining,
                status=LOAN_COMPLETED if remaining == 0 else loan.status,
                next_payment_date=next_payment_date(loan.next_payment_date),
            )
            self.store.upsert_by_key(LOANS, updated.id, updated)

        record_payment("applied")
        log_payment_applied(updated.id, amount, updated.remaining_term, updated.status)
        return True

    def get_loan(self, loan_id: str) -> Loan:
        loan = self.store.find_one(LOANS, lambda l: l.id == loan_id)
        if loan is None:
            raise NotFoundError("Loan", loan_id)
        return loan

    def loan_for_transaction(self, transaction_id: str) -> Optional[Loan]:
        return self.store.find_one(LOANS, lambda l: l.transaction_id == transaction_id)

    def loans_for_user(self, user_id: str) -> List[Loan]:
        return self.store.filter(LOANS, lambda l: l.user_id == user_id)

    def active_loans_for_user(self, user_id: str) -> List[Loan]:
        """Loans still being repaid, in storage order"""
        return self.store.filter(LOANS, lambda l: l.user_id == user_id and l.is_active)
