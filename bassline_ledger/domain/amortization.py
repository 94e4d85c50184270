"""Loan amortization arithmetic"""

from datetime import datetime
from bassline_ledger.domain.models import LoanTerms
from bassline_ledger.domain.exceptions import InvalidAmountError, InvalidTermError
from bassline_ledger.utils.date_utils import add_months


def calculate_loan_terms(principal: float, interest_rate: float, term_months: int) -> LoanTerms:
    """
    Derive the fixed repayment schedule for a loan.

    Requirements:
    - Flat interest: interest = principal * rate, charged once up front
    - total_amount = principal + interest
    - monthly_payment = total_amount / term_months
    - No rounding to currency minor units; presentation layers round

    Raises:
        InvalidTermError: term_months is not a whole number of months >= 1
        InvalidAmountError: principal or interest_rate is negative

    Example:
        1000 at 0.1 over 12 months -> total 1100, monthly 91.666...
    """
    if isinstance(term_months, bool) or not isinstance(term_months, int) or term_months < 1:
        raise InvalidTermError(f"Loan term must be a whole number of months >= 1, got {term_months!r}")
    if principal < 0:
        raise InvalidAmountError(f"Principal must be non-negative, got {principal}")
    if interest_rate < 0:
        raise InvalidAmountError(f"Interest rate must be non-negative, got {interest_rate}")

    interest = principal * interest_rate
    total_amount = principal + interest

    return LoanTerms(
        principal=principal,
        interest_rate=interest_rate,
        term_months=term_months,
        interest=interest,
        total_amount=total_amount,
        monthly_payment=total_amount / term_months,
    )


def next_payment_date(from_date: datetime, months: int = 1) -> datetime:
    """Due date one (or more) calendar months after from_date"""
    return add_months(from_date, months)
