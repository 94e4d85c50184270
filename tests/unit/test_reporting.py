"""Unit tests for account and monthly summaries"""

import pytest
from datetime import datetime, timezone
from bassline_ledger.domain.exceptions import InvalidPeriodError
from bassline_ledger.domain.models import TransactionDetails


def test_empty_account_summary(reporter):
    summary = reporter.account_summary("nobody")

    assert summary.total_spent == 0
    assert summary.transaction_count == 0
    assert summary.active_loans == 0
    assert summary.outstanding_balance == 0
    assert summary.last_transaction is None


def test_account_summary_totals(reporter, transaction_engine, loan_engine):
    transaction_engine.record_transaction("user_1", TransactionDetails(amount=200, method="full"))
    transaction_engine.record_transaction(
        "user_1", TransactionDetails(amount=1000, method="installment", term=10, interest_rate=0.2)
    )
    last = transaction_engine.record_transaction("user_1", TransactionDetails(amount=50, method="bank"))
    transaction_engine.record_transaction("user_2", TransactionDetails(amount=999, method="full"))

    loan = loan_engine.active_loans_for_user("user_1")[0]
    loan_engine.apply_payment(loan.id, loan.monthly_payment)

    summary = reporter.account_summary("user_1")

    assert summary.total_spent == pytest.approx(1250)
    assert summary.transaction_count == 3
    assert summary.active_loans == 1
    # 1200 total over 10 months, 9 months left
    assert summary.outstanding_balance == pytest.approx(120 * 9)
    assert summary.last_transaction.id == last.id


def test_completed_loans_leave_outstanding_balance(reporter, transaction_engine, loan_engine):
    transaction_engine.record_transaction(
        "user_1", TransactionDetails(amount=100, method="installment", term=1, interest_rate=0.1)
    )
    loan = loan_engine.active_loans_for_user("user_1")[0]
    loan_engine.apply_payment(loan.id, 110)

    summary = reporter.account_summary("user_1")
    assert summary.active_loans == 0
    assert summary.outstanding_balance == 0


def test_monthly_summary_filters_by_calendar_month(reporter, transaction_engine, clock):
    clock.now = datetime(2024, 2, 29, 23, 59, tzinfo=timezone.utc)
    transaction_engine.record_transaction("user_1", TransactionDetails(amount=1, method="full"))
    clock.now = datetime(2024, 3, 1, 0, 0, tzinfo=timezone.utc)
    first = transaction_engine.record_transaction("user_1", TransactionDetails(amount=10, method="full"))
    clock.now = datetime(2024, 3, 31, 23, 59, tzinfo=timezone.utc)
    second = transaction_engine.record_transaction("user_1", TransactionDetails(amount=20.5, method="bank"))
    clock.now = datetime(2023, 3, 10, tzinfo=timezone.utc)
    transaction_engine.record_transaction("user_1", TransactionDetails(amount=300, method="full"))
    clock.now = datetime(2024, 4, 1, tzinfo=timezone.utc)
    transaction_engine.record_transaction("user_1", TransactionDetails(amount=4000, method="full"))

    summary = reporter.monthly_summary("user_1", 2024, 3)

    assert summary.year == 2024
    assert summary.month == 3
    assert [t.id for t in summary.transactions] == [first.id, second.id]
    assert summary.total_amount == pytest.approx(30.5)


def test_monthly_summary_empty_month(reporter):
    summary = reporter.monthly_summary("user_1", 2024, 1)
    assert summary.transactions == []
    assert summary.total_amount == 0


@pytest.mark.parametrize("month", [0, 13])
def test_monthly_summary_rejects_invalid_month(reporter, month):
    with pytest.raises(InvalidPeriodError):
        reporter.monthly_summary("user_1", 2024, month)
