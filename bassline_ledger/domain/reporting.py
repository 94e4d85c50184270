"""Read-only reports over a user's transactions and loans"""

from bassline_ledger.domain.exceptions import InvalidPeriodError
from bassline_ledger.domain.models import AccountSummary, LOAN_ACTIVE, MonthlySummary
from bassline_ledger.infrastructure.store.interface import LOANS, TRANSACTIONS, RecordStore
from bassline_ledger.utils.date_utils import in_calendar_month


class LedgerReporter:
    """Aggregates stored records; never writes"""

    def __init__(self, store: RecordStore):
        self.store = store

    def account_summary(self, user_id: str) -> AccountSummary:
        """
        Totals for a user's account.

        outstanding_balance is monthly_payment * remaining_term summed over
        active loans, an approximation of what is still owed rather than a
        present value.
        """
        transactions = self.store.filter(TRANSACTIONS, lambda t: t.user_id == user_id)
        active_loans = self.store.filter(
            LOANS, lambda l: l.user_id == user_id and l.status == LOAN_ACTIVE
        )

        return AccountSummary(
            total_spent=sum((t.amount for t in transactions), 0.0),
            transaction_count=len(transactions),
            active_loans=len(active_loans),
            outstanding_balance=sum((l.monthly_payment * l.remaining_term for l in active_loans), 0.0),
            last_transaction=transactions[-1] if transactions else None,
        )

    def monthly_summary(self, user_id: str, year: int, month: int) -> MonthlySummary:
        """Transactions created in the given calendar month (1 = January)"""
        if not 1 <= month <= 12:
            raise InvalidPeriodError(f"Month must be between 1 and 12, got {month}")

        transactions = self.store.filter(
            TRANSACTIONS,
            lambda t: t.user_id == user_id and in_calendar_month(t.created_at, year, month),
        )
        return MonthlySummary(
            year=year,
            month=month,
            transactions=transactions,
            total_amount=sum((t.amount for t in transactions), 0.0),
        )
