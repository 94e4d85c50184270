"""Account and monthly summary endpoints"""

from fastapi import APIRouter, Depends, Path

from bassline_ledger.api.dependencies import get_reporter
from bassline_ledger.api.v1.schemas import AccountSummaryResponse, MonthlySummaryResponse
from bassline_ledger.domain.reporting import LedgerReporter

router = APIRouter()


@router.get("/users/{user_id}/summary", response_model=AccountSummaryResponse)
def account_summary(user_id: str, reporter: LedgerReporter = Depends(get_reporter)):
    """Spend totals, active loan count and outstanding balance"""
    return AccountSummaryResponse.model_validate(reporter.account_summary(user_id))


@router.get("/users/{user_id}/summary/{year}/{month}", response_model=MonthlySummaryResponse)
def monthly_summary(
    user_id: str,
    year: int,
    month: int = Path(..., description="Calendar month, 1 = January"),
    reporter: LedgerReporter = Depends(get_reporter),
):
    return MonthlySummaryResponse.model_validate(reporter.monthly_summary(user_id, year, month))
