"""Loan opening, lookup and repayment endpoints"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query

from bassline_ledger.api.dependencies import get_loan_engine
from bassline_ledger.api.v1.schemas import LoanCreateRequest, LoanResponse, PaymentRequest
from bassline_ledger.domain.loans import LoanEngine

router = APIRouter()


@router.post("/loans", response_model=LoanResponse, status_code=201)
def open_loan(request_body: LoanCreateRequest, engine: LoanEngine = Depends(get_loan_engine)):
    """Open a loan directly; installment purchases do this automatically"""
    loan = engine.open_loan(
        user_id=request_body.user_id,
        transaction_id=request_body.transaction_id,
        principal=request_body.principal,
        interest_rate=request_body.interest_rate,
        term_months=request_body.term_months,
    )
    return LoanResponse.model_validate(loan)


@router.get("/users/{user_id}/loans", response_model=List[LoanResponse])
def list_loans(
    user_id: str,
    active_only: bool = Query(False, description="Only loans still being repaid"),
    engine: LoanEngine = Depends(get_loan_engine),
):
    loans = engine.active_loans_for_user(user_id) if active_only else engine.loans_for_user(user_id)
    return [LoanResponse.model_validate(loan) for loan in loans]


@router.get("/loans/{loan_id}", response_model=LoanResponse)
def get_loan(loan_id: str, engine: LoanEngine = Depends(get_loan_engine)):
    return LoanResponse.model_validate(engine.get_loan(loan_id))


@router.post("/loans/{loan_id}/payments", response_model=LoanResponse)
def apply_payment(
    loan_id: str,
    request_body: PaymentRequest,
    engine: LoanEngine = Depends(get_loan_engine),
):
    """
    Apply one monthly payment.

    The amount is recorded as given; every payment consumes one month of
    the term. 409 once the loan is completed.
    """
    if not engine.apply_payment(loan_id, request_body.amount):
        raise HTTPException(status_code=404, detail="Loan not found")

    return LoanResponse.model_validate(engine.get_loan(loan_id))
