"""Transaction recording and status endpoints"""

from typing import List
from fastapi import APIRouter, Depends

from bassline_ledger.api.dependencies import get_transaction_engine
from bassline_ledger.api.v1.schemas import (
    PaymentInstructionsSchema,
    StatusUpdateRequest,
    TransactionCreateRequest,
    TransactionResponse,
)
from bassline_ledger.domain.models import Transaction, TransactionDetails
from bassline_ledger.domain.transactions import TransactionEngine

router = APIRouter()


def _to_response(engine: TransactionEngine, transaction: Transaction) -> TransactionResponse:
    """Bank transfers carry the merchant account to pay into"""
    response = TransactionResponse.model_validate(transaction)
    instructions = engine.payment_instructions(transaction)
    if instructions is not None:
        response.payment_instructions = PaymentInstructionsSchema.model_validate(instructions)
    return response


@router.post(
    "/users/{user_id}/transactions",
    response_model=TransactionResponse,
    response_model_exclude_none=True,
    status_code=201,
)
def record_transaction(
    user_id: str,
    request_body: TransactionCreateRequest,
    engine: TransactionEngine = Depends(get_transaction_engine),
):
    """
    Record a purchase.

    Installment purchases also open a loan, visible under
    GET /v1/users/{user_id}/loans. Bank transfers carry a bank_reference
    and the merchant account to pay into.
    """
    details = TransactionDetails(
        amount=request_body.amount,
        method=request_body.method,
        service=request_body.service,
        term=request_body.term,
        interest_rate=request_body.interest_rate,
        status=request_body.status,
    )
    return _to_response(engine, engine.record_transaction(user_id, details))


@router.get(
    "/users/{user_id}/transactions",
    response_model=List[TransactionResponse],
    response_model_exclude_none=True,
)
def list_transactions(user_id: str, engine: TransactionEngine = Depends(get_transaction_engine)):
    """A user's transactions in the order they were recorded"""
    return [_to_response(engine, t) for t in engine.transactions_for_user(user_id)]


@router.get(
    "/transactions/{transaction_id}",
    response_model=TransactionResponse,
    response_model_exclude_none=True,
)
def get_transaction(transaction_id: str, engine: TransactionEngine = Depends(get_transaction_engine)):
    return _to_response(engine, engine.get_transaction(transaction_id))


@router.patch(
    "/transactions/{transaction_id}/status",
    response_model=TransactionResponse,
    response_model_exclude_none=True,
)
def update_status(
    transaction_id: str,
    request_body: StatusUpdateRequest,
    engine: TransactionEngine = Depends(get_transaction_engine),
):
    """Overwrite the status, e.g. pending -> completed; the linked loan is unaffected"""
    updated = engine.set_transaction_status(transaction_id, request_body.status)
    return _to_response(engine, updated)
