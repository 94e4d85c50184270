"""Unit tests for the transaction engine"""

import pytest
from bassline_ledger.domain.exceptions import (
    InvalidAmountError,
    InvalidTermError,
    InvalidTransactionDataError,
    NotFoundError,
)
from bassline_ledger.domain.models import MerchantAccount, TransactionDetails
from bassline_ledger.domain.transactions import TransactionEngine, generate_bank_reference
from bassline_ledger.infrastructure.store.interface import LOANS, TRANSACTIONS


def test_full_payment_defaults_to_pending(transaction_engine, store, clock):
    tx = transaction_engine.record_transaction(
        "user_1", TransactionDetails(amount=450.0, method="full", service="Wheel alignment")
    )

    assert tx.status == "pending"
    assert tx.method == "full"
    assert tx.service == "Wheel alignment"
    assert tx.term == 0
    assert tx.interest_rate == 0.0
    assert tx.bank_reference is None
    assert tx.created_at == clock.now
    assert store.list(TRANSACTIONS) == [tx]
    assert store.list(LOANS) == []


def test_explicit_status_is_kept(transaction_engine):
    tx = transaction_engine.record_transaction(
        "user_1", TransactionDetails(amount=10, method="full", status="completed")
    )
    assert tx.status == "completed"


def test_installment_opens_linked_loan(transaction_engine, loan_engine):
    """1000 over 12 months at 10% -> 1100 total, 91.67 a month"""
    tx = transaction_engine.record_transaction(
        "user_1", TransactionDetails(amount=1000, method="installment", term=12, interest_rate=0.1)
    )

    assert tx.method == "installment"
    loans = loan_engine.loans_for_user("user_1")
    assert len(loans) == 1
    loan = loans[0]
    assert loan.transaction_id == tx.id
    assert loan.original_amount == 1000
    assert loan.total_amount == pytest.approx(1100)
    assert loan.monthly_payment == pytest.approx(91.666666, rel=1e-6)
    assert loan_engine.loan_for_transaction(tx.id).id == loan.id


def test_bank_transfer_gets_reference_from_id(store, loan_engine, clock):
    ids = iter(["id_aaaaaaaa11111111", "id_bbbbbbbb22222222"])
    engine = TransactionEngine(store, loan_engine, clock=clock, id_factory=lambda: next(ids), reference_prefix="BLC")

    first = engine.record_transaction("user_1", TransactionDetails(amount=100, method="bank"))
    second = engine.record_transaction("user_1", TransactionDetails(amount=100, method="bank"))

    assert first.bank_reference == "BLC-11111111"
    assert second.bank_reference == "BLC-22222222"
    assert [t.bank_reference for t in store.list(TRANSACTIONS)] == ["BLC-11111111", "BLC-22222222"]


def test_generate_bank_reference_uses_last_eight_characters():
    assert generate_bank_reference("id_1700000000000_k3j9x0abc", "BLC") == "BLC-3j9x0abc"


def test_only_bank_transfers_carry_reference(transaction_engine):
    full = transaction_engine.record_transaction("user_1", TransactionDetails(amount=1, method="full"))
    installment = transaction_engine.record_transaction(
        "user_1", TransactionDetails(amount=1, method="installment", term=2, interest_rate=0.1)
    )

    assert full.bank_reference is None
    assert installment.bank_reference is None


@pytest.mark.parametrize("term", [None, 0, -3])
def test_installment_without_valid_term_writes_nothing(transaction_engine, store, term):
    with pytest.raises(InvalidTermError):
        transaction_engine.record_transaction(
            "user_1", TransactionDetails(amount=1000, method="installment", term=term, interest_rate=0.1)
        )

    assert store.list(TRANSACTIONS) == []
    assert store.list(LOANS) == []


@pytest.mark.parametrize("rate", [None, 0])
def test_installment_requires_positive_rate(transaction_engine, store, rate):
    with pytest.raises(InvalidTransactionDataError):
        transaction_engine.record_transaction(
            "user_1", TransactionDetails(amount=1000, method="installment", term=12, interest_rate=rate)
        )

    assert store.list(TRANSACTIONS) == []


def test_negative_amount_rejected(transaction_engine, store):
    with pytest.raises(InvalidAmountError):
        transaction_engine.record_transaction("user_1", TransactionDetails(amount=-1, method="full"))
    assert store.list(TRANSACTIONS) == []


def test_unknown_method_rejected(transaction_engine):
    with pytest.raises(InvalidTransactionDataError):
        transaction_engine.record_transaction("user_1", TransactionDetails(amount=1, method="crypto"))


def test_loan_failure_rolls_back_transaction(transaction_engine, loan_engine, store, monkeypatch):
    """No orphan transaction when the loan cannot be opened"""

    def failing_open_loan(*args, **kwargs):
        raise RuntimeError("loan store unavailable")

    monkeypatch.setattr(loan_engine, "open_loan", failing_open_loan)

    with pytest.raises(RuntimeError):
        transaction_engine.record_transaction(
            "user_1", TransactionDetails(amount=1000, method="installment", term=12, interest_rate=0.1)
        )

    assert store.list(TRANSACTIONS) == []
    assert store.list(LOANS) == []


def test_set_transaction_status(transaction_engine, loan_engine):
    tx = transaction_engine.record_transaction(
        "user_1", TransactionDetails(amount=1000, method="installment", term=12, interest_rate=0.1)
    )

    updated = transaction_engine.set_transaction_status(tx.id, "completed")

    assert updated.status == "completed"
    assert transaction_engine.get_transaction(tx.id).status == "completed"
    # The linked loan is tracked independently
    assert loan_engine.loan_for_transaction(tx.id).status == "active"


def test_set_status_unknown_transaction(transaction_engine):
    with pytest.raises(NotFoundError):
        transaction_engine.set_transaction_status("missing", "completed")


def test_set_status_rejects_blank(transaction_engine):
    tx = transaction_engine.record_transaction("user_1", TransactionDetails(amount=1, method="full"))
    with pytest.raises(InvalidTransactionDataError):
        transaction_engine.set_transaction_status(tx.id, "  ")
    assert transaction_engine.get_transaction(tx.id).status == "pending"


def test_transactions_for_user_keeps_insertion_order(transaction_engine, clock):
    later = transaction_engine.record_transaction("user_1", TransactionDetails(amount=1, method="full"))
    # Recorded afterwards but timestamped earlier; order stays by insertion
    clock.advance(days=-10)
    earlier = transaction_engine.record_transaction("user_1", TransactionDetails(amount=2, method="bank"))
    transaction_engine.record_transaction("user_2", TransactionDetails(amount=3, method="full"))

    assert [t.id for t in transaction_engine.transactions_for_user("user_1")] == [later.id, earlier.id]


def test_empty_reference_prefix_is_kept(store, loan_engine, clock):
    engine = TransactionEngine(
        store, loan_engine, clock=clock, id_factory=lambda: "id_00000000abcdef12", reference_prefix=""
    )
    tx = engine.record_transaction("user_1", TransactionDetails(amount=5, method="bank"))
    assert tx.bank_reference == "-abcdef12"


def test_payment_instructions_only_for_bank_transfers(store, loan_engine, clock):
    merchant = MerchantAccount(
        account_name="Bassline Customs", bank_name="Test Bank", account_number="1234567890", branch_code="470010"
    )
    engine = TransactionEngine(store, loan_engine, clock=clock, reference_prefix="BLC", merchant=merchant)

    bank = engine.record_transaction("user_1", TransactionDetails(amount=100, method="bank"))
    full = engine.record_transaction("user_1", TransactionDetails(amount=100, method="full"))

    instructions = engine.payment_instructions(bank)
    assert instructions.account_number == "1234567890"
    assert instructions.branch_code == "470010"
    assert instructions.reference == bank.bank_reference
    assert engine.payment_instructions(full) is None
