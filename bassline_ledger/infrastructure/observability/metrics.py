"""Prometheus metrics for transaction volume, loan origination and repayments"""

from prometheus_client import Counter, Histogram

# Ledger metrics
transaction_counter = Counter(
    "ledger_transactions_total",
    "Transactions recorded",
    ["method"],  # full | installment | bank
)

loans_opened_counter = Counter(
    "ledger_loans_opened_total",
    "Loans opened from installment purchases",
)

loan_payment_counter = Counter(
    "ledger_loan_payments_total",
    "Loan payment attempts",
    ["outcome"],  # applied | not_found | rejected
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transaction(method: str) -> None:
    transaction_counter.labels(method=method).inc()


def record_payment(outcome: str) -> None:
    loan_payment_counter.labels(outcome=outcome).inc()
