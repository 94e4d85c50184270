"""Personal-finance ledger: transactions, installment loans and account reports"""

__version__ = "0.1.0"
