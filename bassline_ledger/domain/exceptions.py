"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NotFoundError(DomainException):
    """Referenced user, transaction or loan does not exist"""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class DuplicateEmailError(DomainException):
    """A user is already registered with this email"""

    pass


class InvalidTermError(DomainException):
    """Loan term is missing, non-integer or below one month"""

    pass


class InvalidAmountError(DomainException):
    """Negative principal, rate or payment amount"""

    pass


class InvalidTransactionDataError(DomainException):
    """Transaction details are malformed or incomplete"""

    pass


class LoanAlreadyCompletedError(DomainException):
    """Payment applied to a loan with no remaining term"""

    pass


class InvalidPeriodError(DomainException):
    """Reporting period is not a valid calendar month"""

    pass


class InvalidPasswordError(DomainException):
    """Password is empty or longer than bcrypt can hash"""

    pass
