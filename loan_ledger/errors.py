"""Exception hierarchy for the loan ledger engine."""


class LoanLedgerError(Exception):
    """Base exception for all loan ledger errors."""


class LoanValidationError(LoanLedgerError, ValueError):
    """Raised when loan terms, repayments or dates are invalid."""


class LoanKindError(LoanLedgerError, TypeError):
    """Raised when a calculator is called with a loan of the wrong kind."""
