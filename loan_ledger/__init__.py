"""
Loan Ledger Engine

Interest accrual and amortization for borrowed-money obligations: daily
simple-interest balances, reducing-balance EMI math, chart series and
overdue installment backfill. Pure functions over immutable records using
Decimal throughout.
"""

from .accrual import daily_status
from .amortization import compute_emi, emi_status
from .engine import (
    apply_overdue_installments, growth_series, loan_status,
    refresh_portfolio, suggest_split
)
from .errors import LoanKindError, LoanLedgerError, LoanValidationError
from .models import (
    EMIBreakdown, GrowthPoint, LoanKind, LoanRecord, LoanState,
    LoanStatus, Repayment
)
from .overdue import missing_installments

__version__ = "1.0.0"
