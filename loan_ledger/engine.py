"""
Loan Engine Facade

Entry points the caller uses: status dispatch by loan kind, repayment split
suggestions, and the overdue-installment sweep over a loan collection. Every
function returns new values; persistence stays with the caller.
"""

from typing import Iterable, List, Optional, Tuple
import logging
import uuid

from .accrual import daily_status
from .amortization import emi_status
from .amounts import Numeric, ZERO, ledger_context, quantize_to, to_decimal
from .config import get_config
from .dates import DateLike, as_date
from .errors import LoanValidationError
from .growth import growth_series
from .logging_config import log_action
from .models import LoanRecord, LoanStatus, Repayment
from .overdue import missing_installments

logger = logging.getLogger(__name__)

__all__ = [
    "loan_status",
    "growth_series",
    "suggest_split",
    "apply_overdue_installments",
    "refresh_portfolio",
]


def loan_status(loan: LoanRecord, as_of: DateLike) -> LoanStatus:
    """Status snapshot for any loan, dispatched on its kind"""
    if loan.is_emi:
        return emi_status(loan, as_of)
    return daily_status(loan, as_of)


@ledger_context
def suggest_split(loan: LoanRecord, amount: Numeric, as_of: DateLike,
                  precision: Optional[Numeric] = None) -> Repayment:
    """
    Propose a principal/interest split for a repayment of ``amount``

    Daily loans settle accrued interest first. EMI loans take one month of
    interest on the outstanding principal first. Either way the interest part
    never exceeds the amount paid. The proposal is not part of the ledger
    until the caller appends it.

    Raises:
        LoanValidationError: If amount is not positive
    """
    amount = to_decimal(amount, "amount")
    if amount <= ZERO:
        raise LoanValidationError(f"Repayment amount must be positive, got {amount}")
    if precision is None:
        precision = get_config().split_precision
    quantum = to_decimal(precision, "precision")

    as_of = as_date(as_of, "as_of")
    status = loan_status(loan, as_of)

    if loan.is_emi:
        interest_owed = status.current_principal * loan.monthly_rate
    else:
        interest_owed = status.accrued_interest

    interest_part = min(amount, max(interest_owed, ZERO))
    principal_part = amount - interest_part

    return Repayment(
        id=str(uuid.uuid4()),
        date=as_of,
        amount_paid=amount,
        principal_component=quantize_to(principal_part, quantum),
        interest_component=quantize_to(interest_part, quantum)
    )


def apply_overdue_installments(loan: LoanRecord, now: DateLike) -> LoanRecord:
    """Return the loan with any missing installments appended; unchanged loans come back as-is"""
    proposals = missing_installments(loan, now)
    if not proposals:
        return loan
    return loan.with_repayments(proposals)


def refresh_portfolio(loans: Iterable[LoanRecord], now: DateLike,
                      correlation_id: Optional[str] = None) -> Tuple[List[LoanRecord], List[str]]:
    """
    Backfill missing installments across a loan collection

    Only active EMI loans are considered. Running the sweep again on its own
    output proposes nothing further, so the caller should persist the result
    before anything else reads the original records.

    Returns:
        (loans in their original order, ids of the loans that changed)
    """
    now = as_date(now, "now")
    refreshed = []
    changed_ids = []

    for loan in loans:
        if loan.is_active and loan.is_emi:
            updated = apply_overdue_installments(loan, now)
            if updated is not loan:
                added = len(updated.repayments) - len(loan.repayments)
                changed_ids.append(loan.id)
                log_action(
                    logger, "info",
                    f"Backfilled {added} overdue installment(s)",
                    loan_id=loan.id,
                    action="backfill_installments",
                    correlation_id=correlation_id,
                    extra={"count": added, "as_of": now.isoformat()}
                )
                loan = updated
        refreshed.append(loan)

    return refreshed, changed_ids
