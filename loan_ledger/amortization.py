"""
Amortization Calculator Module

Equated monthly installments under the standard reducing-balance formula:

    installment = P * r * (1 + r)^n / ((1 + r)^n - 1),   r = annual% / 1200

and the status of an EMI loan derived from the installments already recorded.
"""

from decimal import Decimal
import logging

from .amounts import Numeric, ZERO, clamp_zero, ledger_context, to_decimal
from .dates import DateLike, as_date, days_between
from .errors import LoanKindError, LoanValidationError
from .models import EMIBreakdown, LoanRecord, LoanStatus

logger = logging.getLogger(__name__)


@ledger_context
def compute_emi(principal: Numeric, annual_rate: Numeric, months: int) -> EMIBreakdown:
    """
    Compute installment and totals for a reducing-balance loan

    Args:
        principal: Amount borrowed
        annual_rate: Annual rate in percent (10 means 10% p.a.)
        months: Number of monthly installments

    Returns:
        EMIBreakdown with installment, total interest and total payment

    Raises:
        LoanValidationError: On negative or non-finite amounts or months < 1
    """
    principal = to_decimal(principal, "principal")
    annual_rate = to_decimal(annual_rate, "annual_rate")
    if principal < ZERO:
        raise LoanValidationError(f"principal must be non-negative, got {principal}")
    if annual_rate < ZERO:
        raise LoanValidationError(f"annual_rate must be non-negative, got {annual_rate}")
    if isinstance(months, bool) or not isinstance(months, int) or months < 1:
        raise LoanValidationError(f"months must be a positive integer, got {months!r}")

    monthly_rate = annual_rate / Decimal('1200')

    if monthly_rate == ZERO:
        # No interest - simple division
        installment = principal / Decimal(months)
        return EMIBreakdown(
            installment=installment,
            total_interest=Decimal('0'),
            total_payment=principal
        )

    factor = (Decimal('1') + monthly_rate) ** months
    installment = principal * monthly_rate * factor / (factor - Decimal('1'))
    total_payment = installment * Decimal(months)

    return EMIBreakdown(
        installment=installment,
        total_interest=total_payment - principal,
        total_payment=total_payment
    )


def principal_repaid(loan: LoanRecord) -> Decimal:
    """Sum of principal components across the ledger"""
    return sum((r.principal_component for r in loan.repayments), Decimal('0'))


@ledger_context
def emi_status(loan: LoanRecord, as_of: DateLike) -> LoanStatus:
    """
    Status of an EMI loan as of a calendar date

    Interest is embedded in the installment, so accrued interest is always
    zero. Outstanding principal and total due are floored at zero.

    Raises:
        LoanKindError: If the loan is not an EMI loan
    """
    if not loan.is_emi:
        raise LoanKindError(f"emi_status requires an EMI loan, got {loan.kind.value} ({loan.id})")

    as_of = as_date(as_of, "as_of")
    breakdown = compute_emi(loan.principal, loan.annual_rate, loan.tenure)
    total_paid = sum((r.amount_paid for r in loan.repayments), Decimal('0'))

    status = LoanStatus(
        current_principal=clamp_zero(loan.principal - principal_repaid(loan)),
        accrued_interest=Decimal('0'),
        total_due=clamp_zero(breakdown.total_payment - total_paid),
        days_elapsed=days_between(loan.start_date, as_of),
        emi_amount=breakdown.installment
    )
    logger.debug("EMI status for %s as of %s: total due %s", loan.id, as_of, status.total_due)
    return status
