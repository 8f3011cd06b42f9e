"""
Overdue Installment Generator

Detects EMI periods that have come due without a recorded installment and
proposes the missing repayments. The loan is never modified; the caller
appends the proposals and persists the record.

Coverage is count based: every recorded repayment is taken to cover one
installment period, regardless of its date.
"""

from typing import List, Optional
import logging
import uuid

from .amortization import compute_emi, principal_repaid
from .amounts import Numeric, ledger_context, round_whole, to_decimal
from .config import get_config
from .dates import DateLike, add_months, as_date, whole_months_between
from .models import LoanRecord, Repayment

logger = logging.getLogger(__name__)


def installments_due(loan: LoanRecord, now: DateLike) -> int:
    """Installment periods that have come due by ``now``, capped at the tenure"""
    now = as_date(now, "now")
    months = whole_months_between(loan.start_date, now)
    return max(0, min(months, loan.tenure))


@ledger_context
def missing_installments(loan: LoanRecord, now: DateLike,
                         payoff_tolerance: Optional[Numeric] = None) -> List[Repayment]:
    """
    Propose repayments for installment periods elapsed without a recorded one

    Args:
        loan: EMI loan to inspect; other kinds yield no proposals
        now: Date the check runs as of
        payoff_tolerance: Remaining balance at or below which the loan counts
            as paid off; defaults to the configured payoff_tolerance

    Returns:
        Proposed repayments, oldest first, amounts rounded to whole units
    """
    if not loan.is_emi or loan.tenure is None:
        return []

    if payoff_tolerance is None:
        payoff_tolerance = get_config().payoff_tolerance
    tolerance = to_decimal(payoff_tolerance, "payoff_tolerance")

    installment = compute_emi(loan.principal, loan.annual_rate, loan.tenure).installment
    monthly_rate = loan.monthly_rate
    balance = loan.principal - principal_repaid(loan)

    existing_count = len(loan.repayments)
    missing_count = installments_due(loan, now) - existing_count

    proposals = []
    for slot in range(max(0, missing_count)):
        if balance <= tolerance:
            break

        interest_part = balance * monthly_rate
        principal_part = installment - interest_part
        due_date = add_months(loan.start_date, existing_count + 1 + slot)

        proposals.append(Repayment(
            id=str(uuid.uuid4()),
            date=due_date,
            amount_paid=round_whole(installment),
            principal_component=round_whole(principal_part),
            interest_component=round_whole(interest_part)
        ))

        # Carry the unrounded split forward
        balance -= principal_part

    if proposals:
        logger.debug("Loan %s has %d missing installments (first due %s)",
                     loan.id, len(proposals), proposals[0].date)
    return proposals
