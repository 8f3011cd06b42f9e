"""
Growth Series Generator

Sampled balance/interest time series for trend charts. EMI loans plot only
their obligation trend (two points); daily-interest loans are reconstructed
day by day with the same accrual fold as the accrual calculator and sampled
at a stride that yields roughly ``growth_sample_target`` points.

Chart values are floored at zero. Underlying ledger values are not.
"""

from decimal import Decimal
from datetime import date
from typing import List, Optional
import logging

from .accrual import accrue_to, apply_repayment, initial_state
from .amortization import compute_emi, emi_status
from .amounts import clamp_zero, ledger_context
from .config import get_config
from .dates import DateLike, add_days, as_date, full_label, short_label
from .errors import LoanValidationError
from .models import GrowthPoint, LoanRecord

logger = logging.getLogger(__name__)


@ledger_context
def growth_series(loan: LoanRecord, now: DateLike,
                  sample_target: Optional[int] = None) -> List[GrowthPoint]:
    """
    Build the chart series for a loan from its start date up to ``now``

    Args:
        loan: Loan to chart
        now: End of the series
        sample_target: Approximate number of samples for daily loans;
            defaults to the configured growth_sample_target

    Returns:
        Points in date order, starting with the loan's start date
    """
    now = as_date(now, "now")
    if sample_target is None:
        sample_target = get_config().growth_sample_target
    if sample_target < 1:
        raise LoanValidationError(f"sample_target must be at least 1, got {sample_target}")

    if loan.is_emi:
        points = _emi_series(loan, now)
    else:
        points = _daily_series(loan, now, sample_target)

    logger.debug("Growth series for %s: %d points", loan.id, len(points))
    return points


def sample_stride(total_days: int, sample_target: int) -> int:
    """Days between samples; never less than one"""
    return max(1, total_days // sample_target)


def _emi_series(loan: LoanRecord, now: date) -> List[GrowthPoint]:
    total_payment = compute_emi(loan.principal, loan.annual_rate, loan.tenure).total_payment
    return [
        GrowthPoint(
            date=loan.start_date,
            label=full_label(loan.start_date),
            interest=Decimal('0'),
            total=total_payment
        ),
        GrowthPoint(
            date=now,
            label=full_label(now),
            interest=Decimal('0'),
            total=emi_status(loan, now).total_due
        ),
    ]


def _daily_series(loan: LoanRecord, now: date, sample_target: int) -> List[GrowthPoint]:
    start = loan.start_date
    points = [
        GrowthPoint(
            date=start,
            label=full_label(start),
            interest=Decimal('0'),
            total=loan.principal
        )
    ]

    total_days = max(0, (now - start).days)
    stride = sample_stride(total_days, sample_target)

    ledger = loan.sorted_repayments()
    next_index = 0
    state = initial_state(loan)

    for day in range(1, total_days + 1):
        current = add_days(start, day)

        # Consume repayments due today; ones dated before today were either
        # applied on their own day or fall before the walk and are skipped.
        while next_index < len(ledger):
            repayment = ledger[next_index]
            if repayment.date == current:
                state = apply_repayment(state, repayment, loan.annual_rate)
                next_index += 1
            elif repayment.date < current:
                next_index += 1
            else:
                break

        if day % stride == 0 or day == total_days:
            sample = accrue_to(state, loan.annual_rate, current)
            points.append(GrowthPoint(
                date=current,
                label=short_label(current),
                interest=clamp_zero(sample.interest),
                total=clamp_zero(sample.total)
            ))

    return points
