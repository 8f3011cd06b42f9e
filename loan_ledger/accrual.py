"""
Accrual Calculator Module

Outstanding balance and accrued simple interest for daily-interest loans.
The repayment ledger is replayed as a fold over an immutable AccrualState:
interest accrues on the running principal between ledger dates, then each
repayment's components are subtracted.

Day count is actual/365 fixed with the rate in percent:
    interest = principal * rate * days / 36500
"""

from decimal import Decimal
from datetime import date
from dataclasses import dataclass
from functools import reduce
import logging

from .amounts import ledger_context
from .dates import DateLike, as_date, days_between
from .errors import LoanKindError
from .models import LoanKind, LoanRecord, LoanStatus, Repayment

logger = logging.getLogger(__name__)

DAY_COUNT_DIVISOR = Decimal('36500')


@dataclass(frozen=True)
class AccrualState:
    """Running principal and interest as of ``cursor``"""
    principal: Decimal
    interest: Decimal
    cursor: date

    @property
    def total(self) -> Decimal:
        return self.principal + self.interest


def simple_interest(principal: Decimal, annual_rate: Decimal, days: int) -> Decimal:
    """Simple interest for ``days`` calendar days at ``annual_rate`` percent"""
    return principal * annual_rate * Decimal(days) / DAY_COUNT_DIVISOR


def initial_state(loan: LoanRecord) -> AccrualState:
    return AccrualState(principal=loan.principal, interest=Decimal('0'), cursor=loan.start_date)


def accrue_to(state: AccrualState, annual_rate: Decimal, when: date) -> AccrualState:
    """Accrue interest from the cursor up to ``when``; no-op if ``when`` is not later"""
    if when <= state.cursor:
        return state
    days = (when - state.cursor).days
    return AccrualState(
        principal=state.principal,
        interest=state.interest + simple_interest(state.principal, annual_rate, days),
        cursor=when
    )


def apply_repayment(state: AccrualState, repayment: Repayment, annual_rate: Decimal) -> AccrualState:
    """
    Fold step: accrue up to the repayment date, then apply the repayment

    Either running value may go negative here (e.g. an interest overpayment);
    clamping is left to presentation. The cursor always moves to the
    repayment date, even one that precedes the current cursor.
    """
    accrued = accrue_to(state, annual_rate, repayment.date)
    return AccrualState(
        principal=accrued.principal - repayment.principal_component,
        interest=accrued.interest - repayment.interest_component,
        cursor=repayment.date
    )


def replay(loan: LoanRecord) -> AccrualState:
    """Replay the whole ledger in date order and return the state at the last repayment"""
    return reduce(
        lambda state, repayment: apply_repayment(state, repayment, loan.annual_rate),
        loan.sorted_repayments(),
        initial_state(loan)
    )


@ledger_context
def daily_status(loan: LoanRecord, as_of: DateLike) -> LoanStatus:
    """
    Status of a daily-interest loan as of a calendar date

    Values are reported raw: a principal overpayment shows as a negative
    ``current_principal``.

    Raises:
        LoanKindError: If the loan is not a DAILY loan
    """
    if loan.kind != LoanKind.DAILY:
        raise LoanKindError(f"daily_status requires a DAILY loan, got {loan.kind.value} ({loan.id})")

    as_of = as_date(as_of, "as_of")
    state = accrue_to(replay(loan), loan.annual_rate, as_of)

    status = LoanStatus(
        current_principal=state.principal,
        accrued_interest=state.interest,
        total_due=state.total,
        days_elapsed=days_between(loan.start_date, as_of)
    )
    logger.debug("Daily status for %s as of %s: total due %s", loan.id, as_of, status.total_due)
    return status
