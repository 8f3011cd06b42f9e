"""
Loan Models

Loan records, repayments and the derived snapshots the calculators return.
Records are immutable; changes produce new records via dataclasses.replace.
"""

from decimal import Decimal
from datetime import date
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple
from enum import Enum

from .amounts import ZERO, to_decimal
from .dates import as_date
from .errors import LoanValidationError


class LoanKind(Enum):
    """How a loan accrues what is owed"""
    DAILY = "DAILY"  # Simple interest accrued per calendar day
    EMI = "EMI"      # Equated monthly installments, reducing balance


class LoanState(Enum):
    """Loan lifecycle states"""
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class Repayment:
    """One recorded payment against a loan"""
    id: str
    date: date
    amount_paid: Decimal
    principal_component: Decimal
    interest_component: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'date', as_date(self.date, "repayment date"))
        for name in ('amount_paid', 'principal_component', 'interest_component'):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name))


@dataclass(frozen=True)
class LoanRecord:
    """
    A borrowing obligation with its repayment ledger

    ``annual_rate`` is a percentage (10 means 10% p.a.). ``tenure`` is a
    month count and is only meaningful for EMI loans. Repayment order is not
    significant; calculators sort a copy by date before replaying.
    """
    id: str
    title: str
    principal: Decimal
    annual_rate: Decimal
    start_date: date
    kind: LoanKind
    tenure: Optional[int] = None
    state: LoanState = LoanState.ACTIVE
    repayments: Tuple[Repayment, ...] = field(default_factory=tuple)

    def __post_init__(self):
        principal = to_decimal(self.principal, "principal")
        if principal < ZERO:
            raise LoanValidationError(f"principal must be non-negative, got {principal}")
        object.__setattr__(self, 'principal', principal)

        rate = to_decimal(self.annual_rate, "annual_rate")
        if rate < ZERO:
            raise LoanValidationError(f"annual_rate must be non-negative, got {rate}")
        object.__setattr__(self, 'annual_rate', rate)

        object.__setattr__(self, 'start_date', as_date(self.start_date, "start_date"))

        if not isinstance(self.kind, LoanKind):
            raise LoanValidationError(f"kind must be a LoanKind, got {self.kind!r}")
        if not isinstance(self.state, LoanState):
            raise LoanValidationError(f"state must be a LoanState, got {self.state!r}")

        if self.kind == LoanKind.EMI:
            if isinstance(self.tenure, bool) or not isinstance(self.tenure, int) or self.tenure < 1:
                raise LoanValidationError(
                    f"EMI loans need a tenure of at least one month, got {self.tenure!r}"
                )
        elif self.tenure is not None:
            raise LoanValidationError("tenure applies to EMI loans only")

        repayments = tuple(self.repayments)
        for repayment in repayments:
            if not isinstance(repayment, Repayment):
                raise LoanValidationError(f"repayments must be Repayment objects, got {repayment!r}")
        object.__setattr__(self, 'repayments', repayments)

    @property
    def is_emi(self) -> bool:
        return self.kind == LoanKind.EMI

    @property
    def is_active(self) -> bool:
        return self.state == LoanState.ACTIVE

    @property
    def monthly_rate(self) -> Decimal:
        """Periodic rate as a fraction, e.g. 10% p.a. -> 10/1200"""
        return self.annual_rate / Decimal('1200')

    def sorted_repayments(self) -> Tuple[Repayment, ...]:
        """Repayments in date order; equal dates keep their ledger order"""
        return tuple(sorted(self.repayments, key=lambda r: r.date))

    def with_repayments(self, new_repayments: Iterable[Repayment]) -> 'LoanRecord':
        """Return a copy with repayments appended to the ledger"""
        return replace(self, repayments=self.repayments + tuple(new_repayments))

    def mark_completed(self) -> 'LoanRecord':
        return replace(self, state=LoanState.COMPLETED)


@dataclass(frozen=True)
class LoanStatus:
    """Derived snapshot of what is owed on a loan at a given date"""
    current_principal: Decimal
    accrued_interest: Decimal
    total_due: Decimal
    days_elapsed: int
    emi_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class EMIBreakdown:
    """Result of the reducing-balance installment formula"""
    installment: Decimal
    total_interest: Decimal
    total_payment: Decimal


@dataclass(frozen=True)
class GrowthPoint:
    """One sample of a loan's balance trend"""
    date: date
    label: str
    interest: Decimal
    total: Decimal
