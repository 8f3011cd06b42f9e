"""
Test suite for overdue module

Tests detection of elapsed EMI periods without recorded installments and the
synthesized repayments proposed for them.
"""

from decimal import Decimal
from datetime import date

from loan_ledger.models import LoanKind, LoanRecord, Repayment
from loan_ledger.overdue import installments_due, missing_installments


START = date(2024, 1, 15)


def make_emi_loan(principal='100000', rate='12', tenure=12, repayments=(), start=START):
    return LoanRecord(
        id="EMI001",
        title="Car loan",
        principal=Decimal(principal),
        annual_rate=Decimal(rate),
        start_date=start,
        kind=LoanKind.EMI,
        tenure=tenure,
        repayments=tuple(repayments)
    )


FIRST_INSTALLMENT = Repayment(
    "R1", date(2024, 2, 15), Decimal('8885'), Decimal('7885'), Decimal('1000')
)


class TestInstallmentsDue:
    """Test the elapsed-month count"""

    def test_anniversary_reached(self):
        assert installments_due(make_emi_loan(), date(2024, 4, 15)) == 3

    def test_anniversary_not_reached(self):
        """A month is not due until its day-of-month arrives"""
        assert installments_due(make_emi_loan(), date(2024, 4, 14)) == 2

    def test_capped_at_tenure(self):
        assert installments_due(make_emi_loan(), date(2030, 1, 1)) == 12

    def test_before_start(self):
        assert installments_due(make_emi_loan(), date(2023, 12, 1)) == 0


class TestMissingInstallments:
    """Test synthesized installment proposals"""

    def test_two_missing_after_one_recorded(self):
        """Three months elapsed with one recorded installment proposes two more"""
        loan = make_emi_loan(repayments=[FIRST_INSTALLMENT])
        proposals = missing_installments(loan, date(2024, 4, 15))

        assert len(proposals) == 2
        assert [p.date for p in proposals] == [date(2024, 3, 15), date(2024, 4, 15)]

    def test_split_uses_running_balance(self):
        """Interest is one month on the balance left after recorded principal"""
        loan = make_emi_loan(repayments=[FIRST_INSTALLMENT])
        first, second = missing_installments(loan, date(2024, 4, 15))

        # Balance 92,115 at 1% a month
        assert first.interest_component == Decimal('921')
        assert first.principal_component == Decimal('7964')
        assert first.amount_paid == Decimal('8885')

        # Balance carried forward unrounded: 92,115 - 7,963.73
        assert second.interest_component == Decimal('842')
        assert second.amount_paid == Decimal('8885')

    def test_amounts_are_whole_units(self):
        loan = make_emi_loan()
        for proposal in missing_installments(loan, date(2024, 6, 20)):
            assert proposal.amount_paid == proposal.amount_paid.to_integral_value()
            assert proposal.principal_component == proposal.principal_component.to_integral_value()
            assert proposal.interest_component == proposal.interest_component.to_integral_value()

    def test_nothing_missing(self):
        loan = make_emi_loan(repayments=[FIRST_INSTALLMENT])
        assert missing_installments(loan, date(2024, 3, 14)) == []

    def test_more_recorded_than_due(self):
        """Extra recorded payments never produce negative counts"""
        loan = make_emi_loan(repayments=[FIRST_INSTALLMENT, FIRST_INSTALLMENT])
        assert missing_installments(loan, date(2024, 2, 20)) == []

    def test_full_tenure_elapsed(self):
        """A loan never paid gets the whole schedule, capped at the tenure"""
        proposals = missing_installments(make_emi_loan(), date(2030, 1, 1))

        assert len(proposals) == 12
        assert proposals[0].date == date(2024, 2, 15)
        assert proposals[-1].date == date(2025, 1, 15)

    def test_stops_when_balance_paid_off(self):
        """A near-zero balance proposes nothing"""
        loan = make_emi_loan(repayments=[
            Repayment("R1", date(2024, 2, 15), Decimal('100000'), Decimal('99999.5'), Decimal('0.5'))
        ])
        assert missing_installments(loan, date(2024, 5, 15)) == []

    def test_stops_mid_way(self):
        """Proposals stop once the running balance drops to the tolerance"""
        loan = make_emi_loan(repayments=[
            Repayment("R1", date(2024, 2, 15), Decimal('91200'), Decimal('91200'), Decimal('0'))
        ])
        # Four months due, one recorded, three requested; the balance runs
        # out after two.
        proposals = missing_installments(loan, date(2024, 5, 15))

        assert len(proposals) == 2

    def test_custom_tolerance(self):
        loan = make_emi_loan(repayments=[
            Repayment("R1", date(2024, 2, 15), Decimal('99000'), Decimal('99000'), Decimal('0'))
        ])
        assert len(missing_installments(loan, date(2024, 3, 15))) == 1
        assert missing_installments(loan, date(2024, 3, 15), payoff_tolerance=1000) == []

    def test_zero_rate(self):
        loan = make_emi_loan(principal='1200', rate='0')
        proposals = missing_installments(loan, date(2024, 3, 15))

        assert len(proposals) == 2
        assert all(p.amount_paid == Decimal('100') for p in proposals)
        assert all(p.interest_component == Decimal('0') for p in proposals)

    def test_month_end_due_dates_clamp(self):
        """Due dates on the 31st fall back to the month's last day"""
        loan = make_emi_loan(start=date(2024, 1, 31))
        proposals = missing_installments(loan, date(2024, 3, 31))

        assert [p.date for p in proposals] == [date(2024, 2, 29), date(2024, 3, 31)]

    def test_daily_loan_has_no_installments(self):
        loan = LoanRecord(
            id="LOAN001",
            title="Family loan",
            principal=Decimal('10000'),
            annual_rate=Decimal('10'),
            start_date=START,
            kind=LoanKind.DAILY
        )
        assert missing_installments(loan, date(2025, 1, 1)) == []

    def test_loan_not_mutated(self):
        loan = make_emi_loan(repayments=[FIRST_INSTALLMENT])
        missing_installments(loan, date(2024, 6, 15))

        assert loan.repayments == (FIRST_INSTALLMENT,)

    def test_proposal_ids_unique(self):
        proposals = missing_installments(make_emi_loan(), date(2024, 12, 15))
        assert len({p.id for p in proposals}) == len(proposals)
