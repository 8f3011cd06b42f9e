"""
Test suite for amounts and dates helpers

Tests Decimal coercion, rounding, and calendar arithmetic.
"""

import pytest
from decimal import Decimal
from datetime import date, datetime

from loan_ledger.amounts import (
    clamp_zero, decimal_from_string, quantize_to, round_whole, to_decimal
)
from loan_ledger.dates import (
    add_months, as_date, days_between, full_label, short_label,
    whole_months_between
)
from loan_ledger.errors import LoanValidationError


class TestAmounts:
    """Test Decimal handling"""

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal('0.1')

    def test_string_formats(self):
        assert decimal_from_string("1,234.50") == Decimal('1234.50')
        assert decimal_from_string(" ₹ 500 ") == Decimal('500')

    def test_rejects_bool(self):
        with pytest.raises(LoanValidationError):
            to_decimal(True)

    def test_rejects_non_finite_strings(self):
        with pytest.raises(LoanValidationError, match="finite"):
            to_decimal("NaN")

    def test_rejects_empty_string(self):
        with pytest.raises(LoanValidationError):
            to_decimal("   ")

    @pytest.mark.parametrize("raw", [
        "12abc34", "10/2", "5 000x9", "12 USD", "12 euros", "1,2", "1..5", "500 ₹",
    ])
    def test_rejects_malformed_strings(self, raw):
        """Stray characters are an error, never silently dropped"""
        with pytest.raises(LoanValidationError, match="Cannot convert"):
            decimal_from_string(raw)

    def test_accepts_grouped_and_signed_strings(self):
        assert decimal_from_string("1,00,000") == Decimal('100000')
        assert decimal_from_string("-1,234,567.8") == Decimal('-1234567.8')
        assert decimal_from_string("$12") == Decimal('12')
        assert decimal_from_string(".5") == Decimal('0.5')
        assert decimal_from_string("1e3") == Decimal('1000')

    def test_ledger_context_ignores_thread_precision(self):
        """Calculations use the configured precision whatever the caller's context"""
        from decimal import localcontext
        from loan_ledger.amortization import compute_emi

        expected = compute_emi(Decimal('100000'), Decimal('10'), 12)
        with localcontext() as ctx:
            ctx.prec = 5
            narrowed = compute_emi(Decimal('100000'), Decimal('10'), 12)

        assert narrowed == expected

    def test_ledger_context_in_worker_thread(self):
        import threading
        from decimal import getcontext
        from loan_ledger.amortization import compute_emi

        expected = compute_emi(Decimal('100000'), Decimal('10'), 12)
        results = []

        def worker():
            getcontext().prec = 6
            results.append(compute_emi(Decimal('100000'), Decimal('10'), 12))

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert results == [expected]

    def test_round_whole_half_up(self):
        assert round_whole(Decimal('2.5')) == Decimal('3')
        assert round_whole(Decimal('2.49')) == Decimal('2')
        assert round_whole(Decimal('8884.878')) == Decimal('8885')

    def test_quantize_to(self):
        assert quantize_to(Decimal('1.005'), Decimal('0.01')) == Decimal('1.01')

    def test_clamp_zero(self):
        assert clamp_zero(Decimal('-3')) == Decimal('0')
        assert clamp_zero(Decimal('3')) == Decimal('3')


class TestDates:
    """Test calendar helpers"""

    def test_as_date_forms(self):
        assert as_date(date(2024, 1, 1)) == date(2024, 1, 1)
        assert as_date(datetime(2024, 1, 1, 23, 59)) == date(2024, 1, 1)
        assert as_date("2024-01-01") == date(2024, 1, 1)
        assert as_date("2024-01-01T10:00:00Z") == date(2024, 1, 1)

    def test_as_date_rejects_other_types(self):
        with pytest.raises(LoanValidationError):
            as_date(20240101)

    def test_days_between_is_absolute(self):
        assert days_between(date(2024, 1, 1), date(2024, 4, 10)) == 100
        assert days_between(date(2024, 4, 10), date(2024, 1, 1)) == 100

    def test_add_months_clamps_month_end(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)

    def test_whole_months_between(self):
        assert whole_months_between(date(2024, 1, 4), date(2024, 2, 3)) == 0
        assert whole_months_between(date(2024, 1, 4), date(2024, 2, 4)) == 1
        assert whole_months_between(date(2023, 11, 20), date(2024, 2, 25)) == 3
        assert whole_months_between(date(2024, 3, 1), date(2024, 1, 1)) == -2

    def test_labels(self):
        assert full_label(date(2024, 3, 5)) == "05 Mar 2024"
        assert short_label(date(2024, 3, 5)) == "Mar 05"
