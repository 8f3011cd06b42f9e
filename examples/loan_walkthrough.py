#!/usr/bin/env python3
"""
Example: Tracking a daily-interest loan and an EMI loan

Loads two stored records, prints their status, a growth series, and backfills
overdue installments the way an app would on start-up.
"""

import os
import sys
from datetime import date

# Add the loan ledger package to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from loan_ledger.config import get_config
from loan_ledger.engine import growth_series, loan_status, refresh_portfolio, suggest_split
from loan_ledger.logging_config import setup_logging_from_config
from loan_ledger.records import loan_to_dict, loans_from_dicts


STORED = [
    {
        "id": "family-1",
        "title": "Borrowed from uncle",
        "principal": "50000",
        "rate": "12",
        "startDate": "2025-01-10",
        "status": "ACTIVE",
        "repayments": [
            {"id": "p1", "date": "2025-04-10", "amountPaid": "6000",
             "principalComponent": "4520", "interestComponent": "1480"},
        ],
    },
    {
        "id": "bike-1",
        "title": "Bike EMI",
        "principal": "90000",
        "rate": "10.5",
        "startDate": "2025-02-05",
        "type": "EMI",
        "tenure": 18,
        "status": "ACTIVE",
        "repayments": [],
    },
]


def main():
    config = get_config()
    setup_logging_from_config(config)
    today = date(2025, 7, 1)

    print("Loan Ledger Walkthrough")
    print("=" * 60)

    loans, changed = refresh_portfolio(loans_from_dicts(STORED), today)
    print(f"\nBackfilled loans: {changed or 'none'}")

    for loan in loans:
        status = loan_status(loan, today)
        print(f"\n{loan.title} ({loan.kind.value})")
        print(f"   Principal outstanding: {status.current_principal:,.2f}")
        print(f"   Accrued interest:      {status.accrued_interest:,.2f}")
        print(f"   Total due:             {status.total_due:,.2f}")
        print(f"   Days elapsed:          {status.days_elapsed}")
        if status.emi_amount is not None:
            print(f"   Installment:           {status.emi_amount:,.2f}")

        print("   Trend:")
        for point in growth_series(loan, today):
            print(f"      {point.label:>12}  {point.total:>12,.2f}")

        split = suggest_split(loan, "5000", today)
        print(f"   Paying 5,000 today -> principal {split.principal_component}, "
              f"interest {split.interest_component}")

    print("\nRecords to persist:")
    for loan in loans:
        if loan.id in changed:
            print(f"   {loan_to_dict(loan)}")


if __name__ == "__main__":
    main()
