"""
Stored Record Conversion

Converts between engine models and the plain dicts the storage layer keeps.
Stored records use camelCase keys; amounts are written as Decimal strings
and dates as ISO ``YYYY-MM-DD``.
"""

from typing import Any, Dict, List

from .errors import LoanValidationError
from .models import LoanKind, LoanRecord, LoanState, Repayment


def repayment_to_dict(repayment: Repayment) -> Dict[str, Any]:
    return {
        "id": repayment.id,
        "date": repayment.date.isoformat(),
        "amountPaid": str(repayment.amount_paid),
        "principalComponent": str(repayment.principal_component),
        "interestComponent": str(repayment.interest_component),
    }


def repayment_from_dict(data: Dict[str, Any]) -> Repayment:
    try:
        return Repayment(
            id=str(data["id"]),
            date=data["date"],
            amount_paid=data["amountPaid"],
            principal_component=data.get("principalComponent", data["amountPaid"]),
            interest_component=data.get("interestComponent", 0)
        )
    except KeyError as e:
        raise LoanValidationError(f"Stored repayment is missing field {e.args[0]!r}")


def loan_to_dict(loan: LoanRecord) -> Dict[str, Any]:
    """Serialize a loan for storage"""
    result = {
        "id": loan.id,
        "title": loan.title,
        "principal": str(loan.principal),
        "rate": str(loan.annual_rate),
        "startDate": loan.start_date.isoformat(),
        "type": loan.kind.value,
        "status": loan.state.value,
        "repayments": [repayment_to_dict(r) for r in loan.repayments],
    }
    if loan.tenure is not None:
        result["tenure"] = loan.tenure
    return result


def loan_from_dict(data: Dict[str, Any]) -> LoanRecord:
    """
    Build a loan from a stored dict

    Records written before loan kinds existed have no ``type`` and are
    daily-interest loans. A tenure left on a daily record is ignored.
    """
    try:
        kind = LoanKind(data.get("type") or LoanKind.DAILY.value)
        state = LoanState(data.get("status") or LoanState.ACTIVE.value)
    except ValueError as e:
        raise LoanValidationError(str(e))

    tenure = None
    if kind == LoanKind.EMI:
        tenure = _parse_tenure(data.get("tenure"))

    try:
        return LoanRecord(
            id=str(data["id"]),
            title=data.get("title", ""),
            principal=data["principal"],
            annual_rate=data["rate"],
            start_date=data["startDate"],
            kind=kind,
            tenure=tenure,
            state=state,
            repayments=tuple(repayment_from_dict(r) for r in data.get("repayments", []))
        )
    except KeyError as e:
        raise LoanValidationError(f"Stored loan is missing field {e.args[0]!r}")


def loans_from_dicts(items: List[Dict[str, Any]]) -> List[LoanRecord]:
    return [loan_from_dict(item) for item in items]


def _parse_tenure(value: Any):
    # Stored tenures may come back as floats or strings from JSON forms
    if value is None or isinstance(value, bool):
        return value
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        raise LoanValidationError(f"tenure must be a whole number of months, got {value!r}")
    if not as_float.is_integer():
        raise LoanValidationError(f"tenure must be a whole number of months, got {value!r}")
    return int(as_float)
