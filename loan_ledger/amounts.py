"""
Amount Handling Module

Decimal coercion, rounding and clamping for loan amounts. All amounts are in a
single implied currency unit. NEVER uses float for monetary values.
"""

from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from functools import wraps
from typing import Union
import re

from .config import get_config
from .errors import LoanValidationError

CURRENCY_SYMBOLS = "₹$€£¥"

# Plain or comma-grouped digits (1,234,567 or 1,00,000), optional fraction
# and exponent
NUMBER_PATTERN = re.compile(
    r'[+-]?(?:(?:\d{1,3}(?:,\d{2,3})+|\d+)(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?'
)

ZERO = Decimal('0')
WHOLE_UNIT = Decimal('1')

Numeric = Union[Decimal, int, float, str]


def to_decimal(value: Numeric, field_name: str = "amount") -> Decimal:
    """
    Convert a caller-supplied number to Decimal

    Floats go through str() so 0.1 stays 0.1 rather than its binary expansion.

    Raises:
        LoanValidationError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise LoanValidationError(f"{field_name} must be a number, got {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        result = decimal_from_string(value, field_name)
    else:
        raise LoanValidationError(f"{field_name} must be a number, got {type(value).__name__}")

    if not result.is_finite():
        raise LoanValidationError(f"{field_name} must be finite, got {value!r}")
    return result


def decimal_from_string(value: str, field_name: str = "amount") -> Decimal:
    """
    Safely convert string to Decimal, handling common formats

    Args:
        value: String representation of number
        field_name: Name used in the error message

    Returns:
        Decimal value

    Raises:
        LoanValidationError: If string cannot be converted to valid Decimal
    """
    if not value or not value.strip():
        raise LoanValidationError(f"{field_name} must be a non-empty string")

    stripped = value.strip()
    if stripped.lower() in ("nan", "inf", "-inf", "infinity", "-infinity"):
        raise LoanValidationError(f"{field_name} must be finite, got {value!r}")

    # A leading currency symbol is allowed, nothing else around the number
    if stripped[0] in CURRENCY_SYMBOLS:
        stripped = stripped[1:].lstrip()

    if not NUMBER_PATTERN.fullmatch(stripped):
        raise LoanValidationError(f"Cannot convert {field_name} '{value}' to Decimal")

    try:
        return Decimal(stripped.replace(',', ''))
    except InvalidOperation:
        raise LoanValidationError(f"Cannot convert {field_name} '{value}' to Decimal")


def ledger_context(func):
    """
    Run a calculation under the configured Decimal precision

    Decimal contexts are per thread, so each public calculation sets its own
    instead of inheriting whatever the calling thread has configured.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        with localcontext(Context(prec=get_config().decimal_precision)):
            return func(*args, **kwargs)
    return wrapper


def round_whole(value: Decimal) -> Decimal:
    """Round to the nearest whole currency unit, halves away from zero"""
    return value.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def quantize_to(value: Decimal, quantum: Decimal) -> Decimal:
    """Round to an arbitrary quantum such as Decimal('0.01')"""
    return value.quantize(quantum, rounding=ROUND_HALF_UP)


def clamp_zero(value: Decimal) -> Decimal:
    """Floor a value at zero"""
    return value if value > ZERO else ZERO
