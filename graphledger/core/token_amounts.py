"""Token Amounts: parsing and fixed-point normalization of monetary values.

Invariants:
    - Every amount leaving this module is a Decimal quantized to 2 places (ROUND_HALF_UP)
    - NaN, infinities and unparseable input raise InvalidAmountError
    - Positivity/non-negativity is enforced by the require_* helpers, not by parse
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from graphledger.core.errors import InvalidAmountError

CENTS = Decimal("0.01")


def quantize_tokens(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_amount(value: object, field: str = "amount") -> Decimal:
    """Convert int/float/str/Decimal to a finite 2-decimal Decimal."""
    if isinstance(value, bool):
        raise InvalidAmountError(f"{field} must be a number")
    try:
        amount = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(f"{field} must be a number")
    if not amount.is_finite():
        raise InvalidAmountError(f"{field} must be a finite number")
    return quantize_tokens(amount)


def require_positive(value: object, field: str = "amount") -> Decimal:
    amount = parse_amount(value, field)
    if amount <= 0:
        raise InvalidAmountError(f"{field} must be a positive number")
    return amount


def require_non_negative(value: object, field: str = "amount") -> Decimal:
    amount = parse_amount(value, field)
    if amount < 0:
        raise InvalidAmountError(f"{field} must be a number >= 0")
    return amount
