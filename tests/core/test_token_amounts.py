"""Token Amounts: parsing, quantization and sign checks."""

from decimal import Decimal

import pytest

from graphledger.core.errors import InvalidAmountError
from graphledger.core.token_amounts import (
    parse_amount, quantize_tokens, require_non_negative, require_positive,
)


def test_quantize_half_up():
    assert quantize_tokens(Decimal("1.005")) == Decimal("1.01")
    assert quantize_tokens(Decimal("2")) == Decimal("2.00")


def test_parse_accepts_numbers_and_strings():
    assert parse_amount(3) == Decimal("3.00")
    assert parse_amount(0.1) == Decimal("0.10")
    assert parse_amount("12.345") == Decimal("12.35")


@pytest.mark.parametrize("value", [float("nan"), float("inf"), "abc", True, None])
def test_parse_rejects_garbage(value):
    with pytest.raises(InvalidAmountError):
        parse_amount(value)


def test_require_positive():
    assert require_positive(1) == Decimal("1.00")
    with pytest.raises(InvalidAmountError):
        require_positive(0)
    with pytest.raises(InvalidAmountError):
        require_positive(-2)


def test_require_non_negative():
    assert require_non_negative(0) == Decimal("0.00")
    with pytest.raises(InvalidAmountError):
        require_non_negative(-5)
