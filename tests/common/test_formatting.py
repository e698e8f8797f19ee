from decimal import Decimal

import pytest

from hrms.common.formatting import format_currency, round_money


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "₹0"),
        (999, "₹999"),
        (43500, "₹43,500"),
        (100000, "₹1,00,000"),
        (Decimal("1234567.5"), "₹12,34,568"),
        (-3609.09, "-₹3,609"),
    ],
)
def test_format_currency_uses_lakh_grouping(amount, expected):
    assert format_currency(amount) == expected


def test_round_money_is_half_up():
    assert round_money(Decimal("1804.545")) == Decimal("1804.55")
    assert round_money(Decimal("2.675")) == Decimal("2.68")
