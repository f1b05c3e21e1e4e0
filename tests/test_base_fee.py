from decimal import Decimal

import pytest

from campus_fees.models.domain import Order, OrderCategory
from campus_fees.services.calculators.base_fee import DEFAULT_BASE_FEE, BaseFeeCalculator


def _order(weight=0.4, category=OrderCategory.MAIL, **overrides) -> Order:
    return Order(order_id="O-1", category=category, weight=weight, **overrides)


def test_light_parcel_costs_one_unit(rates):
    assert BaseFeeCalculator(rates).calculate(_order(weight=0.4)) == Decimal("1.00")


@pytest.mark.parametrize(
    ("weight", "expected"),
    [
        (0.5, Decimal("1.00")),
        (1.0, Decimal("2.00")),
        (1.2, Decimal("3.30")),
        (2.0, Decimal("6.00")),
    ],
)
def test_weight_units_and_heavy_surcharge(rates, weight, expected):
    assert BaseFeeCalculator(rates).calculate(_order(weight=weight)) == expected


def test_large_item_multiplier(rates):
    assert BaseFeeCalculator(rates).calculate(_order(weight=0.4, is_large_item=True)) == Decimal("1.50")


def test_missing_weight_falls_back_to_default(rates):
    assert BaseFeeCalculator(rates).calculate(_order(weight=None)) == DEFAULT_BASE_FEE


def test_base_fee_has_two_decimal_places(rates, money_places):
    fee = BaseFeeCalculator(rates).calculate(_order(weight=3.3, is_large_item=True))
    assert money_places(fee) == 2
