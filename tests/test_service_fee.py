from decimal import Decimal

from campus_fees.models.domain import Order, OrderCategory
from campus_fees.services.calculators.service_fee import ServiceFeeCalculator


def _order(**overrides) -> Order:
    values = {"order_id": "O-1", "category": OrderCategory.MAIL, "weight": 1.0}
    values.update(overrides)
    return Order(**values)


def test_service_fee_is_share_of_base_fee(rates):
    assert ServiceFeeCalculator(rates).calculate(_order(), Decimal("10.00")) == Decimal("1.00")


def test_share_is_rounded_half_up(rates):
    # 0.05 * 2.50 = 0.125
    fee = ServiceFeeCalculator(rates).calculate(_order(category=OrderCategory.SHOPPING), Decimal("2.50"))
    assert fee == Decimal("0.13")


def test_insurance_only_when_requested(rates):
    calculator = ServiceFeeCalculator(rates)
    uninsured = _order(declared_value=Decimal("500"))
    insured = _order(declared_value=Decimal("500"), needs_insurance=True)

    assert calculator.calculate(uninsured, Decimal("10.00")) == Decimal("1.00")
    assert calculator.calculate(insured, Decimal("10.00")) == Decimal("6.00")


def test_value_added_services_are_flat(rates):
    order = _order(has_signature_service=True, has_packaging_service=True)
    assert ServiceFeeCalculator(rates).calculate(order, Decimal("10.00")) == Decimal("6.00")
