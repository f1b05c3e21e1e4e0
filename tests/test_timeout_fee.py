from datetime import timedelta, timezone
from decimal import Decimal

import pytest

from campus_fees.models.domain import Order, OrderCategory, TimeoutKind
from campus_fees.services.calculators.timeout_fee import TimeoutFeeCalculator, overdue_hours
from campus_fees.services.calendar.special_dates import SpecialTimeRange

from conftest import FIXED_NOW


def _order(hours_ago=3, **overrides) -> Order:
    values = {
        "order_id": "T-1",
        "category": OrderCategory.MAIL,
        "created_at": FIXED_NOW - timedelta(hours=hours_ago),
        "weight": 2.0,
        "delivery_income": Decimal("10.00"),
    }
    values.update(overrides)
    return Order(**values)


def test_escalated_fee_is_capped_by_delivery_income(rates, clock):
    calculator = TimeoutFeeCalculator(rates, clock)
    assert calculator.calculate(_order(), TimeoutKind.PICKUP) == Decimal("8.00")


def test_express_delivery_is_not_capped(rates, clock):
    calculator = TimeoutFeeCalculator(rates, clock)
    assert calculator.calculate(_order(is_standard_delivery=False), TimeoutKind.PICKUP) == Decimal("9.75")


def test_escalation_stops_at_max_increments(rates, clock):
    calculator = TimeoutFeeCalculator(rates, clock)
    at_cap = calculator.calculate(_order(hours_ago=12, weight=0.4, is_standard_delivery=False), TimeoutKind.PICKUP)
    past_cap = calculator.calculate(_order(hours_ago=30, weight=0.4, is_standard_delivery=False), TimeoutKind.PICKUP)

    assert at_cap == Decimal("11.00")
    assert past_cap == at_cap


def test_fee_grows_with_elapsed_time(rates, clock):
    calculator = TimeoutFeeCalculator(rates, clock)
    order = _order(hours_ago=0, is_standard_delivery=False)
    fees = [
        calculator.calculate(order, TimeoutKind.PICKUP, now=order.created_at + timedelta(minutes=30 * step))
        for step in range(40)
    ]
    assert fees == sorted(fees)
    assert fees[0] < fees[-1]


@pytest.mark.parametrize("income", [Decimal("0.50"), Decimal("5.00"), Decimal("12.34")])
def test_cap_holds_under_every_multiplier(rates, calendar, clock, income):
    order = _order(hours_ago=20, weight=8.0, is_large_item=True, delivery_income=income)
    calendar.register_holiday(order.created_at.date(), Decimal("1.5"))
    calendar.add_time_range(SpecialTimeRange(name="All day", start_hour=0, end_hour=24, rate_multiplier=Decimal("2")))

    fee = TimeoutFeeCalculator(rates, clock).calculate(order, TimeoutKind.DELIVERY)

    assert fee <= income * Decimal("0.8")


def test_missing_delivery_income_caps_at_zero(rates, clock):
    fee = TimeoutFeeCalculator(rates, clock).calculate(_order(delivery_income=None), TimeoutKind.PICKUP)
    assert fee == Decimal("0.00")


def test_missing_start_time_skips_escalation(rates, clock):
    order = _order(weight=0.4, is_standard_delivery=False, expected_delivery_at=None)
    assert TimeoutFeeCalculator(rates, clock).calculate(order, TimeoutKind.DELIVERY) == Decimal("8.00")


def test_holiday_multiplier_applies_on_creation_date(rates, calendar, clock):
    order = _order(hours_ago=0, weight=0.4, is_standard_delivery=False)
    calendar.register_holiday(order.created_at.date(), Decimal("1.5"))

    assert TimeoutFeeCalculator(rates, clock).calculate(order, TimeoutKind.PICKUP) == Decimal("7.50")


def test_time_range_discount_is_ignored(rates, calendar, clock):
    order = _order(hours_ago=0, weight=0.4, is_standard_delivery=False)
    calendar.add_time_range(SpecialTimeRange(name="Quiet", start_hour=0, end_hour=24, rate_multiplier=Decimal("0.8")))

    assert TimeoutFeeCalculator(rates, clock).calculate(order, TimeoutKind.PICKUP) == Decimal("5.00")


def test_estimate_ignores_elapsed_time(rates, clock):
    calculator = TimeoutFeeCalculator(rates, clock)
    assert calculator.estimate(_order(hours_ago=10), TimeoutKind.PICKUP) == Decimal("7.50")
    assert calculator.estimate(_order(hours_ago=0, is_large_item=True), TimeoutKind.PICKUP) == Decimal("11.25")


def test_timeout_minutes_lookup(rates, clock):
    calculator = TimeoutFeeCalculator(rates, clock)
    assert calculator.timeout_minutes(_order(category=OrderCategory.SHOPPING), TimeoutKind.DELIVERY) == 60


def test_overdue_hours_truncates_and_clamps():
    assert overdue_hours(FIXED_NOW, FIXED_NOW + timedelta(minutes=119)) == 1
    assert overdue_hours(FIXED_NOW, FIXED_NOW - timedelta(hours=2)) == 0


def test_overdue_hours_mixes_naive_and_aware_times():
    aware_now = FIXED_NOW.astimezone()
    assert overdue_hours(aware_now - timedelta(hours=2), FIXED_NOW) == 2
    assert overdue_hours(FIXED_NOW - timedelta(hours=3), aware_now) == 3
    assert overdue_hours(aware_now.astimezone(timezone.utc), FIXED_NOW - timedelta(hours=1)) == 0


def test_item_multipliers_round_after_each_step(rates, clock):
    calculator = TimeoutFeeCalculator(rates, clock)
    order = _order(is_large_item=True, weight=2.0)
    # 5.55 x 1.5 = 8.33, then x 1.5 = 12.50 (12.49 when rounded only once).
    assert calculator._apply_item_characteristics(Decimal("5.55"), order) == Decimal("12.50")
