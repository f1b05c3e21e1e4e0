from datetime import datetime
from decimal import Decimal

import pytest

from campus_fees.models.domain import Order, OrderCategory
from campus_fees.services.calculators.delivery_fee import DeliveryFeeCalculator
from campus_fees.services.calendar.special_dates import SpecialDate, SpecialTimeRange

CREATED = datetime(2024, 5, 1, 18, 30)


def _order(category=OrderCategory.MAIL, created_at=CREATED, **overrides) -> Order:
    return Order(
        order_id="D-1",
        category=category,
        created_at=created_at,
        pickup_latitude=30.5,
        pickup_longitude=114.3,
        delivery_latitude=30.52,
        delivery_longitude=114.32,
        weight=1.0,
        **overrides,
    )


def test_distance_within_free_range_is_free(rates, distance, regions, clock):
    distance.meters = 2500
    quote = DeliveryFeeCalculator(rates, distance, regions, clock).calculate(_order())
    assert quote.fee == Decimal("0.00")
    assert quote.distance_km == 2.5


def test_holiday_date_multiplier(rates, calendar, distance, regions, clock):
    calendar.add_date(SpecialDate(name="Labour Day", day=CREATED.date(), rate_multiplier=Decimal("1.5")))
    distance.meters = 5000

    quote = DeliveryFeeCalculator(rates, distance, regions, clock).calculate(_order())

    assert quote.fee == Decimal("6.00")


def test_fee_without_multipliers(rates, distance, regions, clock):
    distance.meters = 5000
    assert DeliveryFeeCalculator(rates, distance, regions, clock).calculate(_order()).fee == Decimal("4.00")


def test_multipliers_round_after_each_step(rates, calendar, distance, regions, clock):
    calendar.add_date(SpecialDate(name="Promo", day=CREATED.date(), rate_multiplier=Decimal("1.5")))
    calendar.add_time_range(SpecialTimeRange(name="Evening", start_hour=18, end_hour=20, rate_multiplier=Decimal("1.5")))
    regions.final_rate = 1.5
    distance.meters = 3035

    # 0.07 -> 0.105 -> 0.11 -> 0.165 -> 0.17 -> 0.255 -> 0.26 (0.24 if rounded once)
    quote = DeliveryFeeCalculator(rates, distance, regions, clock).calculate(_order())

    assert quote.fee == Decimal("0.26")


@pytest.mark.parametrize("category", list(OrderCategory))
def test_fee_is_non_decreasing_in_distance(rates, distance, regions, clock, category):
    calculator = DeliveryFeeCalculator(rates, distance, regions, clock)
    fees = []
    for meters in (0, 1000, 3000, 3001, 3500, 4250, 5000, 9000):
        distance.meters = meters
        fees.append(calculator.calculate(_order(category=category)).fee)
    assert fees == sorted(fees)


def test_missing_creation_time_uses_clock(rates, calendar, distance, regions, clock):
    calendar.add_date(SpecialDate(name="Today", day=clock().date(), rate_multiplier=Decimal("2")))
    distance.meters = 5000

    quote = DeliveryFeeCalculator(rates, distance, regions, clock).calculate(_order(created_at=None))

    assert quote.fee == Decimal("8.00")


def test_category_specific_rate(rates, distance, regions, clock):
    distance.meters = 5000
    quote = DeliveryFeeCalculator(rates, distance, regions, clock).calculate(_order(category=OrderCategory.PURCHASE))
    assert quote.fee == Decimal("5.00")
