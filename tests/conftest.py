from datetime import datetime
from decimal import Decimal

import pytest

from campus_fees.rates import RateConfiguration
from campus_fees.schemas.rates import default_rate_document
from campus_fees.services.calendar.special_dates import SpecialDateCalendar
from campus_fees.services.contracts import RegionRate

FIXED_NOW = datetime(2024, 3, 12, 10, 0)


class FixedDistance:
    """Distance provider returning a settable number of metres."""

    def __init__(self, meters: float = 1000.0) -> None:
        self.meters = meters
        self.calls = []

    def walking_distance_meters(self, lat1, lng1, lat2, lng2):
        self.calls.append((lat1, lng1, lat2, lng2))
        return self.meters


class FixedRegions:
    def __init__(self, final_rate: float = 1.0) -> None:
        self.final_rate = final_rate

    def region_rate(self, pickup_coordinate, delivery_coordinate):
        return RegionRate(final_rate=self.final_rate, is_cross_region=False)


@pytest.fixture
def calendar() -> SpecialDateCalendar:
    return SpecialDateCalendar()


@pytest.fixture
def rates(calendar) -> RateConfiguration:
    return RateConfiguration(default_rate_document(), calendar)


@pytest.fixture
def distance() -> FixedDistance:
    return FixedDistance()


@pytest.fixture
def regions() -> FixedRegions:
    return FixedRegions()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def money_places():
    def _places(value: Decimal) -> int:
        return -value.as_tuple().exponent

    return _places
