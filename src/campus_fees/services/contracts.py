"""Contracts the fee stages require from external collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Union

from ..models.domain import OrderCategory

CalendarCategory = Union[OrderCategory, str]


class DistanceProvider(Protocol):
    def walking_distance_meters(self, lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        """Travel distance in metres. Implementations fall back to straight-line distance on failure."""
        ...


@dataclass(frozen=True, slots=True)
class RegionRate:
    final_rate: float
    is_cross_region: bool
    pickup_region: Optional[str] = None
    delivery_region: Optional[str] = None

    def description(self) -> str:
        if not self.is_cross_region:
            if self.pickup_region is None and self.delivery_region is None:
                return "Outside every delivery region, default rate applies"
            return f"Inside region {self.pickup_region or self.delivery_region}"
        return f"Cross-region order from {self.pickup_region} to {self.delivery_region}"


class RegionLookup(Protocol):
    def region_rate(self, pickup_coordinate: str, delivery_coordinate: str) -> RegionRate:
        """Coordinates are ``"lng,lat"`` strings with six decimals."""
        ...


class Calendar(Protocol):
    def is_holiday(self, day: date) -> bool: ...

    def date_rate_multiplier(self, day: date, category: CalendarCategory) -> Decimal: ...

    def time_range_multiplier(self, hour: int, category: CalendarCategory) -> Decimal: ...


def format_coordinate(latitude: float, longitude: float) -> str:
    return f"{longitude:.6f},{latitude:.6f}"
