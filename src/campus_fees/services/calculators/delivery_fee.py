"""Distance-driven delivery fee with date, time-of-day and region multipliers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable

from ...models.domain import FeeableOrder
from ...money import ZERO, money, to_decimal
from ...rates import RateConfiguration
from ..contracts import DistanceProvider, RegionLookup, format_coordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeliveryQuote:
    distance_km: float
    fee: Decimal


class DeliveryFeeCalculator:
    """Multipliers are applied date -> time -> region, re-rounding after each one."""

    def __init__(
        self,
        rates: RateConfiguration,
        distance: DistanceProvider,
        regions: RegionLookup,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.rates = rates
        self.distance = distance
        self.regions = regions
        self.clock = clock

    def calculate(self, order: FeeableOrder) -> DeliveryQuote:
        logger.debug(f"Calculating delivery fee for order {order.order_id}")
        distance_km = self._delivery_distance_km(order)
        fee = self._distance_fee(order, distance_km)
        reference = self._reference_time(order)
        fee = money(fee * self.rates.date_rate_multiplier(reference.date(), order.category))
        fee = money(fee * self.rates.time_range_multiplier(reference.hour, order.category))
        fee = money(fee * self._region_multiplier(order))
        logger.debug(f"Delivery fee for order {order.order_id}: {fee} over {distance_km:.3f} km")
        return DeliveryQuote(distance_km=distance_km, fee=fee)

    def _delivery_distance_km(self, order: FeeableOrder) -> float:
        meters = self.distance.walking_distance_meters(
            order.pickup_latitude,
            order.pickup_longitude,
            order.delivery_latitude,
            order.delivery_longitude,
        )
        return meters / 1000.0

    def _distance_fee(self, order: FeeableOrder, distance_km: float) -> Decimal:
        free_km = self.rates.base_free_distance(order.category)
        if distance_km <= free_km:
            return ZERO
        extra_km = to_decimal(distance_km) - to_decimal(free_km)
        return money(extra_km * self.rates.distance_rate(order.category))

    def _reference_time(self, order: FeeableOrder) -> datetime:
        if order.created_at is None:
            logger.warning(f"Order {order.order_id} has no creation time, pricing with the current time")
            return self.clock()
        return order.created_at

    def _region_multiplier(self, order: FeeableOrder) -> Decimal:
        result = self.regions.region_rate(
            format_coordinate(order.pickup_latitude, order.pickup_longitude),
            format_coordinate(order.delivery_latitude, order.delivery_longitude),
        )
        logger.debug(f"Region rate for order {order.order_id}: {result.final_rate} ({result.description()})")
        return to_decimal(result.final_rate)
