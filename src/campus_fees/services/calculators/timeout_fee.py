"""Penalty fees for missed pickup, delivery and confirmation deadlines.

The charged amount depends on wall-clock time: the longer a deadline has been
missed, the larger the fee, up to ``max_hourly_increments`` hours. ``now`` is
injectable through the constructor clock or per call so results can be
reproduced exactly.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from ...models.domain import FeeableOrder, TimeoutKind
from ...money import ONE, money, money_or_zero, to_decimal
from ...rates import RateConfiguration

MAX_DEDUCTION_SHARE = Decimal("0.8")

logger = logging.getLogger(__name__)


def timeout_start_time(order: FeeableOrder, kind: TimeoutKind) -> Optional[datetime]:
    match kind:
        case TimeoutKind.PICKUP:
            return order.created_at
        case TimeoutKind.DELIVERY:
            return order.expected_delivery_at
        case TimeoutKind.CONFIRMATION:
            return order.delivered_at
    raise ValueError(f"Unknown timeout kind '{kind}'.")


def _as_aware(moment: datetime) -> datetime:
    # Naive datetimes are local wall-clock time.
    return moment if moment.tzinfo is not None else moment.astimezone()


def overdue_hours(start: datetime, now: datetime) -> int:
    """Whole hours elapsed, truncated toward zero.

    ``start`` and ``now`` may mix naive and timezone-aware values; naive ones
    are read as local time.
    """

    if (start.tzinfo is None) != (now.tzinfo is None):
        start, now = _as_aware(start), _as_aware(now)
    return int((now - start).total_seconds() // 3600) if now >= start else 0


class TimeoutFeeCalculator:
    def __init__(self, rates: RateConfiguration, clock: Callable[[], datetime] = datetime.now) -> None:
        self.rates = rates
        self.clock = clock

    def calculate(self, order: FeeableOrder, kind: TimeoutKind, now: Optional[datetime] = None) -> Decimal:
        now = now or self.clock()
        logger.debug(f"Calculating {kind} timeout fee for order {order.order_id} at {now.isoformat()}")

        fee = self.rates.timeout_fee(order.category, kind)
        fee = self._apply_item_characteristics(fee, order)
        fee = self._apply_escalation(fee, timeout_start_time(order, kind), now)
        fee = self._apply_special_rules(fee, order, now)
        fee = self._limit_deduction(fee, order)

        logger.debug(f"{kind} timeout fee for order {order.order_id}: {fee}")
        return fee

    def estimate(self, order: FeeableOrder, kind: TimeoutKind) -> Decimal:
        """Fee shown up front: item surcharges only, no time-dependent escalation."""

        return self._apply_item_characteristics(self.rates.timeout_fee(order.category, kind), order)

    def timeout_minutes(self, order: FeeableOrder, kind: TimeoutKind) -> int:
        return self.rates.timeout_minutes(order.category, kind)

    def _apply_item_characteristics(self, fee: Decimal, order: FeeableOrder) -> Decimal:
        fee = money(fee)
        if order.is_large_item:
            fee = money(fee * self.rates.large_item_timeout_multiplier(order.category))
        if order.weight is not None and order.weight > 1.0:
            extra_weight = to_decimal(order.weight) - ONE
            fee = money(fee * (ONE + self.rates.timeout_weight_multiplier(order.category) * extra_weight))
        return fee

    def _apply_escalation(self, fee: Decimal, start: Optional[datetime], now: datetime) -> Decimal:
        if start is None:
            return fee
        hours = min(overdue_hours(start, now), self.rates.max_hourly_increments())
        if hours <= 0:
            return fee
        factor = ONE + self.rates.hourly_increment_rate() * hours
        return money(fee * factor)

    def _apply_special_rules(self, fee: Decimal, order: FeeableOrder, now: datetime) -> Decimal:
        reference = order.created_at
        if reference is None:
            logger.warning(f"Order {order.order_id} has no creation time, using {now.isoformat()} for timeout rules")
            reference = now

        if self.rates.is_holiday(reference.date()):
            fee = money(fee * self.rates.holiday_multiplier())

        # Discounts (< 1) are not applied to penalties.
        time_multiplier = self.rates.time_range_multiplier(reference.hour, order.category)
        if time_multiplier > ONE:
            fee = money(fee * time_multiplier)
        return fee

    def _limit_deduction(self, fee: Decimal, order: FeeableOrder) -> Decimal:
        if not order.is_standard_delivery:
            return fee
        if order.delivery_income is None:
            logger.warning(f"Order {order.order_id} has no delivery income, timeout deduction capped at 0")
        max_deduction = money(money_or_zero(order.delivery_income) * MAX_DEDUCTION_SHARE)
        return min(fee, max_deduction)
