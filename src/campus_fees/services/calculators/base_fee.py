"""Weight-tiered base fee."""

from __future__ import annotations

import logging
import math
from decimal import Decimal

from ...models.domain import FeeableOrder, OrderCategory
from ...money import ONE, money, to_decimal
from ...rates import RateConfiguration

WEIGHT_UNIT_KG = 0.5
DEFAULT_BASE_FEE = Decimal("10.00")

logger = logging.getLogger(__name__)


class BaseFeeCalculator:
    """Charge one base-rate unit per started half kilogram.

    Large items and parcels over 1 kg are surcharged through the category's
    multipliers. Failures never reach the caller: :data:`DEFAULT_BASE_FEE`
    is returned instead.
    """

    def __init__(self, rates: RateConfiguration) -> None:
        self.rates = rates

    def calculate(self, order: FeeableOrder) -> Decimal:
        try:
            fee = self._weight_fee(order)
            if order.is_large_item:
                fee = money(fee * self.rates.large_item_multiplier(order.category))
            if order.weight > 1.0:
                fee = self._apply_weight_multiplier(fee, order.weight, order.category)
            return fee
        except Exception as exc:
            logger.warning(f"Base fee for order {order.order_id} failed ({exc!r}), using default {DEFAULT_BASE_FEE}")
            return DEFAULT_BASE_FEE

    def _weight_fee(self, order: FeeableOrder) -> Decimal:
        units = math.ceil(order.weight / WEIGHT_UNIT_KG)
        return money(Decimal(units) * self.rates.base_rate(order.category))

    def _apply_weight_multiplier(self, fee: Decimal, weight: float, category: OrderCategory) -> Decimal:
        extra_weight = to_decimal(weight) - ONE
        multiplier = ONE + self.rates.weight_multiplier(category) * extra_weight
        return money(fee * multiplier)
