"""Pricing for merchant shopping orders."""

from __future__ import annotations

import logging
from decimal import Decimal

from ...errors import FeeCalculationError
from ...models.domain import FeeableOrder, OrderCategory
from ...money import money
from ...schemas.fees import FeeResult
from .base import FeeStrategy, exceeds

MIN_ORDER_AMOUNT = Decimal("20")
MAX_WEIGHT_KG = 10.0

logger = logging.getLogger(__name__)


class ShoppingOrderStrategy(FeeStrategy):
    """Total is goods + delivery + service. The base fee only drives the service fee."""

    category = OrderCategory.SHOPPING

    def price(self, order: FeeableOrder, *, estimate: bool = False) -> FeeResult:
        product_fee = self._product_fee(order)
        base_fee = self.stages.base.calculate(order)
        delivery = self.stages.delivery.calculate(order)
        service_fee = self.stages.service.calculate(order, base_fee)
        logger.debug(
            f"Shopping order {order.order_id}: goods={product_fee} base={base_fee} "
            f"delivery={delivery.fee} service={service_fee}"
        )

        return self._build_result(
            order,
            base_fee=base_fee,
            delivery=delivery,
            delivery_fee=delivery.fee,
            service_fee=service_fee,
            total_fee=product_fee + delivery.fee + service_fee,
            product_fee=product_fee,
            estimate=estimate,
        )

    def validate(self, order: FeeableOrder) -> bool:
        if order.product_price is None or order.product_price < MIN_ORDER_AMOUNT:
            return False
        if exceeds(order.delivery_distance_km, self.stages.rates.max_delivery_distance(self.category)):
            return False
        return not exceeds(order.weight, MAX_WEIGHT_KG)

    @staticmethod
    def _product_fee(order: FeeableOrder) -> Decimal:
        if order.product_price is None:
            raise FeeCalculationError(f"Shopping order {order.order_id} has no product price.")
        quantity = order.quantity if order.quantity is not None else 1
        return money(order.product_price * quantity)
