"""Pricing for parcel pick-up (mail) orders."""

from __future__ import annotations

import logging
from decimal import Decimal

from ...models.domain import FeeableOrder, OrderCategory
from ...schemas.fees import FeeResult
from .base import FeeStrategy, exceeds

MAX_DISTANCE_KM = 5.0
MAX_DECLARED_VALUE = Decimal("5000")
MAX_WEIGHT_KG = 20.0

logger = logging.getLogger(__name__)


class MailOrderStrategy(FeeStrategy):
    """Total is base + delivery + service."""

    category = OrderCategory.MAIL

    def price(self, order: FeeableOrder, *, estimate: bool = False) -> FeeResult:
        base_fee = self.stages.base.calculate(order)
        delivery = self.stages.delivery.calculate(order)
        service_fee = self.stages.service.calculate(order, base_fee)
        logger.debug(f"Mail order {order.order_id}: base={base_fee} delivery={delivery.fee} service={service_fee}")

        return self._build_result(
            order,
            base_fee=base_fee,
            delivery=delivery,
            delivery_fee=delivery.fee,
            service_fee=service_fee,
            total_fee=base_fee + delivery.fee + service_fee,
            estimate=estimate,
        )

    def validate(self, order: FeeableOrder) -> bool:
        if exceeds(order.delivery_distance_km, MAX_DISTANCE_KM):
            return False
        if exceeds(order.declared_value, MAX_DECLARED_VALUE):
            return False
        return not exceeds(order.weight, MAX_WEIGHT_KG)
