"""Pricing for proxy purchase orders."""

from __future__ import annotations

import logging
from decimal import Decimal

from ...errors import FeeCalculationError
from ...models.domain import FeeableOrder, OrderCategory, ProductCategory
from ...money import ONE, money
from ...schemas.fees import FeeResult
from .base import FeeStrategy, exceeds

MAX_EXPECTED_PRICE = Decimal("2000")
MAX_DISTANCE_KM = 100.0
MAX_QUANTITY = 5

# Handling difficulty and risk by goods type.
PRODUCT_CATEGORY_RATES: dict[ProductCategory, Decimal] = {
    ProductCategory.ELECTRONICS: Decimal("1.5"),
    ProductCategory.MEDICINE: Decimal("1.3"),
    ProductCategory.FOOD: Decimal("1.2"),
    ProductCategory.BOOKS: Decimal("1.1"),
    ProductCategory.CLOTHING: Decimal("0.9"),
    ProductCategory.DAILY_NECESSITIES: Decimal("1.1"),
    ProductCategory.BEAUTY: Decimal("1.2"),
    ProductCategory.SPORTS: Decimal("1.3"),
}

# (upper bound of expected price, service rate); cheaper goods pay a higher share.
SERVICE_RATE_TIERS: tuple[tuple[Decimal, Decimal], ...] = (
    (Decimal("100"), Decimal("0.15")),
    (Decimal("500"), Decimal("0.12")),
)
TOP_SERVICE_RATE = Decimal("0.10")

logger = logging.getLogger(__name__)


def purchase_service_rate(expected_price: Decimal) -> Decimal:
    for upper_bound, rate in SERVICE_RATE_TIERS:
        if expected_price <= upper_bound:
            return rate
    return TOP_SERVICE_RATE


class PurchaseOrderStrategy(FeeStrategy):
    """Total is goods + purchase service fee + delivery, where delivery includes the base fee."""

    category = OrderCategory.PURCHASE

    def price(self, order: FeeableOrder, *, estimate: bool = False) -> FeeResult:
        if order.expected_price is None:
            raise FeeCalculationError(f"Purchase order {order.order_id} has no expected price.")
        product_fee = money(order.expected_price)

        base_fee = self._apply_product_category_rate(order, self.stages.base.calculate(order))
        service_fee = money(product_fee * purchase_service_rate(product_fee))
        delivery = self.stages.delivery.calculate(order)
        delivery_fee = delivery.fee + base_fee
        logger.debug(
            f"Purchase order {order.order_id}: goods={product_fee} base={base_fee} "
            f"delivery={delivery_fee} service={service_fee}"
        )

        return self._build_result(
            order,
            base_fee=base_fee,
            delivery=delivery,
            delivery_fee=delivery_fee,
            service_fee=service_fee,
            total_fee=product_fee + service_fee + delivery_fee,
            product_fee=product_fee,
            estimate=estimate,
        )

    def validate(self, order: FeeableOrder) -> bool:
        if exceeds(order.expected_price, MAX_EXPECTED_PRICE):
            return False
        if exceeds(order.delivery_distance_km, MAX_DISTANCE_KM):
            return False
        return not exceeds(order.quantity, MAX_QUANTITY)

    @staticmethod
    def _apply_product_category_rate(order: FeeableOrder, base_fee: Decimal) -> Decimal:
        if order.product_category is None:
            return base_fee
        rate = PRODUCT_CATEGORY_RATES.get(order.product_category, ONE)
        logger.debug(f"Product category {order.product_category} applies rate {rate}")
        return money(base_fee * rate)
