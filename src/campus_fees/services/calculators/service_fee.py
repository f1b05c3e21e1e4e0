"""Service fee: a share of the base fee plus insurance and value-added options."""

from __future__ import annotations

import logging
from decimal import Decimal

from ...models.domain import FeeableOrder
from ...money import ZERO, money, money_or_zero
from ...rates import RateConfiguration

logger = logging.getLogger(__name__)


class ServiceFeeCalculator:
    def __init__(self, rates: RateConfiguration) -> None:
        self.rates = rates

    def calculate(self, order: FeeableOrder, base_fee: Decimal) -> Decimal:
        service_fee = money(base_fee * self.rates.service_rate(order.category))
        service_fee += self.insurance_fee(order)
        service_fee += self.value_added_fee(order)
        logger.debug(f"Service fee for order {order.order_id}: {service_fee}")
        return service_fee

    def insurance_fee(self, order: FeeableOrder) -> Decimal:
        if not order.needs_insurance:
            return ZERO
        return money(self.rates.insurance_rate(order.category) * money_or_zero(order.declared_value))

    def value_added_fee(self, order: FeeableOrder) -> Decimal:
        fee = ZERO
        if order.has_signature_service:
            fee += money(self.rates.signature_service_fee(order.category))
        if order.has_packaging_service:
            fee += money(self.rates.packaging_service_fee(order.category))
        return fee
