"""Revenue split between delivery agent, platform and merchant."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from ...models.domain import FeeableOrder
from ...money import ZERO, money
from ...rates import RateConfiguration
from ...schemas.fees import FeeDistribution

DEFAULT_PLATFORM_RATE = Decimal("0.10")
DEFAULT_DELIVERY_RATE = Decimal("0.80")
DEFAULT_MERCHANT_RATE = Decimal("0.10")

logger = logging.getLogger(__name__)


def _rate_or_default(rate: Optional[Decimal], default: Decimal, label: str) -> Decimal:
    if rate is None:
        logger.warning(f"{label} rate is not configured, using default {default}")
        return default
    return rate


class DistributionCalculator:
    """Split a total fee; always produces a usable :class:`FeeDistribution`.

    An order without a merchant forfeits the merchant share. That share is
    reported as ``unallocated_income`` rather than silently dropped.
    """

    def __init__(self, rates: RateConfiguration) -> None:
        self.rates = rates

    def calculate(self, order: FeeableOrder, total_fee: Decimal) -> FeeDistribution:
        category = order.category
        platform_rate = _rate_or_default(self.rates.platform_rate(category), DEFAULT_PLATFORM_RATE, "Platform")
        delivery_rate = _rate_or_default(self.rates.delivery_rate(category), DEFAULT_DELIVERY_RATE, "Delivery")
        merchant_rate = _rate_or_default(
            self.rates.merchant_rate(category, order.merchant_tier), DEFAULT_MERCHANT_RATE, "Merchant"
        )

        platform_income = money(total_fee * platform_rate)
        delivery_income = money(total_fee * delivery_rate)
        if order.has_merchant:
            merchant_income = money(total_fee * merchant_rate)
            unallocated = ZERO
        else:
            merchant_income = ZERO
            unallocated = money(total_fee * merchant_rate)

        distribution = FeeDistribution(
            delivery_income=delivery_income,
            platform_income=platform_income,
            merchant_income=merchant_income,
            unallocated_income=unallocated,
        )
        logger.debug(f"Distribution for order {order.order_id}: {distribution}")
        return distribution
