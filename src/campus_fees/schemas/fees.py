"""Pydantic result models returned by the fee engine."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..money import CENT, ZERO


class FeeDistribution(BaseModel):
    """Split of a total fee between the delivery agent, the platform and the merchant."""

    model_config = ConfigDict(frozen=True)

    delivery_income: Decimal
    platform_income: Decimal
    merchant_income: Decimal = ZERO
    unallocated_income: Decimal = Field(
        default=ZERO,
        description="Merchant share of an order without a merchant. Held by the platform pending settlement.",
    )

    def total_distributed(self) -> Decimal:
        return self.delivery_income + self.platform_income + self.merchant_income

    def is_valid(self) -> bool:
        return all(
            amount >= 0
            for amount in (self.delivery_income, self.platform_income, self.merchant_income, self.unallocated_income)
        )

    def reconciles_with(self, total_fee: Decimal, tolerance: Decimal = CENT) -> bool:
        """True when every cent of ``total_fee`` is accounted for, allocated or not."""

        accounted = self.total_distributed() + self.unallocated_income
        return abs(accounted - total_fee) <= tolerance


class FeeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: Union[UUID, str]
    calculated_at: datetime
    base_fee: Decimal
    delivery_fee: Decimal
    service_fee: Decimal
    total_fee: Decimal
    distribution: FeeDistribution
    product_fee: Optional[Decimal] = None
    delivery_distance_km: Optional[float] = None
    discount_amount: Optional[Decimal] = None
    is_estimate: bool = False
    is_fallback: bool = False

    def payable_amount(self) -> Decimal:
        return self.total_fee - (self.discount_amount or ZERO)

    def is_valid(self) -> bool:
        if self.base_fee < 0 or self.total_fee <= 0:
            return False
        if self.delivery_distance_km is not None and self.delivery_distance_km < 0:
            return False
        return self.distribution.is_valid()
