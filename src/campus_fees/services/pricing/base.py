"""Base classes for per-category pricing strategies."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable, ClassVar, Optional

from ...errors import FeeCalculationError
from ...models.domain import FeeableOrder, OrderCategory
from ...rates import RateConfiguration
from ...schemas.fees import FeeResult
from ..calculators.base_fee import BaseFeeCalculator
from ..calculators.delivery_fee import DeliveryFeeCalculator, DeliveryQuote
from ..calculators.distribution import DistributionCalculator
from ..calculators.service_fee import ServiceFeeCalculator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PricingStages:
    """The fee stages a strategy composes, sharing one rate configuration."""

    rates: RateConfiguration
    base: BaseFeeCalculator
    delivery: DeliveryFeeCalculator
    service: ServiceFeeCalculator
    distribution: DistributionCalculator
    clock: Callable[[], datetime] = field(default=datetime.now)


@dataclass(frozen=True, slots=True)
class PricingOutcome:
    """Either a computed result or the error that prevented it."""

    result: Optional[FeeResult] = None
    error: Optional[FeeCalculationError] = None

    @property
    def ok(self) -> bool:
        return self.result is not None and self.error is None

    @classmethod
    def success(cls, result: FeeResult) -> "PricingOutcome":
        return cls(result=result)

    @classmethod
    def failure(cls, error: FeeCalculationError) -> "PricingOutcome":
        return cls(error=error)


class FeeStrategy(ABC):
    """Contract for category pricing pipelines."""

    category: ClassVar[OrderCategory]

    def __init__(self, stages: PricingStages) -> None:
        self.stages = stages

    @abstractmethod
    def price(self, order: FeeableOrder, *, estimate: bool = False) -> FeeResult:
        raise NotImplementedError

    @abstractmethod
    def validate(self, order: FeeableOrder) -> bool:
        """Check the order against the category's distance, value and weight limits."""
        raise NotImplementedError

    def run(self, order: FeeableOrder, *, estimate: bool = False, check_limits: bool = True) -> PricingOutcome:
        """Price ``order`` and report failures as a :class:`PricingOutcome` instead of raising."""

        try:
            if check_limits and not self.validate(order):
                return PricingOutcome.failure(
                    FeeCalculationError(f"Order {order.order_id} exceeds the {self.category} order limits.")
                )
            return PricingOutcome.success(self.price(order, estimate=estimate))
        except FeeCalculationError as exc:
            return PricingOutcome.failure(exc)
        except Exception as exc:
            error = FeeCalculationError(f"{self.category} pricing failed for order {order.order_id}: {exc!r}")
            error.__cause__ = exc
            return PricingOutcome.failure(error)

    def _build_result(
        self,
        order: FeeableOrder,
        *,
        base_fee: Decimal,
        delivery: DeliveryQuote,
        delivery_fee: Decimal,
        service_fee: Decimal,
        total_fee: Decimal,
        product_fee: Optional[Decimal] = None,
        estimate: bool = False,
    ) -> FeeResult:
        distribution = self.stages.distribution.calculate(order, total_fee)
        result = FeeResult(
            order_id=order.order_id,
            calculated_at=self.stages.clock(),
            base_fee=base_fee,
            delivery_fee=delivery_fee,
            service_fee=service_fee,
            total_fee=total_fee,
            distribution=distribution,
            product_fee=product_fee,
            delivery_distance_km=delivery.distance_km,
            is_estimate=estimate,
        )
        logger.info(f"{self.category} order {order.order_id} priced: total={total_fee} estimate={estimate}")
        return result


def exceeds(value: Optional[float | Decimal], limit: float | Decimal) -> bool:
    """Absent values never exceed a limit."""

    return value is not None and value > limit
