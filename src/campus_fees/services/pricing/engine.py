"""High-level orchestration for fee requests."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, Mapping, Optional

from ...errors import StrategyNotFoundError
from ...models.domain import FeeableOrder, OrderCategory, TimeoutKind
from ...money import ZERO, money_or_zero
from ...rates import RateConfiguration, load_rate_document
from ...schemas.fees import FeeDistribution, FeeResult
from ..calculators.base_fee import BaseFeeCalculator
from ..calculators.delivery_fee import DeliveryFeeCalculator
from ..calculators.distribution import DistributionCalculator
from ..calculators.service_fee import ServiceFeeCalculator
from ..calculators.timeout_fee import TimeoutFeeCalculator
from ..contracts import Calendar, DistanceProvider, RegionLookup
from .base import FeeStrategy, PricingStages
from .dispatcher import build_registry

DEFAULT_BASE_FEE = Decimal("10.00")
DEFAULT_DELIVERY_FEE = Decimal("8.00")
DEFAULT_SERVICE_FEE = Decimal("2.00")
DEFAULT_DELIVERY_INCOME = Decimal("8.00")
DEFAULT_PLATFORM_INCOME = Decimal("2.00")

logger = logging.getLogger(__name__)


class FeeEngine:
    """Entry point for pricing orders and timeout penalties.

    ``calculate_fee`` never lets a pricing failure escape: a broken pipeline
    yields a conservative default result flagged ``is_fallback`` and the
    cause is logged. The one exception is a category without a registered
    strategy, which is a wiring defect and raises
    :class:`~campus_fees.errors.StrategyNotFoundError`.
    """

    def __init__(
        self,
        rates: RateConfiguration,
        *,
        distance: DistanceProvider,
        regions: RegionLookup,
        clock: Callable[[], datetime] = datetime.now,
        registry: Optional[Mapping[OrderCategory, FeeStrategy]] = None,
    ) -> None:
        self.rates = rates
        self.clock = clock
        self.stages = PricingStages(
            rates=rates,
            base=BaseFeeCalculator(rates),
            delivery=DeliveryFeeCalculator(rates, distance, regions, clock=clock),
            service=ServiceFeeCalculator(rates),
            distribution=DistributionCalculator(rates),
            clock=clock,
        )
        self.timeout = TimeoutFeeCalculator(rates, clock=clock)
        self.registry = registry if registry is not None else build_registry(self.stages)

    def calculate_fee(self, order: FeeableOrder) -> FeeResult:
        strategy = self._strategy_for(order.category)
        logger.info(f"Calculating fee for {order.category} order {order.order_id}")

        outcome = strategy.run(order)
        if not outcome.ok:
            logger.error(
                f"Fee calculation for order {order.order_id} failed, using default fee: {outcome.error}",
                exc_info=outcome.error,
            )
            return self._default_result(order)

        result = outcome.result
        if not self._is_acceptable(result):
            logger.error(f"Fee calculation for order {order.order_id} produced an invalid result {result!r}")
            return self._default_result(order)
        return result

    def estimate_fee(self, order: FeeableOrder) -> FeeResult:
        """Price for display only. Failures raise :class:`FeeCalculationError`."""

        logger.info(f"Estimating fee for {order.category} order {order.order_id}")
        outcome = self._strategy_for(order.category).run(order, estimate=True, check_limits=False)
        if not outcome.ok:
            raise outcome.error
        return outcome.result

    def validate_fee(self, order: FeeableOrder) -> bool:
        return self._strategy_for(order.category).validate(order)

    def calculate_timeout_fee(
        self, order: FeeableOrder, kind: TimeoutKind, now: Optional[datetime] = None
    ) -> Decimal:
        return self.timeout.calculate(order, kind, now=now)

    def estimate_timeout_fee(self, order: FeeableOrder, kind: TimeoutKind) -> Decimal:
        return self.timeout.estimate(order, kind)

    def get_timeout_minutes(self, order: FeeableOrder, kind: TimeoutKind) -> int:
        return self.timeout.timeout_minutes(order, kind)

    def _strategy_for(self, category: OrderCategory) -> FeeStrategy:
        strategy = self.registry.get(category)
        if strategy is None:
            raise StrategyNotFoundError(category)
        return strategy

    @staticmethod
    def _is_acceptable(result: Optional[FeeResult]) -> bool:
        return result is not None and result.is_valid()

    def _default_result(self, order: FeeableOrder) -> FeeResult:
        try:
            expected_price = money_or_zero(order.expected_price)
        except (ArithmeticError, TypeError, ValueError):
            expected_price = ZERO
        return FeeResult(
            order_id=order.order_id,
            calculated_at=self.clock(),
            base_fee=DEFAULT_BASE_FEE,
            delivery_fee=DEFAULT_DELIVERY_FEE,
            service_fee=DEFAULT_SERVICE_FEE,
            total_fee=DEFAULT_BASE_FEE + expected_price,
            distribution=FeeDistribution(
                delivery_income=DEFAULT_DELIVERY_INCOME,
                platform_income=DEFAULT_PLATFORM_INCOME,
                merchant_income=ZERO,
            ),
            is_fallback=True,
        )


def build_engine(
    *,
    distance: DistanceProvider,
    regions: RegionLookup,
    calendar: Calendar,
    source: Optional[Path] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> FeeEngine:
    """Load and validate the rate tables, then wire a :class:`FeeEngine`."""

    rates = RateConfiguration(load_rate_document(source), calendar)
    return FeeEngine(rates, distance=distance, regions=regions, clock=clock)
