"""Factory for pricing strategies keyed by order category."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ...errors import ConfigurationError, StrategyNotFoundError
from ...models.domain import OrderCategory
from .base import FeeStrategy, PricingStages
from .mail import MailOrderStrategy
from .purchase import PurchaseOrderStrategy
from .shopping import ShoppingOrderStrategy


def get_strategy(category: OrderCategory, stages: PricingStages) -> FeeStrategy:
    match category:
        case OrderCategory.MAIL:
            return MailOrderStrategy(stages)
        case OrderCategory.SHOPPING:
            return ShoppingOrderStrategy(stages)
        case OrderCategory.PURCHASE:
            return PurchaseOrderStrategy(stages)
        case _:
            raise StrategyNotFoundError(category)


def build_registry(stages: PricingStages) -> Mapping[OrderCategory, FeeStrategy]:
    """One strategy per category, built once and never modified."""

    registry: dict[OrderCategory, FeeStrategy] = {}
    for category in OrderCategory:
        strategy = get_strategy(category, stages)
        if strategy.category != category:
            raise ConfigurationError(
                f"Strategy {type(strategy).__name__} prices {strategy.category}, not {category}."
            )
        registry[category] = strategy
    return MappingProxyType(registry)
