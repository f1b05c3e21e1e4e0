"""Fee calculation engine for campus delivery orders."""

from .errors import (
    CollaboratorError,
    ConfigurationError,
    FeeCalculationError,
    FeeError,
    StrategyNotFoundError,
)
from .models.domain import MerchantTier, Order, OrderCategory, ProductCategory, TimeoutKind
from .schemas.fees import FeeDistribution, FeeResult
from .services.pricing.engine import FeeEngine, build_engine

__version__ = "0.1.0"

__all__ = [
    "FeeEngine",
    "build_engine",
    "Order",
    "OrderCategory",
    "TimeoutKind",
    "MerchantTier",
    "ProductCategory",
    "FeeResult",
    "FeeDistribution",
    "FeeError",
    "ConfigurationError",
    "StrategyNotFoundError",
    "FeeCalculationError",
    "CollaboratorError",
]
