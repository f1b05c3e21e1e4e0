"""Pydantic models describing the rate tables document."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import MerchantTier, OrderCategory, TimeoutKind


class _Table(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class RateTable(_Table):
    base_rate: Optional[Decimal] = Field(default=None, description="Price of one 0.5 kg weight unit.")
    service_rate: Decimal = Decimal("0.10")
    large_item_rate: Decimal = Decimal("1.5")
    weight_rate: Decimal = Decimal("0.5")
    insurance_rate: Decimal = Decimal("0.01")


class DistanceTable(_Table):
    base_free_distance_km: float = 3.0
    rate_per_km: dict[OrderCategory, Decimal] = Field(default_factory=dict)
    max_distance_km: dict[OrderCategory, float] = Field(default_factory=dict)


class TimeoutTable(_Table):
    fees: dict[OrderCategory, dict[TimeoutKind, Decimal]] = Field(default_factory=dict)
    large_item_multipliers: dict[OrderCategory, Decimal] = Field(default_factory=dict)
    weight_multipliers: dict[OrderCategory, Decimal] = Field(default_factory=dict)
    holiday_multiplier: Decimal = Decimal("1.5")
    pickup_minutes: dict[OrderCategory, int] = Field(default_factory=dict)
    delivery_minutes: dict[OrderCategory, int] = Field(default_factory=dict)
    confirmation_minutes: dict[OrderCategory, int] = Field(default_factory=dict)
    max_hourly_increments: int = Field(default=12, ge=0)
    hourly_increment_rate: Decimal = Decimal("0.1")


class DistributionTable(_Table):
    platform_rates: dict[OrderCategory, Decimal] = Field(default_factory=dict)
    delivery_rates: dict[OrderCategory, Decimal] = Field(default_factory=dict)
    merchant_rates: dict[OrderCategory, Decimal] = Field(default_factory=dict)
    merchant_tier_rates: dict[MerchantTier, Decimal] = Field(
        default_factory=dict,
        description="Overrides the category merchant rate for merchants of the given tier.",
    )


class ValueAddedTable(_Table):
    insurance_rates: dict[OrderCategory, Decimal] = Field(default_factory=dict)
    signature_fees: dict[OrderCategory, Decimal] = Field(default_factory=dict)
    packaging_fees: dict[OrderCategory, Decimal] = Field(default_factory=dict)


class HolidayApiTable(_Table):
    url: str = "http://api.haoshenqi.top/holiday"
    batch_months: int = Field(default=3, ge=1)
    cache_prefix: str = "holiday:"
    cache_duration_seconds: int = Field(default=86400, ge=0)


class SpecialDateTable(_Table):
    enable_holiday_multiplier: bool = True
    enable_special_date_rate: bool = True
    enable_special_time_multiplier: bool = True
    holiday_multiplier: Decimal = Decimal("1.5")
    holiday_api: HolidayApiTable = Field(default_factory=HolidayApiTable)


class RateDocument(_Table):
    """Everything the fee stages read, as loaded from JSON or defaults."""

    rates: dict[OrderCategory, RateTable] = Field(default_factory=dict)
    distance: Optional[DistanceTable] = None
    timeout: Optional[TimeoutTable] = None
    distribution: DistributionTable = Field(default_factory=DistributionTable)
    value_added: ValueAddedTable = Field(default_factory=ValueAddedTable)
    special_dates: SpecialDateTable = Field(default_factory=SpecialDateTable)


def _per_category(mail: str, shopping: str, purchase: str) -> dict[OrderCategory, Decimal]:
    return {
        OrderCategory.MAIL: Decimal(mail),
        OrderCategory.SHOPPING: Decimal(shopping),
        OrderCategory.PURCHASE: Decimal(purchase),
    }


def default_rate_document() -> RateDocument:
    """Rate tables used when no rates file is configured."""

    return RateDocument(
        rates={
            OrderCategory.MAIL: RateTable(base_rate=Decimal("1.00"), service_rate=Decimal("0.10")),
            OrderCategory.SHOPPING: RateTable(base_rate=Decimal("1.00"), service_rate=Decimal("0.05")),
            OrderCategory.PURCHASE: RateTable(base_rate=Decimal("1.00"), service_rate=Decimal("0.15")),
        },
        distance=DistanceTable(
            base_free_distance_km=3.0,
            rate_per_km=_per_category("2.00", "2.00", "2.50"),
            max_distance_km={
                OrderCategory.MAIL: 5.0,
                OrderCategory.SHOPPING: 3.0,
                OrderCategory.PURCHASE: 4.0,
            },
        ),
        timeout=TimeoutTable(
            fees={
                OrderCategory.MAIL: {
                    TimeoutKind.PICKUP: Decimal("5.00"),
                    TimeoutKind.DELIVERY: Decimal("8.00"),
                    TimeoutKind.CONFIRMATION: Decimal("3.00"),
                },
                OrderCategory.SHOPPING: {
                    TimeoutKind.PICKUP: Decimal("5.00"),
                    TimeoutKind.DELIVERY: Decimal("10.00"),
                    TimeoutKind.CONFIRMATION: Decimal("3.00"),
                },
                OrderCategory.PURCHASE: {
                    TimeoutKind.PICKUP: Decimal("6.00"),
                    TimeoutKind.DELIVERY: Decimal("10.00"),
                    TimeoutKind.CONFIRMATION: Decimal("4.00"),
                },
            },
            large_item_multipliers=_per_category("1.5", "1.5", "1.5"),
            weight_multipliers=_per_category("0.5", "0.5", "0.5"),
            holiday_multiplier=Decimal("1.5"),
            pickup_minutes={OrderCategory.MAIL: 30, OrderCategory.SHOPPING: 20, OrderCategory.PURCHASE: 45},
            delivery_minutes={OrderCategory.MAIL: 120, OrderCategory.SHOPPING: 60, OrderCategory.PURCHASE: 120},
            confirmation_minutes={
                OrderCategory.MAIL: 1440,
                OrderCategory.SHOPPING: 1440,
                OrderCategory.PURCHASE: 1440,
            },
            max_hourly_increments=12,
            hourly_increment_rate=Decimal("0.1"),
        ),
        distribution=DistributionTable(
            platform_rates=_per_category("0.20", "0.10", "0.20"),
            delivery_rates=_per_category("0.80", "0.20", "0.80"),
            merchant_rates=_per_category("0.00", "0.70", "0.00"),
        ),
        value_added=ValueAddedTable(
            insurance_rates=_per_category("0.01", "0.01", "0.01"),
            signature_fees=_per_category("2.00", "2.00", "2.00"),
            packaging_fees=_per_category("3.00", "3.00", "3.00"),
        ),
    )
