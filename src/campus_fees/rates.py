"""Validated, read-only access to the rate tables.

A :class:`RateConfiguration` is built once at process start and handed to the
fee engine. Construction validates the tables and raises
:class:`~campus_fees.errors.ConfigurationError` when they are unusable; that is
the only fee-related failure allowed to stop startup.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Mapping, Optional

from pydantic import ValidationError

from .config import settings
from .errors import ConfigurationError
from .models.domain import MerchantTier, OrderCategory, TimeoutKind
from .money import ONE
from .schemas.rates import DistanceTable, RateDocument, RateTable, TimeoutTable, default_rate_document
from .services.contracts import Calendar

logger = logging.getLogger(__name__)


def load_rate_document(source: Optional[Path] = None) -> RateDocument:
    """Load rate tables from ``source`` (or the configured file), else the defaults."""

    path = source or settings.rates_file
    if path is None:
        logger.info("No rates file configured, using built-in rate tables")
        return default_rate_document()
    if not path.exists():
        raise ConfigurationError(f"Rates file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        try:
            payload = json.load(handle, parse_float=Decimal)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Rates file '{path}' is not valid JSON: {exc}") from exc
    try:
        document = RateDocument.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Rates file '{path}' is invalid: {exc}") from exc
    logger.info(f"Loaded rate tables from {path}")
    return document


def _require_per_category(name: str, table: Mapping[OrderCategory, object]) -> None:
    for category in OrderCategory:
        if table.get(category) is None:
            raise ConfigurationError(f"Missing rate value for {name}.{category}.")


class RateConfiguration:
    """Lookup facade over a :class:`RateDocument` plus the holiday calendar."""

    def __init__(
        self,
        document: RateDocument,
        calendar: Calendar,
        *,
        holiday_api_url: Optional[str] = None,
    ) -> None:
        self.document = document
        self.calendar = calendar
        self.holiday_api_url = holiday_api_url or settings.holiday_api_url or document.special_dates.holiday_api.url
        self._validate()
        self._distance: DistanceTable = document.distance
        self._timeout: TimeoutTable = document.timeout

    # -- validation -------------------------------------------------------

    def _validate(self) -> None:
        self._validate_rates()
        self._validate_special_dates()
        self._validate_distance()
        self._validate_timeout()
        self._validate_value_added()

    def _validate_rates(self) -> None:
        if not self.document.rates:
            raise ConfigurationError("Rate tables must not be empty.")
        for category in OrderCategory:
            table = self.document.rates.get(category)
            if table is None or table.base_rate is None or table.base_rate <= 0:
                raise ConfigurationError(f"Base rate for order category '{category}' must be greater than 0.")

    def _validate_special_dates(self) -> None:
        if self.document.special_dates.holiday_multiplier <= 0:
            raise ConfigurationError("Holiday multiplier must be greater than 0.")
        if not self.holiday_api_url or not self.holiday_api_url.strip():
            raise ConfigurationError("Holiday API URL must not be empty.")

    def _validate_distance(self) -> None:
        if self.document.distance is None:
            raise ConfigurationError("Distance rate table is required.")
        if self.document.distance.base_free_distance_km < 0:
            raise ConfigurationError("Base free distance must not be negative.")
        _require_per_category("distance.rate_per_km", self.document.distance.rate_per_km)
        _require_per_category("distance.max_distance_km", self.document.distance.max_distance_km)

    def _validate_timeout(self) -> None:
        if self.document.timeout is None:
            raise ConfigurationError("Timeout fee table is required.")
        if self.document.timeout.holiday_multiplier <= 0:
            raise ConfigurationError("Timeout holiday multiplier must be greater than 0.")
        timeout = self.document.timeout
        for category in OrderCategory:
            fees = timeout.fees.get(category)
            if fees is None:
                raise ConfigurationError(f"Missing rate value for timeout.fees.{category}.")
            for kind in TimeoutKind:
                if kind not in fees:
                    raise ConfigurationError(f"Missing rate value for timeout.fees.{category}.{kind}.")
        _require_per_category("timeout.large_item_multipliers", timeout.large_item_multipliers)
        _require_per_category("timeout.weight_multipliers", timeout.weight_multipliers)
        _require_per_category("timeout.pickup_minutes", timeout.pickup_minutes)
        _require_per_category("timeout.delivery_minutes", timeout.delivery_minutes)
        _require_per_category("timeout.confirmation_minutes", timeout.confirmation_minutes)

    def _validate_value_added(self) -> None:
        _require_per_category("value_added.signature_fees", self.document.value_added.signature_fees)
        _require_per_category("value_added.packaging_fees", self.document.value_added.packaging_fees)

    # -- rate table -------------------------------------------------------

    def _rate_table(self, category: OrderCategory) -> RateTable:
        return self.document.rates[category]

    def base_rate(self, category: OrderCategory) -> Decimal:
        return Decimal(self._rate_table(category).base_rate)

    def service_rate(self, category: OrderCategory) -> Decimal:
        return self._rate_table(category).service_rate

    def large_item_multiplier(self, category: OrderCategory) -> Decimal:
        return self._rate_table(category).large_item_rate

    def weight_multiplier(self, category: OrderCategory) -> Decimal:
        return self._rate_table(category).weight_rate

    def insurance_rate(self, category: OrderCategory) -> Decimal:
        rate = self.document.value_added.insurance_rates.get(category)
        if rate is None:
            return self._rate_table(category).insurance_rate
        return rate

    # -- distance ---------------------------------------------------------

    def distance_rate(self, category: OrderCategory) -> Decimal:
        return self._distance.rate_per_km[category]

    def base_free_distance(self, category: OrderCategory) -> float:
        return self._distance.base_free_distance_km

    def max_delivery_distance(self, category: OrderCategory) -> float:
        return self._distance.max_distance_km[category]

    # -- timeout ----------------------------------------------------------

    def timeout_fee(self, category: OrderCategory, kind: TimeoutKind) -> Decimal:
        return self._timeout.fees[category][kind]

    def large_item_timeout_multiplier(self, category: OrderCategory) -> Decimal:
        return self._timeout.large_item_multipliers[category]

    def timeout_weight_multiplier(self, category: OrderCategory) -> Decimal:
        return self._timeout.weight_multipliers[category]

    def holiday_multiplier(self) -> Decimal:
        return self._timeout.holiday_multiplier

    def timeout_minutes(self, category: OrderCategory, kind: TimeoutKind) -> int:
        match kind:
            case TimeoutKind.PICKUP:
                return self._timeout.pickup_minutes[category]
            case TimeoutKind.DELIVERY:
                return self._timeout.delivery_minutes[category]
            case TimeoutKind.CONFIRMATION:
                return self._timeout.confirmation_minutes[category]
        raise ValueError(f"Unknown timeout kind '{kind}'.")

    def max_hourly_increments(self) -> int:
        return self._timeout.max_hourly_increments

    def hourly_increment_rate(self) -> Decimal:
        return self._timeout.hourly_increment_rate

    # -- distribution -----------------------------------------------------

    def platform_rate(self, category: OrderCategory) -> Optional[Decimal]:
        return self.document.distribution.platform_rates.get(category)

    def delivery_rate(self, category: OrderCategory) -> Optional[Decimal]:
        return self.document.distribution.delivery_rates.get(category)

    def merchant_rate(self, category: OrderCategory, tier: Optional[MerchantTier]) -> Optional[Decimal]:
        if tier is not None and tier in self.document.distribution.merchant_tier_rates:
            return self.document.distribution.merchant_tier_rates[tier]
        return self.document.distribution.merchant_rates.get(category)

    # -- value-added services ---------------------------------------------

    def signature_service_fee(self, category: OrderCategory) -> Decimal:
        return self.document.value_added.signature_fees[category]

    def packaging_service_fee(self, category: OrderCategory) -> Decimal:
        return self.document.value_added.packaging_fees[category]

    # -- calendar ---------------------------------------------------------

    def is_holiday(self, day: date) -> bool:
        return self.calendar.is_holiday(day)

    def holiday_rate_multiplier(self) -> Decimal:
        """Multiplier stamped on synced public holidays; 1 when holiday pricing is off."""

        special = self.document.special_dates
        if not special.enable_holiday_multiplier:
            return ONE
        return special.holiday_multiplier

    def date_rate_multiplier(self, day: date, category: OrderCategory) -> Decimal:
        if not self.document.special_dates.enable_special_date_rate:
            logger.debug("Special date rates disabled")
            return ONE
        return self.calendar.date_rate_multiplier(day, category)

    def time_range_multiplier(self, hour: int, category: OrderCategory) -> Decimal:
        if not self.document.special_dates.enable_special_time_multiplier:
            return ONE
        return self.calendar.time_range_multiplier(hour, category)

    @property
    def holiday_pricing_enabled(self) -> bool:
        return self.document.special_dates.enable_holiday_multiplier

    @property
    def holiday_batch_months(self) -> int:
        return self.document.special_dates.holiday_api.batch_months
