"""In-memory calendar of special dates and time-of-day surcharges."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Iterable, Optional

from ...models.domain import ALL_ORDERS
from ...money import ONE
from ..contracts import CalendarCategory

HOLIDAY_PRIORITY = 100

logger = logging.getLogger(__name__)


class SpecialDateType(StrEnum):
    HOLIDAY = "HOLIDAY"
    PROMOTION = "PROMOTION"


@dataclass(slots=True)
class SpecialDate:
    name: str
    day: date
    rate_multiplier: Decimal = ONE
    type: SpecialDateType = SpecialDateType.PROMOTION
    category: CalendarCategory = ALL_ORDERS
    priority: int = 0
    active: bool = True
    rate_enabled: bool = True
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Special date name must not be empty.")
        if self.rate_multiplier <= 0:
            raise ValueError(f"Special date {self.name} must have a positive rate multiplier.")


@dataclass(slots=True)
class SpecialTimeRange:
    """Hours ``start_hour <= hour < end_hour`` of every day."""

    name: str
    start_hour: int
    end_hour: int
    rate_multiplier: Decimal = ONE
    category: CalendarCategory = ALL_ORDERS
    active: bool = True

    def __post_init__(self) -> None:
        if not 0 <= self.start_hour < self.end_hour <= 24:
            raise ValueError(f"Invalid time range {self.start_hour}-{self.end_hour} for {self.name}.")
        if self.rate_multiplier <= 0:
            raise ValueError(f"Time range {self.name} must have a positive rate multiplier.")

    def covers(self, hour: int) -> bool:
        return self.start_hour <= hour < self.end_hour


def _same_category(left: CalendarCategory, right: CalendarCategory) -> bool:
    return str(left) == str(right)


class SpecialDateCalendar:
    """Rules for one category take precedence over rules for ``ALL_ORDERS``."""

    def __init__(
        self,
        dates: Iterable[SpecialDate] = (),
        time_ranges: Iterable[SpecialTimeRange] = (),
    ) -> None:
        self._dates: list[SpecialDate] = list(dates)
        self._time_ranges: list[SpecialTimeRange] = list(time_ranges)
        self._lock = threading.RLock()

    def add_date(self, special_date: SpecialDate) -> None:
        with self._lock:
            self._dates.append(special_date)
        logger.info(f"Added special date {special_date.name} on {special_date.day} for {special_date.category}")

    def add_time_range(self, time_range: SpecialTimeRange) -> None:
        with self._lock:
            self._time_ranges.append(time_range)

    def register_holiday(self, day: date, rate_multiplier: Decimal, name: Optional[str] = None) -> SpecialDate:
        """Insert or refresh the ``ALL_ORDERS`` holiday entry for ``day``."""

        holiday = SpecialDate(
            name=name or f"Holiday {day.isoformat()}",
            day=day,
            rate_multiplier=rate_multiplier,
            type=SpecialDateType.HOLIDAY,
            category=ALL_ORDERS,
            priority=HOLIDAY_PRIORITY,
            description="Public holiday",
        )
        with self._lock:
            self._dates = [
                existing
                for existing in self._dates
                if not (existing.day == day and _same_category(existing.category, ALL_ORDERS))
            ]
            self._dates.append(holiday)
        logger.debug(f"Registered holiday {day}")
        return holiday

    def remove_date(self, day: date, category: CalendarCategory = ALL_ORDERS) -> int:
        with self._lock:
            before = len(self._dates)
            self._dates = [
                existing
                for existing in self._dates
                if not (existing.day == day and _same_category(existing.category, category))
            ]
            return before - len(self._dates)

    def dates_between(self, start: date, end: date) -> list[SpecialDate]:
        if start > end:
            raise ValueError("Start date must not be after end date.")
        with self._lock:
            return sorted((d for d in self._dates if start <= d.day <= end), key=lambda d: d.day)

    def is_holiday(self, day: date) -> bool:
        with self._lock:
            return any(d.day == day and d.type is SpecialDateType.HOLIDAY for d in self._dates)

    def date_rate_multiplier(self, day: date, category: CalendarCategory) -> Decimal:
        for scope in (category, ALL_ORDERS):
            special_date = self._highest_priority_date(day, scope)
            if special_date is not None:
                logger.debug(f"Special date {special_date.name} applies {special_date.rate_multiplier} to {category}")
                return special_date.rate_multiplier
        return ONE

    def time_range_multiplier(self, hour: int, category: CalendarCategory) -> Decimal:
        if not 0 <= hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {hour}.")
        for scope in (category, ALL_ORDERS):
            with self._lock:
                multipliers = [
                    time_range.rate_multiplier
                    for time_range in self._time_ranges
                    if time_range.active and _same_category(time_range.category, scope) and time_range.covers(hour)
                ]
            if multipliers:
                return max(multipliers)
        return ONE

    def _highest_priority_date(self, day: date, scope: CalendarCategory) -> Optional[SpecialDate]:
        with self._lock:
            candidates = [
                d
                for d in self._dates
                if d.day == day and d.active and d.rate_enabled and _same_category(d.category, scope)
            ]
        return max(candidates, key=lambda d: d.priority, default=None)
