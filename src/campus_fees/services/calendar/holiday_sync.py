"""Pulls public holidays from the holiday API into a :class:`SpecialDateCalendar`."""

from __future__ import annotations

import logging
from calendar import monthrange
from datetime import date
from decimal import Decimal
from typing import Any, Iterator, Optional

import httpx

from ...config import settings
from ...errors import CollaboratorError
from ...rates import RateConfiguration
from .special_dates import SpecialDateCalendar

# Day status the holiday API uses for statutory holidays.
HOLIDAY_STATUS = 3

logger = logging.getLogger(__name__)


def month_starts(start: date, end: date) -> Iterator[date]:
    current = start.replace(day=1)
    while current <= end:
        yield current
        current = date(current.year + current.month // 12, current.month % 12 + 1, 1)


def add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year, month = day.year + month_index // 12, month_index % 12 + 1
    return date(year, month, min(day.day, monthrange(year, month)[1]))


class HolidayApiClient:
    def __init__(
        self,
        calendar: SpecialDateCalendar,
        *,
        url: str,
        holiday_multiplier: Decimal,
        batch_months: int = 3,
        enabled: bool = True,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not url:
            raise ValueError("Holiday API URL is not configured.")
        self.calendar = calendar
        self.url = url
        self.holiday_multiplier = holiday_multiplier
        self.batch_months = batch_months
        self.enabled = enabled
        self.timeout = timeout if timeout is not None else settings.holiday_api_timeout_seconds
        self._transport = transport

    @classmethod
    def for_rates(
        cls,
        rates: RateConfiguration,
        calendar: SpecialDateCalendar,
        transport: httpx.BaseTransport | None = None,
    ) -> "HolidayApiClient":
        return cls(
            calendar,
            url=rates.holiday_api_url,
            holiday_multiplier=rates.holiday_rate_multiplier(),
            batch_months=rates.holiday_batch_months,
            enabled=rates.holiday_pricing_enabled,
            transport=transport,
        )

    def sync_upcoming(self, today: Optional[date] = None) -> int:
        """Sync from ``today`` through the configured number of months ahead."""

        if not self.enabled:
            logger.info("Holiday pricing is disabled, skipping holiday sync")
            return 0
        start = today or date.today()
        return self.sync(start, add_months(start, self.batch_months))

    def sync(self, start: date, end: date) -> int:
        logger.info(f"Syncing holidays from {start} to {end}")
        registered = 0
        with httpx.Client(timeout=httpx.Timeout(self.timeout), transport=self._transport) as client:
            for month in month_starts(start, end):
                try:
                    registered += self._sync_month(client, month)
                except CollaboratorError as exc:
                    logger.warning(f"Skipping holidays for {month:%Y-%m}: {exc}")
        logger.info(f"Holiday sync finished, {registered} holidays registered")
        return registered

    def _sync_month(self, client: httpx.Client, month: date) -> int:
        try:
            response = client.get(self.url, params={"date": f"{month:%Y-%m}"})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise CollaboratorError(f"Holiday API request failed: {exc}") from exc

        entries = payload if isinstance(payload, list) else [payload]
        registered = 0
        for entry in entries:
            holiday = self._parse_holiday(entry)
            if holiday is not None:
                self.calendar.register_holiday(holiday, self.holiday_multiplier)
                registered += 1
        return registered

    @staticmethod
    def _parse_holiday(entry: Any) -> Optional[date]:
        if not isinstance(entry, dict):
            return None
        try:
            if int(entry.get("status", -1)) != HOLIDAY_STATUS:
                return None
            return date.fromisoformat(str(entry["date"]))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(f"Ignoring malformed holiday entry {entry!r}: {exc}")
            return None
