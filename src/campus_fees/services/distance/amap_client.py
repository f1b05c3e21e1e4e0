"""HTTP client for walking and e-bike route distances from the AMap direction API."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

import httpx

from ...config import settings
from ...errors import CollaboratorError
from ..contracts import format_coordinate
from ..geospatial import haversine_meters

WALKING = "walking"
EBIKE = "electrobike"

logger = logging.getLogger(__name__)


def distance_cache_key(mode: str, lat1: float, lng1: float, lat2: float, lng2: float) -> str:
    return f"{mode}:{lat1:.6f}:{lng1:.6f}:{lat2:.6f}:{lng2:.6f}"


class AmapDistanceClient:
    """Route distances with retries, an in-memory cache and straight-line fallbacks."""

    def __init__(
        self,
        base_url: str | None = None,
        web_key: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        ebike_threshold_km: float | None = None,
        default_distance_km: float | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = (base_url or settings.amap_base_url).rstrip("/")
        self.web_key = web_key if web_key is not None else settings.amap_web_key
        if not self.web_key or len(self.web_key) != 32:
            logger.warning("AMap web key is missing or malformed; route requests will fall back to straight-line distance")
        self.timeout = timeout if timeout is not None else settings.distance_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.distance_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.distance_backoff_seconds
        self.ebike_threshold_km = (
            ebike_threshold_km if ebike_threshold_km is not None else settings.ebike_threshold_km
        )
        self.default_distance_km = (
            default_distance_km if default_distance_km is not None else settings.default_distance_km
        )
        self._transport = transport
        self._sleep = sleep
        self._cache: dict[str, float] = {}
        self._lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout), transport=self._transport)

    def walking_distance_meters(self, lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        try:
            return self.route_distance_meters(WALKING, lat1, lng1, lat2, lng2)
        except CollaboratorError as exc:
            logger.warning(f"Walking distance unavailable, using straight-line distance: {exc}")
            return haversine_meters(lat1, lng1, lat2, lng2)

    def optimal_delivery_distance_km(self, lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        """E-bike routing for long trips, walking for short ones, straight line if both fail."""

        try:
            linear_km = haversine_meters(lat1, lng1, lat2, lng2) / 1000.0
        except (TypeError, ValueError) as exc:
            logger.error(f"Straight-line distance failed, using default {self.default_distance_km} km: {exc}")
            return self.default_distance_km

        try:
            if linear_km > self.ebike_threshold_km:
                try:
                    return self.route_distance_meters(EBIKE, lat1, lng1, lat2, lng2) / 1000.0
                except CollaboratorError as exc:
                    logger.warning(f"E-bike routing failed, falling back to walking: {exc}")
            return self.route_distance_meters(WALKING, lat1, lng1, lat2, lng2) / 1000.0
        except CollaboratorError as exc:
            logger.error(f"Route distance failed, using straight-line distance {linear_km:.3f} km: {exc}")
            return linear_km

    def route_distance_meters(self, mode: str, lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        key = distance_cache_key(mode, lat1, lng1, lat2, lng2)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        distance = self._request_distance(mode, lat1, lng1, lat2, lng2)
        with self._lock:
            self._cache[key] = distance
        return distance

    def clear_cache(self) -> None:
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
        logger.debug(f"Cleared {count} cached route distances")

    def _request_distance(self, mode: str, lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        if not self.web_key:
            raise CollaboratorError("AMap web key is not configured.")

        params = {
            "key": self.web_key,
            "origin": format_coordinate(lat1, lng1),
            "destination": format_coordinate(lat2, lng2),
            "show_fields": "cost",
        }
        url = f"{self.base_url}/{mode}"

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    return _extract_distance(response.json())
                except (httpx.TimeoutException, httpx.TransportError, httpx.HTTPStatusError) as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise CollaboratorError(f"AMap {mode} request failed after {attempt} attempts: {exc}") from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"AMap {mode} request failed, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries}): {exc}"
                    )
                    self._sleep(wait_time)
                except ValueError as exc:
                    raise CollaboratorError(f"AMap {mode} response could not be parsed: {exc}") from exc
        finally:
            client.close()


def _extract_distance(data: dict) -> float:
    status = str(data.get("status", ""))
    info = str(data.get("info", ""))
    if status != "1" or info.upper() != "OK":
        raise CollaboratorError(
            f"AMap API error: status={status} info={info} infocode={data.get('infocode')}"
        )

    paths = (data.get("route") or {}).get("paths") or []
    if not paths:
        raise CollaboratorError("AMap response contains no route paths.")
    distance = float(paths[0].get("distance", 0))
    if distance <= 0:
        raise CollaboratorError(f"AMap returned an invalid distance: {distance}")
    return distance
