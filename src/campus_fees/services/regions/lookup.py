"""Geofenced delivery regions and the rate multiplier they apply to an order."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from shapely.geometry import Polygon

from ...errors import CollaboratorError, ConfigurationError
from ..contracts import RegionRate
from ..geospatial import point_in_polygon, polygon_from_lnglat

DEFAULT_REGION_RATE = 1.0

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DeliveryRegion:
    """A named polygon whose rate multiplier applies to orders touching it.

    ``boundary`` holds ``(lat, lng)`` vertices. When regions overlap the one
    with the highest ``priority`` wins.
    """

    id: int
    name: str
    boundary: Sequence[tuple[float, float]]
    rate_multiplier: float = 1.0
    priority: int = 0
    active: bool = True
    description: Optional[str] = None
    _polygon: Optional[Polygon] = field(default=None, init=False, repr=False, compare=False)

    @property
    def polygon(self) -> Polygon:
        if self._polygon is None:
            self._polygon = polygon_from_lnglat([(lng, lat) for lat, lng in self.boundary])
        return self._polygon

    def contains(self, lat: float, lng: float) -> bool:
        return point_in_polygon(lat, lng, self.polygon)


def parse_coordinate(coordinate: str) -> tuple[float, float]:
    """Parse a ``"lng,lat"`` string into ``(lat, lng)``."""

    parts = coordinate.split(",") if isinstance(coordinate, str) else []
    if len(parts) != 2:
        raise CollaboratorError(f"Invalid coordinate format: {coordinate!r}")
    try:
        lng, lat = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise CollaboratorError(f"Invalid coordinate format: {coordinate!r}") from exc
    if not (-180.0 <= lng <= 180.0 and -90.0 <= lat <= 90.0):
        raise CollaboratorError(f"Coordinate out of range: {coordinate!r}")
    return lat, lng


class PolygonRegionLookup:
    """In-memory region lookup backed by shapely polygons."""

    def __init__(self, regions: Iterable[DeliveryRegion]) -> None:
        self._regions: list[DeliveryRegion] = []
        for region in regions:
            if region.rate_multiplier <= 0:
                raise ConfigurationError(f"Region {region.name} has a non-positive rate multiplier.")
            try:
                if region.polygon.is_empty:
                    raise ValueError("boundary encloses no area")
            except ValueError as exc:
                raise ConfigurationError(f"Region {region.name} has an invalid boundary: {exc}") from exc
            self._regions.append(region)
        self._regions.sort(key=lambda region: region.priority, reverse=True)
        self._cache: dict[str, Optional[DeliveryRegion]] = {}
        self._lock = threading.Lock()
        logger.info(f"Loaded {len(self._regions)} delivery regions")

    def find_region(self, coordinate: str) -> Optional[DeliveryRegion]:
        with self._lock:
            if coordinate in self._cache:
                return self._cache[coordinate]

        lat, lng = parse_coordinate(coordinate)
        match = next(
            (region for region in self._regions if region.active and region.contains(lat, lng)),
            None,
        )
        logger.debug(f"Coordinate {coordinate} is {'in ' + match.name if match else 'outside every region'}")
        with self._lock:
            self._cache[coordinate] = match
        return match

    def region_rate(self, pickup_coordinate: str, delivery_coordinate: str) -> RegionRate:
        pickup = self.find_region(pickup_coordinate)
        delivery = self.find_region(delivery_coordinate)
        if pickup is None and delivery is None:
            return RegionRate(final_rate=DEFAULT_REGION_RATE, is_cross_region=False)

        pickup_rate = pickup.rate_multiplier if pickup else DEFAULT_REGION_RATE
        delivery_rate = delivery.rate_multiplier if delivery else DEFAULT_REGION_RATE
        is_cross_region = pickup is not None and delivery is not None and pickup.id != delivery.id
        return RegionRate(
            final_rate=(pickup_rate + delivery_rate) / 2.0,
            is_cross_region=is_cross_region,
            pickup_region=pickup.name if pickup else None,
            delivery_region=delivery.name if delivery else None,
        )

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
