"""Domain models for feeable orders and the enumerations they carry."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Optional, Protocol, Union
from uuid import UUID


class OrderCategory(StrEnum):
    """Order type selecting the rate tables and the pricing strategy."""

    MAIL = "MAIL"
    SHOPPING = "SHOPPING"
    PURCHASE = "PURCHASE"


# Calendar rules keyed on this value apply to every order category.
ALL_ORDERS = "ALL_ORDERS"


class TimeoutKind(StrEnum):
    PICKUP = "PICKUP"
    DELIVERY = "DELIVERY"
    CONFIRMATION = "CONFIRMATION"


class MerchantTier(StrEnum):
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    DIAMOND = "DIAMOND"


class ProductCategory(StrEnum):
    FOOD = "FOOD"
    DAILY_NECESSITIES = "DAILY_NECESSITIES"
    ELECTRONICS = "ELECTRONICS"
    CLOTHING = "CLOTHING"
    BOOKS = "BOOKS"
    BEAUTY = "BEAUTY"
    SPORTS = "SPORTS"
    OTHER = "OTHER"
    MEDICINE = "MEDICINE"


OrderId = Union[UUID, str]


class FeeableOrder(Protocol):
    """Read-only view of an order that the fee engine can price."""

    @property
    def order_id(self) -> OrderId: ...
    @property
    def category(self) -> OrderCategory: ...
    @property
    def created_at(self) -> Optional[datetime]: ...
    @property
    def pickup_latitude(self) -> Optional[float]: ...
    @property
    def pickup_longitude(self) -> Optional[float]: ...
    @property
    def delivery_latitude(self) -> Optional[float]: ...
    @property
    def delivery_longitude(self) -> Optional[float]: ...
    @property
    def delivery_distance_km(self) -> Optional[float]: ...
    @property
    def weight(self) -> Optional[float]: ...
    @property
    def is_large_item(self) -> bool: ...
    @property
    def product_price(self) -> Optional[Decimal]: ...
    @property
    def quantity(self) -> Optional[int]: ...
    @property
    def expected_price(self) -> Optional[Decimal]: ...
    @property
    def has_merchant(self) -> bool: ...
    @property
    def merchant_tier(self) -> Optional[MerchantTier]: ...
    @property
    def product_category(self) -> Optional[ProductCategory]: ...
    @property
    def expected_delivery_at(self) -> Optional[datetime]: ...
    @property
    def delivered_at(self) -> Optional[datetime]: ...
    @property
    def needs_insurance(self) -> bool: ...
    @property
    def declared_value(self) -> Optional[Decimal]: ...
    @property
    def has_signature_service(self) -> bool: ...
    @property
    def has_packaging_service(self) -> bool: ...
    @property
    def delivery_income(self) -> Optional[Decimal]: ...
    @property
    def is_standard_delivery(self) -> bool: ...


@dataclass(frozen=True, slots=True)
class Order:
    """Plain order record satisfying :class:`FeeableOrder`."""

    order_id: OrderId
    category: OrderCategory
    created_at: Optional[datetime] = None
    pickup_latitude: Optional[float] = None
    pickup_longitude: Optional[float] = None
    delivery_latitude: Optional[float] = None
    delivery_longitude: Optional[float] = None
    delivery_distance_km: Optional[float] = None
    weight: Optional[float] = None
    is_large_item: bool = False
    product_price: Optional[Decimal] = None
    quantity: Optional[int] = None
    expected_price: Optional[Decimal] = None
    has_merchant: bool = False
    merchant_tier: Optional[MerchantTier] = None
    product_category: Optional[ProductCategory] = None
    expected_delivery_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    needs_insurance: bool = False
    declared_value: Optional[Decimal] = None
    has_signature_service: bool = False
    has_packaging_service: bool = False
    delivery_income: Optional[Decimal] = None
    is_standard_delivery: bool = True

    def __post_init__(self) -> None:
        if self.weight is not None and self.weight <= 0:
            raise ValueError("weight must be positive when present")
        for name in ("product_price", "expected_price", "declared_value", "delivery_income"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative")
