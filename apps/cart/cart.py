"""Cart value types.

A cart is rebuilt from its JSON form on every access and written back
whole after every change, so these classes only know how to compute their
totals and how to turn themselves into plain dicts.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from shared.domain.value_objects import DEFAULT_CURRENCY, DateRange, Money


@dataclass
class CartItem:
    room_id: int
    room_number: str
    room_type_name: str
    price_per_night: Decimal
    check_in: date
    check_out: date
    thumbnail: str = ""
    cart_item_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def stay(self) -> DateRange:
        return DateRange(self.check_in, self.check_out)

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def subtotal(self) -> Decimal:
        return self.price_per_night * self.nights

    def to_dict(self) -> dict[str, Any]:
        return {
            "cart_item_id": self.cart_item_id,
            "room_id": self.room_id,
            "room_number": self.room_number,
            "room_type_name": self.room_type_name,
            "price_per_night": str(self.price_per_night),
            "thumbnail": self.thumbnail,
            "check_in": self.check_in.isoformat(),
            "check_out": self.check_out.isoformat(),
            "nights": self.nights,
            "subtotal": str(self.subtotal),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CartItem":
        return cls(
            cart_item_id=data["cart_item_id"],
            room_id=int(data["room_id"]),
            room_number=data["room_number"],
            room_type_name=data["room_type_name"],
            price_per_night=Decimal(data["price_per_night"]),
            thumbnail=data.get("thumbnail", ""),
            check_in=date.fromisoformat(data["check_in"]),
            check_out=date.fromisoformat(data["check_out"]),
        )


@dataclass
class Cart:
    items: list[CartItem] = field(default_factory=list)
    currency: str = DEFAULT_CURRENCY

    @property
    def total(self) -> Decimal:
        total = Money.zero(self.currency)
        for item in self.items:
            total = total + Money(item.subtotal, self.currency)
        return total.amount

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, cart_item_id: str) -> CartItem | None:
        return next((item for item in self.items if item.cart_item_id == cart_item_id), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "currency": self.currency,
            "total": str(self.total),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Cart":
        return cls(
            items=[CartItem.from_dict(item) for item in data.get("items", [])],
            currency=data.get("currency") or DEFAULT_CURRENCY,
        )
