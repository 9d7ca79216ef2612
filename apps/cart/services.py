"""Cart operations.

Every operation takes the caller's ``CartStore``, reads the cart, changes
it and writes it back in full.
"""

from __future__ import annotations

import logging
from datetime import date

from django.utils import timezone  # type: ignore

from apps.rooms.models import Room
from shared.exceptions import NotFound, ValidationError

from .cart import Cart, CartItem
from .store import CartStore

logger = logging.getLogger(__name__)


def validate_stay_dates(check_in: date, check_out: date, today: date | None = None) -> None:
    today = today or timezone.localdate()
    if check_in >= check_out:
        raise ValidationError("Check-out date must be after check-in date.")
    if check_in < today:
        raise ValidationError("Check-in date cannot be in the past.")


def _get_bookable_room(room_id: int) -> Room:
    try:
        return Room.objects.active().select_related("room_type").get(pk=room_id)
    except Room.DoesNotExist:
        raise NotFound("Room not found.")


def add_item(store: CartStore, room_id: int, check_in: date, check_out: date) -> Cart:
    validate_stay_dates(check_in, check_out)
    room = _get_bookable_room(room_id)

    cart = store.load()
    cart.items.append(
        CartItem(
            room_id=room.pk,
            room_number=room.room_number,
            room_type_name=room.room_type.name,
            price_per_night=room.price_per_night,
            thumbnail=room.thumbnail_url,
            check_in=check_in,
            check_out=check_out,
        )
    )
    store.save(cart)
    logger.info("Added room %s to cart %s for %s..%s", room.room_number, store.key, check_in, check_out)
    return cart


def remove_item(store: CartStore, cart_item_id: str) -> Cart:
    cart = store.load()
    item = cart.find(cart_item_id)
    if item is None:
        raise NotFound("Cart item not found.")
    cart.items.remove(item)
    store.save(cart)
    return cart


def update_item(store: CartStore, cart_item_id: str, check_in: date, check_out: date) -> Cart:
    validate_stay_dates(check_in, check_out)
    cart = store.load()
    item = cart.find(cart_item_id)
    if item is None:
        raise NotFound("Cart item not found.")
    item.check_in = check_in
    item.check_out = check_out
    store.save(cart)
    return cart


def clear_cart(store: CartStore) -> Cart:
    store.clear()
    return store.load()
