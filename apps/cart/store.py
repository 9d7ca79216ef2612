"""Keyed cart storage on top of Django's cache framework."""

from __future__ import annotations

import json
import logging

from django.conf import settings  # type: ignore
from django.core.cache import cache as default_cache  # type: ignore

from .cart import Cart

logger = logging.getLogger(__name__)

CART_KEY_PREFIX = "cart"


def cart_key_for_user(user_id) -> str:
    return f"{CART_KEY_PREFIX}:user:{user_id}"


def cart_key_for_session(session_key: str) -> str:
    return f"{CART_KEY_PREFIX}:anon:{session_key}"


class CartStore:
    """Loads and saves one caller's cart.

    Signed-in callers are keyed by user id, anonymous ones by their session
    key, so carts never collide. An anonymous cart is left alone when its
    owner signs in.
    """

    def __init__(self, key: str, cache=None, timeout: int | None = None):
        self.key = key
        self.cache = cache or default_cache
        self.timeout = timeout if timeout is not None else settings.CART_TTL

    @classmethod
    def for_request(cls, request) -> "CartStore":
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            return cls(cart_key_for_user(user.pk))

        session = request.session
        if not session.session_key:
            session.create()
        return cls(cart_key_for_session(session.session_key))

    def load(self) -> Cart:
        raw = self.cache.get(self.key)
        if not raw:
            return Cart(currency=settings.BOOKING_CURRENCY)
        try:
            return Cart.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding unreadable cart stored under %s", self.key)
            return Cart(currency=settings.BOOKING_CURRENCY)

    def save(self, cart: Cart) -> None:
        self.cache.set(self.key, json.dumps(cart.to_dict()), self.timeout)

    def clear(self) -> None:
        self.cache.delete(self.key)
