"""Stripe integration.

Only this module talks to the Stripe SDK. Everything else works with
plain booking objects and the values returned from here.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import stripe  # type: ignore
from django.conf import settings  # type: ignore

from shared.domain.value_objects import Money
from shared.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class WebhookRejected(Exception):
    """The webhook request is not authentic or not readable."""


def _configure() -> None:
    stripe.api_key = settings.STRIPE_SECRET_KEY


def build_line_items(bookings: Sequence[Any]) -> list[dict[str, Any]]:
    """One line item per booking: nightly price times number of nights."""
    line_items = []
    for booking in bookings:
        nightly = Money(booking.total_amount / booking.nights, booking.currency)
        line_items.append(
            {
                "price_data": {
                    "currency": booking.currency.lower(),
                    "unit_amount": nightly.minor_units(),
                    "product_data": {
                        "name": f"{booking.room.room_number} - {booking.room_type.name}",
                        "description": (
                            f"Check-in: {booking.check_in:%Y-%m-%d}, "
                            f"Check-out: {booking.check_out:%Y-%m-%d}"
                        ),
                    },
                },
                "quantity": booking.nights,
            }
        )
    return line_items


def create_checkout_session(bookings: Sequence[Any], user, email: str | None = None) -> tuple[str, str]:
    """Open a hosted checkout page for the given bookings.

    Returns ``(session_id, redirect_url)``. The booking numbers and the
    user id travel in the session metadata so the webhook can find the
    bookings again.
    """
    _configure()
    params: dict[str, Any] = {
        "mode": "payment",
        "payment_method_types": ["card"],
        "line_items": build_line_items(bookings),
        "success_url": settings.STRIPE_SUCCESS_URL,
        "cancel_url": settings.STRIPE_CANCEL_URL,
        "metadata": {
            "bookingNumbers": ",".join(b.booking_number for b in bookings),
            "userId": str(user.pk),
        },
    }
    if email:
        params["customer_email"] = email

    try:
        session = stripe.checkout.Session.create(**params)
    except stripe.StripeError as exc:
        logger.error(
            "Stripe checkout session failed for bookings %s: %s",
            params["metadata"]["bookingNumbers"],
            exc,
        )
        raise ExternalServiceError() from exc

    return session.id, session.url


def verify_webhook(payload: bytes, signature: str | None) -> None:
    """Check the Stripe-Signature header against the configured secret."""
    secret = settings.STRIPE_WEBHOOK_SECRET
    if not secret:
        raise WebhookRejected("Webhook secret is not configured.")
    if not signature:
        raise WebhookRejected("Missing Stripe-Signature header.")

    try:
        stripe.Webhook.construct_event(payload, signature, secret)
    except stripe.SignatureVerificationError as exc:
        raise WebhookRejected("Invalid signature.") from exc
    except ValueError as exc:
        raise WebhookRejected("Malformed payload.") from exc


def retrieve_checkout_session(session_id: str) -> dict[str, Any]:
    """Fetch a checkout session: its id, payment status and metadata."""
    _configure()
    try:
        session = stripe.checkout.Session.retrieve(session_id)
    except stripe.StripeError as exc:
        logger.error("Could not retrieve Stripe checkout session %s: %s", session_id, exc)
        raise ExternalServiceError() from exc

    metadata = dict(session.metadata) if session.metadata else {}
    return {
        "id": session.id,
        "payment_status": session.payment_status,
        "metadata": metadata,
    }
