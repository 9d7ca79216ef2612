"""Payment reconciliation.

Payments are confirmed either directly (``confirm_payment``) or from the
payment provider's webhook. Both paths upsert the payment row keyed by
(provider transaction id, booking), so replaying a notification never
creates a second payment.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterable

import structlog  # type: ignore
from django.db import DatabaseError  # type: ignore

from apps.bookings.domain.events import BookingConfirmed
from apps.bookings.models import Booking
from shared.application.uow import DjangoUnitOfWork

from .gateway import WebhookRejected, retrieve_checkout_session, verify_webhook
from .models import Payment

logger = structlog.get_logger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"
PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"


@dataclass
class WebhookResult:
    event_type: str
    handled: bool = False
    confirmed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def booking_numbers_from_metadata(metadata: dict[str, Any]) -> list[str]:
    """Read ``bookingNumbers`` (comma separated) or the older single ``bookingNumber``."""
    raw = metadata.get("bookingNumbers") or metadata.get("bookingNumber") or ""
    return [number.strip() for number in str(raw).split(",") if number.strip()]


def _upsert_payment(booking: Booking, transaction_id: str) -> Payment:
    payment, created = Payment.objects.update_or_create(
        provider_transaction_id=transaction_id,
        booking=booking,
        defaults={
            "provider": Payment.Provider.STRIPE,
            "status": Payment.Status.SUCCEEDED,
            "amount": booking.total_amount,
            "currency": booking.currency,
        },
    )
    if not created:
        logger.info(
            "payment_already_recorded",
            booking_number=booking.booking_number,
            transaction_id=transaction_id,
        )
    return payment


def _confirm_booking(
    uow: DjangoUnitOfWork,
    booking_number: str,
    transaction_id: str,
    *,
    only_pending: bool = False,
) -> bool:
    booking = (
        Booking.objects.select_for_update()
        .filter(booking_number=booking_number)
        .first()
    )
    if booking is None:
        logger.warning("payment_for_unknown_booking", booking_number=booking_number, transaction_id=transaction_id)
        return False

    if only_pending and booking.status != Booking.Status.PENDING_PAYMENT:
        logger.info(
            "payment_ignored_booking_not_pending",
            booking_number=booking_number,
            status=booking.status_code,
        )
        return False

    _upsert_payment(booking, transaction_id)

    if not booking.is_blocking:
        # Cancelled and completed bookings stay terminal; the money is on record for a refund.
        logger.warning(
            "payment_for_closed_booking",
            booking_number=booking_number,
            status=booking.status_code,
            transaction_id=transaction_id,
        )
        return False

    was_confirmed = booking.status == Booking.Status.CONFIRMED
    booking.mark_confirmed(transaction_id)
    if not was_confirmed:
        uow.add_event(
            BookingConfirmed(
                booking_id=booking.pk,
                booking_number=booking.booking_number,
                user_id=booking.user_id,
                payment_reference=transaction_id,
            )
        )
        logger.info("booking_confirmed", booking_number=booking_number, transaction_id=transaction_id)
    return True


def confirm_payment(booking_number: str, transaction_id: str) -> bool:
    """Record a successful payment and confirm the booking in one commit."""
    with DjangoUnitOfWork() as uow:
        return _confirm_booking(uow, booking_number, transaction_id)


def confirm_payments(booking_numbers: Iterable[str], transaction_id: str) -> bool:
    """Confirm each booking on its own; True only if all of them succeeded.

    Bookings confirmed before a failure stay confirmed.
    """
    all_confirmed = True
    for booking_number in booking_numbers:
        try:
            confirmed = confirm_payment(booking_number, transaction_id)
        except DatabaseError:
            logger.exception("payment_confirmation_failed", booking_number=booking_number)
            confirmed = False
        all_confirmed = all_confirmed and confirmed
    return all_confirmed


def _parse_event(payload: bytes) -> dict[str, Any]:
    try:
        event = json.loads(payload)
    except ValueError as exc:
        raise WebhookRejected("Malformed payload.") from exc
    if not isinstance(event, dict) or not isinstance(event.get("type"), str):
        raise WebhookRejected("Malformed payload.")
    return event


def process_payment_webhook(payload: bytes, signature: str | None) -> WebhookResult:
    """Verify and apply one provider notification.

    Raises ``WebhookRejected`` before touching any data when the request
    is not authentic or cannot be read. Every booking named by the event
    is updated in a single transaction.
    """
    verify_webhook(payload, signature)
    event = _parse_event(payload)
    event_type = event["type"]
    result = WebhookResult(event_type=event_type)

    data = event.get("data") or {}
    if not isinstance(data, dict):
        raise WebhookRejected("Malformed payload.")
    data_object = data.get("object") or {}
    if not isinstance(data_object, dict):
        raise WebhookRejected("Malformed payload.")
    metadata = data_object.get("metadata") or {}
    if not isinstance(metadata, dict):
        raise WebhookRejected("Malformed payload.")

    if event_type == CHECKOUT_COMPLETED:
        if data_object.get("payment_status") != "paid":
            logger.info("checkout_completed_not_paid", session_id=data_object.get("id"))
            return result
        booking_numbers = booking_numbers_from_metadata(metadata)
        only_pending = False
    elif event_type == PAYMENT_INTENT_SUCCEEDED:
        number = metadata.get("bookingNumber")
        booking_numbers = [str(number).strip()] if number else []
        only_pending = True
    else:
        logger.info("webhook_event_ignored", event_type=event_type)
        return result

    transaction_id = data_object.get("id")
    if not transaction_id or not isinstance(transaction_id, str):
        raise WebhookRejected("Malformed payload.")

    result.handled = True
    with DjangoUnitOfWork() as uow:
        for booking_number in booking_numbers:
            if _confirm_booking(uow, booking_number, transaction_id, only_pending=only_pending):
                result.confirmed.append(booking_number)
            else:
                result.skipped.append(booking_number)

    logger.info(
        "webhook_processed",
        event_type=event_type,
        transaction_id=transaction_id,
        confirmed=result.confirmed,
        skipped=result.skipped,
    )
    return result


def confirm_checkout_session(session_id: str, user) -> list[str]:
    """Confirm the caller's bookings after returning from the hosted checkout page.

    Backup for a webhook that has not arrived yet; only pending bookings
    owned by ``user`` are touched.
    """
    session = retrieve_checkout_session(session_id)
    if session["payment_status"] != "paid":
        return []

    booking_numbers = booking_numbers_from_metadata(session["metadata"])
    owned = set(
        Booking.objects.filter(
            user=user,
            booking_number__in=booking_numbers,
            status=Booking.Status.PENDING_PAYMENT,
        ).values_list("booking_number", flat=True)
    )
    return [
        number
        for number in booking_numbers
        if number in owned and confirm_payment(number, session["id"])
    ]
