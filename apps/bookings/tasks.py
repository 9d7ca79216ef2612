"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore

from . import services
from .models import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (scheduled by Celery Beat)
# ============================================================================

@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> dict[str, int]:
    """
    Complete every pending or confirmed booking whose check-out has passed.

    Same rule as the lazy completion applied when bookings are listed; this
    task just keeps the data tidy for bookings nobody looks at.

    Runs hourly.

    Returns:
        dict: {"completed": number of completed bookings}
    """
    completed_count = services.complete_finished_bookings()
    if completed_count > 0:
        logger.info("Completed %s bookings", completed_count)
    return {"completed": completed_count}


# ============================================================================
# NOTIFICATION TASKS
# ============================================================================

@shared_task(name="bookings.send_booking_confirmation_email")
def send_booking_confirmation_email(booking_id: int) -> bool:
    """Tell the guest that the payment went through."""
    try:
        booking = Booking.objects.select_related("user", "room", "room_type").get(pk=booking_id)
    except Booking.DoesNotExist:
        logger.error("Booking %s not found for confirmation email", booking_id)
        return False

    subject = f"Booking {booking.booking_number} confirmed"
    message = (
        f"Hello {booking.user.full_name},\n\n"
        f"Your booking {booking.booking_number} is confirmed.\n\n"
        f"Room: {booking.room.room_number} ({booking.room_type.name})\n"
        f"Check-in: {booking.check_in:%Y-%m-%d}\n"
        f"Check-out: {booking.check_out:%Y-%m-%d}\n"
        f"Nights: {booking.nights}\n"
        f"Total paid: {booking.total_amount} {booking.currency}\n\n"
        "We look forward to your stay."
    )
    send_mail(
        subject=subject,
        message=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[booking.user.email],
        fail_silently=False,
    )
    logger.info("Confirmation email sent for booking %s to %s", booking.booking_number, booking.user.email)
    return True
