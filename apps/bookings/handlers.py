"""Domain event handlers for bookings.

Registered on the shared message bus when the app is ready; every handler
runs after the transaction that raised the event has committed.
"""

from __future__ import annotations

import logging

from shared.application.message_bus import message_bus

from .domain.events import BookingConfirmed

logger = logging.getLogger(__name__)


def queue_confirmation_email(event: BookingConfirmed) -> None:
    from .tasks import send_booking_confirmation_email

    send_booking_confirmation_email.delay(event.booking_id)
    logger.debug("Queued confirmation email for booking %s", event.booking_number)


def register_handlers() -> None:
    message_bus.register_event_handler(BookingConfirmed, queue_confirmation_email)
