"""Domain services for booking workflows.

Availability checks, turning a cart into bookings, and the lifecycle rules
(lazy completion and cancellation).
"""

from __future__ import annotations

import enum
import logging
from datetime import date
from typing import Iterable, TYPE_CHECKING

from django.db import IntegrityError, transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork
from shared.exceptions import Conflict, NotFound, PersistenceError, ValidationError

from .domain.events import BookingCancelled, BookingCompleted, BookingCreated
from .models import Booking

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.cart.cart import Cart

logger = logging.getLogger(__name__)


class BookingConflictError(Conflict):
    """Raised when a room is busy for the requested dates."""

    default_detail = "One or more rooms are no longer available. Please update your selection."
    code = "booking_conflict"


class BookingNumberCollision(PersistenceError):
    """Two bookings got the same number; the checkout can simply be retried."""

    default_detail = "We could not create your booking. Please try again."
    code = "booking_number_collision"


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------

def overlap_filter(check_in: date, check_out: date) -> Q:
    """Half-open overlap with ``[check_in, check_out)``; touching stays do not overlap."""
    return Q(check_in__lt=check_out) & Q(check_out__gt=check_in)


def blocking_overlaps(check_in: date, check_out: date):
    return Booking.objects.blocking().filter(overlap_filter(check_in, check_out))


def is_room_available(room_id, check_in: date, check_out: date, *, exclude_booking_id=None) -> bool:
    bookings_qs = blocking_overlaps(check_in, check_out).filter(room_id=room_id)
    if exclude_booking_id is not None:
        bookings_qs = bookings_qs.exclude(pk=exclude_booking_id)
    return not bookings_qs.exists()


def unavailable_room_ids(check_in: date, check_out: date) -> set[int]:
    """Ids of every room that has a blocking booking overlapping the window."""
    return set(blocking_overlaps(check_in, check_out).values_list("room_id", flat=True))


def ensure_room_is_available(room_id, check_in: date, check_out: date, *, exclude_booking_id=None) -> None:
    if not is_room_available(room_id, check_in, check_out, exclude_booking_id=exclude_booking_id):
        raise BookingConflictError()


# ---------------------------------------------------------------------------
# Cart -> bookings
# ---------------------------------------------------------------------------

def _check_cart_items_do_not_overlap(cart: "Cart") -> None:
    seen: dict[int, list] = {}
    for item in cart.items:
        for other in seen.setdefault(item.room_id, []):
            if item.stay.overlaps_with(other.stay):
                raise BookingConflictError(
                    f"Room {item.room_number} appears twice in your cart for overlapping dates."
                )
        seen[item.room_id].append(item)


def create_bookings(user, cart: "Cart") -> list[Booking]:
    """Turn every cart item into its own PendingPayment booking.

    All bookings are written in one transaction. The rooms involved are
    locked first and availability is checked again under the lock, so two
    concurrent checkouts of the same room cannot both succeed.
    """
    from apps.rooms.models import Room

    if cart.is_empty:
        raise ValidationError("Your cart is empty.")

    today = timezone.localdate()
    for item in cart.items:
        if item.check_in < today:
            raise ValidationError(
                f"The stay in room {item.room_number} starts in the past. Please update your selection."
            )

    _check_cart_items_do_not_overlap(cart)

    room_ids = sorted({item.room_id for item in cart.items})
    bookings: list[Booking] = []

    with DjangoUnitOfWork() as uow:
        rooms_qs = _lock_queryset_if_possible(Room.objects.filter(pk__in=room_ids).order_by("pk"))
        rooms = {room.pk: room for room in rooms_qs}

        for item in cart.items:
            if item.room_id not in rooms:
                raise NotFound(f"Room {item.room_number} no longer exists.")
            ensure_room_is_available(item.room_id, item.check_in, item.check_out)

        for item in cart.items:
            room = rooms[item.room_id]
            booking = Booking(
                booking_number=Booking.generate_booking_number(),
                user=user,
                room=room,
                room_type_id=room.room_type_id,
                check_in=item.check_in,
                check_out=item.check_out,
                nights=item.nights,
                total_amount=item.subtotal,
                currency=cart.currency,
                status=Booking.Status.PENDING_PAYMENT,
            )
            try:
                booking.save()
            except IntegrityError as exc:
                logger.error(
                    "Could not save booking %s for user %s: %s",
                    booking.booking_number,
                    user.pk,
                    exc,
                )
                raise BookingNumberCollision() from exc

            uow.add_event(
                BookingCreated(
                    booking_id=booking.pk,
                    booking_number=booking.booking_number,
                    user_id=user.pk,
                )
            )
            bookings.append(booking)

    logger.info(
        "Created %s bookings for user %s: %s",
        len(bookings),
        user.pk,
        ", ".join(b.booking_number for b in bookings),
    )
    return bookings


def start_payment(bookings: list[Booking], user, email: str | None = None) -> str:
    """Open a checkout session for the bookings and remember its id on each of them.

    Returns the url of the hosted payment page.
    """
    from apps.finances import gateway

    session_id, checkout_url = gateway.create_checkout_session(bookings, user, email=email)
    Booking.objects.filter(pk__in=[b.pk for b in bookings]).update(
        payment_reference=session_id,
        updated_at=timezone.now(),
    )
    for booking in bookings:
        booking.payment_reference = session_id
    return checkout_url


def ensure_payable(booking: Booking, today: date | None = None) -> None:
    """A booking can be paid while it is pending and its stay has not started."""
    today = today or timezone.localdate()
    if booking.status != Booking.Status.PENDING_PAYMENT:
        raise ValidationError("Only bookings awaiting payment can be paid.")
    if booking.check_in < today:
        raise ValidationError("This stay has already started and can no longer be paid online.")


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

def apply_lazy_completions(bookings: Iterable[Booking], today: date | None = None) -> list[Booking]:
    """Mark every blocking booking whose check-out has passed as Completed.

    The change is saved, so later independent reads see it too.
    """
    today = today or timezone.localdate()
    bookings = list(bookings)
    completed: list[Booking] = []

    with DjangoUnitOfWork() as uow:
        for booking in bookings:
            if booking.is_blocking and booking.is_past_checkout(today):
                booking.mark_completed()
                uow.add_event(
                    BookingCompleted(
                        booking_id=booking.pk,
                        booking_number=booking.booking_number,
                        user_id=booking.user_id,
                    )
                )
                completed.append(booking)

    if completed:
        logger.info("Completed %s bookings whose stay has ended", len(completed))
    return bookings


def get_user_bookings(user) -> list[Booking]:
    bookings = Booking.objects.filter(user=user).select_related("room", "room_type")
    return apply_lazy_completions(bookings)


def complete_finished_bookings(today: date | None = None) -> int:
    """Bulk variant of the lazy completion used by the periodic task."""
    stale = list(Booking.objects.stale(today))
    apply_lazy_completions(stale, today)
    return len(stale)


class CancelOutcome(enum.Enum):
    CANCELLED = "cancelled"
    NOT_FOUND = "not_found"
    NOT_OWNER = "not_owner"
    ALREADY_COMPLETED = "already_completed"
    NOT_CANCELLABLE = "not_cancellable"

    @property
    def succeeded(self) -> bool:
        return self is CancelOutcome.CANCELLED


CANCEL_ERROR_MESSAGES = {
    CancelOutcome.ALREADY_COMPLETED: "This booking has already been completed and can no longer be cancelled.",
    CancelOutcome.NOT_CANCELLABLE: "Only pending or confirmed bookings can be cancelled.",
}


def _cancel_locked_booking(uow: DjangoUnitOfWork, booking: Booking, *, by_staff: bool = False) -> CancelOutcome:
    """Status and date rules shared by guest and staff cancellation.

    A booking whose check-out has already passed is completed instead.
    """
    if booking.is_past_checkout():
        if booking.is_blocking:
            booking.mark_completed()
            uow.add_event(
                BookingCompleted(
                    booking_id=booking.pk,
                    booking_number=booking.booking_number,
                    user_id=booking.user_id,
                )
            )
        return CancelOutcome.ALREADY_COMPLETED

    if not booking.is_blocking:
        return CancelOutcome.NOT_CANCELLABLE

    booking.mark_cancelled()
    uow.add_event(
        BookingCancelled(
            booking_id=booking.pk,
            booking_number=booking.booking_number,
            user_id=booking.user_id,
            by_staff=by_staff,
        )
    )
    return CancelOutcome.CANCELLED


def cancel_booking(booking_id, user) -> CancelOutcome:
    """Cancel the caller's own booking if its stay has not ended yet."""
    with DjangoUnitOfWork() as uow:
        booking = _lock_queryset_if_possible(Booking.objects.filter(pk=booking_id)).first()
        if booking is None:
            return CancelOutcome.NOT_FOUND
        if booking.user_id != user.pk:
            return CancelOutcome.NOT_OWNER
        outcome = _cancel_locked_booking(uow, booking)

    if outcome.succeeded:
        logger.info("Booking %s cancelled by user %s", booking.booking_number, user.pk)
    return outcome


def admin_cancel_booking(booking_id) -> Booking:
    """Staff cancellation of any guest's booking.

    Ownership is not checked, but the status and date rules are the same
    as for guests: Completed and Cancelled bookings stay as they are.
    """
    with DjangoUnitOfWork() as uow:
        booking = _lock_queryset_if_possible(Booking.objects.filter(pk=booking_id)).first()
        if booking is None:
            raise NotFound("Booking not found.")
        outcome = _cancel_locked_booking(uow, booking, by_staff=True)

    # Raised after the commit so a lazy completion is kept
    if not outcome.succeeded:
        raise ValidationError(CANCEL_ERROR_MESSAGES[outcome])

    logger.info("Booking %s cancelled by staff", booking.booking_number)
    return booking
