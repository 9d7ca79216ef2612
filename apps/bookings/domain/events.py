"""
Booking Domain Events

Events that represent things that have happened to a booking.
They are published after the transaction that caused them commits.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass
class BookingCreated(DomainEvent):
    """A booking was created from a cart item and awaits payment"""
    booking_id: int
    booking_number: str
    user_id: int


@dataclass
class BookingConfirmed(DomainEvent):
    """
    Payment for the booking succeeded (PendingPayment -> Confirmed)

    Triggers:
    - Confirmation email to the guest
    """
    booking_id: int
    booking_number: str
    user_id: int
    payment_reference: str


@dataclass
class BookingCancelled(DomainEvent):
    booking_id: int
    booking_number: str
    user_id: int
    by_staff: bool = False


@dataclass
class BookingCompleted(DomainEvent):
    """The stay is over (check-out date has passed)"""
    booking_id: int
    booking_number: str
    user_id: int
