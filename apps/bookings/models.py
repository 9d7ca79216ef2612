"""Booking domain models for Innkeeper."""

from __future__ import annotations

import uuid
from datetime import timezone as dt_timezone
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

BOOKING_NUMBER_PREFIX = "BK"


class BookingQuerySet(models.QuerySet):
    def blocking(self) -> "BookingQuerySet":
        """Bookings that hold their room for the stay dates."""
        return self.filter(status__in=Booking.BLOCKING_STATUSES)

    def stale(self, today=None) -> "BookingQuerySet":
        """Blocking bookings whose check-out date is already behind us."""
        today = today or timezone.localdate()
        return self.blocking().filter(check_out__lt=today)


class Booking(models.Model):
    """A reservation of one room for one date range."""

    class Status(models.IntegerChoices):
        # Codes are persisted; never renumber them.
        PENDING_PAYMENT = 1, _("Pending payment")
        CONFIRMED = 2, _("Confirmed")
        CANCELLED = 3, _("Cancelled")
        COMPLETED = 4, _("Completed")

    # Names used in exports and API payloads
    STATUS_CODES = {
        Status.PENDING_PAYMENT: "PendingPayment",
        Status.CONFIRMED: "Confirmed",
        Status.CANCELLED: "Cancelled",
        Status.COMPLETED: "Completed",
    }
    BLOCKING_STATUSES = (Status.PENDING_PAYMENT, Status.CONFIRMED)
    TERMINAL_STATUSES = (Status.CANCELLED, Status.COMPLETED)

    booking_number = models.CharField(max_length=50, unique=True, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    room = models.ForeignKey(
        "rooms.Room",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    room_type = models.ForeignKey(
        "rooms.RoomType",
        on_delete=models.PROTECT,
        related_name="bookings",
        help_text=_("Room type at the moment the booking was made."),
    )
    check_in = models.DateField()
    check_out = models.DateField()
    nights = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=10, default="USD")
    status = models.PositiveSmallIntegerField(
        choices=Status.choices,
        default=Status.PENDING_PAYMENT,
    )
    payment_reference = models.CharField(
        max_length=255,
        blank=True,
        help_text=_("Checkout session or payment intent id at the payment provider."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="booking_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "check_in", "check_out"], name="booking_room_dates_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.booking_number} ({self.status_code})"

    @staticmethod
    def generate_booking_number(now=None) -> str:
        """``BK`` + UTC creation date + 8 upper-case hex characters."""
        now = now or timezone.now()
        stamp = now.astimezone(dt_timezone.utc).strftime("%Y%m%d")
        return f"{BOOKING_NUMBER_PREFIX}{stamp}{uuid.uuid4().hex[:8].upper()}"

    @property
    def status_code(self) -> str:
        return self.STATUS_CODES[self.Status(self.status)]

    @property
    def is_blocking(self) -> bool:
        return self.status in self.BLOCKING_STATUSES

    def is_past_checkout(self, today=None) -> bool:
        today = today or timezone.localdate()
        return self.check_out < today

    def mark_completed(self) -> None:
        self.status = self.Status.COMPLETED
        self.save(update_fields=["status", "updated_at"])

    def mark_cancelled(self) -> None:
        self.status = self.Status.CANCELLED
        self.save(update_fields=["status", "updated_at"])

    def mark_confirmed(self, payment_reference: str) -> None:
        self.status = self.Status.CONFIRMED
        self.payment_reference = payment_reference
        self.save(update_fields=["status", "payment_reference", "updated_at"])
