"""Financial domain models for Innkeeper."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Payment(models.Model):
    """Money received for a booking, as reported by the payment provider."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        SUCCEEDED = "succeeded", _("Succeeded")
        FAILED = "failed", _("Failed")

    class Provider(models.TextChoices):
        STRIPE = "stripe", _("Stripe")

    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="payments",
    )
    provider = models.CharField(max_length=50, choices=Provider.choices, default=Provider.STRIPE)
    provider_transaction_id = models.CharField(
        max_length=255,
        help_text=_("Checkout session or payment intent id at the provider."),
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=10, default="USD")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["provider_transaction_id", "booking"],
                name="payment_unique_transaction_per_booking",
            ),
        ]

    def __str__(self) -> str:
        return f"Payment {self.provider_transaction_id} for booking {self.booking_id} ({self.status})"
