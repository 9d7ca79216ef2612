"""Room catalog models for Innkeeper.

A ``RoomType`` carries the commercial description (capacity, nightly
price, amenities); a ``Room`` is a physical room of that type. Rooms that
have bookings cannot be deleted, only deactivated.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Avg  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class RoomType(models.Model):
    """Room category: Standard, Deluxe, Suite and so on."""

    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(max_length=1000, blank=True)
    capacity = models.PositiveSmallIntegerField(default=2, validators=[MinValueValidator(1)])
    base_price_per_night = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    amenities = models.TextField(
        blank=True,
        help_text=_("Comma separated list shown on the room page."),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Room type")
        verbose_name_plural = _("Room types")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    @property
    def amenity_list(self) -> list[str]:
        return [item.strip() for item in self.amenities.split(",") if item.strip()]


class RoomQuerySet(models.QuerySet):
    def active(self) -> "RoomQuerySet":
        return self.filter(is_active=True)


class Room(models.Model):
    """A physical, bookable room."""

    room_number = models.CharField(max_length=50, unique=True)
    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.PROTECT,
        related_name="rooms",
    )
    floor = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = RoomQuerySet.as_manager()

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["room_number"]
        indexes = [
            models.Index(fields=["is_active", "room_type"], name="room_active_type_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.room_number} ({self.room_type.name})"

    @property
    def price_per_night(self) -> Decimal:
        return self.room_type.base_price_per_night

    @property
    def thumbnail_url(self) -> str:
        image = self.images.order_by("sort_order", "id").first()
        return image.url if image else ""

    def average_rating(self) -> float:
        """Mean rating over approved feedback, 0 when there is none."""
        value = self.feedbacks.filter(is_approved=True).aggregate(avg=Avg("rating"))["avg"]
        return round(float(value), 2) if value is not None else 0.0

    def has_bookings(self) -> bool:
        return self.bookings.exists()


class RoomImage(models.Model):
    """Photo of a room, referenced by URL."""

    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name="images")
    url = models.URLField(max_length=500)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = _("Room image")
        verbose_name_plural = _("Room images")
        ordering = ["sort_order", "id"]

    def __str__(self) -> str:
        return f"Image #{self.sort_order} for room {self.room_id}"
