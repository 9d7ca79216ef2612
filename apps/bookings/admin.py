"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from apps.finances.models import Payment

from .models import Booking


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ("provider", "provider_transaction_id", "amount", "currency", "status", "created_at")
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_number",
        "room",
        "user",
        "status",
        "check_in",
        "check_out",
        "nights",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "check_in", "check_out", "room_type")
    search_fields = ("booking_number", "room__room_number", "user__email")
    readonly_fields = (
        "booking_number",
        "nights",
        "total_amount",
        "payment_reference",
        "created_at",
        "updated_at",
    )
    inlines = [PaymentInline]
