"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.finances.serializers import PaymentSerializer

from .models import Booking


class BookingSerializer(serializers.ModelSerializer):
    """Read-only view of a booking."""

    status = serializers.CharField(source="status_code", read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    room_id = serializers.ReadOnlyField(source="room.id")
    room_number = serializers.ReadOnlyField(source="room.room_number")
    room_type_name = serializers.ReadOnlyField(source="room_type.name")

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_number",
            "room_id",
            "room_number",
            "room_type_name",
            "check_in",
            "check_out",
            "nights",
            "total_amount",
            "currency",
            "status",
            "status_display",
            "payment_reference",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AdminBookingSerializer(BookingSerializer):
    user_email = serializers.ReadOnlyField(source="user.email")
    user_name = serializers.ReadOnlyField(source="user.full_name")

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ["user_email", "user_name"]
        read_only_fields = fields


class AdminBookingDetailSerializer(AdminBookingSerializer):
    payments = PaymentSerializer(many=True, read_only=True)

    class Meta(AdminBookingSerializer.Meta):
        fields = AdminBookingSerializer.Meta.fields + ["payments"]
        read_only_fields = fields


class CheckoutSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True)


class CheckoutVerifySerializer(serializers.Serializer):
    session_id = serializers.CharField(max_length=255)
