"""Serializers for the finances domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    booking_number = serializers.ReadOnlyField(source="booking.booking_number")

    class Meta:
        model = Payment
        fields = [
            "id",
            "booking",
            "booking_number",
            "provider",
            "provider_transaction_id",
            "amount",
            "currency",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
