"""Serializers for cart requests."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class StayDatesSerializer(serializers.Serializer):
    check_in = serializers.DateField()
    check_out = serializers.DateField()


class CartItemCreateSerializer(StayDatesSerializer):
    room = serializers.IntegerField(min_value=1)
