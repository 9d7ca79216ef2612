"""Serializers for the favorites domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.rooms.models import Room
from apps.rooms.serializers import RoomSerializer

from .models import FavoriteRoom


class FavoriteRoomSerializer(serializers.ModelSerializer):
    """Serializer for listing favorites with the room card."""

    room_id = serializers.ReadOnlyField(source='room.id')
    room = RoomSerializer(read_only=True)

    class Meta:
        model = FavoriteRoom
        fields = ['id', 'room_id', 'room', 'created_at']


class FavoriteToggleSerializer(serializers.Serializer):
    """Serializer for toggling favorite status."""

    room = serializers.IntegerField(required=True)

    def validate_room(self, value: int) -> int:  # type: ignore
        if not Room.objects.filter(id=value, is_active=True).exists():
            raise serializers.ValidationError("Room not found or inactive.")
        return value
