"""Serializers for room feedback.

The author is taken from the request in the view, never from the payload.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.rooms.models import Room

from .models import RoomFeedback


class RoomFeedbackCreateSerializer(serializers.ModelSerializer):
    """Serializer for leaving feedback on a room."""

    room = serializers.PrimaryKeyRelatedField(queryset=Room.objects.filter(is_active=True))

    class Meta:
        model = RoomFeedback
        fields = ['room', 'comment', 'rating']

    def validate_rating(self, value: int) -> int:  # type: ignore
        if value < 1 or value > 5:
            raise serializers.ValidationError('Rating must be between 1 and 5.')
        return value

    def validate_comment(self, value: str) -> str:  # type: ignore
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Comment cannot be empty.')
        return value


class RoomFeedbackSerializer(serializers.ModelSerializer):
    """Read serializer for feedback including the author's display name."""

    user_id = serializers.ReadOnlyField(source='user.id')
    user_name = serializers.ReadOnlyField(source='user.full_name')
    room_id = serializers.ReadOnlyField(source='room.id')
    room_number = serializers.ReadOnlyField(source='room.room_number')

    class Meta:
        model = RoomFeedback
        fields = [
            'id',
            'user_id',
            'user_name',
            'room_id',
            'room_number',
            'comment',
            'rating',
            'is_approved',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
