"""Serializers for the room catalog."""

from __future__ import annotations

from datetime import timedelta

from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import Room, RoomImage, RoomType

SORT_CHOICES = ["popular", "price-asc", "price-desc", "rating"]


class RoomTypeSerializer(serializers.ModelSerializer):
    room_count = serializers.SerializerMethodField()

    class Meta:
        model = RoomType
        fields = [
            "id",
            "name",
            "description",
            "capacity",
            "base_price_per_night",
            "amenities",
            "room_count",
            "created_at",
        ]
        read_only_fields = ["room_count", "created_at"]

    def get_room_count(self, obj: RoomType) -> int:
        return obj.rooms.count()


class RoomImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = RoomImage
        fields = ["id", "url", "sort_order"]
        read_only_fields = ["sort_order"]


class RoomSerializer(serializers.ModelSerializer):
    """Compact room card used by search results and lists."""

    room_type_name = serializers.ReadOnlyField(source="room_type.name")
    capacity = serializers.ReadOnlyField(source="room_type.capacity")
    price_per_night = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    amenities = serializers.ReadOnlyField(source="room_type.amenity_list")
    thumbnail = serializers.SerializerMethodField()

    class Meta:
        model = Room
        fields = [
            "id",
            "room_number",
            "floor",
            "is_active",
            "room_type",
            "room_type_name",
            "capacity",
            "price_per_night",
            "amenities",
            "thumbnail",
        ]

    def get_thumbnail(self, obj: Room) -> str:
        # Uses the prefetched images when the queryset has them
        images = list(obj.images.all())
        return images[0].url if images else ""


class RoomDetailSerializer(RoomSerializer):
    description = serializers.ReadOnlyField(source="room_type.description")
    images = RoomImageSerializer(many=True, read_only=True)
    average_rating = serializers.SerializerMethodField()
    feedback_count = serializers.SerializerMethodField()
    is_favorite = serializers.SerializerMethodField()

    class Meta(RoomSerializer.Meta):
        fields = RoomSerializer.Meta.fields + [
            "description",
            "images",
            "average_rating",
            "feedback_count",
            "is_favorite",
            "created_at",
        ]

    def get_average_rating(self, obj: Room) -> float:
        return obj.average_rating()

    def get_feedback_count(self, obj: Room) -> int:
        return obj.feedbacks.filter(is_approved=True).count()

    def get_is_favorite(self, obj: Room) -> bool:
        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            return False
        return obj.favorited_by.filter(user=request.user).exists()


class RoomWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Room
        fields = ["id", "room_number", "room_type", "floor", "is_active"]

    def validate_room_number(self, value: str) -> str:
        value = value.strip()
        qs = Room.objects.filter(room_number__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A room with this number already exists.")
        return value


class StayWindowSerializer(serializers.Serializer):
    check_in = serializers.DateField()
    check_out = serializers.DateField()

    def validate(self, attrs):  # type: ignore
        if attrs["check_in"] >= attrs["check_out"]:
            raise serializers.ValidationError("Check-out date must be after check-in date.")
        return attrs


class RoomSearchSerializer(StayWindowSerializer):
    """Query parameters of the catalog search; the stay defaults to tomorrow for one night."""

    check_in = serializers.DateField(required=False)
    check_out = serializers.DateField(required=False)
    adults = serializers.IntegerField(min_value=1, default=1)
    children = serializers.IntegerField(min_value=0, default=0)
    sort = serializers.ChoiceField(choices=SORT_CHOICES, default="popular")
    favorites_only = serializers.BooleanField(default=False)

    def validate(self, attrs):  # type: ignore
        tomorrow = timezone.localdate() + timedelta(days=1)
        attrs.setdefault("check_in", tomorrow)
        attrs.setdefault("check_out", attrs["check_in"] + timedelta(days=1))
        return super().validate(attrs)
