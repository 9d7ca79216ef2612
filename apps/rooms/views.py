"""Room catalog API views."""

from __future__ import annotations

from django.db.models import Count, Max  # type: ignore
from django.db.models.deletion import ProtectedError  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.pagination import PageNumberPagination  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.services import is_room_available, unavailable_room_ids
from apps.users.permissions import IsHotelAdmin, IsHotelAdminOrReadOnly, is_hotel_admin
from shared.exceptions import Conflict

from .filters import RoomFilterSet
from .models import Room, RoomImage, RoomType
from .serializers import (
    RoomDetailSerializer,
    RoomImageSerializer,
    RoomSearchSerializer,
    RoomSerializer,
    RoomTypeSerializer,
    RoomWriteSerializer,
    StayWindowSerializer,
)

FEATURED_ROOMS_LIMIT = 6

SORT_ORDERING = {
    "price-asc": ["room_type__base_price_per_night", "room_number"],
    "price-desc": ["-room_type__base_price_per_night", "room_number"],
    "rating": ["-room_type__capacity", "room_number"],
    "popular": ["-booking_count", "room_number"],
}


class RoomPagination(PageNumberPagination):
    page_size = 12
    page_size_query_param = "page_size"
    max_page_size = 100


class RoomViewSet(viewsets.ModelViewSet):
    """
    Room catalog.

    Guests browse and search active rooms; hotel staff manage rooms and
    their images.
    """

    queryset = Room.objects.select_related("room_type").prefetch_related("images")
    permission_classes = [IsHotelAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = RoomFilterSet
    pagination_class = RoomPagination
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "retrieve" and is_hotel_admin(self.request.user):
            return qs
        if self.action in {"update", "partial_update", "destroy", "add_image"}:
            return qs
        return qs.filter(is_active=True)

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return RoomWriteSerializer
        if self.action == "retrieve":
            return RoomDetailSerializer
        return RoomSerializer

    def list(self, request, *args, **kwargs):  # type: ignore
        """Search available rooms for a stay and a party size."""
        params = RoomSearchSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        search = params.validated_data

        qs = self.filter_queryset(self.get_queryset())
        qs = qs.filter(room_type__capacity__gte=search["adults"] + search["children"])
        qs = qs.exclude(pk__in=unavailable_room_ids(search["check_in"], search["check_out"]))
        if search["favorites_only"] and request.user.is_authenticated:
            qs = qs.filter(favorited_by__user=request.user)
        if search["sort"] == "popular":
            qs = qs.annotate(booking_count=Count("bookings"))
        qs = qs.order_by(*SORT_ORDERING[search["sort"]])

        page = self.paginate_queryset(qs)
        serializer = RoomSerializer(page, many=True, context=self.get_serializer_context())
        return self.get_paginated_response(serializer.data)

    @action(detail=False, methods=["get"])
    def featured(self, request):
        rooms = self.get_queryset().order_by("-created_at", "-id")[:FEATURED_ROOMS_LIMIT]
        return Response(RoomSerializer(rooms, many=True, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):
        room = self.get_object()
        params = StayWindowSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        check_in = params.validated_data["check_in"]
        check_out = params.validated_data["check_out"]
        return Response(
            {
                "room_id": room.pk,
                "check_in": check_in,
                "check_out": check_out,
                "available": is_room_available(room.pk, check_in, check_out),
            }
        )

    @action(detail=True, methods=["post"], url_path="images", permission_classes=[IsHotelAdmin])
    def add_image(self, request, pk=None):
        room = self.get_object()
        serializer = RoomImageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        last = room.images.aggregate(last=Max("sort_order"))["last"]
        image = serializer.save(room=room, sort_order=0 if last is None else last + 1)
        return Response(RoomImageSerializer(image).data, status=status.HTTP_201_CREATED)

    def perform_destroy(self, instance: Room) -> None:
        if instance.has_bookings():
            raise Conflict("This room has bookings and cannot be deleted. Deactivate it instead.")
        try:
            instance.delete()
        except ProtectedError as exc:
            raise Conflict("This room has bookings and cannot be deleted. Deactivate it instead.") from exc


class RoomImageViewSet(mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """Removal of a single room image."""

    queryset = RoomImage.objects.all()
    serializer_class = RoomImageSerializer
    permission_classes = [IsHotelAdmin]


class RoomTypeViewSet(viewsets.ModelViewSet):
    """Room types: public to read, staff to manage."""

    queryset = RoomType.objects.all()
    serializer_class = RoomTypeSerializer
    permission_classes = [IsHotelAdminOrReadOnly]
    pagination_class = None

    def perform_destroy(self, instance: RoomType) -> None:
        room_count = instance.rooms.count()
        if room_count:
            raise Conflict(
                f"This room type is used by {room_count} room(s) and cannot be deleted."
            )
        instance.delete()
