"""API views for the booking domain."""

from __future__ import annotations

import csv

from django.http import HttpResponse  # type: ignore
from django.utils import timezone  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.cart.store import CartStore
from apps.finances.services import confirm_checkout_session
from apps.users.permissions import IsHotelAdmin, is_hotel_admin
from shared.exceptions import ExternalServiceError, NotFound, Unauthorized

from . import services
from .filters import AdminBookingFilterSet
from .models import Booking
from .serializers import (
    AdminBookingDetailSerializer,
    AdminBookingSerializer,
    BookingSerializer,
    CheckoutSerializer,
    CheckoutVerifySerializer,
)

CANCEL_RESPONSES = {
    services.CancelOutcome.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Booking not found."),
    services.CancelOutcome.NOT_OWNER: (
        status.HTTP_403_FORBIDDEN,
        "You can only cancel your own bookings.",
    ),
    services.CancelOutcome.ALREADY_COMPLETED: (
        status.HTTP_400_BAD_REQUEST,
        services.CANCEL_ERROR_MESSAGES[services.CancelOutcome.ALREADY_COMPLETED],
    ),
    services.CancelOutcome.NOT_CANCELLABLE: (
        status.HTTP_400_BAD_REQUEST,
        services.CANCEL_ERROR_MESSAGES[services.CancelOutcome.NOT_CANCELLABLE],
    ),
}

EXPORT_HEADER = [
    "BookingNumber",
    "UserEmail",
    "RoomNumber",
    "CheckIn",
    "CheckOut",
    "Nights",
    "TotalAmount",
    "Status",
    "CreatedAt",
]


class BookingViewSet(viewsets.GenericViewSet):
    """Bookings of the signed-in guest.

    - `list` returns the caller's bookings, newest first, with finished stays completed
    - `retrieve` is open to the owner and hotel staff
    - `checkout` turns the cart into bookings and opens a payment page
    - `verify_checkout` confirms bookings when the guest returns from the payment page
    - `pay` opens a new payment page for a booking still awaiting payment
    - `cancel` cancels one of the caller's own bookings
    """

    queryset = Booking.objects.select_related("room", "room_type", "user")
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = r"\d+"

    def _get_booking(self, pk) -> Booking:
        booking = self.get_queryset().filter(pk=pk).first()
        if booking is None:
            raise NotFound("Booking not found.")
        if booking.user_id != self.request.user.pk and not is_hotel_admin(self.request.user):
            raise Unauthorized("You can only view your own bookings.")
        return booking

    def list(self, request):  # type: ignore
        bookings = services.get_user_bookings(request.user)
        return Response(BookingSerializer(bookings, many=True).data)

    def retrieve(self, request, pk=None):  # type: ignore
        booking = self._get_booking(pk)
        services.apply_lazy_completions([booking])
        return Response(BookingSerializer(booking).data)

    @action(detail=False, methods=["post"])
    def checkout(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data.get("email") or request.user.email

        store = CartStore.for_request(request)
        bookings = services.create_bookings(request.user, store.load())
        # The bookings now hold the rooms; keeping the items would only conflict with them.
        store.clear()
        booking_numbers = [booking.booking_number for booking in bookings]

        try:
            checkout_url = services.start_payment(bookings, request.user, email=email)
        except ExternalServiceError as exc:
            return Response(
                {
                    "detail": exc.detail,
                    "code": exc.code,
                    "booking_numbers": booking_numbers,
                },
                status=exc.status_code,
            )

        return Response(
            {"booking_numbers": booking_numbers, "checkout_url": checkout_url},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["post"], url_path="checkout/verify")
    def verify_checkout(self, request):
        serializer = CheckoutVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        confirmed = confirm_checkout_session(serializer.validated_data["session_id"], request.user)
        return Response({"confirmed": confirmed})

    @action(detail=True, methods=["post"])
    def pay(self, request, pk=None):
        booking = self._get_booking(pk)
        if booking.user_id != request.user.pk:
            raise Unauthorized("You can only pay for your own bookings.")
        services.ensure_payable(booking)
        checkout_url = services.start_payment([booking], request.user, email=request.user.email)
        return Response({"booking_number": booking.booking_number, "checkout_url": checkout_url})

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        outcome = services.cancel_booking(pk, request.user)
        if not outcome.succeeded:
            http_status, message = CANCEL_RESPONSES[outcome]
            return Response({"detail": message, "code": outcome.value}, status=http_status)
        booking = self.get_queryset().get(pk=pk)
        return Response(BookingSerializer(booking).data)


class AdminBookingViewSet(viewsets.ReadOnlyModelViewSet):
    """Back-office access to every booking."""

    queryset = Booking.objects.select_related("room", "room_type", "user").order_by("-created_at", "-id")
    serializer_class = AdminBookingSerializer
    permission_classes = [IsHotelAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_class = AdminBookingFilterSet
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "retrieve":
            return qs.prefetch_related("payments")
        return qs

    def get_serializer_class(self):  # type: ignore
        if self.action == "retrieve":
            return AdminBookingDetailSerializer
        return super().get_serializer_class()

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        booking = services.admin_cancel_booking(pk)
        return Response(AdminBookingSerializer(booking).data)

    @action(detail=False, methods=["get"])
    def export(self, request):
        bookings = self.filter_queryset(self.get_queryset())
        filename = f"bookings_{timezone.now():%Y%m%d}.csv"

        response = HttpResponse(content_type="text/csv")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        writer = csv.writer(response)
        writer.writerow(EXPORT_HEADER)
        for booking in bookings:
            created_at = timezone.localtime(booking.created_at)
            writer.writerow(
                [
                    booking.booking_number,
                    booking.user.email,
                    booking.room.room_number,
                    f"{booking.check_in:%Y-%m-%d}",
                    f"{booking.check_out:%Y-%m-%d}",
                    booking.nights,
                    booking.total_amount,
                    booking.status_code,
                    f"{created_at:%Y-%m-%d %H:%M:%S}",
                ]
            )
        return response
