"""Integration tests for booking API endpoints."""

from __future__ import annotations

import csv
import io
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.core import mail
from django.core.cache import cache
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.finances.models import Payment
from apps.rooms.models import Room, RoomType
from apps.users.models import User
from shared.exceptions import ExternalServiceError

CHECKOUT_URL = "https://checkout.stripe.test/pay/cs_test_1"


class BookingAPITestCase(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        self.other_guest = User.objects.create_user(email="other@example.com", password="OtherPass123")
        self.staff = User.objects.create_user(
            email="staff@example.com",
            password="StaffPass123",
            role=User.RoleChoices.ADMIN,
            is_staff=True,
        )
        self.room_type = RoomType.objects.create(
            name="Deluxe", capacity=3, base_price_per_night=Decimal("100.00")
        )
        self.room = Room.objects.create(room_number="201", room_type=self.room_type, floor=2)
        self.second_room = Room.objects.create(room_number="202", room_type=self.room_type, floor=2)
        self.today = timezone.localdate()
        self.client.force_authenticate(self.guest)

    def add_to_cart(self, room: Room, start_in_days: int, nights: int):
        check_in = self.today + timedelta(days=start_in_days)
        response = self.client.post(
            reverse("cart:items"),
            {
                "room": room.pk,
                "check_in": str(check_in),
                "check_out": str(check_in + timedelta(days=nights)),
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response

    def make_booking(self, *, user=None, room=None, start_in_days=3, nights=2, status_value=Booking.Status.PENDING_PAYMENT):
        check_in = self.today + timedelta(days=start_in_days)
        return Booking.objects.create(
            booking_number=Booking.generate_booking_number(),
            user=user or self.guest,
            room=room or self.room,
            room_type=self.room_type,
            check_in=check_in,
            check_out=check_in + timedelta(days=nights),
            nights=nights,
            total_amount=Decimal("100.00") * nights,
            status=status_value,
        )


class CheckoutAPITests(BookingAPITestCase):
    def test_checkout_creates_bookings_and_returns_payment_page(self) -> None:
        self.add_to_cart(self.room, 7, 3)
        self.add_to_cart(self.second_room, 7, 1)

        with mock.patch(
            "apps.finances.gateway.create_checkout_session",
            return_value=("cs_test_1", CHECKOUT_URL),
        ) as create_session:
            response = self.client.post(reverse("booking-checkout"), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["checkout_url"], CHECKOUT_URL)
        self.assertEqual(len(response.data["booking_numbers"]), 2)

        bookings = Booking.objects.filter(booking_number__in=response.data["booking_numbers"])
        self.assertEqual(bookings.count(), 2)
        for booking in bookings:
            self.assertEqual(booking.status, Booking.Status.PENDING_PAYMENT)
            self.assertEqual(booking.payment_reference, "cs_test_1")
        self.assertEqual(
            sorted(b.total_amount for b in bookings),
            [Decimal("100.00"), Decimal("300.00")],
        )
        self.assertEqual(create_session.call_args.kwargs["email"], "guest@example.com")

        # The cart is emptied once the bookings exist
        self.assertEqual(self.client.get(reverse("cart:detail")).data["items"], [])

    def test_checkout_uses_given_email(self) -> None:
        self.add_to_cart(self.room, 2, 1)

        with mock.patch(
            "apps.finances.gateway.create_checkout_session",
            return_value=("cs_test_1", CHECKOUT_URL),
        ) as create_session:
            self.client.post(reverse("booking-checkout"), {"email": "billing@example.com"}, format="json")

        self.assertEqual(create_session.call_args.kwargs["email"], "billing@example.com")

    def test_empty_cart_is_rejected(self) -> None:
        response = self.client.post(reverse("booking-checkout"), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"], "Your cart is empty.")

    def test_conflicting_cart_returns_409_and_creates_nothing(self) -> None:
        self.add_to_cart(self.room, 5, 2)
        self.make_booking(user=self.other_guest, room=self.room, start_in_days=6, nights=2)

        response = self.client.post(reverse("booking-checkout"), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(
            response.data["detail"],
            "One or more rooms are no longer available. Please update your selection.",
        )
        self.assertFalse(Booking.objects.filter(user=self.guest).exists())
        self.assertEqual(len(self.client.get(reverse("cart:detail")).data["items"]), 1)

    def test_payment_provider_failure_keeps_bookings_for_retry(self) -> None:
        self.add_to_cart(self.room, 5, 2)

        with mock.patch(
            "apps.finances.gateway.create_checkout_session",
            side_effect=ExternalServiceError(),
        ):
            response = self.client.post(reverse("booking-checkout"), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data["code"], "external_service_error")
        self.assertEqual(len(response.data["booking_numbers"]), 1)
        booking = Booking.objects.get(booking_number=response.data["booking_numbers"][0])
        self.assertEqual(booking.status, Booking.Status.PENDING_PAYMENT)
        self.assertEqual(booking.payment_reference, "")

        with mock.patch(
            "apps.finances.gateway.create_checkout_session",
            return_value=("cs_test_retry", CHECKOUT_URL),
        ):
            response = self.client.post(reverse("booking-pay", args=[booking.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["booking_number"], booking.booking_number)
        booking.refresh_from_db()
        self.assertEqual(booking.payment_reference, "cs_test_retry")

    def test_checkout_requires_authentication(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.post(reverse("booking-checkout"), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_verify_confirms_paid_session(self) -> None:
        booking = self.make_booking()
        session = {
            "id": "cs_test_paid",
            "payment_status": "paid",
            "metadata": {"bookingNumbers": booking.booking_number, "userId": str(self.guest.pk)},
        }

        with mock.patch("apps.finances.services.retrieve_checkout_session", return_value=session):
            response = self.client.post(
                reverse("booking-verify-checkout"), {"session_id": "cs_test_paid"}, format="json"
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["confirmed"], [booking.booking_number])
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        self.assertTrue(Payment.objects.filter(booking=booking, provider_transaction_id="cs_test_paid").exists())

    def test_verify_ignores_unpaid_session_and_foreign_bookings(self) -> None:
        mine = self.make_booking()
        theirs = self.make_booking(user=self.other_guest, room=self.second_room)

        unpaid = {"id": "cs_open", "payment_status": "unpaid", "metadata": {"bookingNumbers": mine.booking_number}}
        with mock.patch("apps.finances.services.retrieve_checkout_session", return_value=unpaid):
            response = self.client.post(reverse("booking-verify-checkout"), {"session_id": "cs_open"}, format="json")
        self.assertEqual(response.data["confirmed"], [])

        paid = {
            "id": "cs_paid",
            "payment_status": "paid",
            "metadata": {"bookingNumbers": f"{mine.booking_number},{theirs.booking_number}"},
        }
        with mock.patch("apps.finances.services.retrieve_checkout_session", return_value=paid):
            response = self.client.post(reverse("booking-verify-checkout"), {"session_id": "cs_paid"}, format="json")

        self.assertEqual(response.data["confirmed"], [mine.booking_number])
        theirs.refresh_from_db()
        self.assertEqual(theirs.status, Booking.Status.PENDING_PAYMENT)


class BookingListAPITests(BookingAPITestCase):
    def test_list_returns_own_bookings_newest_first(self) -> None:
        older = self.make_booking(start_in_days=3)
        newer = self.make_booking(room=self.second_room, start_in_days=10)
        self.make_booking(user=self.other_guest, start_in_days=20)

        response = self.client.get(reverse("booking-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data], [newer.pk, older.pk])
        self.assertEqual(response.data[0]["status"], "PendingPayment")
        self.assertEqual(response.data[0]["room_number"], "202")
        self.assertEqual(response.data[0]["room_type_name"], "Deluxe")

    def test_list_completes_finished_stays(self) -> None:
        booking = self.make_booking(start_in_days=-6, nights=2, status_value=Booking.Status.CONFIRMED)

        response = self.client.get(reverse("booking-list"))

        self.assertEqual(response.data[0]["status"], "Completed")
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.COMPLETED)

    def test_detail_is_limited_to_owner_and_staff(self) -> None:
        booking = self.make_booking(user=self.other_guest)

        response = self.client.get(reverse("booking-detail", args=[booking.pk]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.staff)
        response = self.client.get(reverse("booking-detail", args=[booking.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["booking_number"], booking.booking_number)

        response = self.client.get(reverse("booking-detail", args=[999999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_pay_rejects_confirmed_and_foreign_bookings(self) -> None:
        confirmed = self.make_booking(status_value=Booking.Status.CONFIRMED)
        response = self.client.post(reverse("booking-pay", args=[confirmed.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"], "Only bookings awaiting payment can be paid.")

        foreign = self.make_booking(user=self.other_guest, room=self.second_room)
        response = self.client.post(reverse("booking-pay", args=[foreign.pk]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class CancelAPITests(BookingAPITestCase):
    def test_owner_cancels_booking(self) -> None:
        booking = self.make_booking(status_value=Booking.Status.CONFIRMED)

        response = self.client.post(reverse("booking-cancel", args=[booking.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "Cancelled")

    def test_cancel_error_messages(self) -> None:
        foreign = self.make_booking(user=self.other_guest)
        finished = self.make_booking(room=self.second_room, start_in_days=-6, nights=2)
        cancelled = self.make_booking(start_in_days=30, status_value=Booking.Status.CANCELLED)

        cases = [
            (999999, status.HTTP_404_NOT_FOUND, "Booking not found."),
            (foreign.pk, status.HTTP_403_FORBIDDEN, "You can only cancel your own bookings."),
            (
                finished.pk,
                status.HTTP_400_BAD_REQUEST,
                "This booking has already been completed and can no longer be cancelled.",
            ),
            (cancelled.pk, status.HTTP_400_BAD_REQUEST, "Only pending or confirmed bookings can be cancelled."),
        ]
        for pk, expected_status, message in cases:
            with self.subTest(pk=pk):
                response = self.client.post(reverse("booking-cancel", args=[pk]))
                self.assertEqual(response.status_code, expected_status)
                self.assertEqual(response.data["detail"], message)

        finished.refresh_from_db()
        self.assertEqual(finished.status, Booking.Status.COMPLETED)


class AdminBookingAPITests(BookingAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.confirmed = self.make_booking(status_value=Booking.Status.CONFIRMED)
        self.pending = self.make_booking(user=self.other_guest, room=self.second_room, start_in_days=8)
        self.client.force_authenticate(self.staff)

    def test_guests_cannot_use_back_office(self) -> None:
        self.client.force_authenticate(self.guest)
        self.assertEqual(self.client.get(reverse("admin-booking-list")).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get(reverse("admin-booking-export")).status_code, status.HTTP_403_FORBIDDEN)

    def test_list_and_filters(self) -> None:
        response = self.client.get(reverse("admin-booking-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertIn("user_email", response.data[0])

        response = self.client.get(reverse("admin-booking-list"), {"status": "Confirmed"})
        self.assertEqual([item["id"] for item in response.data], [self.confirmed.pk])

        response = self.client.get(reverse("admin-booking-list"), {"status": str(Booking.Status.PENDING_PAYMENT)})
        self.assertEqual([item["id"] for item in response.data], [self.pending.pk])

        response = self.client.get(reverse("admin-booking-list"), {"search": "other@"})
        self.assertEqual([item["id"] for item in response.data], [self.pending.pk])

    def test_detail_includes_payments(self) -> None:
        Payment.objects.create(
            booking=self.confirmed,
            provider_transaction_id="cs_test_detail",
            amount=self.confirmed.total_amount,
            status=Payment.Status.SUCCEEDED,
        )

        response = self.client.get(reverse("admin-booking-detail", args=[self.confirmed.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["payments"]), 1)
        self.assertEqual(response.data["payments"][0]["provider_transaction_id"], "cs_test_detail")

    def test_staff_cancel(self) -> None:
        response = self.client.post(reverse("admin-booking-cancel", args=[self.pending.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "Cancelled")

        response = self.client.post(reverse("admin-booking-cancel", args=[999999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_staff_cancel_refuses_closed_bookings(self) -> None:
        completed = self.make_booking(start_in_days=-10, status_value=Booking.Status.COMPLETED)
        cancelled = self.make_booking(start_in_days=30, status_value=Booking.Status.CANCELLED)
        cases = [
            (completed, "This booking has already been completed and can no longer be cancelled."),
            (cancelled, "Only pending or confirmed bookings can be cancelled."),
        ]

        for booking, message in cases:
            with self.subTest(status=booking.status):
                response = self.client.post(reverse("admin-booking-cancel", args=[booking.pk]))
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertEqual(response.data["detail"], message)

        completed.refresh_from_db()
        cancelled.refresh_from_db()
        self.assertEqual(completed.status, Booking.Status.COMPLETED)
        self.assertEqual(cancelled.status, Booking.Status.CANCELLED)

    def test_export_csv(self) -> None:
        response = self.client.get(reverse("admin-booking-export"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response["Content-Type"], "text/csv")
        self.assertIn("attachment; filename=\"bookings_", response["Content-Disposition"])

        rows = list(csv.reader(io.StringIO(response.content.decode())))
        self.assertEqual(
            rows[0],
            [
                "BookingNumber",
                "UserEmail",
                "RoomNumber",
                "CheckIn",
                "CheckOut",
                "Nights",
                "TotalAmount",
                "Status",
                "CreatedAt",
            ],
        )
        self.assertEqual(len(rows), 3)
        by_number = {row[0]: row for row in rows[1:]}
        row = by_number[self.confirmed.booking_number]
        self.assertEqual(row[1], "guest@example.com")
        self.assertEqual(row[2], "201")
        self.assertEqual(row[3], f"{self.confirmed.check_in:%Y-%m-%d}")
        self.assertEqual(row[5], "2")
        self.assertEqual(row[6], "200.00")
        self.assertEqual(row[7], "Confirmed")
        created_at = timezone.localtime(self.confirmed.created_at)
        self.assertEqual(row[8], f"{created_at:%Y-%m-%d %H:%M:%S}")

    def test_export_honours_filters(self) -> None:
        response = self.client.get(reverse("admin-booking-export"), {"status": "PendingPayment"})
        rows = list(csv.reader(io.StringIO(response.content.decode())))
        self.assertEqual([row[0] for row in rows[1:]], [self.pending.booking_number])


class ConfirmationEmailFlowTests(BookingAPITestCase):
    def test_confirmation_email_is_sent_after_payment(self) -> None:
        booking = self.make_booking()
        session = {
            "id": "cs_mail",
            "payment_status": "paid",
            "metadata": {"bookingNumbers": booking.booking_number},
        }

        with mock.patch("apps.finances.services.retrieve_checkout_session", return_value=session):
            with self.captureOnCommitCallbacks(execute=True):
                self.client.post(reverse("booking-verify-checkout"), {"session_id": "cs_mail"}, format="json")

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, f"Booking {booking.booking_number} confirmed")
        self.assertEqual(mail.outbox[0].to, ["guest@example.com"])
