from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.rooms.models import Room, RoomType
from apps.users.models import User


class DashboardAPITests(APITestCase):
    def setUp(self) -> None:
        self.guest = User.objects.create_user(email='guest@example.com', password='GuestPass123')
        self.staff = User.objects.create_user(
            email='staff@example.com', password='StaffPass123', role=User.RoleChoices.ADMIN
        )
        room_type = RoomType.objects.create(name='Standard', capacity=2, base_price_per_night=Decimal('100.00'))
        RoomType.objects.create(name='Suite', capacity=4, base_price_per_night=Decimal('300.00'))
        self.rooms = [
            Room.objects.create(room_number=str(100 + n), room_type=room_type, floor=1) for n in range(1, 5)
        ]
        self.rooms[3].is_active = False
        self.rooms[3].save()

        check_in = timezone.localdate() + timedelta(days=3)
        statuses = [
            (Booking.Status.CONFIRMED, Decimal('200.00')),
            (Booking.Status.CONFIRMED, Decimal('150.50')),
            (Booking.Status.CONFIRMED, Decimal('100.00')),
            (Booking.Status.PENDING_PAYMENT, Decimal('400.00')),
            (Booking.Status.PENDING_PAYMENT, Decimal('100.00')),
            (Booking.Status.CANCELLED, Decimal('300.00')),
        ]
        for index, (status_value, total) in enumerate(statuses):
            Booking.objects.create(
                booking_number=Booking.generate_booking_number(),
                user=self.guest,
                room=self.rooms[index % 3],
                room_type=room_type,
                check_in=check_in + timedelta(days=index * 5),
                check_out=check_in + timedelta(days=index * 5 + 1),
                nights=1,
                total_amount=total,
                status=status_value,
            )
        self.url = reverse('analytics-dashboard')

    def test_staff_sees_headline_numbers(self) -> None:
        self.client.force_authenticate(self.staff)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['total_bookings'], 6)
        self.assertEqual(data['total_rooms'], 4)
        self.assertEqual(data['active_rooms'], 3)
        self.assertEqual(data['total_room_types'], 2)
        self.assertEqual(data['confirmed_bookings'], 3)
        self.assertEqual(data['pending_bookings'], 2)
        self.assertEqual(data['total_revenue'], Decimal('450.50'))
        self.assertEqual(data['occupancy_rate'], 75.0)
        self.assertEqual(len(data['recent_bookings']), 5)
        self.assertEqual(
            data['status_breakdown'],
            [
                {'status': 'Confirmed', 'count': 3, 'percentage': 50.0},
                {'status': 'PendingPayment', 'count': 2, 'percentage': 33.3},
                {'status': 'Cancelled', 'count': 1, 'percentage': 16.7},
            ],
        )

    def test_empty_hotel(self) -> None:
        Booking.objects.all().delete()
        self.client.force_authenticate(self.staff)

        data = self.client.get(self.url).data

        self.assertEqual(data['total_bookings'], 0)
        self.assertEqual(data['total_revenue'], Decimal('0'))
        self.assertEqual(data['status_breakdown'], [])
        self.assertEqual(data['recent_bookings'], [])

    def test_guests_are_forbidden(self) -> None:
        self.client.force_authenticate(self.guest)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(None)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_401_UNAUTHORIZED)
