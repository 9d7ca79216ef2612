"""API views for analytics.

The back-office dashboard: booking and room counts, confirmed revenue,
the most recent bookings and how bookings split across statuses.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.models import Booking
from apps.bookings.serializers import AdminBookingSerializer
from apps.rooms.models import Room, RoomType
from apps.users.permissions import IsHotelAdmin

RECENT_BOOKINGS_COUNT = 5


def _percentage(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


class DashboardView(APIView):
    """Return headline statistics for hotel staff."""

    permission_classes = [IsHotelAdmin]

    def get(self, request, format=None):  # type: ignore
        booking_qs = Booking.objects.all()
        total_bookings = booking_qs.count()
        total_rooms = Room.objects.count()
        active_rooms = Room.objects.filter(is_active=True).count()

        confirmed_qs = booking_qs.filter(status=Booking.Status.CONFIRMED)
        total_revenue = confirmed_qs.aggregate(total=models.Sum('total_amount')).get('total') or Decimal('0')

        recent = booking_qs.select_related('room', 'room_type', 'user').order_by('-created_at', '-id')[
            :RECENT_BOOKINGS_COUNT
        ]

        breakdown = []
        rows = booking_qs.values('status').annotate(count=models.Count('id')).order_by('-count', 'status')
        for row in rows:
            breakdown.append(
                {
                    'status': Booking.STATUS_CODES[Booking.Status(row['status'])],
                    'count': row['count'],
                    'percentage': _percentage(row['count'], total_bookings),
                }
            )

        return Response(
            {
                'total_bookings': total_bookings,
                'total_rooms': total_rooms,
                'total_room_types': RoomType.objects.count(),
                'active_rooms': active_rooms,
                'confirmed_bookings': confirmed_qs.count(),
                'pending_bookings': booking_qs.filter(status=Booking.Status.PENDING_PAYMENT).count(),
                'total_revenue': total_revenue,
                'occupancy_rate': _percentage(active_rooms, total_rooms),
                'recent_bookings': AdminBookingSerializer(recent, many=True).data,
                'status_breakdown': breakdown,
            }
        )
