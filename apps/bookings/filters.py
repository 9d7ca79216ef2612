"""FilterSet for the back-office booking list."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Booking

STATUS_BY_CODE = {code.lower(): status for status, code in Booking.STATUS_CODES.items()}


class AdminBookingFilterSet(django_filters.FilterSet):
    # Accepts the status name (``Confirmed``) or its numeric code (``2``)
    status = django_filters.CharFilter(method="filter_status")
    search = django_filters.CharFilter(method="filter_search")
    check_in_from = django_filters.DateFilter(field_name="check_in", lookup_expr="gte")
    check_in_to = django_filters.DateFilter(field_name="check_in", lookup_expr="lte")

    class Meta:
        model = Booking
        fields = ["room"]

    def filter_status(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        if value.isdigit():
            return queryset.filter(status=int(value))
        status = STATUS_BY_CODE.get(value.lower())
        if status is None:
            return queryset.none()
        return queryset.filter(status=status)

    def filter_search(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(booking_number__icontains=value)
            | Q(user__email__icontains=value)
            | Q(room__room_number__icontains=value)
        )
