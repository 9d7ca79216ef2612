"""FilterSet definitions for room search and listing."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Room


class RoomFilterSet(django_filters.FilterSet):
    """Catalog filters; dates, party size and sorting are handled by the view."""

    room_type = django_filters.NumberFilter(field_name="room_type_id", lookup_expr="exact")
    floor = django_filters.NumberFilter(field_name="floor", lookup_expr="exact")
    price_min = django_filters.NumberFilter(field_name="room_type__base_price_per_night", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="room_type__base_price_per_night", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Room
        fields = ["room_type", "floor"]

    def filter_search(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(room_number__icontains=value)
            | Q(room_type__name__icontains=value)
            | Q(room_type__description__icontains=value)
            | Q(room_type__amenities__icontains=value)
        )
