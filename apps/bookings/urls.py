"""URL routing for the booking domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter, SimpleRouter  # type: ignore

from .views import AdminBookingViewSet, BookingViewSet

admin_router = SimpleRouter()
admin_router.register(r"admin", AdminBookingViewSet, basename="admin-booking")

router = DefaultRouter()
router.register(r"", BookingViewSet, basename="booking")

urlpatterns = [
    path("", include(admin_router.urls)),
    path("", include(router.urls)),
]
