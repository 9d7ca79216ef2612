"""URL routing for room types, mounted separately from the rooms themselves."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import RoomTypeViewSet

router = DefaultRouter()
router.register(r"", RoomTypeViewSet, basename="room-type")

urlpatterns = [
    path("", include(router.urls)),
]
