"""URL routing for the room catalog."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import RoomImageViewSet, RoomViewSet

router = DefaultRouter()
router.register(r"images", RoomImageViewSet, basename="room-image")
router.register(r"", RoomViewSet, basename="room")

urlpatterns = [
    path("", include(router.urls)),
]
