"""URL routing for the reviews domain."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import RoomFeedbackViewSet

router = DefaultRouter()
router.register(r'', RoomFeedbackViewSet, basename='review')

urlpatterns = [path('', include(router.urls))]
