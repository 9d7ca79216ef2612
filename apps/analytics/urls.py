"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import DashboardView


urlpatterns = [
    # Do not prefix with 'analytics/' here; the prefix is defined in config.urls
    path('dashboard/', DashboardView.as_view(), name='analytics-dashboard'),
]
