"""Admin registration for favorites."""

from __future__ import annotations

from django.contrib import admin

from .models import FavoriteRoom


@admin.register(FavoriteRoom)
class FavoriteRoomAdmin(admin.ModelAdmin):
    list_display = ('user', 'room', 'created_at')
    search_fields = ('user__email', 'room__room_number')
