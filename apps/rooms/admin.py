"""Admin registration for the room catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import Room, RoomImage, RoomType


class RoomImageInline(admin.TabularInline):
    model = RoomImage
    extra = 1


@admin.register(RoomType)
class RoomTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "capacity", "base_price_per_night", "created_at")
    search_fields = ("name", "description", "amenities")


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("room_number", "room_type", "floor", "is_active", "created_at")
    list_filter = ("is_active", "room_type", "floor")
    search_fields = ("room_number", "room_type__name")
    inlines = [RoomImageInline]
