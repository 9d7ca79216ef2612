"""Admin registration for room feedback."""

from __future__ import annotations

from django.contrib import admin

from .models import RoomFeedback


@admin.register(RoomFeedback)
class RoomFeedbackAdmin(admin.ModelAdmin):
    list_display = ('room', 'user', 'rating', 'is_approved', 'created_at')
    list_filter = ('is_approved', 'rating')
    search_fields = ('comment', 'user__email', 'room__room_number')
    actions = ['approve', 'reject']

    @admin.action(description='Approve selected feedback')
    def approve(self, request, queryset):
        queryset.update(is_approved=True)

    @admin.action(description='Reject selected feedback')
    def reject(self, request, queryset):
        queryset.update(is_approved=False)
