"""Models for the review domain.

Defines ``RoomFeedback``: a comment and a 1..5 rating left by a signed-in
guest for a room. Feedback is approved on creation; staff can hide it
again by rejecting it.
"""

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class RoomFeedback(models.Model):
    """Feedback left by a guest for a room."""

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='feedbacks'
    )
    room = models.ForeignKey(
        'rooms.Room', on_delete=models.CASCADE, related_name='feedbacks'
    )
    comment = models.TextField(max_length=1000)
    rating = models.PositiveSmallIntegerField(
        default=5,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text=_('Rating from 1 to 5')
    )

    # Moderation
    is_approved = models.BooleanField(
        default=True,
        help_text=_('Visible to other guests')
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Room feedback')
        verbose_name_plural = _('Room feedback')
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['room', '-created_at'], name='feedback_room_created_idx'),
            models.Index(fields=['is_approved'], name='feedback_approved_idx'),
        ]

    def __str__(self) -> str:
        return f"Feedback by {self.user_id} for room {self.room_id} (Rating: {self.rating})"
