"""Model definition for favorites.

``FavoriteRoom`` is a bookmark a guest keeps on a room. A room can be
favorited once per user, enforced by a unique constraint.
"""

from __future__ import annotations

from django.db import models  # type: ignore


class FavoriteRoom(models.Model):
    """A user's favorite room."""

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='favorites'
    )
    room = models.ForeignKey(
        'rooms.Room', on_delete=models.CASCADE, related_name='favorited_by'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(fields=['user', 'room'], name='favorite_unique_user_room'),
        ]

    def __str__(self) -> str:
        return f"Favorite room {self.room_id} by user {self.user_id}"
