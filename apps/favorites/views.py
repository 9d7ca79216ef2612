"""API views for favorites management."""

from __future__ import annotations

from rest_framework import mixins, permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .models import FavoriteRoom
from .serializers import FavoriteRoomSerializer, FavoriteToggleSerializer


class FavoriteViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Favorite rooms of the signed-in user.

    Endpoints:
    - GET /api/v1/favorites/ - favorites with room data
    - POST /api/v1/favorites/toggle/ - add or remove a room
    - GET /api/v1/favorites/check/?room=<id> - is the room a favorite
    - GET /api/v1/favorites/ids/ - ids of every favorite room
    """

    queryset = FavoriteRoom.objects.select_related('room', 'room__room_type').prefetch_related('room__images')
    serializer_class = FavoriteRoomSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        return super().get_queryset().filter(user=self.request.user)

    @action(detail=False, methods=['post'])
    def toggle(self, request):  # type: ignore
        """
        Add the room if it is not a favorite yet, remove it otherwise.

        Returns:
            {"room_id": 12, "is_favorite": true | false}
        """
        serializer = FavoriteToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        room_id = serializer.validated_data['room']

        deleted, _ = FavoriteRoom.objects.filter(user=request.user, room_id=room_id).delete()
        if deleted:
            return Response({'room_id': room_id, 'is_favorite': False}, status=status.HTTP_200_OK)

        FavoriteRoom.objects.get_or_create(user=request.user, room_id=room_id)
        return Response({'room_id': room_id, 'is_favorite': True}, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def check(self, request):  # type: ignore
        room_id = request.query_params.get('room', '')
        if not room_id.isdigit():
            raise serializers.ValidationError({'room': 'A valid room id is required.'})
        is_favorite = self.get_queryset().filter(room_id=room_id).exists()
        return Response({'room_id': int(room_id), 'is_favorite': is_favorite})

    @action(detail=False, methods=['get'])
    def ids(self, request):  # type: ignore
        room_ids = list(self.get_queryset().values_list('room_id', flat=True))
        return Response({'room_ids': room_ids})
