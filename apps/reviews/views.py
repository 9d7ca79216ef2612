"""API views for room feedback."""

from __future__ import annotations

from django.db.models import Avg  # type: ignore
from rest_framework import mixins, permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsHotelAdmin, is_hotel_admin

from .models import RoomFeedback
from .serializers import RoomFeedbackCreateSerializer, RoomFeedbackSerializer

LATEST_FEEDBACK_COUNT = 3


class IsAuthorOrHotelAdmin(permissions.BasePermission):
    """Allow guests to remove their own feedback and staff to remove any."""

    def has_object_permission(self, request, view, obj: RoomFeedback) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_hotel_admin(request.user) or obj.user_id == request.user.id


class RoomFeedbackViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Guest feedback on rooms.

    Endpoints:
    - GET /api/v1/reviews/?room=<id> - approved feedback for a room, newest first
    - POST /api/v1/reviews/ - leave feedback (signed-in guests)
    - DELETE /api/v1/reviews/{id}/ - author or staff
    - GET /api/v1/reviews/latest/ - latest approved feedback across rooms
    - GET /api/v1/reviews/average/?room=<id> - average rating of a room
    - POST /api/v1/reviews/{id}/approve/, /reject/ - staff moderation
    """

    queryset = RoomFeedback.objects.select_related('room', 'user').all()
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsAuthorOrHotelAdmin]

    def get_serializer_class(self):  # type: ignore
        if self.action == 'create':
            return RoomFeedbackCreateSerializer
        return RoomFeedbackSerializer

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()

        room_id = self.request.query_params.get('room')
        if room_id:
            if not room_id.isdigit():
                raise serializers.ValidationError({'room': 'A valid room id is required.'})
            qs = qs.filter(room_id=room_id)

        # Staff moderate, so they need to see what is hidden
        if is_hotel_admin(self.request.user):
            include_unapproved = self.request.query_params.get('include_unapproved', '').lower()
            if self.action != 'list' or include_unapproved in {'1', 'true', 'yes'}:
                return qs
        return qs.filter(is_approved=True)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feedback = serializer.save(user=request.user, is_approved=True)
        return Response(RoomFeedbackSerializer(feedback).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def latest(self, request):  # type: ignore
        feedbacks = self.get_queryset().filter(is_approved=True)[:LATEST_FEEDBACK_COUNT]
        return Response(RoomFeedbackSerializer(feedbacks, many=True).data)

    @action(detail=False, methods=['get'])
    def average(self, request):  # type: ignore
        room_id = request.query_params.get('room')
        if not room_id:
            raise serializers.ValidationError({'room': 'This query parameter is required.'})
        qs = self.get_queryset().filter(is_approved=True)
        value = qs.aggregate(avg=Avg('rating'))['avg']
        return Response({
            'room_id': int(room_id),
            'average_rating': round(float(value), 2) if value is not None else 0.0,
            'count': qs.count(),
        })

    @action(detail=True, methods=['post'], permission_classes=[IsHotelAdmin])
    def approve(self, request, pk=None):  # type: ignore
        return self._moderate(is_approved=True)

    @action(detail=True, methods=['post'], permission_classes=[IsHotelAdmin])
    def reject(self, request, pk=None):  # type: ignore
        return self._moderate(is_approved=False)

    def _moderate(self, *, is_approved: bool) -> Response:
        feedback = self.get_object()
        feedback.is_approved = is_approved
        feedback.save(update_fields=['is_approved', 'updated_at'])
        return Response(RoomFeedbackSerializer(feedback).data)
