from __future__ import annotations

from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.favorites.models import FavoriteRoom
from apps.rooms.models import Room, RoomType
from apps.users.models import User


class FavoriteAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email='guest@example.com', password='GuestPass123')
        self.other = User.objects.create_user(email='other@example.com', password='OtherPass123')
        room_type = RoomType.objects.create(name='Standard', capacity=2, base_price_per_night=Decimal('90.00'))
        self.room = Room.objects.create(room_number='101', room_type=room_type, floor=1)
        self.second_room = Room.objects.create(room_number='102', room_type=room_type, floor=1)
        self.client.force_authenticate(self.user)
        self.toggle_url = reverse('favorite-toggle')

    def test_toggle_adds_then_removes(self) -> None:
        response = self.client.post(self.toggle_url, {'room': self.room.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data, {'room_id': self.room.pk, 'is_favorite': True})
        self.assertTrue(FavoriteRoom.objects.filter(user=self.user, room=self.room).exists())

        response = self.client.post(self.toggle_url, {'room': self.room.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'room_id': self.room.pk, 'is_favorite': False})
        self.assertFalse(FavoriteRoom.objects.exists())

    def test_toggle_rejects_unknown_or_inactive_room(self) -> None:
        response = self.client.post(self.toggle_url, {'room': 999999}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.second_room.is_active = False
        self.second_room.save()
        response = self.client.post(self.toggle_url, {'room': self.second_room.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_check_and_ids_are_per_user(self) -> None:
        FavoriteRoom.objects.create(user=self.user, room=self.room)
        FavoriteRoom.objects.create(user=self.other, room=self.second_room)

        response = self.client.get(reverse('favorite-check'), {'room': self.room.pk})
        self.assertEqual(response.data, {'room_id': self.room.pk, 'is_favorite': True})

        response = self.client.get(reverse('favorite-check'), {'room': self.second_room.pk})
        self.assertFalse(response.data['is_favorite'])

        response = self.client.get(reverse('favorite-ids'))
        self.assertEqual(response.data, {'room_ids': [self.room.pk]})

        response = self.client.get(reverse('favorite-check'), {'room': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_includes_room_card(self) -> None:
        FavoriteRoom.objects.create(user=self.user, room=self.room)

        response = self.client.get(reverse('favorite-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['room_id'], self.room.pk)
        self.assertEqual(response.data[0]['room']['room_number'], '101')

    def test_anonymous_is_rejected(self) -> None:
        self.client.force_authenticate(None)
        self.assertEqual(self.client.get(reverse('favorite-list')).status_code, status.HTTP_401_UNAUTHORIZED)
        response = self.client.post(self.toggle_url, {'room': self.room.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
