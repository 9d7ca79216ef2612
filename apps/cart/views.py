"""Cart API views.

The cart lives in the cache, not in the database, so these are plain
APIViews rather than model viewsets.
"""

from __future__ import annotations

from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from . import services
from .serializers import CartItemCreateSerializer, StayDatesSerializer
from .store import CartStore


class CartView(APIView):
    """Current caller's cart; DELETE empties it."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        cart = CartStore.for_request(request).load()
        return Response(cart.to_dict())

    def delete(self, request):  # type: ignore
        cart = services.clear_cart(CartStore.for_request(request))
        return Response(cart.to_dict())


class CartItemListView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        serializer = CartItemCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        cart = services.add_item(
            CartStore.for_request(request),
            data["room"],
            data["check_in"],
            data["check_out"],
        )
        return Response(cart.to_dict(), status=status.HTTP_201_CREATED)


class CartItemDetailView(APIView):
    permission_classes = [permissions.AllowAny]

    def patch(self, request, item_id: str):  # type: ignore
        serializer = StayDatesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = services.update_item(
            CartStore.for_request(request),
            item_id,
            serializer.validated_data["check_in"],
            serializer.validated_data["check_out"],
        )
        return Response(cart.to_dict())

    def delete(self, request, item_id: str):  # type: ignore
        cart = services.remove_item(CartStore.for_request(request), item_id)
        return Response(cart.to_dict())
