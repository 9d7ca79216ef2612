"""URL routing for the cart."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import CartItemDetailView, CartItemListView, CartView

app_name = "cart"

urlpatterns = [
    path("", CartView.as_view(), name="detail"),
    path("items/", CartItemListView.as_view(), name="items"),
    path("items/<str:item_id>/", CartItemDetailView.as_view(), name="item-detail"),
]
