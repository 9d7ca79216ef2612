"""API views for payments.

Payments are never created through the API directly: they appear when the
payment provider reports a completed checkout to the webhook below.
"""

from __future__ import annotations

import structlog  # type: ignore
from django.http import JsonResponse  # type: ignore
from django.views.decorators.csrf import csrf_exempt  # type: ignore
from django.views.decorators.http import require_POST  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore

from apps.users.permissions import is_hotel_admin

from .gateway import WebhookRejected
from .models import Payment
from .serializers import PaymentSerializer
from .services import process_payment_webhook

logger = structlog.get_logger(__name__)


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """Payments of the current user; staff see every payment."""

    queryset = Payment.objects.select_related("booking", "booking__user").all()
    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if is_hotel_admin(self.request.user):
            return qs
        return qs.filter(booking__user=self.request.user)


@csrf_exempt
@require_POST
def stripe_webhook(request):
    """Entry point for Stripe events. 400 on anything that fails verification."""
    signature = request.headers.get("Stripe-Signature")
    try:
        result = process_payment_webhook(request.body, signature)
    except WebhookRejected as exc:
        logger.warning("stripe_webhook_rejected", reason=str(exc))
        return JsonResponse({"status": "error", "message": str(exc)}, status=400)

    return JsonResponse(
        {
            "status": "success",
            "event_type": result.event_type,
            "handled": result.handled,
            "confirmed": result.confirmed,
        },
        status=200,
    )
