"""
REST API glue shared by all apps.

``exception_handler`` is installed as DRF's EXCEPTION_HANDLER and turns
``DomainError`` subclasses into JSON responses.
"""

from __future__ import annotations

import logging

from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.exceptions import DomainError, ExternalServiceError, PersistenceError

logger = logging.getLogger(__name__)


def exception_handler(exc, context):
    if isinstance(exc, DomainError):
        view = context.get("view")
        if isinstance(exc, (ExternalServiceError, PersistenceError)):
            logger.error(
                "Request failed in %s: %s",
                view.__class__.__name__ if view else "unknown view",
                exc,
            )
        return Response({"detail": exc.detail, "code": exc.code}, status=exc.status_code)
    return drf_exception_handler(exc, context)
