"""
Domain Error Taxonomy

Errors raised by the service layer. Each one carries the HTTP status and
the user-safe message the API answers with, so views never have to build
error responses by hand (see ``shared.api.exception_handler``).
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for errors raised by domain services"""

    status_code = 400
    default_detail = "The request could not be processed."
    code = "error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(DomainError):
    """Bad input: invalid date range, missing field, empty cart"""

    status_code = 400
    default_detail = "Invalid input."
    code = "invalid"


class NotFound(DomainError):
    status_code = 404
    default_detail = "Not found."
    code = "not_found"


class Conflict(DomainError):
    """The requested change clashes with the current state of the data"""

    status_code = 409
    default_detail = "The resource was changed by another request."
    code = "conflict"


class Unauthorized(DomainError):
    """The caller does not own the resource"""

    status_code = 403
    default_detail = "You do not have access to this resource."
    code = "forbidden"


class ExternalServiceError(DomainError):
    """
    A third-party call (payment provider) failed

    The provider's own message is logged by the raiser and never shown
    to the end user.
    """

    status_code = 502
    default_detail = "The payment service is temporarily unavailable. Please try again later."
    code = "external_service_error"


class PersistenceError(DomainError):
    status_code = 503
    default_detail = "We could not save your changes. Please try again."
    code = "persistence_error"
