"""
Domain error taxonomy shared by every service layer.

Services raise these instead of returning error values; the DRF exception
handler below turns them into ``{"error": ..., "code": ...}`` responses.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "error"

    def __init__(self, message, code=None, **details):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details

    def __str__(self):
        return self.message

    def to_dict(self):
        payload = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(DomainError):
    """Input or state-transition is not acceptable."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "validation_error"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"


class ForbiddenError(DomainError):
    """The actor exists but may not act on this resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_code = "forbidden"


class ConflictError(DomainError):
    """A concurrent writer changed the record first."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "conflict"


def get_client_ip(request):
    """Get client IP address from request."""
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def domain_exception_handler(exc, context):
    """
    DRF exception handler that understands DomainError.

    Anything else is delegated to the stock DRF handler.
    """
    if isinstance(exc, DomainError):
        request = context.get("request")
        logger.warning(
            f"{exc.__class__.__name__} [{exc.code}]: {exc.message}",
            extra={
                "status_code": exc.status_code,
                "path": getattr(request, "path", None),
                "method": getattr(request, "method", None),
            },
        )
        return Response(exc.to_dict(), status=exc.status_code)

    return exception_handler(exc, context)
