"""
Domain error taxonomy and its mapping to HTTP responses.

Services raise these exceptions; the DRF exception handler below turns
them into responses. None of them are retried by the services themselves.
"""
import logging
from typing import Dict, Optional

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class for expected, caller-facing failures."""
    code = 'domain_error'
    default_message = 'Request could not be processed'

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(DomainError):
    """Malformed or missing request data. Raised before touching the store."""
    code = 'invalid_input'
    default_message = 'Invalid input'

    def __init__(
        self,
        message: Optional[str] = None,
        field: Optional[str] = None,
        fields: Optional[Dict[str, str]] = None
    ):
        super().__init__(message)
        self.field = field
        if fields:
            self.fields = dict(fields)
        else:
            self.fields = {field: self.message} if field else {}


class NotFound(DomainError):
    code = 'not_found'
    default_message = 'Not found'


class Forbidden(DomainError):
    code = 'forbidden'
    default_message = 'You do not have permission to perform this action'


class SlotConflict(DomainError):
    """The requested window overlaps an existing non-cancelled appointment."""
    code = 'slot_conflict'
    default_message = 'This time slot is no longer available.'


class InvalidTransition(DomainError):
    code = 'invalid_transition'
    default_message = 'Status transition not allowed'


class ValidationFailed(DomainError):
    """Intake answers do not satisfy the template schema."""
    code = 'validation_failed'
    default_message = 'Intake answers failed validation'

    def __init__(self, fields: Dict[str, str], message: Optional[str] = None):
        super().__init__(message)
        self.fields = dict(fields)


_STATUS_BY_ERROR = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    Forbidden: status.HTTP_403_FORBIDDEN,
    SlotConflict: status.HTTP_409_CONFLICT,
    InvalidTransition: status.HTTP_400_BAD_REQUEST,
    ValidationFailed: status.HTTP_400_BAD_REQUEST,
}


def domain_error_response(exc: DomainError) -> Response:
    """Build the HTTP response for a domain error."""
    body = {'error': exc.message, 'code': exc.code}
    if isinstance(exc, ValidationFailed):
        body['fields'] = exc.fields
    elif isinstance(exc, InvalidInput) and exc.fields:
        body['fields'] = exc.fields

    http_status = status.HTTP_400_BAD_REQUEST
    for error_class, mapped_status in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_class):
            http_status = mapped_status
            break

    return Response(body, status=http_status)


def invalid_input_from_serializer(serializer, message='Invalid input') -> InvalidInput:
    """Collapse DRF serializer errors into an InvalidInput (first message per field)."""
    fields = {}
    for name, errors in serializer.errors.items():
        if isinstance(errors, (list, tuple)) and errors:
            fields[name] = str(errors[0])
        else:
            fields[name] = str(errors)
    return InvalidInput(message, fields=fields)


def domain_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER.

    Domain errors become {"error", "code"[, "fields"]} responses; anything
    else falls through to DRF's default handling (and 500 for the rest).
    """
    if isinstance(exc, DomainError):
        view = context.get('view')
        logger.info(
            'Domain error: %s',
            exc.code,
            extra={
                'event': 'domain_error',
                'code': exc.code,
                'view': view.__class__.__name__ if view else None,
            }
        )
        return domain_error_response(exc)

    return exception_handler(exc, context)
