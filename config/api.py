"""
Shared API response envelope.

Every endpoint answers with the same JSON shape::

    {
        "success": true,
        "code": "SUCCESS",
        "message": "Request successful",
        "data": {...},
        "errors": null,
        "timestamp": "2024-01-01T12:00:00+00:00"
    }

Views build responses with ``success_response`` / ``error_response``.
Domain exceptions carrying a ``code`` attribute are turned into envelopes
with ``service_error_response``. Framework errors raised by DRF are wrapped
by ``api_exception_handler``, which is registered as the project
``EXCEPTION_HANDLER``.
"""

import logging
import math

from django.http import Http404
from django.utils import timezone
from rest_framework import exceptions, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ErrorCode:
    """Machine readable codes returned in the ``code`` field."""

    SUCCESS = 'SUCCESS'
    UNAUTHORIZED = 'UNAUTHORIZED'
    FORBIDDEN = 'FORBIDDEN'
    NOT_FOUND = 'NOT_FOUND'
    BAD_REQUEST = 'BAD_REQUEST'
    CONFLICT = 'CONFLICT'
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    INVALID_INPUT = 'INVALID_INPUT'
    DUPLICATE_ENTRY = 'DUPLICATE_ENTRY'
    INSUFFICIENT_FUNDS = 'INSUFFICIENT_FUNDS'
    UNPROCESSABLE_ENTITY = 'UNPROCESSABLE_ENTITY'
    INTERNAL_ERROR = 'INTERNAL_ERROR'


STATUS_BY_CODE = {
    ErrorCode.SUCCESS: status.HTTP_200_OK,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_ENTRY: status.HTTP_409_CONFLICT,
    ErrorCode.INSUFFICIENT_FUNDS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNPROCESSABLE_ENTITY: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_status_code(code: str) -> int:
    """Map an error code to its HTTP status. Unknown codes are 500."""
    return STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def build_envelope(*, success, code, message, data=None, errors=None):
    return {
        'success': success,
        'code': code,
        'message': message,
        'data': data,
        'errors': errors,
        'timestamp': timezone.now().isoformat(),
    }


def success_response(data=None, message='Request successful', status_code=status.HTTP_200_OK):
    """Return a successful envelope response."""
    return Response(
        build_envelope(success=True, code=ErrorCode.SUCCESS, message=message, data=data),
        status=status_code,
    )


def error_response(code=ErrorCode.INTERNAL_ERROR, message='An error occurred', errors=None, status_code=None):
    """Return an error envelope; the HTTP status follows the code unless given."""
    return Response(
        build_envelope(success=False, code=code, message=message, errors=errors),
        status=status_code or get_status_code(code),
    )


def service_error_response(exc):
    """Convert a domain exception with a ``code`` attribute into a response."""
    code = getattr(exc, 'code', ErrorCode.BAD_REQUEST)
    return error_response(code, str(exc))


class StandardPagination(PageNumberPagination):
    """Page number pagination wrapped in the response envelope."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data):
        page_size = self.get_page_size(self.request) or self.page_size
        total = self.page.paginator.count
        return success_response({
            'items': data,
            'meta': {
                'page': self.page.number,
                'page_size': page_size,
                'total': total,
                'pages': math.ceil(total / page_size) if page_size else 0,
            },
        })

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                'success': {'type': 'boolean'},
                'code': {'type': 'string'},
                'message': {'type': 'string'},
                'data': {
                    'type': 'object',
                    'properties': {
                        'items': schema,
                        'meta': {'type': 'object'},
                    },
                },
                'timestamp': {'type': 'string', 'format': 'date-time'},
            },
        }


class EnvelopeMixin:
    """
    Wrap payloads returned by the generic ViewSet actions (retrieve, update)
    in the envelope. Responses already in envelope form pass through.
    """

    def finalize_response(self, request, response, *args, **kwargs):
        if (
            isinstance(response, Response)
            and 200 <= response.status_code < 300
            and response.status_code != status.HTTP_204_NO_CONTENT
            and not _is_envelope(response.data)
        ):
            response.data = build_envelope(
                success=True,
                code=ErrorCode.SUCCESS,
                message='Request successful',
                data=response.data,
            )
        return super().finalize_response(request, response, *args, **kwargs)


def _is_envelope(data):
    return isinstance(data, dict) and 'success' in data and 'timestamp' in data


def _flatten_errors(detail):
    """Turn DRF error details into ``{field: [messages]}``."""
    if isinstance(detail, dict):
        return {
            field: [str(msg) for msg in (msgs if isinstance(msgs, list) else [msgs])]
            for field, msgs in detail.items()
        }
    if isinstance(detail, list):
        return {'non_field_errors': [str(msg) for msg in detail]}
    return {'non_field_errors': [str(detail)]}


def api_exception_handler(exc, context):
    """
    DRF exception handler producing the shared envelope.

    Unhandled exceptions are logged and reported as INTERNAL_ERROR so that
    clients always receive JSON.
    """
    if isinstance(exc, Http404):
        exc = exceptions.NotFound(str(exc) or 'Not found.')

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            "Unhandled error in %s", view.__class__.__name__ if view else 'view'
        )
        return error_response(ErrorCode.INTERNAL_ERROR, 'Internal server error')

    if isinstance(exc, exceptions.ValidationError):
        code = ErrorCode.VALIDATION_ERROR
        message = 'Validation failed'
        errors = _flatten_errors(exc.detail)
    elif isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        code = ErrorCode.UNAUTHORIZED
        message = str(exc.detail)
        errors = None
    elif isinstance(exc, exceptions.PermissionDenied):
        code = ErrorCode.FORBIDDEN
        message = str(exc.detail)
        errors = None
    elif isinstance(exc, exceptions.NotFound):
        code = ErrorCode.NOT_FOUND
        message = str(exc.detail)
        errors = None
    else:
        code = ErrorCode.INTERNAL_ERROR if response.status_code >= 500 else ErrorCode.BAD_REQUEST
        detail = getattr(exc, 'detail', str(exc))
        message = str(detail) if not isinstance(detail, (dict, list)) else 'Request failed'
        errors = _flatten_errors(detail) if isinstance(detail, (dict, list)) else None

    response.data = build_envelope(success=False, code=code, message=message, errors=errors)
    return response
