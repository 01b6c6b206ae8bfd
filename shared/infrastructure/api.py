"""
API Response Envelope

Every JSON response of the platform is wrapped as::

    {"success": bool, "data": ..., "error": "CODE", "message": "...", "pagination": {...}}

This module provides the success helper, the paginator and the DRF exception
handler that produce that shape, including the mapping of domain errors
to HTTP status codes.
"""

from collections import OrderedDict
from typing import Any, Optional

import structlog
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.views import exception_handler

from shared.domain.exceptions import DomainError

logger = structlog.get_logger(__name__)


STATUS_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: 'BAD_REQUEST',
    status.HTTP_401_UNAUTHORIZED: 'UNAUTHORIZED',
    status.HTTP_403_FORBIDDEN: 'FORBIDDEN',
    status.HTTP_404_NOT_FOUND: 'NOT_FOUND',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'METHOD_NOT_ALLOWED',
    status.HTTP_409_CONFLICT: 'CONFLICT',
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: 'UNSUPPORTED_MEDIA_TYPE',
    status.HTTP_422_UNPROCESSABLE_ENTITY: 'UNPROCESSABLE_ENTITY',
    status.HTTP_429_TOO_MANY_REQUESTS: 'RATE_LIMITED',
}


def success_response(
    data: Any = None,
    *,
    status_code: int = status.HTTP_200_OK,
    message: Optional[str] = None,
) -> Response:
    body: dict[str, Any] = {'success': True, 'data': data}
    if message:
        body['message'] = message
    return Response(body, status=status_code)


def error_body(error_code: str, message: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {'success': False, 'error': error_code, 'message': message}
    if details is not None:
        body['details'] = details
    return body


class EnvelopePagination(PageNumberPagination):
    """
    Page number pagination reporting its state in the envelope.

    ``?page=`` selects the page and ``?limit=`` the page size (max 100).
    """

    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100
    page_query_param = 'page'

    def get_paginated_response(self, data: Any) -> Response:
        paginator = self.page.paginator
        return Response(OrderedDict([
            ('success', True),
            ('data', data),
            ('pagination', OrderedDict([
                ('page', self.page.number),
                ('limit', paginator.per_page),
                ('total', paginator.count),
                ('total_pages', paginator.num_pages if paginator.count else 0),
                ('has_next', self.page.has_next()),
                ('has_prev', self.page.has_previous()),
            ])),
        ]))

    def get_paginated_response_schema(self, schema: dict) -> dict:
        return {
            'type': 'object',
            'properties': {
                'success': {'type': 'boolean', 'example': True},
                'data': schema,
                'pagination': {
                    'type': 'object',
                    'properties': {
                        'page': {'type': 'integer', 'example': 1},
                        'limit': {'type': 'integer', 'example': 20},
                        'total': {'type': 'integer', 'example': 42},
                        'total_pages': {'type': 'integer', 'example': 3},
                        'has_next': {'type': 'boolean', 'example': True},
                        'has_prev': {'type': 'boolean', 'example': False},
                    },
                },
            },
        }


def envelope_exception_handler(exc, context) -> Optional[Response]:
    """
    DRF exception handler producing the error envelope.

    Domain errors are expected outcomes and map to 4xx without logging
    above INFO. Anything unrecognised is logged with traceback and reported
    as a generic 500.
    """
    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else None

    if isinstance(exc, DomainError):
        logger.info(
            'domain_error',
            error_code=exc.error_code,
            status_code=exc.status_code,
            detail=exc.message,
            view=view_name,
        )
        return Response(
            error_body(exc.error_code, exc.public_message),
            status=exc.status_code,
        )

    if isinstance(exc, (Http404, DjangoPermissionDenied)):
        response = exception_handler(exc, context)
        if response is not None:
            message = 'Not found' if response.status_code == status.HTTP_404_NOT_FOUND else 'Forbidden'
            response.data = error_body(STATUS_ERROR_CODES[response.status_code], message)
        return response

    response = exception_handler(exc, context)
    if response is not None:
        return _format_api_exception(exc, response)

    logger.exception('unhandled_exception', exception_type=type(exc).__name__, view=view_name)
    return Response(
        error_body('INTERNAL_ERROR', 'Internal server error'),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _format_api_exception(exc, response: Response) -> Response:
    if isinstance(exc, exceptions.ValidationError):
        response.data = error_body('VALIDATION_ERROR', 'Validation error', details=response.data)
        return response

    error_code = STATUS_ERROR_CODES.get(response.status_code)
    if error_code is None:
        error_code = str(getattr(exc, 'default_code', 'error')).upper()

    detail = getattr(exc, 'detail', None)
    message = str(detail) if detail is not None else error_code
    response.data = error_body(error_code, message)
    return response
