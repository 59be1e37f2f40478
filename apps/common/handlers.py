"""
DRF exception handler producing the response envelope.

All responses leave the API as ``{"success": bool, "data"?, "error"?,
"message"?}``. Lifecycle code raises ``TransitionRejected`` subclasses and
this module turns them, and every DRF error, into that envelope.
"""
import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import TransitionRejected

logger = logging.getLogger(__name__)


def _first_message(detail):
    """Pull the first human readable message out of a DRF error detail."""
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = _first_message(value)
            if message:
                if key == 'non_field_errors':
                    return message
                return f"{key}: {message}"
        return ''
    if isinstance(detail, (list, tuple)):
        for item in detail:
            message = _first_message(item)
            if message:
                return message
        return ''
    return str(detail)


def envelope_exception_handler(exc, context):
    """
    Lifecycle rejections map to 400 (409 for stale transitions), DRF
    validation errors to 400, permission errors to 401/403 and missing
    objects to 404.
    """
    if isinstance(exc, TransitionRejected):
        view = context.get('view')
        logger.warning(
            f"Rejected state change in {view.__class__.__name__ if view else 'unknown view'}: {exc}"
        )
        payload = {'success': False, 'error': exc.reason}
        if exc.detail:
            payload['message'] = str(exc.detail)
        return Response(payload, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        response.data = {
            'success': False,
            'error': _first_message(exc.detail) or 'validation failed',
            'details': exc.detail,
        }
        return response

    if isinstance(exc, (Http404, exceptions.NotFound)):
        message = 'not found'
    elif isinstance(exc, PermissionDenied):
        message = 'permission denied'
    else:
        message = _first_message(getattr(exc, 'detail', '')) or str(exc)

    response.data = {'success': False, 'error': message}
    return response
