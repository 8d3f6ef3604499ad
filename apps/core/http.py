"""
JSON request/response helpers shared by the API views.
"""
import json
import logging
from datetime import datetime
from functools import wraps

from django.http import JsonResponse

from .exceptions import BookingEngineError, ValidationError

logger = logging.getLogger(__name__)


def parse_date(date_str):
    try:
        return datetime.strptime(date_str, '%Y-%m-%d').date()
    except (ValueError, TypeError):
        return None


def parse_time(time_str):
    try:
        return datetime.strptime(time_str, '%H:%M').time()
    except (ValueError, TypeError):
        return None


def require_date(value, field='date'):
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError(f'{field} must be a date in YYYY-MM-DD format.')
    return parsed


def require_time(value, field='time'):
    parsed = parse_time(value)
    if parsed is None:
        raise ValidationError(f'{field} must be a time in HH:MM format.')
    return parsed


def read_json(request, optional=False) -> dict:
    """
    Decode a JSON object body. Raises ValidationError on anything else.
    With optional=True a non-JSON body (form post, bare POST) is read as form data.
    """
    if not request.body:
        return {}
    if optional and request.content_type != 'application/json':
        return request.POST.dict()
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError('Request body must be valid JSON.')
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')
    return data


def error_response(exc: BookingEngineError) -> JsonResponse:
    return JsonResponse(
        {'error': str(exc), 'code': type(exc).__name__},
        status=exc.status_code,
    )


def api_view(view_func):
    """
    Turns domain errors into JSON error responses.
    Anything unexpected is logged and answered with a generic 500.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except BookingEngineError as exc:
            return error_response(exc)
        except Exception:
            logger.exception('Unhandled error in %s', view_func.__name__)
            return JsonResponse({'error': 'Internal server error'}, status=500)
    return wrapper
