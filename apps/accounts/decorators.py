"""
Authentication decorators for the JSON API.

Unauthenticated requests get a 401 JSON body instead of a login redirect.
The resolved Principal is attached as request.principal.
"""
from functools import wraps
from django.http import JsonResponse

from .principal import principal_for


def login_required_json(view_func):
    """Require an authenticated session. Sets request.principal."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        principal = principal_for(request.user)
        if principal is None:
            return JsonResponse({'error': 'Authentication required'}, status=401)
        request.principal = principal
        return view_func(request, *args, **kwargs)
    return wrapper

