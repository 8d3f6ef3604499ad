"""
Session authentication endpoints (JSON).
"""
import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import JsonResponse
from django.middleware.csrf import get_token
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from apps.core.exceptions import ConflictError, ValidationError
from apps.core.http import api_view, read_json

from .decorators import login_required_json
from .principal import principal_for

logger = logging.getLogger(__name__)


@require_GET
@ensure_csrf_cookie
def csrf(request):
    return JsonResponse({'csrfToken': get_token(request)})


@require_POST
@api_view
def login_view(request):
    data = read_json(request)
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''

    user = authenticate(request, username=username, password=password)
    if user is None:
        logger.warning('Failed login for username %r', username)
        return JsonResponse({'error': 'Invalid username or password.'}, status=401)

    login(request, user)
    return JsonResponse({'user': principal_for(user).as_dict()})


@require_POST
def logout_view(request):
    logout(request)
    return JsonResponse({'ok': True})


@require_GET
@login_required_json
def me(request):
    return JsonResponse({'user': request.principal.as_dict()})


@require_POST
@api_view
def signup(request):
    """Create a client account and log it in."""
    data = read_json(request)
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    email = (data.get('email') or '').strip()

    if not username or not password:
        raise ValidationError('username and password are required.')

    User = get_user_model()
    if User.objects.filter(username=username).exists():
        raise ConflictError('That username is already registered.')

    candidate = User(username=username, email=email)
    try:
        validate_password(password, user=candidate)
    except DjangoValidationError as exc:
        raise ValidationError(' '.join(exc.messages))

    user = User.objects.create_user(
        username=username,
        email=email,
        password=password,
        first_name=(data.get('first_name') or '').strip(),
        last_name=(data.get('last_name') or '').strip(),
    )
    login(request, user, backend='django.contrib.auth.backends.ModelBackend')
    logger.info('Client account created: %s', username)
    return JsonResponse({'user': principal_for(user).as_dict()}, status=201)
