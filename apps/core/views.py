"""
Shop settings endpoint (JSON).

  GET /settings/   public shop profile
  PUT /settings/   admin: partial update of the editable fields
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from apps.accounts.decorators import login_required_json
from apps.accounts.permissions import Action, require_permission

from .exceptions import ValidationError
from .http import api_view, read_json
from .models import ShopSettings

logger = logging.getLogger(__name__)


@require_http_methods(['GET', 'PUT'])
@api_view
def shop_settings(request):
    if request.method == 'PUT':
        return _update(request)
    return JsonResponse({'settings': ShopSettings.load().as_dict()})


@login_required_json
def _update(request):
    require_permission(request.principal, Action.MANAGE_SETTINGS)
    data = read_json(request)

    unknown = sorted(set(data) - set(ShopSettings.EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f'Unknown settings: {", ".join(unknown)}.')

    shop = ShopSettings.load()
    for field, value in data.items():
        if value is None and field not in ('latitude', 'longitude'):
            value = ''
        setattr(shop, field, value)

    try:
        shop.full_clean()
    except DjangoValidationError as exc:
        messages = [f'{field}: {" ".join(errors)}' for field, errors in exc.message_dict.items()]
        raise ValidationError(' '.join(messages))

    shop.save()
    logger.info('Shop settings updated by %s (%s)', request.principal.username, ', '.join(sorted(data)))
    return JsonResponse({'settings': shop.as_dict()})


# ── Error handlers ────────────────────────────────────────────────────────────

def error_400(request, exception=None):
    return JsonResponse({'error': 'Bad request'}, status=400)


def error_403(request, exception=None):
    return JsonResponse({'error': 'Forbidden'}, status=403)


def error_404(request, exception=None):
    return JsonResponse({'error': 'Not found'}, status=404)


def error_500(request):
    return JsonResponse({'error': 'Internal server error'}, status=500)
