"""
Service catalog endpoints (JSON).

  GET    /services/?barber=<uuid>   active services (shop-wide + that barber's own)
  POST   /services/                 admin: create
  PATCH  /services/<uuid>/          admin: update
  DELETE /services/<uuid>/          admin: deactivate
"""
import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from apps.accounts.decorators import login_required_json
from apps.accounts.permissions import Action, require_permission
from apps.barbers.availability import get_barber
from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.http import api_view, read_json

from .models import Service

logger = logging.getLogger(__name__)


def _get_service(pk) -> Service:
    try:
        return Service.objects.get(pk=pk)
    except (Service.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFoundError(f'Service {pk} not found.')


def _apply(service: Service, data: dict, partial: bool):
    """Copy validated fields from a request body onto a service."""
    if not partial or 'name' in data:
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError('name is required.')
        service.name = name

    if 'description' in data:
        service.description = (data.get('description') or '').strip()

    if not partial or 'duration_minutes' in data:
        try:
            duration = int(data.get('duration_minutes'))
        except (TypeError, ValueError):
            raise ValidationError('duration_minutes must be an integer.')
        if duration < 5:
            raise ValidationError('duration_minutes must be at least 5.')
        service.duration_minutes = duration

    if not partial or 'price' in data:
        try:
            price = Decimal(str(data.get('price')))
        except (InvalidOperation, TypeError):
            raise ValidationError('price must be a number.')
        if not price.is_finite() or price < 0:
            raise ValidationError('price must be zero or more.')
        service.price = price

    if 'barber_id' in data:
        barber_id = data.get('barber_id')
        service.barber = get_barber(barber_id) if barber_id else None

    if 'is_active' in data:
        service.is_active = bool(data.get('is_active'))


def _list(request):
    qs = Service.objects.filter(is_active=True).select_related('barber')
    barber_id = request.GET.get('barber')
    if barber_id:
        barber = get_barber(barber_id)
        qs = qs.filter(Q(barber__isnull=True) | Q(barber=barber))
    return JsonResponse({'services': [s.as_dict() for s in qs.order_by('name', 'duration_minutes')]})


@require_http_methods(['GET', 'POST'])
@api_view
def service_collection(request):
    if request.method == 'GET':
        return _list(request)
    return _create(request)


@login_required_json
def _create(request):
    require_permission(request.principal, Action.MANAGE_SERVICES)
    service = Service()
    _apply(service, read_json(request), partial=False)
    service.save()
    logger.info('Service "%s" created by %s', service.name, request.principal.username)
    return JsonResponse({'service': service.as_dict()}, status=201)


@require_http_methods(['PATCH', 'DELETE'])
@login_required_json
@api_view
def service_detail(request, pk):
    require_permission(request.principal, Action.MANAGE_SERVICES)
    service = _get_service(pk)

    if request.method == 'DELETE':
        service.is_active = False
        service.save(update_fields=['is_active', 'updated_at'])
        logger.info('Service "%s" deactivated by %s', service.name, request.principal.username)
        return JsonResponse({'service': service.as_dict()})

    _apply(service, read_json(request), partial=True)
    service.save()
    return JsonResponse({'service': service.as_dict()})
