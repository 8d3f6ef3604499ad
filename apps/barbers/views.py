"""
Barber directory and availability endpoints (JSON).

  GET    /barbers/                          active barbers
  GET    /barbers/<uuid>/availability/      weekly rules + upcoming overrides
  PUT    /barbers/me/availability/          replace weekly rules
  GET    /barbers/me/days-off/              upcoming overrides
  POST   /barbers/me/days-off/              day off or special hours for a date
  DELETE /barbers/me/days-off/<uuid>/

The /me/ routes act on the caller's own chair; admins pass ?barber=<uuid>.
"""
import logging

from django.db import transaction
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_http_methods

from apps.accounts.decorators import login_required_json
from apps.accounts.permissions import Action, require_permission
from apps.core.exceptions import UnauthorizedError, ValidationError
from apps.core.http import api_view, parse_time, read_json, require_date

from . import availability
from .models import Barber

logger = logging.getLogger(__name__)


def _managed_barber(request) -> Barber:
    """The barber whose availability the caller is editing."""
    principal = request.principal
    barber_id = request.GET.get('barber') or principal.barber_id
    if barber_id is None:
        raise UnauthorizedError('Only barbers can manage availability.')
    barber = availability.get_barber(barber_id)
    require_permission(principal, Action.MANAGE_AVAILABILITY, barber)
    return barber


def _schedule_payload(barber):
    return {
        'barber': barber.as_dict(),
        'rules': [rule.as_dict() for rule in availability.get_rules(barber)],
        'overrides': [
            o.as_dict() for o in availability.list_overrides(barber, from_date=timezone.localdate())
        ],
    }


@require_GET
@api_view
def barber_list(request):
    barbers = Barber.objects.filter(is_active=True).order_by('display_name')
    return JsonResponse({'barbers': [b.as_dict() for b in barbers]})


@require_GET
@api_view
def barber_availability(request, barber_id):
    barber = availability.get_barber(barber_id)
    return JsonResponse(_schedule_payload(barber))


@require_http_methods(['PUT'])
@login_required_json
@api_view
def my_availability(request):
    """
    Body: {"rules": [{"weekday": 0, "start_time": "09:00", "end_time": "18:00",
                      "is_available": true}, ...]}
    Weekdays not mentioned keep their current rule.
    """
    barber = _managed_barber(request)
    rules = read_json(request).get('rules')
    if not isinstance(rules, list):
        raise ValidationError('rules must be a list.')

    parsed = []
    for item in rules:
        if not isinstance(item, dict):
            raise ValidationError('Each rule must be an object.')
        try:
            weekday = int(item.get('weekday'))
        except (TypeError, ValueError):
            raise ValidationError('weekday must be an integer between 0 (Monday) and 6 (Sunday).')
        parsed.append((
            weekday,
            parse_time(item.get('start_time')),
            parse_time(item.get('end_time')),
            bool(item.get('is_available', True)),
        ))

    with transaction.atomic():
        for weekday, start, end, is_available in parsed:
            availability.upsert_rule(barber, weekday, start, end, is_available=is_available)

    return JsonResponse(_schedule_payload(barber))


@require_http_methods(['GET', 'POST'])
@login_required_json
@api_view
def my_days_off(request):
    barber = _managed_barber(request)

    if request.method == 'GET':
        overrides = availability.list_overrides(barber, from_date=timezone.localdate())
        return JsonResponse({'overrides': [o.as_dict() for o in overrides]})

    data = read_json(request)
    is_available = bool(data.get('is_available', False))
    start = end = None
    if is_available:
        start = parse_time(data.get('start_time'))
        end = parse_time(data.get('end_time'))
    override = availability.set_override(
        barber,
        require_date(data.get('date')),
        is_available=is_available,
        start_time=start,
        end_time=end,
        reason=(data.get('reason') or '').strip(),
    )
    return JsonResponse({'override': override.as_dict()}, status=201)


@require_http_methods(['DELETE'])
@login_required_json
@api_view
def my_day_off_detail(request, override_id):
    barber = _managed_barber(request)
    availability.remove_override(barber, override_id)
    return JsonResponse({'ok': True})
