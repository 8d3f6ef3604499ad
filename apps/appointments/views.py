"""
Appointment endpoints (JSON).

  GET  /appointments/slots/?barber=<uuid>&service=<uuid>&date=YYYY-MM-DD
  GET  /appointments/                  role-filtered list (?status= ?upcoming=1 ?barber= ?limit=)
  POST /appointments/                  book {barber_id, service_id, date, time, notes}
  GET  /appointments/<uuid>/           detail + audit trail
  POST /appointments/<uuid>/status/    {status, reason}
  POST /appointments/<uuid>/cancel/    {reason}
  POST /appointments/<uuid>/mark-paid/
  GET  /appointments/<uuid>/calendar.ics  iCalendar download
  GET  /appointments/earnings/          ?period=week|month or ?from=&to=, ?group_by= ?barber=
"""
import logging

from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from apps.accounts.decorators import login_required_json
from apps.accounts.permissions import Action, require_permission
from apps.core.exceptions import ValidationError
from apps.core.http import api_view, read_json, require_date, require_time

from . import earnings, engine, ics, ledger, transitions

logger = logging.getLogger(__name__)


def _appointment_payload(appointment, with_history=False):
    data = appointment.as_dict()
    data['barber_name'] = appointment.barber.display_name
    data['service_name'] = appointment.service.name
    data['client_name'] = appointment.client.get_full_name() or appointment.client.get_username()
    if with_history:
        data['allowed_next'] = transitions.allowed_next(appointment.status)
        data['history'] = [
            {
                'from': log.from_status,
                'to': log.to_status,
                'by': log.changed_by,
                'reason': log.reason,
                'at': log.changed_at.isoformat(),
            }
            for log in appointment.status_logs.all()
        ]
    return data


@require_GET
@api_view
def slots(request):
    barber_id = request.GET.get('barber')
    service_id = request.GET.get('service')
    on_date = require_date(request.GET.get('date'))
    if not barber_id or not service_id:
        raise ValidationError('barber and service are required.')

    grid = engine.available_slots(barber_id, service_id, on_date)
    return JsonResponse({
        'barber_id': barber_id,
        'service_id': service_id,
        'date': on_date.isoformat(),
        'slots': [slot.as_dict() for slot in grid],
    })


@require_http_methods(['GET', 'POST'])
@login_required_json
@api_view
def appointment_collection(request):
    principal = request.principal

    if request.method == 'POST':
        data = read_json(request)
        appointment = engine.book(
            barber_id=data.get('barber_id'),
            client=request.user,
            service_id=data.get('service_id'),
            on_date=require_date(data.get('date')),
            start_time=require_time(data.get('time')),
            notes=(data.get('notes') or '').strip(),
            principal=principal,
        )
        return JsonResponse({'appointment': _appointment_payload(appointment)}, status=201)

    limit = request.GET.get('limit')
    status = request.GET.get('status')
    upcoming = status == 'upcoming' or request.GET.get('upcoming') in ('1', 'true')
    try:
        limit = int(limit) if limit else None
    except ValueError:
        raise ValidationError('limit must be an integer.')

    qs = ledger.for_principal(
        principal,
        status=None if upcoming else status,
        upcoming=upcoming,
        barber_id=request.GET.get('barber'),
        limit=limit,
    )
    return JsonResponse({'appointments': [_appointment_payload(a) for a in qs]})


@require_GET
@login_required_json
@api_view
def appointment_detail(request, appointment_id):
    appointment = ledger.get_appointment(appointment_id)
    require_permission(request.principal, Action.VIEW, appointment)
    return JsonResponse({'appointment': _appointment_payload(appointment, with_history=True)})


@require_POST
@login_required_json
@api_view
def appointment_status(request, appointment_id):
    data = read_json(request)
    next_status = (data.get('status') or '').strip().upper()
    if not next_status:
        raise ValidationError('status is required.')
    appointment = ledger.update_status(
        appointment_id, next_status, request.principal,
        reason=(data.get('reason') or '').strip(),
    )
    return JsonResponse({'appointment': _appointment_payload(appointment)})


@require_POST
@login_required_json
@api_view
def appointment_cancel(request, appointment_id):
    data = read_json(request, optional=True)
    appointment = transitions.cancel(
        appointment_id, request.principal, reason=(data.get('reason') or '').strip(),
    )
    return JsonResponse({'appointment': _appointment_payload(appointment)})


@require_POST
@login_required_json
@api_view
def appointment_mark_paid(request, appointment_id):
    appointment = transitions.mark_paid(appointment_id, request.principal)
    return JsonResponse({'appointment': _appointment_payload(appointment)})


@require_GET
@login_required_json
@api_view
def appointment_calendar(request, appointment_id):
    appointment = ledger.get_appointment(appointment_id)
    require_permission(request.principal, Action.VIEW, appointment)
    response = HttpResponse(ics.build_ics(appointment), content_type='text/calendar; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{ics.filename_for(appointment)}"'
    return response


@require_GET
@login_required_json
@api_view
def earnings_summary(request):
    date_from = request.GET.get('from')
    date_to = request.GET.get('to')
    if date_from or date_to:
        date_from = require_date(date_from, 'from')
        date_to = require_date(date_to, 'to')
    else:
        date_from, date_to = earnings.period_range(request.GET.get('period') or 'week')

    summary = earnings.summarize(
        request.principal, date_from, date_to,
        barber_id=request.GET.get('barber'),
        group_by=request.GET.get('group_by') or 'day',
    )
    return JsonResponse(summary)
