"""
Booking engine — pure business logic, no HTTP/request awareness.

Public API:
  bookable_barber_and_service(barber_id, service_id)
  available_slots(barber_id, service_id, on_date, now=None)
  book(barber_id, client, service_id, on_date, start_time, notes='', principal=None, now=None)
"""
import logging
from datetime import date as date_type, datetime, time as time_type

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from apps.accounts.permissions import Action, require_permission
from apps.barbers.availability import window_for_date
from apps.barbers.models import Barber
from apps.core.exceptions import ConflictError, ValidationError
from apps.services.models import Service

from . import ledger
from .ledger import booked_intervals
from .models import Appointment, AppointmentStatus, AppointmentStatusLog
from .signals import emit_booked
from .slots import (
    MINUTES_PER_DAY,
    local_now,
    minutes_to_time,
    overlaps,
    resolve_slots,
    time_to_minutes,
)

logger = logging.getLogger(__name__)


def bookable_barber_and_service(barber_id, service_id):
    """
    Resolve the barber and service of a booking request.
    Raises ValidationError when either is unknown, inactive or mismatched.
    """
    try:
        barber = Barber.objects.select_related('user').get(pk=barber_id, is_active=True)
    except (Barber.DoesNotExist, DjangoValidationError, ValueError):
        raise ValidationError('Unknown or inactive barber.')

    try:
        service = Service.objects.get(pk=service_id, is_active=True)
    except (Service.DoesNotExist, DjangoValidationError, ValueError):
        raise ValidationError('Unknown or inactive service.')

    if not service.is_offered_by(barber):
        raise ValidationError(f'{barber.display_name} does not offer {service.name}.')
    return barber, service


def available_slots(barber_id, service_id, on_date: date_type, now: datetime = None) -> list:
    """Slot grid for a (barber, service, date) request."""
    barber, service = bookable_barber_and_service(barber_id, service_id)
    return resolve_slots(barber, on_date, service.duration_minutes, now=now)


# ── Core: Booking Creation ────────────────────────────────────────────────────

def _validate_request(barber, service, on_date: date_type, start_time: time_type, now_local: datetime):
    """Terminal checks: past dates, day off, outside working hours."""
    if on_date < now_local.date():
        raise ValidationError('Cannot book an appointment in the past.')

    start = time_to_minutes(start_time)
    end = start + service.duration_minutes
    if on_date == now_local.date() and start <= time_to_minutes(now_local.time()):
        raise ValidationError('Cannot book an appointment in the past.')
    if end >= MINUTES_PER_DAY:
        raise ValidationError('Appointment must end on the same day.')

    window = window_for_date(barber, on_date)
    if window is None:
        raise ValidationError(f'{barber.display_name} is not available on {on_date.isoformat()}.')
    if start < time_to_minutes(window[0]) or end > time_to_minutes(window[1]):
        raise ValidationError('Appointment must be within working hours.')
    return start, end


def book(barber_id, client, service_id, on_date: date_type, start_time: time_type,
         notes: str = '', principal=None, now: datetime = None) -> Appointment:
    """
    Reserve [start_time, start_time + service duration) in the barber's chair.

    The overlap check runs against the ledger as it is at commit time, inside
    the same transaction as the insert, with the barber row locked
    (SELECT ... FOR UPDATE) so concurrent bookers for one chair queue up.

    Raises:
      ValidationError — unknown barber/service, past date, outside availability
      ConflictError   — the interval is taken; re-fetch slots and let the user choose
    """
    if principal is not None:
        require_permission(principal, Action.BOOK)

    barber, service = bookable_barber_and_service(barber_id, service_id)
    start, end = _validate_request(barber, service, on_date, start_time, local_now(now))

    with transaction.atomic():
        # Serialise writers for this chair
        Barber.objects.select_for_update().filter(pk=barber.pk).first()

        for occ_start, occ_end in booked_intervals(barber.pk, on_date):
            if overlaps(start, end, time_to_minutes(occ_start), time_to_minutes(occ_end)):
                logger.info(
                    'Booking conflict: %s on %s at %s overlaps %s-%s',
                    barber, on_date, start_time, occ_start, occ_end,
                )
                raise ConflictError(
                    'This time slot is no longer available. Please choose a different time.'
                )

        appointment = ledger.create(Appointment(
            barber=barber,
            client=client,
            service=service,
            date=on_date,
            start_time=minutes_to_time(start),
            end_time=minutes_to_time(end),
            duration_minutes=service.duration_minutes,
            price=service.price,   # price snapshot
            status=AppointmentStatus.PENDING,
            notes=notes,
        ))
        AppointmentStatusLog.objects.create(
            appointment=appointment,
            from_status='',
            to_status=AppointmentStatus.PENDING,
            changed_by=principal.username if principal else client.get_username(),
            reason='Booked',
        )
        emit_booked(appointment)

    logger.info(
        'Appointment %s booked: %s with %s on %s at %s',
        appointment.id_short, client, barber, on_date, appointment.start_time,
    )
    return appointment
