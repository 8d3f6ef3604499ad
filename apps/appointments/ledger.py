"""
Appointment ledger — the authoritative record of who sits in which chair when.

Public API:
  get_appointment(appointment_id, for_update=False)
  list_for_barber_on_date(barber_id, on_date)
  booked_intervals(barber_id, on_date)
  create(candidate)
  update_status(appointment_id, next_status, principal)
  for_principal(principal, status=None, upcoming=False, limit=None)
"""
from datetime import date as date_type

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from apps.core.exceptions import ConflictError, NotFoundError, ValidationError

from .models import ACTIVE_STATUSES, Appointment, AppointmentStatus


def get_appointment(appointment_id, for_update=False) -> Appointment:
    qs = Appointment.objects.select_related('barber', 'client', 'service')
    if for_update:
        qs = qs.select_for_update(of=('self',))
    try:
        return qs.get(pk=appointment_id)
    except (Appointment.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFoundError(f'Appointment {appointment_id} not found.')


def list_for_barber_on_date(barber_id, on_date: date_type) -> list:
    """Appointments that occupy the barber's chair on a date (cancelled ones do not)."""
    return list(
        Appointment.objects
        .filter(barber_id=barber_id, date=on_date, status__in=ACTIVE_STATUSES)
        .order_by('start_time')
    )


def booked_intervals(barber_id, on_date: date_type) -> list:
    """(start_time, end_time) pairs of the occupied intervals, in order."""
    return [(a.start_time, a.end_time) for a in list_for_barber_on_date(barber_id, on_date)]


def create(candidate: Appointment) -> Appointment:
    """
    Persist a new appointment.
    Raises ConflictError if the database guard rejects the slot.
    """
    try:
        with transaction.atomic():
            candidate.save(force_insert=True)
    except IntegrityError:
        raise ConflictError('This time slot was just booked by someone else. Please choose another time.')
    return candidate


def update_status(appointment_id, next_status, principal, reason: str = '') -> Appointment:
    from .transitions import transition

    return transition(appointment_id, next_status, principal, reason=reason)


def for_principal(principal, status: str = None, upcoming: bool = False,
                  barber_id=None, limit: int = None):
    """
    Role-filtered listing: clients see their own bookings, barbers their
    chair, admins everything.
    """
    qs = Appointment.objects.select_related('barber', 'client', 'service')

    if not principal.is_admin:
        if principal.is_barber:
            qs = qs.filter(Q(barber_id=principal.barber_id) | Q(client_id=principal.user_id))
        else:
            qs = qs.filter(client_id=principal.user_id)

    if barber_id:
        qs = qs.filter(barber_id=barber_id)

    if upcoming:
        today = timezone.localdate()
        qs = qs.filter(
            status__in=[AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED],
            date__gte=today,
        ).order_by('date', 'start_time')
    elif status:
        if status not in AppointmentStatus.values:
            raise ValidationError(f'Unknown status {status!r}.')
        qs = qs.filter(status=status)

    if limit:
        qs = qs[:limit]
    return qs
