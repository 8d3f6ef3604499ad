"""
Appointment lifecycle.

  PENDING ──► CONFIRMED ──► COMPLETED ──(UNPAID ► PAID)
     │            │
     └──► CANCELLED ◄┘

CANCELLED and COMPLETED+PAID are terminal. Who may drive each edge is
decided by apps.accounts.permissions; this module decides which edges exist.

Public API:
  allowed_next(status)
  transition(appointment_id, next_status, principal, reason='')
  confirm(appointment_id, principal)
  complete(appointment_id, principal)
  cancel(appointment_id, principal, reason='')
  mark_paid(appointment_id, principal)
"""
import logging
from datetime import datetime, timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.accounts.permissions import Action, require_permission
from apps.core.exceptions import InvalidTransitionError, ValidationError

from .ledger import get_appointment
from .models import AppointmentStatus, AppointmentStatusLog, PaymentStatus
from .signals import emit_status_changed

logger = logging.getLogger(__name__)


# from_status → {to_status: action checked against the acting principal}
TRANSITIONS = {
    AppointmentStatus.PENDING: {
        AppointmentStatus.CONFIRMED: Action.CONFIRM,
        AppointmentStatus.CANCELLED: Action.CANCEL,
    },
    AppointmentStatus.CONFIRMED: {
        AppointmentStatus.COMPLETED: Action.COMPLETE,
        AppointmentStatus.CANCELLED: Action.CANCEL,
    },
    AppointmentStatus.COMPLETED: {},
    AppointmentStatus.CANCELLED: {},
}


def allowed_next(status) -> list:
    return list(TRANSITIONS.get(status, {}))


def _action_for(current, next_status):
    action = TRANSITIONS.get(current, {}).get(next_status)
    if action is None:
        raise InvalidTransitionError(f'Cannot move an appointment from {current} to {next_status}.')
    return action


def _check_cancellation_notice(appointment, now=None):
    """Non-admin cancellations need CANCELLATION_NOTICE_HOURS of notice."""
    notice = timedelta(hours=getattr(settings, 'CANCELLATION_NOTICE_HOURS', 24))
    starts_at = timezone.make_aware(
        datetime.combine(appointment.date, appointment.start_time),
        timezone.get_current_timezone(),
    )
    now = now or timezone.now()
    if starts_at - now < notice:
        raise ValidationError(
            f'Appointments must be cancelled at least {int(notice.total_seconds() // 3600)} hours in advance.'
        )


def _log(appointment, from_status, to_status, principal, reason=''):
    AppointmentStatusLog.objects.create(
        appointment=appointment,
        from_status=from_status,
        to_status=to_status,
        changed_by=principal.username or str(principal.user_id),
        reason=reason,
    )


def transition(appointment_id, next_status, principal, reason: str = '', now=None):
    """
    Move an appointment along the lifecycle.

    Raises:
      NotFoundError          — unknown appointment
      UnauthorizedError      — principal is unrelated or lacks the role for this edge
      InvalidTransitionError — edge does not exist (e.g. anything out of CANCELLED)
      ValidationError        — unknown status, or late cancellation by a non-admin
    """
    if next_status not in AppointmentStatus.values:
        raise ValidationError(f'Unknown status {next_status!r}.')

    with transaction.atomic():
        appointment = get_appointment(appointment_id, for_update=True)
        require_permission(principal, Action.VIEW, appointment)
        action = _action_for(appointment.status, next_status)
        require_permission(principal, action, appointment)

        update_fields = ['status', 'updated_at']
        if next_status == AppointmentStatus.CANCELLED:
            if not principal.is_admin:
                _check_cancellation_notice(appointment, now=now)
            appointment.cancelled_at = timezone.now()
            appointment.cancellation_reason = reason or 'Cancelled by user'
            update_fields += ['cancelled_at', 'cancellation_reason']

        from_status = appointment.status
        appointment.status = next_status
        appointment.save(update_fields=update_fields)
        _log(appointment, from_status, next_status, principal, reason)
        emit_status_changed(appointment, from_status, next_status, changed_by=principal.username)

    logger.info('Appointment %s: %s → %s by %s', appointment.id_short, from_status, next_status, principal.username)
    return appointment


def confirm(appointment_id, principal):
    return transition(appointment_id, AppointmentStatus.CONFIRMED, principal)


def complete(appointment_id, principal):
    return transition(appointment_id, AppointmentStatus.COMPLETED, principal)


def cancel(appointment_id, principal, reason: str = '', now=None):
    return transition(appointment_id, AppointmentStatus.CANCELLED, principal, reason=reason, now=now)


def mark_paid(appointment_id, principal):
    """
    Record payment for a completed appointment.
    Raises InvalidTransitionError unless status is COMPLETED and still UNPAID.
    """
    with transaction.atomic():
        appointment = get_appointment(appointment_id, for_update=True)
        require_permission(principal, Action.VIEW, appointment)
        require_permission(principal, Action.MARK_PAID, appointment)
        if appointment.payment_status == PaymentStatus.PAID:
            raise InvalidTransitionError('This appointment is already paid.')
        if appointment.status != AppointmentStatus.COMPLETED:
            raise InvalidTransitionError('Only completed appointments can be marked as paid.')

        appointment.payment_status = PaymentStatus.PAID
        appointment.paid_at = timezone.now()
        appointment.save(update_fields=['payment_status', 'paid_at', 'updated_at'])
        _log(appointment, PaymentStatus.UNPAID, PaymentStatus.PAID, principal, 'Payment recorded')
        emit_status_changed(
            appointment, PaymentStatus.UNPAID, PaymentStatus.PAID, changed_by=principal.username,
        )

    logger.info('Appointment %s marked as paid by %s', appointment.id_short, principal.username)
    return appointment
