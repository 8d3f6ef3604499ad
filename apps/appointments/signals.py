"""
Appointment domain events.

  appointment_booked(sender=Appointment, appointment)
  appointment_status_changed(sender=Appointment, appointment, from_status, to_status, changed_by)

Both are sent only after the surrounding transaction commits, through
send_robust, so a failing receiver (email, invoicing) never undoes the
booking or the transition that produced the event.
"""
import logging
from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

appointment_booked = Signal()
appointment_status_changed = Signal()


def _dispatch(signal, name, **kwargs):
    from .models import Appointment

    for receiver, result in signal.send_robust(sender=Appointment, **kwargs):
        if isinstance(result, Exception):
            logger.error(
                '%s receiver %r failed: %s', name, receiver, result,
                exc_info=(type(result), result, result.__traceback__),
            )


def emit_booked(appointment):
    transaction.on_commit(
        lambda: _dispatch(appointment_booked, 'appointment_booked', appointment=appointment)
    )


def emit_status_changed(appointment, from_status, to_status, changed_by=''):
    transaction.on_commit(
        lambda: _dispatch(
            appointment_status_changed, 'appointment_status_changed',
            appointment=appointment,
            from_status=from_status,
            to_status=to_status,
            changed_by=changed_by,
        )
    )
