from datetime import datetime, time, timedelta

import pytest
from django.core import mail
from django.utils import timezone

from apps.appointments import transitions
from apps.appointments.models import AppointmentStatus, PaymentStatus
from apps.appointments.signals import appointment_status_changed
from apps.core.exceptions import InvalidTransitionError, NotFoundError, UnauthorizedError, ValidationError

pytestmark = pytest.mark.django_db


def test_allowed_next_table():
    assert set(transitions.allowed_next(AppointmentStatus.PENDING)) == {'CONFIRMED', 'CANCELLED'}
    assert set(transitions.allowed_next(AppointmentStatus.CONFIRMED)) == {'COMPLETED', 'CANCELLED'}
    assert transitions.allowed_next(AppointmentStatus.COMPLETED) == []
    assert transitions.allowed_next(AppointmentStatus.CANCELLED) == []


def test_full_lifecycle(book, barber_principal):
    appointment = book('10:00')

    transitions.confirm(appointment.pk, barber_principal)
    transitions.complete(appointment.pk, barber_principal)
    paid = transitions.mark_paid(appointment.pk, barber_principal)

    assert paid.status == AppointmentStatus.COMPLETED
    assert paid.payment_status == PaymentStatus.PAID
    assert paid.paid_at is not None
    assert paid.is_terminal
    history = {(log.from_status, log.to_status) for log in paid.status_logs.all()}
    assert history == {
        ('', 'PENDING'),
        ('PENDING', 'CONFIRMED'),
        ('CONFIRMED', 'COMPLETED'),
        ('UNPAID', 'PAID'),
    }


@pytest.mark.parametrize('target', ['PENDING', 'CONFIRMED', 'COMPLETED', 'CANCELLED'])
def test_nothing_leaves_cancelled(book, admin_principal, target):
    appointment = book('10:00')
    transitions.cancel(appointment.pk, admin_principal)

    with pytest.raises(InvalidTransitionError):
        transitions.transition(appointment.pk, target, admin_principal)


def test_pending_cannot_jump_to_completed(book, barber_principal):
    appointment = book('10:00')

    with pytest.raises(InvalidTransitionError):
        transitions.complete(appointment.pk, barber_principal)


def test_paid_while_pending_is_invalid(book, barber_principal):
    appointment = book('10:00')

    with pytest.raises(InvalidTransitionError):
        transitions.mark_paid(appointment.pk, barber_principal)


def test_paid_twice_is_invalid(book, barber_principal):
    appointment = book('10:00')
    transitions.confirm(appointment.pk, barber_principal)
    transitions.complete(appointment.pk, barber_principal)
    transitions.mark_paid(appointment.pk, barber_principal)

    with pytest.raises(InvalidTransitionError):
        transitions.mark_paid(appointment.pk, barber_principal)


def test_unknown_status_and_appointment(book, barber_principal):
    appointment = book('10:00')

    with pytest.raises(ValidationError):
        transitions.transition(appointment.pk, 'ARCHIVED', barber_principal)
    with pytest.raises(NotFoundError):
        transitions.confirm('00000000-0000-0000-0000-000000000000', barber_principal)


def test_client_cannot_confirm(book, client_principal):
    appointment = book('10:00')

    with pytest.raises(UnauthorizedError):
        transitions.confirm(appointment.pk, client_principal)


def test_other_barber_cannot_touch_the_appointment(book, other_barber):
    from apps.accounts.principal import principal_for

    appointment = book('10:00')

    with pytest.raises(UnauthorizedError):
        transitions.confirm(appointment.pk, principal_for(other_barber.user))


def test_client_can_withdraw_pending_request(book, client_principal, now):
    appointment = book('10:00')

    cancelled = transitions.cancel(appointment.pk, client_principal, now=now)

    assert cancelled.status == AppointmentStatus.CANCELLED
    assert cancelled.cancelled_at is not None
    assert cancelled.cancellation_reason == 'Cancelled by user'


def test_client_cannot_cancel_confirmed(book, client_principal, barber_principal, now):
    appointment = book('10:00')
    transitions.confirm(appointment.pk, barber_principal)

    with pytest.raises(UnauthorizedError):
        transitions.cancel(appointment.pk, client_principal, now=now)


def test_late_cancellation_is_rejected(book, client_principal, monday):
    appointment = book('10:00')
    two_hours_before = timezone.make_aware(datetime.combine(monday, time(8, 0)))

    with pytest.raises(ValidationError):
        transitions.cancel(appointment.pk, client_principal, now=two_hours_before)

    appointment.refresh_from_db()
    assert appointment.status == AppointmentStatus.PENDING


def test_admin_may_cancel_late(book, admin_principal, monday):
    appointment = book('10:00')
    two_hours_before = timezone.make_aware(datetime.combine(monday, time(8, 0)))

    cancelled = transitions.cancel(appointment.pk, admin_principal, reason='Shop closed', now=two_hours_before)

    assert cancelled.status == AppointmentStatus.CANCELLED
    assert cancelled.cancellation_reason == 'Shop closed'


def test_notice_window_follows_setting(book, barber_principal, monday, settings):
    settings.CANCELLATION_NOTICE_HOURS = 1
    appointment = book('10:00')
    two_hours_before = timezone.make_aware(datetime.combine(monday, time(8, 0)))

    assert transitions.cancel(appointment.pk, barber_principal, now=two_hours_before).status == 'CANCELLED'


def test_status_change_event_and_email(book, barber_principal, django_capture_on_commit_callbacks):
    appointment = book('10:00')
    received = []

    def listener(sender, appointment, from_status, to_status, **kwargs):
        received.append((from_status, to_status, kwargs['changed_by']))

    appointment_status_changed.connect(listener)
    try:
        with django_capture_on_commit_callbacks(execute=True):
            transitions.confirm(appointment.pk, barber_principal)
    finally:
        appointment_status_changed.disconnect(listener)

    assert received == [('PENDING', 'CONFIRMED', 'carlos')]
    assert [message.to for message in mail.outbox] == [['ana@example.com']]
    assert mail.outbox[0].subject.startswith('Appointment Confirmed')


def test_failing_receiver_does_not_undo_transition(book, barber_principal, django_capture_on_commit_callbacks):
    appointment = book('10:00')

    def broken(sender, **kwargs):
        raise RuntimeError('mail server down')

    appointment_status_changed.connect(broken)
    try:
        with django_capture_on_commit_callbacks(execute=True):
            transitions.confirm(appointment.pk, barber_principal)
    finally:
        appointment_status_changed.disconnect(broken)

    appointment.refresh_from_db()
    assert appointment.status == AppointmentStatus.CONFIRMED


def test_cancelled_slot_can_be_rebooked(book, admin_principal, other_client):
    first = book('10:00')
    transitions.cancel(first.pk, admin_principal)

    second = book('10:00', client=other_client)

    assert second.pk != first.pk
    assert second.status == AppointmentStatus.PENDING


def test_ledger_update_status_delegates(book, barber_principal):
    from apps.appointments import ledger

    appointment = book('10:00')

    assert ledger.update_status(appointment.pk, 'CONFIRMED', barber_principal).status == 'CONFIRMED'


def test_for_principal_scopes_by_role(book, client_principal, barber_principal, admin_principal,
                                      other_client, other_barber, monday):
    from apps.accounts.principal import principal_for
    from apps.appointments import ledger

    mine = book('10:00')
    book('11:00', client=other_client)
    book('10:00', barber_id=other_barber.pk, client=other_client)

    assert [a.pk for a in ledger.for_principal(client_principal)] == [mine.pk]
    assert ledger.for_principal(barber_principal).count() == 2
    assert ledger.for_principal(admin_principal).count() == 3
    assert ledger.for_principal(principal_for(other_client)).count() == 2
    assert ledger.for_principal(admin_principal, barber_id=other_barber.pk).count() == 1
    with pytest.raises(ValidationError):
        ledger.for_principal(admin_principal, status='LOST')

    assert timedelta(0) < (monday - timezone.localdate())
    assert ledger.for_principal(client_principal, upcoming=True).count() == 1
