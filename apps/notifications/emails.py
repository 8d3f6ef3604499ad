"""
Email notifications for appointment events.

All functions are synchronous and run from the after-commit signal
receivers in apps.notifications.receivers, so a failed send never
affects the booking that triggered it.

Public API:
  send_appointment_booked(appointment)
  send_status_changed(appointment, from_status, to_status)
"""
import logging
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from apps.appointments.models import AppointmentStatus, PaymentStatus
from apps.core.models import ShopSettings

logger = logging.getLogger(__name__)


STATUS_SUBJECTS = {
    AppointmentStatus.CONFIRMED: 'Appointment Confirmed',
    AppointmentStatus.COMPLETED: 'Thanks for Visiting',
    AppointmentStatus.CANCELLED: 'Appointment Cancelled',
    PaymentStatus.PAID:          'Payment Received',
}


def _appointment_context(appointment) -> dict:
    """Common template context for all appointment emails."""
    shop = ShopSettings.load()
    client = appointment.client
    return {
        'client_name':   client.get_full_name() or client.get_username(),
        'barber_name':   appointment.barber.display_name,
        'service_name':  appointment.service.name,
        'date':          appointment.date,
        'start_time':    appointment.start_time,
        'end_time':      appointment.end_time,
        'duration':      appointment.duration_minutes,
        'price':         appointment.price,
        'notes':         appointment.notes,
        'status':        appointment.get_status_display(),
        'reference':     appointment.id_short,
        'detail_url':    _detail_url(appointment),
        'shop_name':     shop.shop_name,
        'shop_address':  shop.address,
        'shop_phone':    shop.phone,
        'support_email': shop.email or settings.DEFAULT_FROM_EMAIL,
    }


def _detail_url(appointment) -> str:
    base = getattr(settings, 'SITE_URL', 'http://127.0.0.1:8000')
    return f"{base}/appointments/{appointment.id}/"


def _send(subject: str, to_email: str, html_template: str, txt_template: str, context: dict):
    """Low-level send helper — builds multipart email with HTML + text fallback."""
    if not to_email:
        logger.warning('Email skipped — no email address (appointment %s)', context.get('reference'))
        return

    try:
        text_body = render_to_string(txt_template, context)
        html_body = render_to_string(html_template, context)

        msg = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[to_email],
        )
        msg.attach_alternative(html_body, 'text/html')
        msg.send(fail_silently=False)
        logger.info('Email "%s" sent to %s', subject, to_email)
    except Exception as exc:
        # Log but never crash the caller because of an email failure
        logger.exception('Failed to send email "%s" to %s: %s', subject, to_email, exc)


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def send_appointment_booked(appointment):
    """
    Booking request received: confirmation to the client, heads-up to the barber.
    """
    ctx = _appointment_context(appointment)
    when = f'{appointment.date.strftime("%d %b %Y")} at {appointment.start_time.strftime("%H:%M")}'

    _send(
        subject=f'Appointment Requested — {appointment.service.name} on {when}',
        to_email=appointment.client.email,
        html_template='emails/appointment_booked.html',
        txt_template='emails/appointment_booked.txt',
        context={**ctx, 'for_barber': False},
    )
    _send(
        subject=f'New Appointment — {ctx["client_name"]} on {when}',
        to_email=appointment.barber.email,
        html_template='emails/appointment_booked.html',
        txt_template='emails/appointment_booked.txt',
        context={**ctx, 'for_barber': True},
    )


def send_status_changed(appointment, from_status: str, to_status: str):
    """
    Tell the client about a lifecycle change.
    Cancellations are also sent to the barber.
    """
    title = STATUS_SUBJECTS.get(to_status)
    if title is None:
        return

    ctx = _appointment_context(appointment)
    ctx.update({
        'title': title,
        'from_status': from_status,
        'to_status': to_status,
        'is_cancelled': to_status == AppointmentStatus.CANCELLED,
        'is_paid': to_status == PaymentStatus.PAID,
        'cancellation_reason': appointment.cancellation_reason,
    })
    subject = f'{title} — {appointment.service.name} on {appointment.date.strftime("%d %b %Y")}'

    _send(
        subject=subject,
        to_email=appointment.client.email,
        html_template='emails/appointment_status_changed.html',
        txt_template='emails/appointment_status_changed.txt',
        context={**ctx, 'for_barber': False},
    )
    if to_status == AppointmentStatus.CANCELLED:
        _send(
            subject=subject,
            to_email=appointment.barber.email,
            html_template='emails/appointment_status_changed.html',
            txt_template='emails/appointment_status_changed.txt',
            context={**ctx, 'for_barber': True},
        )
