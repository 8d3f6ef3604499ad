"""
iCalendar (.ics) export for a single appointment.
"""
from datetime import datetime, timedelta, timezone as dt_timezone

from django.utils import timezone

from apps.core.models import ShopSettings

from .models import AppointmentStatus

PRODID = '-//BookMe//Barbershop Booking//EN'
REMINDER_MINUTES = 30

_EVENT_STATUS = {
    AppointmentStatus.PENDING: 'TENTATIVE',
    AppointmentStatus.CONFIRMED: 'CONFIRMED',
    AppointmentStatus.COMPLETED: 'CONFIRMED',
    AppointmentStatus.CANCELLED: 'CANCELLED',
}


def escape_text(value: str) -> str:
    return (
        value.replace('\\', '\\\\')
        .replace(';', '\\;')
        .replace(',', '\\,')
        .replace('\r', '')
        .replace('\n', '\\n')
    )


def quote_param(value: str) -> str:
    return '"' + value.replace('"', '') + '"'


def format_utc(moment: datetime) -> str:
    return moment.astimezone(dt_timezone.utc).strftime('%Y%m%dT%H%M%SZ')


def appointment_window(appointment):
    """Aware start/end of the appointment in the shop's time zone."""
    tz = timezone.get_default_timezone()
    start = timezone.make_aware(datetime.combine(appointment.date, appointment.start_time), tz)
    return start, start + timedelta(minutes=appointment.duration_minutes)


def filename_for(appointment) -> str:
    return f'bookme-appointment-{appointment.id_short}.ics'


def build_ics(appointment, now=None) -> str:
    shop = ShopSettings.load()
    start, end = appointment_window(appointment)
    barber_user = appointment.barber.user
    client = appointment.client

    summary = f'{appointment.service.name} with {appointment.barber.display_name}'
    description = f'{appointment.service.name} ({appointment.duration_minutes} min) at {shop.shop_name}.'
    if appointment.notes:
        description += f'\nNotes: {appointment.notes}'
    location = ', '.join(part for part in (shop.shop_name, shop.address) if part)

    lines = [
        'BEGIN:VCALENDAR',
        'VERSION:2.0',
        f'PRODID:{PRODID}',
        'CALSCALE:GREGORIAN',
        'METHOD:PUBLISH',
        'BEGIN:VEVENT',
        f'UID:{appointment.id}@bookme',
        f'DTSTAMP:{format_utc(now or timezone.now())}',
        f'DTSTART:{format_utc(start)}',
        f'DTEND:{format_utc(end)}',
        f'SUMMARY:{escape_text(summary)}',
        f'DESCRIPTION:{escape_text(description)}',
        f'LOCATION:{escape_text(location)}',
        f'STATUS:{_EVENT_STATUS[appointment.status]}',
    ]
    if barber_user.email:
        lines.append(f'ORGANIZER;CN={quote_param(appointment.barber.display_name)}:mailto:{barber_user.email}')
    if client.email:
        name = client.get_full_name() or client.get_username()
        lines.append(f'ATTENDEE;CN={quote_param(name)}:mailto:{client.email}')
    if appointment.status != AppointmentStatus.CANCELLED:
        lines += [
            'BEGIN:VALARM',
            f'TRIGGER:-PT{REMINDER_MINUTES}M',
            'ACTION:DISPLAY',
            f'DESCRIPTION:{escape_text(summary)}',
            'END:VALARM',
        ]
    lines += ['END:VEVENT', 'END:VCALENDAR']
    return '\r\n'.join(lines) + '\r\n'
