"""
Email receivers for appointment events. Connected in NotificationsConfig.ready().
"""
from django.dispatch import receiver

from apps.appointments.signals import appointment_booked, appointment_status_changed

from . import emails


@receiver(appointment_booked, dispatch_uid='notifications.appointment_booked')
def email_on_booked(sender, appointment, **kwargs):
    emails.send_appointment_booked(appointment)


@receiver(appointment_status_changed, dispatch_uid='notifications.appointment_status_changed')
def email_on_status_changed(sender, appointment, from_status, to_status, **kwargs):
    emails.send_status_changed(appointment, from_status, to_status)
