"""
Invoice receivers: issue on completion, settle on payment.
Connected in InvoicesConfig.ready().
"""
from django.dispatch import receiver

from apps.appointments.models import AppointmentStatus, PaymentStatus
from apps.appointments.signals import appointment_status_changed

from . import receipts


@receiver(appointment_status_changed, dispatch_uid='invoices.appointment_status_changed')
def invoice_on_status_changed(sender, appointment, to_status, **kwargs):
    if to_status == AppointmentStatus.COMPLETED:
        receipts.issue_for(appointment)
    elif to_status == PaymentStatus.PAID:
        receipts.mark_paid_for(appointment)
