"""
Invoice issuing and receipt data.

Public API:
  next_invoice_number(year=None)
  issue_for(appointment)
  mark_paid_for(appointment)
  get_receipt_context(invoice)
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.appointments.models import AppointmentStatus, PaymentStatus
from apps.core.exceptions import ValidationError
from apps.core.models import ShopSettings

from .models import Invoice

logger = logging.getLogger(__name__)

NUMBER_ATTEMPTS = 3


def next_invoice_number(year: int = None) -> str:
    """Next free INV-<year>-<NNNN> number. Numbering restarts every year."""
    year = year or timezone.localdate().year
    prefix = f'INV-{year}-'
    last = (
        Invoice.objects
        .filter(invoice_number__startswith=prefix)
        .order_by('-invoice_number')
        .values_list('invoice_number', flat=True)
        .first()
    )
    next_number = int(last.rsplit('-', 1)[1]) + 1 if last else 1
    return f'{prefix}{next_number:04d}'


def issue_for(appointment) -> Invoice:
    """
    Issue the invoice for a completed appointment.
    Returns the existing invoice if one was already issued.
    """
    if appointment.status != AppointmentStatus.COMPLETED:
        raise ValidationError('Invoices are only issued for completed appointments.')

    existing = Invoice.objects.filter(appointment=appointment).first()
    if existing is not None:
        return existing

    shop = ShopSettings.load()
    client = appointment.client
    is_paid = appointment.payment_status == PaymentStatus.PAID

    # Two issuers may race for the same number; the unique index decides.
    for attempt in range(NUMBER_ATTEMPTS):
        try:
            with transaction.atomic():
                invoice = Invoice.objects.create(
                    invoice_number=next_invoice_number(),
                    appointment=appointment,
                    issuer_name=shop.shop_name,
                    issuer_address=shop.address,
                    issuer_phone=shop.phone,
                    issuer_email=shop.email,
                    recipient_name=client.get_full_name() or client.get_username(),
                    recipient_email=client.email,
                    amount=appointment.price,
                    description=f'{appointment.service.name} with {appointment.barber.display_name}',
                    is_paid=is_paid,
                    paid_at=appointment.paid_at if is_paid else None,
                )
        except IntegrityError:
            existing = Invoice.objects.filter(appointment=appointment).first()
            if existing is not None:
                return existing
            logger.warning('Invoice number clash for appointment %s (attempt %s)', appointment.id_short, attempt + 1)
            continue
        logger.info('Invoice %s issued for appointment %s', invoice.invoice_number, appointment.id_short)
        return invoice

    raise ValidationError('Could not allocate an invoice number. Please try again.')


def mark_paid_for(appointment):
    """Flag the appointment's invoice as paid. No-op if none was issued."""
    updated = Invoice.objects.filter(appointment=appointment, is_paid=False).update(
        is_paid=True,
        paid_at=appointment.paid_at or timezone.now(),
        updated_at=timezone.now(),
    )
    if updated:
        logger.info('Invoice for appointment %s marked as paid', appointment.id_short)
    return updated


def get_receipt_context(invoice) -> dict:
    """Template context for invoices/receipt_pdf.html."""
    appointment = invoice.appointment
    return {
        'invoice': invoice,
        'issuer': {
            'name': invoice.issuer_name,
            'address': invoice.issuer_address,
            'phone': invoice.issuer_phone,
            'email': invoice.issuer_email,
        },
        'recipient': {
            'name': invoice.recipient_name,
            'email': invoice.recipient_email,
        },
        'appointment': {
            'reference': appointment.id_short,
            'service': appointment.service.name,
            'barber': appointment.barber.display_name,
            'date': appointment.date,
            'time': appointment.start_time,
            'duration': appointment.duration_minutes,
        },
        'items': [
            {
                'description': appointment.service.name,
                'quantity': 1,
                'unit_price': invoice.amount,
                'total': invoice.amount,
            },
        ],
        'financials': {
            'total': invoice.amount,
            'status': 'Paid' if invoice.is_paid else 'Unpaid',
            'paid_at': invoice.paid_at,
        },
        'generated_at': timezone.now(),
    }
