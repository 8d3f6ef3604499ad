"""
Invoices app models:
  - Invoice : issued once per completed appointment

Issuer details are copied from ShopSettings and recipient details from the
client at issue time, so later edits to either never rewrite an invoice.
"""
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import UUIDModel, TimestampedModel


class Invoice(UUIDModel, TimestampedModel):
    invoice_number = models.CharField(max_length=20, unique=True, help_text='INV-<year>-<NNNN>')
    appointment = models.OneToOneField(
        'appointments.Appointment',
        on_delete=models.PROTECT,
        related_name='invoice',
    )

    # Issuer snapshot
    issuer_name = models.CharField(max_length=120)
    issuer_address = models.CharField(max_length=255, blank=True)
    issuer_phone = models.CharField(max_length=30, blank=True)
    issuer_email = models.EmailField(blank=True)

    # Recipient snapshot
    recipient_name = models.CharField(max_length=150)
    recipient_email = models.EmailField(blank=True)

    amount = models.DecimalField(max_digits=8, decimal_places=2, validators=[MinValueValidator(0)])
    description = models.CharField(max_length=255)
    is_paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'Invoice'
        verbose_name_plural = 'Invoices'
        ordering = ['-invoice_number']

    def __str__(self):
        return f"{self.invoice_number} | {self.recipient_name} | {self.amount}"

    def as_dict(self):
        return {
            'id': str(self.id),
            'invoice_number': self.invoice_number,
            'appointment_id': str(self.appointment_id),
            'recipient_name': self.recipient_name,
            'amount': str(self.amount),
            'description': self.description,
            'is_paid': self.is_paid,
            'paid_at': self.paid_at.isoformat() if self.paid_at else None,
            'issued_at': self.created_at.isoformat(),
        }
