"""
Appointments app models:
  - Appointment          : a booked interval in a barber's chair
  - AppointmentStatusLog : full audit trail of state transitions

Status changes go through apps.appointments.transitions — never write
`status` or `payment_status` directly.
"""
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import UUIDModel, TimestampedModel


class AppointmentStatus(models.TextChoices):
    PENDING   = 'PENDING',   'Pending'
    CONFIRMED = 'CONFIRMED', 'Confirmed'
    COMPLETED = 'COMPLETED', 'Completed'
    CANCELLED = 'CANCELLED', 'Cancelled'


class PaymentStatus(models.TextChoices):
    UNPAID = 'UNPAID', 'Unpaid'
    PAID   = 'PAID',   'Paid'


# Statuses that hold their interval in the barber's ledger.
ACTIVE_STATUSES = (
    AppointmentStatus.PENDING,
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.COMPLETED,
)


class Appointment(UUIDModel, TimestampedModel):
    barber = models.ForeignKey('barbers.Barber', on_delete=models.PROTECT, related_name='appointments')
    client = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='appointments')
    service = models.ForeignKey('services.Service', on_delete=models.PROTECT, related_name='appointments')

    date = models.DateField(db_index=True)
    start_time = models.TimeField()
    end_time = models.TimeField()
    duration_minutes = models.PositiveIntegerField(
        help_text='Booked duration (service.duration_minutes at time of booking)',
    )
    price = models.DecimalField(
        max_digits=8, decimal_places=2, default=0,
        validators=[MinValueValidator(0)],
        help_text='Service price at time of booking',
    )

    status = models.CharField(
        max_length=20, choices=AppointmentStatus.choices,
        default=AppointmentStatus.PENDING, db_index=True,
    )
    payment_status = models.CharField(
        max_length=10, choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID,
    )

    notes = models.TextField(blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'Appointment'
        verbose_name_plural = 'Appointments'
        ordering = ['-date', '-start_time']
        # DB-level guard: no two live appointments start together in one chair
        constraints = [
            models.UniqueConstraint(
                fields=['barber', 'date', 'start_time'],
                condition=~models.Q(status='CANCELLED'),
                name='uq_live_appointment_slot',
            )
        ]

    def __str__(self):
        return (
            f"#{self.id_short} | {self.client} | "
            f"{self.service.name} | {self.date} {self.start_time}"
        )

    @property
    def id_short(self):
        """Returns the first 8 chars of UUID in uppercase."""
        return str(self.id)[:8].upper()

    @property
    def is_terminal(self):
        return (
            self.status == AppointmentStatus.CANCELLED
            or (self.status == AppointmentStatus.COMPLETED and self.payment_status == PaymentStatus.PAID)
        )

    def as_dict(self):
        return {
            'id': str(self.id),
            'barber_id': str(self.barber_id),
            'client_id': self.client_id,
            'service_id': str(self.service_id),
            'date': self.date.isoformat(),
            'start_time': self.start_time.strftime('%H:%M'),
            'end_time': self.end_time.strftime('%H:%M'),
            'duration_minutes': self.duration_minutes,
            'price': str(self.price),
            'status': self.status,
            'payment_status': self.payment_status,
            'notes': self.notes,
            'cancelled_at': self.cancelled_at.isoformat() if self.cancelled_at else None,
            'cancellation_reason': self.cancellation_reason,
            'paid_at': self.paid_at.isoformat() if self.paid_at else None,
        }


class AppointmentStatusLog(UUIDModel):
    """Immutable audit trail of every status or payment change on an appointment."""
    appointment = models.ForeignKey(Appointment, on_delete=models.CASCADE, related_name='status_logs')
    from_status = models.CharField(max_length=20, blank=True)
    to_status = models.CharField(max_length=20)
    changed_by = models.CharField(max_length=150, help_text='username / system')
    reason = models.TextField(blank=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Appointment Status Log'
        verbose_name_plural = 'Appointment Status Logs'
        ordering = ['changed_at']

    def __str__(self):
        return f"Appointment {str(self.appointment_id)[:8]}: {self.from_status or '∅'} → {self.to_status}"
