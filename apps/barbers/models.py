"""
Barber models: Barber profile, weekly AvailabilityRule, date-specific
AvailabilityOverride (day off or special hours).
"""
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from apps.core.models import UUIDModel, TimestampedModel


WEEKDAY_CHOICES = [
    (0, 'Monday'), (1, 'Tuesday'), (2, 'Wednesday'),
    (3, 'Thursday'), (4, 'Friday'), (5, 'Saturday'), (6, 'Sunday'),
]


class Barber(UUIDModel, TimestampedModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='barber_profile',
    )
    display_name = models.CharField(max_length=120)
    bio = models.TextField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Barber'
        verbose_name_plural = 'Barbers'
        ordering = ['display_name']

    def __str__(self):
        return self.display_name

    @property
    def email(self):
        return self.user.email

    def as_dict(self):
        return {
            'id': str(self.id),
            'name': self.display_name,
            'bio': self.bio,
            'phone': self.phone,
            'is_active': self.is_active,
        }


class AvailabilityRule(UUIDModel):
    """
    A barber's recurring hours for one weekday.
    At most one rule per (barber, weekday); is_available=False marks the day off.
    """
    barber = models.ForeignKey(
        Barber,
        on_delete=models.CASCADE,
        related_name='availability_rules',
    )
    weekday = models.IntegerField(choices=WEEKDAY_CHOICES)
    start_time = models.TimeField()
    end_time = models.TimeField()
    is_available = models.BooleanField(default=True)

    class Meta:
        verbose_name = 'Availability Rule'
        verbose_name_plural = 'Availability Rules'
        ordering = ['barber', 'weekday']
        constraints = [
            models.UniqueConstraint(fields=['barber', 'weekday'], name='uq_availability_barber_weekday'),
        ]

    def __str__(self):
        state = (
            f"{self.start_time.strftime('%H:%M')}–{self.end_time.strftime('%H:%M')}"
            if self.is_available else 'Off'
        )
        return f"{self.barber.display_name} — {self.get_weekday_display()} ({state})"

    def clean(self):
        if self.is_available and self.start_time >= self.end_time:
            raise ValidationError('start_time must be before end_time.')

    def as_dict(self):
        return {
            'id': str(self.id),
            'weekday': self.weekday,
            'weekday_name': self.get_weekday_display(),
            'start_time': self.start_time.strftime('%H:%M'),
            'end_time': self.end_time.strftime('%H:%M'),
            'is_available': self.is_available,
        }


class AvailabilityOverride(UUIDModel, TimestampedModel):
    """
    Replaces the weekly rule on one calendar date.
      is_available=False            → day off (vacation, sick day)
      is_available=True + times     → special hours for that date
    """
    barber = models.ForeignKey(
        Barber,
        on_delete=models.CASCADE,
        related_name='availability_overrides',
    )
    date = models.DateField(db_index=True)
    is_available = models.BooleanField(default=False)
    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    reason = models.CharField(max_length=255, blank=True)

    class Meta:
        verbose_name = 'Availability Override'
        verbose_name_plural = 'Availability Overrides'
        ordering = ['date']
        constraints = [
            models.UniqueConstraint(fields=['barber', 'date'], name='uq_override_barber_date'),
        ]

    def __str__(self):
        if not self.is_available:
            return f"{self.barber.display_name} — Day off on {self.date}"
        return (
            f"{self.barber.display_name} — {self.date} "
            f"({self.start_time.strftime('%H:%M')}–{self.end_time.strftime('%H:%M')})"
        )

    def clean(self):
        if self.is_available:
            if self.start_time is None or self.end_time is None:
                raise ValidationError('Special hours need both start_time and end_time.')
            if self.start_time >= self.end_time:
                raise ValidationError('start_time must be before end_time.')

    def as_dict(self):
        return {
            'id': str(self.id),
            'date': self.date.isoformat(),
            'is_available': self.is_available,
            'start_time': self.start_time.strftime('%H:%M') if self.start_time else None,
            'end_time': self.end_time.strftime('%H:%M') if self.end_time else None,
            'reason': self.reason,
        }
