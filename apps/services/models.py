"""
Service model — a bookable service with a fixed duration and price.

A service with no barber is offered by the whole shop; a service bound to a
barber is only bookable in that barber's chair. The duration is the slot
width used by the slot resolver.
"""
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import BaseModel


class Service(BaseModel):
    barber = models.ForeignKey(
        'barbers.Barber',
        on_delete=models.PROTECT,
        related_name='services',
        null=True,
        blank=True,
        help_text='Leave empty for a shop-wide service.',
    )
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    duration_minutes = models.PositiveIntegerField(
        validators=[MinValueValidator(5)],
        help_text='Appointment length in minutes',
    )
    price = models.DecimalField(max_digits=8, decimal_places=2, validators=[MinValueValidator(0)])
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Service'
        verbose_name_plural = 'Services'
        ordering = ['name', 'duration_minutes']

    def __str__(self):
        owner = self.barber.display_name if self.barber_id else 'All barbers'
        return f"{self.name} ({self.duration_minutes} min) — {owner}"

    @property
    def is_global(self):
        return self.barber_id is None

    def is_offered_by(self, barber) -> bool:
        return self.is_global or self.barber_id == barber.pk

    def as_dict(self):
        return {
            'id': str(self.id),
            'name': self.name,
            'description': self.description,
            'duration_minutes': self.duration_minutes,
            'price': str(self.price),
            'barber_id': str(self.barber_id) if self.barber_id else None,
            'is_active': self.is_active,
        }
