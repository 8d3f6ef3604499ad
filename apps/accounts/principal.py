"""
The authenticated actor behind a request.

Roles are derived from the Django user rather than stored:
  ADMIN   — user.is_staff
  BARBER  — user has an active barber profile
  CLIENT  — everyone else who is logged in
"""
from django.db import models


class Role(models.TextChoices):
    CLIENT = 'CLIENT', 'Client'
    BARBER = 'BARBER', 'Barber'
    ADMIN  = 'ADMIN',  'Admin'


class Principal:
    def __init__(self, user_id, role, barber_id=None, username=''):
        self.user_id = user_id
        self.role = role
        self.barber_id = barber_id
        self.username = username

    def __repr__(self):
        return f"Principal(user_id={self.user_id!r}, role={self.role!r}, barber_id={self.barber_id!r})"

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    @property
    def is_barber(self):
        return self.barber_id is not None

    def owns(self, barber_id) -> bool:
        """True if this principal is the barber identified by barber_id."""
        return self.barber_id is not None and str(self.barber_id) == str(barber_id)

    def booked(self, appointment) -> bool:
        return appointment.client_id == self.user_id

    def as_dict(self):
        return {
            'id': self.user_id,
            'username': self.username,
            'role': self.role,
            'barber_id': str(self.barber_id) if self.barber_id else None,
        }


def principal_for(user):
    """Build a Principal from a Django user. Returns None for anonymous users."""
    if user is None or not user.is_authenticated:
        return None

    from apps.barbers.models import Barber

    barber_id = (
        Barber.objects
        .filter(user=user, is_active=True)
        .values_list('id', flat=True)
        .first()
    )
    if user.is_staff:
        role = Role.ADMIN
    elif barber_id is not None:
        role = Role.BARBER
    else:
        role = Role.CLIENT
    return Principal(user.pk, role, barber_id=barber_id, username=user.get_username())
