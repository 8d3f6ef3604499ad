from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.accounts.principal import principal_for
from apps.barbers.models import AvailabilityRule, Barber
from apps.services.models import Service


@pytest.fixture
def monday():
    """A Monday at least a week ahead, so notice and past-date rules never interfere."""
    today = date.today()
    return today + timedelta(days=(7 - today.weekday()) + 7)


@pytest.fixture
def now(monday):
    """Fixed wall clock three days before `monday`."""
    return timezone.make_aware(datetime.combine(monday - timedelta(days=3), time(10, 0)))


@pytest.fixture
def make_user(db):
    def _make(username, is_staff=False, **extra):
        return get_user_model().objects.create_user(
            username=username,
            password='s3cret-pass!',
            email=f'{username}@example.com',
            is_staff=is_staff,
            **extra,
        )
    return _make


@pytest.fixture
def client_user(make_user):
    return make_user('ana', first_name='Ana', last_name='Torres')


@pytest.fixture
def other_client(make_user):
    return make_user('luis')


@pytest.fixture
def admin_user(make_user):
    return make_user('boss', is_staff=True)


@pytest.fixture
def barber(make_user):
    user = make_user('carlos')
    barber = Barber.objects.create(user=user, display_name='Carlos Mendoza')
    AvailabilityRule.objects.create(
        barber=barber, weekday=0, start_time=time(9, 0), end_time=time(18, 0),
    )
    return barber


@pytest.fixture
def other_barber(make_user):
    user = make_user('diego')
    barber = Barber.objects.create(user=user, display_name='Diego Rivas')
    AvailabilityRule.objects.create(
        barber=barber, weekday=0, start_time=time(9, 0), end_time=time(18, 0),
    )
    return barber


@pytest.fixture
def service(db):
    return Service.objects.create(name='Haircut & Beard', duration_minutes=60, price=Decimal('25.00'))


@pytest.fixture
def client_principal(client_user):
    return principal_for(client_user)


@pytest.fixture
def barber_principal(barber):
    return principal_for(barber.user)


@pytest.fixture
def admin_principal(admin_user):
    return principal_for(admin_user)


@pytest.fixture
def book(barber, service, client_user, client_principal, monday, now):
    """Book `start` (HH:MM) on `monday` for the default client."""
    from apps.appointments import engine

    def _book(start='10:00', **kwargs):
        hour, minute = map(int, start.split(':'))
        params = {
            'barber_id': barber.pk,
            'client': client_user,
            'service_id': service.pk,
            'on_date': monday,
            'start_time': time(hour, minute),
            'principal': client_principal,
            'now': now,
        }
        params.update(kwargs)
        return engine.book(**params)
    return _book
