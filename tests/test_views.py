from datetime import timedelta

import pytest
from django.urls import reverse

from apps.appointments.models import Appointment, AppointmentStatus
from apps.invoices.models import Invoice
from apps.services.models import Service

pytestmark = pytest.mark.django_db


def _slots(client, barber, service, on_date):
    return client.get(reverse('appointments:slots'), {
        'barber': str(barber.pk), 'service': str(service.pk), 'date': on_date.isoformat(),
    })


def _book(client, barber, service, on_date, at='10:00'):
    return client.post(reverse('appointments:collection'), {
        'barber_id': str(barber.pk),
        'service_id': str(service.pk),
        'date': on_date.isoformat(),
        'time': at,
    }, content_type='application/json')


# ── Accounts ──────────────────────────────────────────────────────────────────

def test_signup_login_me_logout(client):
    response = client.post(reverse('accounts:signup'), {
        'username': 'marta', 'password': 'a-Strong-passw0rd', 'email': 'marta@example.com',
    }, content_type='application/json')
    assert response.status_code == 201
    assert response.json()['user']['role'] == 'CLIENT'

    assert client.get(reverse('accounts:me')).json()['user']['username'] == 'marta'

    client.post(reverse('accounts:logout'))
    assert client.get(reverse('accounts:me')).status_code == 401

    response = client.post(reverse('accounts:login'), {
        'username': 'marta', 'password': 'a-Strong-passw0rd',
    }, content_type='application/json')
    assert response.status_code == 200


def test_signup_rejects_duplicates(client, client_user):
    response = client.post(reverse('accounts:signup'), {
        'username': 'ana', 'password': 'a-Strong-passw0rd',
    }, content_type='application/json')

    assert response.status_code == 409
    assert response.json()['code'] == 'ConflictError'


def test_bad_login(client, client_user):
    response = client.post(reverse('accounts:login'), {
        'username': 'ana', 'password': 'wrong',
    }, content_type='application/json')

    assert response.status_code == 401


# ── Barbers ───────────────────────────────────────────────────────────────────

def test_barber_directory_and_public_schedule(client, barber):
    listing = client.get(reverse('barbers:list')).json()
    assert [b['name'] for b in listing['barbers']] == ['Carlos Mendoza']

    schedule = client.get(reverse('barbers:availability', args=[barber.pk])).json()
    assert schedule['rules'][0]['start_time'] == '09:00'
    assert schedule['overrides'] == []


def test_barber_edits_own_hours(client, barber):
    client.force_login(barber.user)

    response = client.put(reverse('barbers:my_availability'), {'rules': [
        {'weekday': 0, 'start_time': '10:00', 'end_time': '14:00'},
        {'weekday': 6, 'is_available': False},
    ]}, content_type='application/json')

    assert response.status_code == 200
    rules = {r['weekday']: r for r in response.json()['rules']}
    assert rules[0]['start_time'] == '10:00'
    assert rules[6]['is_available'] is False


def test_invalid_rule_leaves_the_whole_week_untouched(client, barber):
    client.force_login(barber.user)

    response = client.put(reverse('barbers:my_availability'), {'rules': [
        {'weekday': 2, 'start_time': '10:00', 'end_time': '14:00'},
        {'weekday': 3, 'start_time': '18:00', 'end_time': '09:00'},
    ]}, content_type='application/json')

    assert response.status_code == 400
    assert not barber.availability_rules.filter(weekday__in=[2, 3]).exists()
    assert barber.availability_rules.get(weekday=0).start_time.strftime('%H:%M') == '09:00'


def test_availability_edit_is_refused_to_clients(client, client_user, barber):
    client.force_login(client_user)

    response = client.put(reverse('barbers:my_availability'), {'rules': []}, content_type='application/json')
    assert response.status_code == 403

    response = client.put(
        reverse('barbers:my_availability') + f'?barber={barber.pk}',
        {'rules': []}, content_type='application/json',
    )
    assert response.status_code == 403


def test_days_off_roundtrip(client, barber, service, monday):
    client.force_login(barber.user)

    response = client.post(reverse('barbers:my_days_off'), {
        'date': monday.isoformat(), 'reason': 'Vacation',
    }, content_type='application/json')
    assert response.status_code == 201
    override_id = response.json()['override']['id']

    assert _slots(client, barber, service, monday).json()['slots'] == []
    assert len(client.get(reverse('barbers:my_days_off')).json()['overrides']) == 1

    response = client.delete(reverse('barbers:my_day_off_detail', args=[override_id]))
    assert response.status_code == 200
    assert len(_slots(client, barber, service, monday).json()['slots']) == 9


def test_admin_manages_any_barber(client, admin_user, barber, monday):
    client.force_login(admin_user)

    response = client.post(
        reverse('barbers:my_days_off') + f'?barber={barber.pk}',
        {'date': monday.isoformat(), 'is_available': True, 'start_time': '12:00', 'end_time': '15:00'},
        content_type='application/json',
    )

    assert response.status_code == 201
    assert barber.availability_overrides.get().start_time.hour == 12


# ── Services ──────────────────────────────────────────────────────────────────

def test_service_catalog(client, barber, other_barber, service):
    Service.objects.create(name='Colour', duration_minutes=90, price='45.00', barber=other_barber)

    everything = client.get(reverse('services:collection')).json()['services']
    assert {s['name'] for s in everything} == {'Haircut & Beard', 'Colour'}

    for_carlos = client.get(reverse('services:collection'), {'barber': str(barber.pk)}).json()['services']
    assert [s['name'] for s in for_carlos] == ['Haircut & Beard']


def test_service_admin_crud(client, admin_user):
    client.force_login(admin_user)

    response = client.post(reverse('services:collection'), {
        'name': 'Beard Trim', 'duration_minutes': 30, 'price': '10.00',
    }, content_type='application/json')
    assert response.status_code == 201
    service_id = response.json()['service']['id']

    response = client.patch(reverse('services:detail', args=[service_id]), {
        'price': '12.50',
    }, content_type='application/json')
    assert response.json()['service']['price'] == '12.50'

    response = client.delete(reverse('services:detail', args=[service_id]))
    assert response.json()['service']['is_active'] is False
    assert client.get(reverse('services:collection')).json()['services'] == []
    assert Service.objects.get(pk=service_id).is_active is False


@pytest.mark.parametrize('body', [
    {'name': '', 'duration_minutes': 30, 'price': '10'},
    {'name': 'X', 'duration_minutes': 2, 'price': '10'},
    {'name': 'X', 'duration_minutes': 30, 'price': '-1'},
    {'name': 'X', 'duration_minutes': 'long', 'price': '10'},
])
def test_service_validation(client, admin_user, body):
    client.force_login(admin_user)

    response = client.post(reverse('services:collection'), body, content_type='application/json')

    assert response.status_code == 400


def test_service_changes_need_admin(client, client_user, service):
    assert client.post(reverse('services:collection'), {}, content_type='application/json').status_code == 401

    client.force_login(client_user)
    response = client.post(reverse('services:collection'), {
        'name': 'Beard Trim', 'duration_minutes': 30, 'price': '10.00',
    }, content_type='application/json')
    assert response.status_code == 403
    assert client.delete(reverse('services:detail', args=[service.pk])).status_code == 403


# ── Appointments ──────────────────────────────────────────────────────────────

def test_slots_endpoint(client, barber, service, monday):
    response = _slots(client, barber, service, monday)

    assert response.status_code == 200
    slots = response.json()['slots']
    assert len(slots) == 9
    assert slots[0] == {'start': '09:00', 'end': '10:00'}


def test_slots_endpoint_validates_query(client, barber, service):
    response = client.get(reverse('appointments:slots'), {'barber': str(barber.pk), 'date': 'tomorrow'})

    assert response.status_code == 400
    assert response.json()['code'] == 'ValidationError'


def test_booking_requires_login(client, barber, service, monday):
    assert _book(client, barber, service, monday).status_code == 401


def test_booking_flow(client, client_user, other_client, barber, service, monday):
    client.force_login(client_user)

    response = _book(client, barber, service, monday)
    assert response.status_code == 201
    appointment = response.json()['appointment']
    assert appointment['status'] == 'PENDING'
    assert appointment['barber_name'] == 'Carlos Mendoza'

    starts = [s['start'] for s in _slots(client, barber, service, monday).json()['slots']]
    assert '10:00' not in starts

    client.force_login(other_client)
    response = _book(client, barber, service, monday)
    assert response.status_code == 409
    assert response.json()['code'] == 'ConflictError'


def test_booking_bad_payload(client, client_user, barber, service, monday):
    client.force_login(client_user)

    response = _book(client, barber, service, monday, at='10h')
    assert response.status_code == 400

    response = client.post(reverse('appointments:collection'), 'not json', content_type='application/json')
    assert response.status_code == 400


def test_listing_is_role_filtered(client, client_user, other_client, barber, service, monday):
    client.force_login(client_user)
    _book(client, barber, service, monday, '10:00')
    client.force_login(other_client)
    _book(client, barber, service, monday, '11:00')

    assert len(client.get(reverse('appointments:collection')).json()['appointments']) == 1

    client.force_login(barber.user)
    assert len(client.get(reverse('appointments:collection')).json()['appointments']) == 2
    upcoming = client.get(reverse('appointments:collection'), {'status': 'upcoming'}).json()['appointments']
    assert [a['start_time'] for a in upcoming] == ['10:00', '11:00']


def test_detail_shows_history_and_is_private(client, client_user, other_client, barber, service, monday):
    client.force_login(client_user)
    appointment_id = _book(client, barber, service, monday).json()['appointment']['id']

    detail = client.get(reverse('appointments:detail', args=[appointment_id])).json()['appointment']
    assert set(detail['allowed_next']) == {'CONFIRMED', 'CANCELLED'}
    assert detail['history'][0]['to'] == 'PENDING'

    client.force_login(other_client)
    assert client.get(reverse('appointments:detail', args=[appointment_id])).status_code == 403


def test_lifecycle_over_http(client, client_user, barber, service, monday, django_capture_on_commit_callbacks):
    client.force_login(client_user)
    appointment_id = _book(client, barber, service, monday).json()['appointment']['id']

    response = client.post(reverse('appointments:mark_paid', args=[appointment_id]))
    assert response.status_code == 403

    client.force_login(barber.user)
    response = client.post(reverse('appointments:mark_paid', args=[appointment_id]))
    assert response.status_code == 409
    assert response.json()['code'] == 'InvalidTransitionError'

    for status in ('confirmed', 'COMPLETED'):
        with django_capture_on_commit_callbacks(execute=True):
            response = client.post(
                reverse('appointments:status', args=[appointment_id]),
                {'status': status}, content_type='application/json',
            )
        assert response.status_code == 200

    with django_capture_on_commit_callbacks(execute=True):
        response = client.post(reverse('appointments:mark_paid', args=[appointment_id]))
    assert response.json()['appointment']['payment_status'] == 'PAID'

    invoice = Invoice.objects.get(appointment_id=appointment_id)
    assert invoice.is_paid

    response = client.get(reverse('invoices:pdf', args=[invoice.pk]))
    assert response.status_code == 200
    assert response['Content-Type'] == 'application/pdf'
    assert response.content.startswith(b'%PDF')


def test_unknown_invoice_is_not_found(client, other_client):
    client.force_login(other_client)

    missing = client.get(reverse('invoices:pdf', args=['00000000-0000-0000-0000-000000000000']))
    assert missing.status_code == 404


def test_cancel_endpoint(client, client_user, barber, service, monday):
    client.force_login(client_user)
    appointment_id = _book(client, barber, service, monday).json()['appointment']['id']

    response = client.post(
        reverse('appointments:cancel', args=[appointment_id]),
        {'reason': 'Change of plans'}, content_type='application/json',
    )

    assert response.status_code == 200
    assert response.json()['appointment']['status'] == 'CANCELLED'
    assert Appointment.objects.get(pk=appointment_id).cancellation_reason == 'Change of plans'

    response = client.post(reverse('appointments:cancel', args=[appointment_id]))
    assert response.status_code == 409


def test_cancel_accepts_a_form_body(client, client_user, barber, service, monday):
    client.force_login(client_user)
    appointment_id = _book(client, barber, service, monday).json()['appointment']['id']

    response = client.post(reverse('appointments:cancel', args=[appointment_id]), {'reason': 'Sick'})

    assert response.status_code == 200
    assert Appointment.objects.get(pk=appointment_id).cancellation_reason == 'Sick'


def test_cancel_rejects_malformed_json(client, client_user, barber, service, monday):
    client.force_login(client_user)
    appointment_id = _book(client, barber, service, monday).json()['appointment']['id']

    response = client.post(
        reverse('appointments:cancel', args=[appointment_id]), 'not json', content_type='application/json',
    )

    assert response.status_code == 400
    assert Appointment.objects.get(pk=appointment_id).status == AppointmentStatus.PENDING


# ── Calendar export ───────────────────────────────────────────────────────────

def test_calendar_download(client, client_user, other_client, barber, service, monday):
    client.force_login(client_user)
    appointment_id = _book(client, barber, service, monday).json()['appointment']['id']

    response = client.get(reverse('appointments:calendar', args=[appointment_id]))

    assert response.status_code == 200
    assert response['Content-Type'].startswith('text/calendar')
    assert 'attachment; filename="bookme-appointment-' in response['Content-Disposition']
    body = response.content.decode()
    assert body.startswith('BEGIN:VCALENDAR\r\n')
    assert f"DTSTART:{monday.strftime('%Y%m%d')}T100000Z" in body
    assert f"DTEND:{monday.strftime('%Y%m%d')}T110000Z" in body
    assert f'UID:{appointment_id}@bookme' in body
    assert 'STATUS:TENTATIVE' in body

    client.force_login(other_client)
    assert client.get(reverse('appointments:calendar', args=[appointment_id])).status_code == 403


def test_status_endpoint_rejects_unknown_status(client, barber, client_user, service, monday):
    client.force_login(client_user)
    appointment_id = _book(client, barber, service, monday).json()['appointment']['id']
    client.force_login(barber.user)

    response = client.post(
        reverse('appointments:status', args=[appointment_id]),
        {'status': 'ARCHIVED'}, content_type='application/json',
    )

    assert response.status_code == 400
    assert Appointment.objects.get(pk=appointment_id).status == AppointmentStatus.PENDING


def test_booking_a_past_date_is_rejected(client, client_user, barber, service, monday):
    client.force_login(client_user)

    response = _book(client, barber, service, monday - timedelta(weeks=52))

    assert response.status_code == 400


# ── Settings ──────────────────────────────────────────────────────────────────

def test_settings_are_public_and_admin_editable(client, client_user, admin_user):
    assert client.get(reverse('core:settings')).json()['settings']['shop_name'] == 'BookMe'

    client.force_login(client_user)
    response = client.put(reverse('core:settings'), {'shop_name': 'Mine'}, content_type='application/json')
    assert response.status_code == 403

    client.force_login(admin_user)
    response = client.put(reverse('core:settings'), {
        'shop_name': 'Barbería Central', 'latitude': '40.4168',
    }, content_type='application/json')
    assert response.status_code == 200
    assert response.json()['settings']['shop_name'] == 'Barbería Central'
    assert response.json()['settings']['latitude'] == pytest.approx(40.4168)


@pytest.mark.parametrize('body', [
    {'email': 'not-an-email'},
    {'instagram': 'nope'},
    {'owner': 'me'},
])
def test_settings_validation(client, admin_user, body):
    client.force_login(admin_user)

    response = client.put(reverse('core:settings'), body, content_type='application/json')

    assert response.status_code == 400
