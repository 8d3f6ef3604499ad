"""
Seed management command.

Populates the database with demo data:
  - shop settings
  - 1 admin, 3 barbers and 2 client accounts (password: "bookme123")
  - weekly availability (Mon–Sat, 09:00–18:00) for every barber
  - 5 shop-wide services and 1 barber-specific service

Usage:
    python manage.py seed_data
    python manage.py seed_data --flush   # wipe and re-seed
"""
from datetime import time
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.appointments.models import Appointment
from apps.barbers.availability import add_missing_rules
from apps.barbers.models import AvailabilityOverride, AvailabilityRule, Barber
from apps.core.models import ShopSettings
from apps.invoices.models import Invoice
from apps.services.models import Service

DEMO_PASSWORD = 'bookme123'


class Command(BaseCommand):
    help = 'Seed demo shop settings, users, barbers, availability and services'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush', action='store_true',
            help='Delete all existing demo data before creating fresh records',
        )

    def _user(self, username, first_name, last_name, is_staff=False):
        User = get_user_model()
        user, created = User.objects.get_or_create(
            username=username,
            defaults={
                'first_name': first_name,
                'last_name': last_name,
                'email': f'{username}@bookme.local',
                'is_staff': is_staff,
                'is_superuser': is_staff,
            },
        )
        if created:
            user.set_password(DEMO_PASSWORD)
            user.save(update_fields=['password'])
        return user

    @transaction.atomic
    def handle(self, *args, **options):
        if options['flush']:
            self.stdout.write('Flushing existing data...')
            Invoice.objects.all().delete()
            Appointment.objects.all().delete()
            AvailabilityOverride.objects.all().delete()
            AvailabilityRule.objects.all().delete()
            Service.objects.all().delete()
            Barber.objects.all().delete()
            get_user_model().objects.filter(email__endswith='@bookme.local').delete()

        self.stdout.write('Seeding shop settings...')
        shop = ShopSettings.load()
        if not shop.address:
            shop.shop_name = 'BookMe Barbershop'
            shop.address = 'Av. Principal 123, Centro'
            shop.phone = '+1 555 0100'
            shop.email = 'hello@bookme.local'
            shop.save()
        self.stdout.write(self.style.SUCCESS('  ✔ Shop settings ready'))

        # ── Users ─────────────────────────────────────────────────────────────
        self.stdout.write('Seeding users...')
        self._user('admin', 'Shop', 'Admin', is_staff=True)
        self._user('client1', 'Ana', 'Torres')
        self._user('client2', 'Luis', 'García')
        self.stdout.write(self.style.SUCCESS('  ✔ 1 admin and 2 clients created'))

        # ── Barbers ───────────────────────────────────────────────────────────
        self.stdout.write('Seeding barbers...')
        barbers_data = [
            {'username': 'carlos', 'first': 'Carlos', 'last': 'Mendoza', 'bio': 'Classic cuts and hot-towel shaves, 10 years behind the chair.'},
            {'username': 'diego',  'first': 'Diego',  'last': 'Rivas',   'bio': 'Fades, tapers and modern textured styles.'},
            {'username': 'sofia',  'first': 'Sofía',  'last': 'Herrera', 'bio': 'Beard sculpting and colour specialist.'},
        ]
        barbers = []
        for b in barbers_data:
            user = self._user(b['username'], b['first'], b['last'])
            barber, _ = Barber.objects.get_or_create(
                user=user,
                defaults={'display_name': f"{b['first']} {b['last']}", 'bio': b['bio']},
            )
            barbers.append(barber)
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(barbers)} barbers created'))

        # ── Availability (Mon–Sat, 09:00–18:00) ───────────────────────────────
        self.stdout.write('Seeding availability...')
        for barber in barbers:
            add_missing_rules(barber, [0, 1, 2, 3, 4, 5], time(9, 0), time(18, 0))
        self.stdout.write(self.style.SUCCESS('  ✔ Availability set (Mon–Sat, 09:00–18:00)'))

        # ── Services ──────────────────────────────────────────────────────────
        self.stdout.write('Seeding services...')
        services_data = [
            {'barber': None, 'name': 'Haircut',            'duration_minutes': 30, 'price': '15.00', 'description': 'Scissor or clipper cut, washed and styled.'},
            {'barber': None, 'name': 'Haircut & Beard',    'duration_minutes': 60, 'price': '25.00', 'description': 'Full haircut plus beard trim and line-up.'},
            {'barber': None, 'name': 'Beard Trim',         'duration_minutes': 30, 'price': '10.00', 'description': 'Shape, trim and hot-towel finish.'},
            {'barber': None, 'name': 'Kids Cut',           'duration_minutes': 30, 'price': '12.00', 'description': 'Haircut for children under 12.'},
            {'barber': None, 'name': 'Hot Towel Shave',    'duration_minutes': 45, 'price': '20.00', 'description': 'Traditional straight-razor shave.'},
            {'barber': barbers[2], 'name': 'Colour & Style', 'duration_minutes': 90, 'price': '45.00', 'description': 'Full colour treatment with cut and style.'},
        ]
        for svc in services_data:
            Service.objects.get_or_create(
                barber=svc['barber'], name=svc['name'], duration_minutes=svc['duration_minutes'],
                defaults={'price': Decimal(svc['price']), 'description': svc['description']},
            )
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(services_data)} services created'))

        self.stdout.write(self.style.SUCCESS(
            f'\n✅ Seed complete! Log in as admin / {DEMO_PASSWORD} (or any barber/client username).'
        ))
