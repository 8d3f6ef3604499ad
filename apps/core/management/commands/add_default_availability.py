"""
management command: add_default_availability

Gives every active barber a weekly rule for each working day that has none.
Existing rules are left exactly as they are, so the command is safe to re-run.

Usage:
    python manage.py add_default_availability
    python manage.py add_default_availability --start 10:00 --end 19:00 --days 0,1,2,3,4
"""
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.barbers.availability import add_missing_rules
from apps.barbers.models import Barber, WEEKDAY_CHOICES
from apps.core.http import parse_time

WEEKDAY_NAMES = dict(WEEKDAY_CHOICES)


class Command(BaseCommand):
    help = 'Add default weekly availability to active barbers missing it'

    def add_arguments(self, parser):
        parser.add_argument(
            '--start', default=settings.DEFAULT_AVAILABILITY_START,
            help='Opening time, HH:MM (default: %(default)s)',
        )
        parser.add_argument(
            '--end', default=settings.DEFAULT_AVAILABILITY_END,
            help='Closing time, HH:MM (default: %(default)s)',
        )
        parser.add_argument(
            '--days', default='0,1,2,3,4,5',
            help='Comma-separated weekdays, 0=Monday .. 6=Sunday (default: Monday to Saturday)',
        )

    def _parse_days(self, raw):
        try:
            days = sorted({int(part) for part in raw.split(',') if part.strip()})
        except ValueError:
            raise CommandError(f'--days must be comma-separated integers, got {raw!r}')
        if not days or any(day not in WEEKDAY_NAMES for day in days):
            raise CommandError('--days values must be between 0 (Monday) and 6 (Sunday)')
        return days

    def handle(self, *args, **options):
        start = parse_time(options['start'])
        end = parse_time(options['end'])
        if start is None or end is None:
            raise CommandError('--start and --end must be times in HH:MM format')
        if start >= end:
            raise CommandError('--start must be before --end')
        days = self._parse_days(options['days'])

        barbers = Barber.objects.filter(is_active=True).order_by('display_name')
        self.stdout.write(f'Checking {barbers.count()} active barber(s)...')

        updated = 0
        for barber in barbers:
            added = add_missing_rules(barber, days, start, end)
            if not added:
                self.stdout.write(f'  {barber.display_name}: already complete')
                continue
            updated += 1
            names = ', '.join(WEEKDAY_NAMES[day] for day in added)
            self.stdout.write(self.style.SUCCESS(f'  ✔ {barber.display_name}: added {names}'))

        self.stdout.write(self.style.SUCCESS(
            f'\nDone. {updated} barber(s) updated '
            f'({start.strftime("%H:%M")}-{end.strftime("%H:%M")}).'
        ))
