"""
Availability store — the persistence seam for barber working hours.

Public API:
  get_rules(barber_id)
  upsert_rule(barber_id, weekday, start_time, end_time, is_available=True)
  add_missing_rules(barber, weekdays, start_time, end_time)
  list_overrides(barber_id, from_date=None)
  set_override(barber_id, on_date, is_available=False, start_time=None, end_time=None, reason='')
  remove_override(barber_id, override_id)
  window_for_date(barber, on_date)
"""
import logging
from datetime import date as date_type, time as time_type

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from apps.core.exceptions import NotFoundError, ValidationError

from .models import AvailabilityOverride, AvailabilityRule, Barber

logger = logging.getLogger(__name__)


def get_barber(barber_id) -> Barber:
    """Fetch a barber (active or not). Raises NotFoundError."""
    if isinstance(barber_id, Barber):
        return barber_id
    try:
        return Barber.objects.select_related('user').get(pk=barber_id)
    except (Barber.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFoundError(f'Barber {barber_id} not found.')


def _check_window(start_time: time_type, end_time: time_type):
    if start_time is None or end_time is None:
        raise ValidationError('start_time and end_time are required.')
    if start_time >= end_time:
        raise ValidationError('start_time must be before end_time.')


# ── Weekly rules ──────────────────────────────────────────────────────────────

def get_rules(barber_id) -> list:
    """All weekly rules for a barber, Monday first."""
    barber = get_barber(barber_id)
    return list(barber.availability_rules.order_by('weekday'))


def upsert_rule(barber_id, weekday: int, start_time: time_type, end_time: time_type,
                is_available: bool = True) -> AvailabilityRule:
    """Create or replace the rule for one weekday."""
    barber = get_barber(barber_id)
    if weekday not in range(7):
        raise ValidationError('weekday must be an integer between 0 (Monday) and 6 (Sunday).')
    if is_available:
        _check_window(start_time, end_time)
    else:
        # Day off: hours are kept only as a hint for when the day is reopened.
        start_time = start_time or time_type(0, 0)
        end_time = end_time or time_type(0, 0)

    rule, created = AvailabilityRule.objects.update_or_create(
        barber=barber,
        weekday=weekday,
        defaults={
            'start_time': start_time,
            'end_time': end_time,
            'is_available': is_available,
        },
    )
    logger.info(
        '%s availability rule for %s weekday=%s (%s-%s, available=%s)',
        'Created' if created else 'Updated', barber, weekday, start_time, end_time, is_available,
    )
    return rule


def add_missing_rules(barber: Barber, weekdays, start_time: time_type, end_time: time_type) -> list:
    """
    Create rules for the given weekdays that have none yet.
    Existing rules are never touched. Returns the weekdays that were added.
    """
    _check_window(start_time, end_time)
    existing = set(barber.availability_rules.values_list('weekday', flat=True))
    missing = [day for day in weekdays if day not in existing]
    with transaction.atomic():
        for day in missing:
            AvailabilityRule.objects.create(
                barber=barber,
                weekday=day,
                start_time=start_time,
                end_time=end_time,
                is_available=True,
            )
    return missing


# ── Date overrides ────────────────────────────────────────────────────────────

def list_overrides(barber_id, from_date: date_type = None) -> list:
    barber = get_barber(barber_id)
    qs = barber.availability_overrides.all()
    if from_date is not None:
        qs = qs.filter(date__gte=from_date)
    return list(qs.order_by('date'))


def set_override(barber_id, on_date: date_type, is_available: bool = False,
                 start_time: time_type = None, end_time: time_type = None,
                 reason: str = '') -> AvailabilityOverride:
    """Create or replace the override for one date."""
    barber = get_barber(barber_id)
    if is_available:
        _check_window(start_time, end_time)
    else:
        start_time = end_time = None

    override, _ = AvailabilityOverride.objects.update_or_create(
        barber=barber,
        date=on_date,
        defaults={
            'is_available': is_available,
            'start_time': start_time,
            'end_time': end_time,
            'reason': reason,
        },
    )
    logger.info('Availability override for %s on %s (available=%s)', barber, on_date, is_available)
    return override


def remove_override(barber_id, override_id) -> None:
    barber = get_barber(barber_id)
    try:
        override = barber.availability_overrides.get(pk=override_id)
    except (AvailabilityOverride.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFoundError(f'Override {override_id} not found.')
    override.delete()


# ── Effective window ──────────────────────────────────────────────────────────

def window_for_date(barber: Barber, on_date: date_type):
    """
    Working window for a barber on a date.
    Returns (start_time, end_time) or None if the barber does not work that day.
    A date override wins over the weekly rule.
    """
    if not barber.is_active:
        return None

    override = barber.availability_overrides.filter(date=on_date).first()
    if override is not None:
        if not override.is_available:
            return None
        return override.start_time, override.end_time

    rule = barber.availability_rules.filter(weekday=on_date.weekday()).first()
    if rule is None or not rule.is_available:
        return None
    if rule.start_time >= rule.end_time:
        return None
    return rule.start_time, rule.end_time
