"""
Slot resolver — bookable start times for a barber on a date.

Pure with respect to its inputs: given the same availability, the same
ledger snapshot and the same `now`, it always returns the same slots.
Slots are derived values and go stale the moment a conflicting booking
commits; the booking engine re-checks at commit time.
"""
from datetime import date as date_type, datetime, time as time_type
from typing import NamedTuple

from django.conf import settings
from django.utils import timezone

from apps.barbers.availability import get_barber, window_for_date
from apps.core.exceptions import ValidationError

from .ledger import booked_intervals

MINUTES_PER_DAY = 24 * 60


# ── Time helpers ──────────────────────────────────────────────────────────────

def time_to_minutes(t: time_type) -> int:
    return t.hour * 60 + t.minute


def minutes_to_time(minutes: int) -> time_type:
    return time_type(minutes // 60, minutes % 60)


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """True if [a_start, a_end) overlaps [b_start, b_end). Minutes since midnight."""
    return a_start < b_end and b_start < a_end


def local_now(now: datetime = None) -> datetime:
    """`now` as a local wall-clock datetime (defaults to the current time)."""
    if now is None:
        return timezone.localtime(timezone.now())
    if timezone.is_aware(now):
        return timezone.localtime(now)
    return now


class Slot(NamedTuple):
    start: time_type
    end: time_type

    def as_dict(self):
        return {
            'start': self.start.strftime('%H:%M'),
            'end': self.end.strftime('%H:%M'),
        }


# ── Core: Slot Generation ─────────────────────────────────────────────────────

def resolve_slots(barber_id, on_date: date_type, duration_minutes: int,
                  step_minutes: int = None, now: datetime = None, booked=None) -> list:
    """
    Bookable slots for a barber on a date, in chronological order.

    step_minutes defaults to settings.BOOKING_SLOT_STEP_MINUTES, or to the
    service duration when that is unset. `booked` may carry a ledger snapshot
    of (start_time, end_time) pairs; otherwise the ledger is queried.

    Empty list means no availability (day off, inactive barber, past date,
    fully booked).
    """
    if duration_minutes is None or duration_minutes <= 0:
        raise ValidationError('Service duration must be a positive number of minutes.')

    barber = get_barber(barber_id)
    now_local = local_now(now)
    today = now_local.date()
    if on_date < today:
        return []

    window = window_for_date(barber, on_date)
    if window is None:
        return []

    step = step_minutes or getattr(settings, 'BOOKING_SLOT_STEP_MINUTES', None) or duration_minutes
    if step <= 0:
        raise ValidationError('Slot step must be a positive number of minutes.')

    if booked is None:
        booked = booked_intervals(barber.pk, on_date)
    occupied = [(time_to_minutes(s), time_to_minutes(e)) for s, e in booked]

    window_start = time_to_minutes(window[0])
    window_end = time_to_minutes(window[1])
    cutoff = time_to_minutes(now_local.time()) if on_date == today else None

    slots = []
    current = window_start
    while current + duration_minutes <= window_end:
        slot_end = current + duration_minutes

        if cutoff is not None and current <= cutoff:
            current += step
            continue

        if not any(overlaps(current, slot_end, occ_s, occ_e) for occ_s, occ_e in occupied):
            slots.append(Slot(minutes_to_time(current), minutes_to_time(slot_end)))

        current += step

    return slots
