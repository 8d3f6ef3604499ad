"""
Earnings: revenue from paid appointments, grouped by barber and period.

Barbers see their own chair, admins any barber or the whole shop.
"""
from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, Sum
from django.db.models.functions import TruncDay, TruncMonth, TruncWeek
from django.utils import timezone

from apps.accounts.permissions import Action, require_permission
from apps.barbers.availability import get_barber
from apps.core.exceptions import ValidationError

from .models import Appointment, PaymentStatus

CENT = Decimal('0.01')

GROUPINGS = {
    'day': TruncDay,
    'week': TruncWeek,
    'month': TruncMonth,
}


def period_range(period: str, today=None):
    """(first, last) date of the current week (Monday first) or month."""
    today = today or timezone.localdate()
    if period == 'week':
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=6)
    if period == 'month':
        start = today.replace(day=1)
        next_month = (start + timedelta(days=32)).replace(day=1)
        return start, next_month - timedelta(days=1)
    raise ValidationError("period must be 'week' or 'month'.")


def _money(value):
    return str((value or Decimal('0')).quantize(CENT))


def summarize(principal, date_from, date_to, barber_id=None, group_by='day') -> dict:
    if date_from > date_to:
        raise ValidationError('from must not be after to.')
    if group_by not in GROUPINGS:
        raise ValidationError(f"group_by must be one of {', '.join(GROUPINGS)}.")

    if barber_id:
        barber_id = get_barber(barber_id).pk
    elif not principal.is_admin:
        barber_id = principal.barber_id
    require_permission(principal, Action.VIEW_EARNINGS, barber_id)

    qs = Appointment.objects.filter(
        payment_status=PaymentStatus.PAID,
        date__range=(date_from, date_to),
    )
    if barber_id:
        qs = qs.filter(barber_id=barber_id)

    totals = qs.aggregate(total=Sum('price'), count=Count('id'))
    count = totals['count']
    average = totals['total'] / count if count else None

    by_barber = (
        qs.values('barber_id', 'barber__display_name')
        .annotate(total=Sum('price'), count=Count('id'))
        .order_by('barber__display_name')
    )
    by_period = (
        qs.annotate(period=GROUPINGS[group_by]('date'))
        .values('period', 'barber_id', 'barber__display_name')
        .annotate(total=Sum('price'), count=Count('id'))
        .order_by('period', 'barber__display_name')
    )

    return {
        'from': date_from.isoformat(),
        'to': date_to.isoformat(),
        'group_by': group_by,
        'barber_id': str(barber_id) if barber_id else None,
        'total': _money(totals['total']),
        'count': count,
        'average': _money(average),
        'barbers': [
            {
                'barber_id': str(row['barber_id']),
                'barber_name': row['barber__display_name'],
                'total': _money(row['total']),
                'count': row['count'],
            }
            for row in by_barber
        ],
        'periods': [
            {
                'period': row['period'].isoformat(),
                'barber_id': str(row['barber_id']),
                'barber_name': row['barber__display_name'],
                'total': _money(row['total']),
                'count': row['count'],
            }
            for row in by_period
        ],
    }
