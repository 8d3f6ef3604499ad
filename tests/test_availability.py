from datetime import time, timedelta

import pytest

from apps.barbers import availability
from apps.barbers.models import AvailabilityRule
from apps.core.exceptions import NotFoundError, ValidationError

pytestmark = pytest.mark.django_db


def test_rules_are_ordered_by_weekday(barber):
    availability.upsert_rule(barber, 4, time(10, 0), time(16, 0))
    availability.upsert_rule(barber, 2, time(10, 0), time(16, 0))

    assert [rule.weekday for rule in availability.get_rules(barber.pk)] == [0, 2, 4]


def test_upsert_replaces_existing_rule(barber):
    availability.upsert_rule(barber.pk, 0, time(12, 0), time(20, 0))

    rule = AvailabilityRule.objects.get(barber=barber, weekday=0)
    assert (rule.start_time, rule.end_time) == (time(12, 0), time(20, 0))
    assert AvailabilityRule.objects.filter(barber=barber).count() == 1


@pytest.mark.parametrize('weekday,start,end', [
    (7, time(9, 0), time(18, 0)),
    (-1, time(9, 0), time(18, 0)),
    (1, time(18, 0), time(9, 0)),
    (1, time(9, 0), time(9, 0)),
    (1, None, time(9, 0)),
])
def test_upsert_validates(barber, weekday, start, end):
    with pytest.raises(ValidationError):
        availability.upsert_rule(barber, weekday, start, end)


def test_day_off_rule_needs_no_hours(barber, monday):
    availability.upsert_rule(barber, 0, None, None, is_available=False)

    assert availability.window_for_date(barber, monday) is None


def test_add_missing_rules_never_overwrites(barber):
    availability.upsert_rule(barber, 0, time(12, 0), time(20, 0))

    added = availability.add_missing_rules(barber, [0, 1, 2], time(9, 0), time(18, 0))

    assert added == [1, 2]
    assert AvailabilityRule.objects.get(barber=barber, weekday=0).start_time == time(12, 0)
    assert availability.add_missing_rules(barber, [0, 1, 2], time(9, 0), time(18, 0)) == []


def test_window_prefers_override(barber, monday):
    assert availability.window_for_date(barber, monday) == (time(9, 0), time(18, 0))

    availability.set_override(barber, monday, is_available=True, start_time=time(13, 0), end_time=time(17, 0))
    assert availability.window_for_date(barber, monday) == (time(13, 0), time(17, 0))
    assert availability.window_for_date(barber, monday + timedelta(days=7)) == (time(9, 0), time(18, 0))


def test_set_override_replaces_and_remove_restores(barber, monday):
    first = availability.set_override(barber, monday, is_available=False, reason='Sick')
    second = availability.set_override(barber, monday, is_available=False, reason='Still sick')

    assert first.pk == second.pk
    assert [o.reason for o in availability.list_overrides(barber)] == ['Still sick']

    availability.remove_override(barber, second.pk)
    assert availability.window_for_date(barber, monday) == (time(9, 0), time(18, 0))


def test_special_hours_override_needs_a_window(barber, monday):
    with pytest.raises(ValidationError):
        availability.set_override(barber, monday, is_available=True, start_time=time(15, 0), end_time=time(12, 0))


def test_list_overrides_from_date(barber, monday):
    availability.set_override(barber, monday, reason='A')
    availability.set_override(barber, monday + timedelta(days=14), reason='B')

    assert [o.reason for o in availability.list_overrides(barber, from_date=monday + timedelta(days=1))] == ['B']


def test_remove_unknown_override(barber, other_barber, monday):
    foreign = availability.set_override(other_barber, monday)

    with pytest.raises(NotFoundError):
        availability.remove_override(barber, foreign.pk)


def test_unknown_barber():
    with pytest.raises(NotFoundError):
        availability.get_rules('00000000-0000-0000-0000-000000000000')
