from datetime import datetime, timedelta

import pytest
from pytz import utc

from mawaqit.high_latitude import (
    EVENING_TWILIGHT,
    MORNING_TWILIGHT,
    SeasonalTable,
    bound_fajr,
    bound_isha,
    days_since_solstice,
    night_portion,
    season_adjusted_evening_twilight,
    season_adjusted_morning_twilight,
)
from mawaqit.models import HighLatitudeRule, Shafaq


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2016, 6, 20, hour, minute, tzinfo=utc)


@pytest.mark.parametrize(
    "day_of_year, year, latitude, expected",
    [
        (1, 2016, 1, 11),
        (355, 2015, 1, 0),  # Dec 21
        (365, 2015, 1, 10),
        (366, 2016, 1, 10),
        (172, 2015, -1, 0),  # Jun 21
        (173, 2016, -1, 0),
        (1, 2015, -1, 194),
    ],
)
def test_days_since_solstice(day_of_year, year, latitude, expected):
    assert days_since_solstice(day_of_year, year, latitude) == expected


def test_seasonal_table_hits_its_anchor_points():
    table = SeasonalTable(base=75, a=55, b=0, c=-55, d=110)
    assert table.minutes(55, 0) == pytest.approx(130)
    assert table.minutes(55, 91) == pytest.approx(75)
    assert table.minutes(55, 137) == pytest.approx(20)
    assert table.minutes(55, 183) == pytest.approx(185)
    assert table.minutes(-55, 229) == pytest.approx(20)
    assert table.minutes(55, 275) == pytest.approx(75)


def test_seasonal_twilight_at_the_equator_is_the_base():
    sunrise = at(6)
    sunset = at(18)
    assert season_adjusted_morning_twilight(0, 100, 2016, sunrise) == sunrise - timedelta(minutes=75)
    assert season_adjusted_evening_twilight(0, 100, 2016, sunset) == sunset + timedelta(minutes=75)
    assert season_adjusted_evening_twilight(
        0, 100, 2016, sunset, Shafaq.AHMER
    ) == sunset + timedelta(minutes=62)


def test_white_twilight_lasts_longer_than_red():
    sunset = at(20)
    red = season_adjusted_evening_twilight(50, 172, 2016, sunset, Shafaq.AHMER)
    general = season_adjusted_evening_twilight(50, 172, 2016, sunset, Shafaq.GENERAL)
    white = season_adjusted_evening_twilight(50, 172, 2016, sunset, Shafaq.ABYAD)
    assert red < general < white


def test_tables_are_pluggable():
    custom = SeasonalTable(base=90, a=0, b=0, c=0, d=0)
    assert season_adjusted_morning_twilight(45, 10, 2016, at(7), table=custom) == at(5, 30)
    assert set(EVENING_TWILIGHT) == set(Shafaq)
    assert MORNING_TWILIGHT.base == 75


def test_night_portions():
    assert night_portion(HighLatitudeRule.MIDDLE_OF_THE_NIGHT) == 1 / 2
    assert night_portion(HighLatitudeRule.SEVENTH_OF_THE_NIGHT) == 1 / 7
    with pytest.raises(ValueError):
        night_portion(HighLatitudeRule.TWILIGHT_ANGLE)


def test_middle_of_the_night_bounds_fajr():
    sunrise = at(5)
    night = timedelta(hours=8)
    rule = HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    assert bound_fajr(at(3), rule, 50, 172, 2016, sunrise, night) == at(3)
    assert bound_fajr(at(0, 30), rule, 50, 172, 2016, sunrise, night) == at(1)
    assert bound_fajr(None, rule, 50, 172, 2016, sunrise, night) == at(1)


def test_seventh_of_the_night_bounds_isha():
    sunset = at(20)
    night = timedelta(hours=7)
    rule = HighLatitudeRule.SEVENTH_OF_THE_NIGHT
    assert bound_isha(at(20, 45), rule, 50, 172, 2016, sunset, night) == at(20, 45)
    assert bound_isha(at(22), rule, 50, 172, 2016, sunset, night) == at(21)
    assert bound_isha(None, rule, 50, 172, 2016, sunset, night) == at(21)


def test_seasonal_rule_defers_to_angle_within_its_bound():
    sunrise = at(5)
    night = timedelta(hours=8)
    rule = HighLatitudeRule.TWILIGHT_ANGLE
    assert bound_fajr(at(4), rule, 40, 172, 2016, sunrise, night) == at(4)
    limit = season_adjusted_morning_twilight(40, 172, 2016, sunrise)
    assert bound_fajr(at(1), rule, 40, 172, 2016, sunrise, night) == limit


def test_seasonal_rule_switches_to_seventh_above_55_degrees():
    sunrise = at(4)
    night = timedelta(hours=7)
    rule = HighLatitudeRule.TWILIGHT_ANGLE
    # The angle result lies within the seasonal bound but is still replaced
    assert bound_fajr(at(2), rule, 60, 172, 2016, sunrise, night) == at(3)
    assert bound_fajr(at(2), rule, -60, 172, 2016, sunrise, night) == at(3)
    assert bound_fajr(at(2), rule, 55, 172, 2016, sunrise, night) == at(2)


def test_bounds_never_fail():
    for rule in HighLatitudeRule:
        assert bound_fajr(None, rule, 89, 1, 2016, at(12), timedelta(hours=1)) < at(12)
        assert bound_isha(None, rule, 89, 1, 2016, at(12), timedelta(hours=1)) > at(12)
