"""Bounds on Fajr and Isha for nights where twilight never fully ends.

Each rule yields a "safe" Fajr before sunrise and a "safe" Isha after sunset.
The solver keeps an angle-based time only when it falls inside that bound.

The seasonal tables follow Khalid Shaukat's Moonsighting Committee method:
minutes of twilight as a piecewise-linear function of latitude and of the
number of days since the winter solstice.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from mawaqit.julian import is_leap_year
from mawaqit.models import HighLatitudeRule, Shafaq

log = logging.getLogger(__name__)

SEASONAL_LATITUDE_LIMIT = 55.0  # Above this the seasonal rule falls back to 1/7 of the night


@dataclass(frozen=True)
class SeasonalTable:
    """Twilight duration at four seasonal anchor points.

    Each anchor is ``base + coefficient / 55 * |latitude|`` minutes. Anchors are
    placed at 0, 91, 137, 183, 229, 275 and 366 days after the winter solstice
    and interpolated linearly: a → b → c → d → c → b → a.
    """

    base: float
    a: float
    b: float
    c: float
    d: float

    def minutes(self, latitude: float, days_since_solstice: int) -> float:
        lat = abs(latitude)
        a = self.base + self.a / 55.0 * lat
        b = self.base + self.b / 55.0 * lat
        c = self.base + self.c / 55.0 * lat
        d = self.base + self.d / 55.0 * lat

        dyy = days_since_solstice
        if dyy < 91:
            return a + (b - a) / 91.0 * dyy
        if dyy < 137:
            return b + (c - b) / 46.0 * (dyy - 91)
        if dyy < 183:
            return c + (d - c) / 46.0 * (dyy - 137)
        if dyy < 229:
            return d + (c - d) / 46.0 * (dyy - 183)
        if dyy < 275:
            return c + (b - c) / 46.0 * (dyy - 229)
        return b + (a - b) / 91.0 * (dyy - 275)


MORNING_TWILIGHT = SeasonalTable(base=75, a=28.65, b=19.44, c=32.74, d=48.10)

EVENING_TWILIGHT: dict[Shafaq, SeasonalTable] = {
    Shafaq.GENERAL: SeasonalTable(base=75, a=25.60, b=2.050, c=-9.21, d=6.14),
    Shafaq.AHMER: SeasonalTable(base=62, a=17.40, b=-7.16, c=5.12, d=19.44),
    Shafaq.ABYAD: SeasonalTable(base=75, a=25.60, b=7.16, c=36.84, d=81.84),
}


def days_since_solstice(day_of_year: int, year: int, latitude: float) -> int:
    """Days elapsed since the local winter solstice (Dec 21 north, Jun 21 south)."""
    northern_offset = 10
    leap = is_leap_year(year)
    southern_offset = 173 if leap else 172
    days_in_year = 366 if leap else 365

    if latitude >= 0:
        days = day_of_year + northern_offset
        if days >= days_in_year:
            days -= days_in_year
    else:
        days = day_of_year - southern_offset
        if days < 0:
            days += days_in_year
    return days


def season_adjusted_morning_twilight(
    latitude: float,
    day_of_year: int,
    year: int,
    sunrise: datetime,
    table: SeasonalTable = MORNING_TWILIGHT,
) -> datetime:
    minutes = table.minutes(latitude, days_since_solstice(day_of_year, year, latitude))
    return sunrise - timedelta(seconds=round(minutes * 60))


def season_adjusted_evening_twilight(
    latitude: float,
    day_of_year: int,
    year: int,
    sunset: datetime,
    shafaq: Shafaq = Shafaq.GENERAL,
    tables: dict[Shafaq, SeasonalTable] = EVENING_TWILIGHT,
) -> datetime:
    minutes = tables[shafaq].minutes(
        latitude, days_since_solstice(day_of_year, year, latitude)
    )
    return sunset + timedelta(seconds=round(minutes * 60))


def night_portion(rule: HighLatitudeRule) -> float:
    """Fraction of the night allowed between sunset and Isha (and Fajr and sunrise)."""
    if rule is HighLatitudeRule.MIDDLE_OF_THE_NIGHT:
        return 1 / 2
    if rule is HighLatitudeRule.SEVENTH_OF_THE_NIGHT:
        return 1 / 7
    raise ValueError(f"{rule} has no fixed night portion")


def overrides_angle(rule: HighLatitudeRule, latitude: float) -> bool:
    """Whether the seasonal rule discards the angle result in favour of 1/7 of the night."""
    return (
        rule is HighLatitudeRule.TWILIGHT_ANGLE
        and abs(latitude) > SEASONAL_LATITUDE_LIMIT
    )


def safe_fajr(
    rule: HighLatitudeRule,
    latitude: float,
    day_of_year: int,
    year: int,
    sunrise: datetime,
    night: timedelta,
) -> datetime:
    """Earliest Fajr the rule accepts."""
    if rule is HighLatitudeRule.TWILIGHT_ANGLE:
        return season_adjusted_morning_twilight(latitude, day_of_year, year, sunrise)
    return sunrise - night * night_portion(rule)


def safe_isha(
    rule: HighLatitudeRule,
    latitude: float,
    day_of_year: int,
    year: int,
    sunset: datetime,
    night: timedelta,
    shafaq: Shafaq = Shafaq.GENERAL,
) -> datetime:
    """Latest Isha the rule accepts."""
    if rule is HighLatitudeRule.TWILIGHT_ANGLE:
        return season_adjusted_evening_twilight(
            latitude, day_of_year, year, sunset, shafaq
        )
    return sunset + night * night_portion(rule)


def bound_fajr(
    angle_fajr: datetime | None,
    rule: HighLatitudeRule,
    latitude: float,
    day_of_year: int,
    year: int,
    sunrise: datetime,
    night: timedelta,
) -> datetime:
    """Angle-based Fajr when it lies within the rule's bound, else the bound itself."""
    if overrides_angle(rule, latitude):
        angle_fajr = sunrise - night / 7
    limit = safe_fajr(rule, latitude, day_of_year, year, sunrise, night)
    if angle_fajr is None or angle_fajr < limit:
        log.debug(
            "Fajr taken from %s bound (angle result: %s)", rule.value, angle_fajr
        )
        return limit
    return angle_fajr


def bound_isha(
    angle_isha: datetime | None,
    rule: HighLatitudeRule,
    latitude: float,
    day_of_year: int,
    year: int,
    sunset: datetime,
    night: timedelta,
    shafaq: Shafaq = Shafaq.GENERAL,
) -> datetime:
    """Angle-based Isha when it lies within the rule's bound, else the bound itself."""
    if overrides_angle(rule, latitude):
        angle_isha = sunset + night / 7
    limit = safe_isha(rule, latitude, day_of_year, year, sunset, night, shafaq)
    if angle_isha is None or angle_isha > limit:
        log.debug(
            "Isha taken from %s bound (angle result: %s)", rule.value, angle_isha
        )
        return limit
    return angle_isha
