"""Julian-day arithmetic for proleptic Gregorian dates.

Everything here is plain arithmetic on Julian day numbers, so results do not
depend on the host calendar, locale or timezone database.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime

from pytz import utc

from mawaqit.errors import InputError

J2000 = 2451545.0  # Julian day of 2000-01-01 12:00 TT


def julian_day(year: int, month: int, day: int, hours: float = 0.0) -> float:
    """Julian day at the given UTC hour of a proleptic Gregorian date (Meeus ch. 7)."""
    y = year if month > 2 else year - 1
    m = month if month > 2 else month + 12
    d = day + hours / 24.0

    a = math.floor(y / 100)
    b = 2 - a + math.floor(a / 4)

    i0 = math.floor(365.25 * (y + 4716))
    i1 = math.floor(30.6001 * (m + 1))
    return i0 + i1 + d + b - 1524.5


def julian_century(jd: float) -> float:
    """Julian centuries elapsed since J2000."""
    return (jd - J2000) / 36525.0


def civil_from_julian_day(jd: float) -> tuple[int, int, int]:
    """Inverse of julian_day(): (year, month, day) containing the given instant."""
    shifted = jd + 0.5
    z = math.floor(shifted)
    alpha = math.floor((z - 1867216.25) / 36524.25)
    a = z + 1 + alpha - math.floor(alpha / 4)
    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)

    day = b - d - math.floor(30.6001 * e)
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715
    return year, month, day


def is_leap_year(year: int) -> bool:
    if year % 4 != 0:
        return False
    if year % 100 == 0 and year % 400 != 0:
        return False
    return True


def days_in_month(year: int, month: int) -> int:
    if month == 2:
        return 29 if is_leap_year(year) else 28
    if month in (4, 6, 9, 11):
        return 30
    return 31


@dataclass(frozen=True)
class CalendarDate:
    """A proleptic Gregorian calendar day with no time of day."""

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise InputError(f"Invalid month: {self.month}")
        if not 1 <= self.day <= days_in_month(self.year, self.month):
            raise InputError(
                f"Invalid day {self.day} for {self.year:04d}-{self.month:02d}"
            )

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @classmethod
    def from_date(cls, value: date) -> "CalendarDate":
        return cls(value.year, value.month, value.day)

    @property
    def julian_day(self) -> float:
        """Julian day at 0h UTC of this date."""
        return julian_day(self.year, self.month, self.day)

    @property
    def is_leap_year(self) -> bool:
        return is_leap_year(self.year)

    @property
    def day_of_year(self) -> int:
        """1-based ordinal of this date within its year."""
        return int(self.julian_day - julian_day(self.year, 1, 1)) + 1

    def add_days(self, days: int) -> "CalendarDate":
        return CalendarDate(*civil_from_julian_day(self.julian_day + days))

    def next_day(self) -> "CalendarDate":
        return self.add_days(1)

    def midnight_utc(self) -> datetime:
        """0h UTC of this date as an aware datetime."""
        return datetime(self.year, self.month, self.day, tzinfo=utc)
