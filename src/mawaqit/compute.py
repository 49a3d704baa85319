"""Prayer time solving layer — solar events, high-latitude bounds, adjustments and Sunnah times."""

import logging
import math
from collections.abc import Iterator
from datetime import datetime, timedelta

from mawaqit.astronomy import SolarTime
from mawaqit.errors import InputError
from mawaqit.high_latitude import bound_fajr, bound_isha
from mawaqit.julian import CalendarDate
from mawaqit.models import (
    CalculationParameters,
    GeoCoordinate,
    Prayer,
    PrayerTimes,
    Rounding,
    SunnahTimes,
)

log = logging.getLogger(__name__)

DUHA_AFTER_SUNRISE = timedelta(minutes=20)
DUHA_BEFORE_DHUHR = timedelta(minutes=10)
WITR_BEFORE_FAJR = timedelta(minutes=5)


def time_from_hours(date: CalendarDate, hours: float | None) -> datetime | None:
    """UTC instant ``hours`` after 0h UTC of ``date``, seconds truncated.

    Returns None for a missing or non-finite value.
    """
    if hours is None or not math.isfinite(hours):
        return None
    h = math.floor(hours)
    m = math.floor((hours - h) * 60)
    s = math.floor((hours - (h + m / 60)) * 60 * 60)
    return date.midnight_utc() + timedelta(hours=h, minutes=m, seconds=s)


def round_minute(instant: datetime, rounding: Rounding) -> datetime:
    """Apply a rounding policy to an instant.

    Sub-second precision is always dropped. NEAREST rounds 30 seconds and above
    up; UP moves any non-zero remainder to the next minute.
    """
    truncated = instant.replace(second=0, microsecond=0)
    if rounding is Rounding.NONE:
        return instant.replace(microsecond=0)
    if rounding is Rounding.NEAREST and instant.second >= 30:
        return truncated + timedelta(minutes=1)
    if rounding is Rounding.UP and (instant.second or instant.microsecond):
        return truncated + timedelta(minutes=1)
    return truncated


def _is_ordered(instants: list[datetime]) -> bool:
    return all(earlier < later for earlier, later in zip(instants, instants[1:]))


def solve(
    coordinates: GeoCoordinate,
    date: CalendarDate,
    parameters: CalculationParameters,
) -> PrayerTimes | None:
    """Compute the six prayer instants for one date and location.

    Args:
        coordinates: Observer position.
        date: Calendar date whose prayers are wanted (dates are UTC days).
        parameters: Angles, madhab, high-latitude rule, adjustments and rounding.

    Returns:
        PrayerTimes with UTC instants, or None when the sun does not rise or set
        on this date or the next, or when adjustments break the
        fajr < sunrise < dhuhr < asr < maghrib < isha order.
    """
    solar_time = SolarTime.for_date(date, coordinates)
    tomorrow = date.next_day()
    tomorrow_solar_time = SolarTime.for_date(tomorrow, coordinates)

    dhuhr = time_from_hours(date, solar_time.transit)
    sunrise = time_from_hours(date, solar_time.sunrise)
    sunset = time_from_hours(date, solar_time.sunset)
    tomorrow_sunrise = time_from_hours(tomorrow, tomorrow_solar_time.sunrise)
    if dhuhr is None or sunrise is None or sunset is None or tomorrow_sunrise is None:
        log.debug("No sunrise or sunset at %s on %s", coordinates, date)
        return None

    asr = time_from_hours(
        date, solar_time.afternoon(parameters.madhab.shadow_length)
    )
    if asr is None:
        log.debug("Asr unreachable at %s on %s", coordinates, date)
        return None

    night = tomorrow_sunrise - sunset
    latitude = coordinates.latitude
    rule = parameters.high_latitude_rule

    fajr = bound_fajr(
        time_from_hours(date, solar_time.hour_angle(-parameters.fajr_angle, after_transit=False)),
        rule,
        latitude,
        date.day_of_year,
        date.year,
        sunrise,
        night,
    )

    maghrib = sunset
    if parameters.isha_interval > 0:
        isha = maghrib + timedelta(minutes=parameters.isha_interval)
    else:
        isha = bound_isha(
            time_from_hours(date, solar_time.hour_angle(-parameters.isha_angle, after_transit=True)),
            rule,
            latitude,
            date.day_of_year,
            date.year,
            sunset,
            night,
            parameters.shafaq,
        )

    if parameters.maghrib_angle > 0:
        angle_maghrib = time_from_hours(
            date, solar_time.hour_angle(-parameters.maghrib_angle, after_transit=True)
        )
        if angle_maghrib is not None and sunset < angle_maghrib < isha:
            maghrib = angle_maghrib

    raw = {
        Prayer.FAJR: fajr,
        Prayer.SUNRISE: sunrise,
        Prayer.DHUHR: dhuhr,
        Prayer.ASR: asr,
        Prayer.MAGHRIB: maghrib,
        Prayer.ISHA: isha,
    }
    adjustments = parameters.total_adjustments
    final = {
        prayer: round_minute(
            instant + timedelta(minutes=adjustments.minutes_for(prayer)),
            parameters.rounding,
        )
        for prayer, instant in raw.items()
    }

    if not _is_ordered([final[prayer] for prayer in Prayer]):
        log.debug("Prayer times out of order at %s on %s: %s", coordinates, date, final)
        return None

    return PrayerTimes(
        date=date,
        coordinates=coordinates,
        parameters=parameters,
        fajr=final[Prayer.FAJR],
        sunrise=final[Prayer.SUNRISE],
        dhuhr=final[Prayer.DHUHR],
        asr=final[Prayer.ASR],
        maghrib=final[Prayer.MAGHRIB],
        isha=final[Prayer.ISHA],
    )


def solve_days(
    coordinates: GeoCoordinate,
    start: CalendarDate,
    days: int,
    parameters: CalculationParameters,
) -> Iterator[tuple[CalendarDate, PrayerTimes | None]]:
    """Yield (date, result) for ``days`` consecutive dates starting at ``start``."""
    if days < 0:
        raise InputError(f"days must not be negative: {days}")
    for offset in range(days):
        date = start.add_days(offset)
        yield date, solve(coordinates, date, parameters)


def derive_sunnah(
    prayer_times: PrayerTimes,
    next_day: PrayerTimes | None = None,
) -> SunnahTimes | None:
    """Derive night divisions and the Duha/Witr windows.

    Args:
        prayer_times: Prayer times of the day whose night is divided.
        next_day: Prayer times of the following date with identical coordinates
            and parameters. Solved here when omitted.

    Returns:
        SunnahTimes rounded to the nearest minute, or None when the following
        day cannot be solved.

    Raises:
        InputError: If ``next_day`` is not the following date for the same
            coordinates and parameters.
    """
    tomorrow = prayer_times.date.next_day()
    if next_day is None:
        next_day = solve(prayer_times.coordinates, tomorrow, prayer_times.parameters)
        if next_day is None:
            log.debug("No prayer times for %s; Sunnah times unavailable", tomorrow)
            return None
    elif (
        next_day.date != tomorrow
        or next_day.coordinates != prayer_times.coordinates
        or next_day.parameters != prayer_times.parameters
    ):
        raise InputError(
            f"next_day must be {tomorrow} at the same location with the same parameters"
        )

    maghrib = prayer_times.maghrib
    next_fajr = next_day.fajr
    night = next_fajr - maghrib

    def nearest(instant: datetime) -> datetime:
        return round_minute(instant, Rounding.NEAREST)

    return SunnahTimes(
        first_third_of_the_night=nearest(maghrib + night / 3),
        middle_of_the_night=nearest(maghrib + night / 2),
        last_third_of_the_night=nearest(maghrib + night * 2 / 3),
        sunrise=nearest(prayer_times.sunrise),
        first_time_of_duha=nearest(prayer_times.sunrise + DUHA_AFTER_SUNRISE),
        last_time_of_duha=nearest(prayer_times.dhuhr - DUHA_BEFORE_DHUHR),
        first_time_of_witr=nearest(prayer_times.isha),
        last_time_of_witr=nearest(next_fajr - WITR_BEFORE_FAJR),
    )


def is_duha_time(sunnah_times: SunnahTimes, now: datetime) -> bool:
    """True when ``now`` lies within the Duha window, both ends included."""
    return sunnah_times.is_duha_time(now)
