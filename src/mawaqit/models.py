"""Data model definitions — immutable inputs, configuration and solved results."""

import dataclasses
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from pytz import utc

from mawaqit.errors import InputError
from mawaqit.julian import CalendarDate


@dataclass(frozen=True)
class GeoCoordinate:
    """Observer position. Validated on construction."""

    latitude: float  # Decimal degrees, north positive
    longitude: float  # Decimal degrees, east positive
    altitude: float | None = None  # Metres above sea level; not used by the solver

    def __post_init__(self) -> None:
        if not math.isfinite(self.latitude) or not -90 <= self.latitude <= 90:
            raise InputError(f"Latitude out of range [-90, 90]: {self.latitude}")
        if not math.isfinite(self.longitude) or not -180 <= self.longitude <= 180:
            raise InputError(f"Longitude out of range [-180, 180]: {self.longitude}")


class Prayer(Enum):
    FAJR = "fajr"
    SUNRISE = "sunrise"
    DHUHR = "dhuhr"
    ASR = "asr"
    MAGHRIB = "maghrib"
    ISHA = "isha"


class Madhab(Enum):
    """School of thought for Asr. The value is the shadow length factor."""

    STANDARD = 1  # Shafi, Maliki, Hanbali
    ALTERNATE = 2  # Hanafi

    @property
    def shadow_length(self) -> int:
        return self.value


class HighLatitudeRule(Enum):
    """Bound applied to Fajr and Isha when twilight lasts all night."""

    MIDDLE_OF_THE_NIGHT = "middle_of_the_night"
    SEVENTH_OF_THE_NIGHT = "seventh_of_the_night"
    TWILIGHT_ANGLE = "twilight_angle"  # Seasonal adjustment tables


class Rounding(Enum):
    NONE = "none"
    NEAREST = "nearest"
    UP = "up"


class Shafaq(Enum):
    """Twilight colour used by the seasonal evening table."""

    GENERAL = "general"
    AHMER = "ahmer"  # Red
    ABYAD = "abyad"  # White


@dataclass(frozen=True)
class PrayerAdjustments:
    """Signed minute offsets per prayer. Adding two of them sums each field."""

    fajr: int = 0
    sunrise: int = 0
    dhuhr: int = 0
    asr: int = 0
    maghrib: int = 0
    isha: int = 0

    def __add__(self, other: "PrayerAdjustments") -> "PrayerAdjustments":
        if not isinstance(other, PrayerAdjustments):
            return NotImplemented
        return PrayerAdjustments(
            fajr=self.fajr + other.fajr,
            sunrise=self.sunrise + other.sunrise,
            dhuhr=self.dhuhr + other.dhuhr,
            asr=self.asr + other.asr,
            maghrib=self.maghrib + other.maghrib,
            isha=self.isha + other.isha,
        )

    def minutes_for(self, prayer: Prayer) -> int:
        return getattr(self, prayer.value)


@dataclass(frozen=True)
class CalculationParameters:
    """Everything the solver needs besides location and date.

    Fields are fixed after construction; use replace() to derive a variant,
    e.g. ``params.replace(madhab=Madhab.ALTERNATE)``.

    The defaults are a template, not a usable method: with every angle at 0
    Fajr falls after sunrise and solving returns None. Start from a
    CalculationMethod preset or set the angles explicitly.
    """

    method: str = "other"  # Informational tag; the solver never branches on it
    fajr_angle: float = 0.0  # Degrees below the horizon
    maghrib_angle: float = 0.0  # 0 means geometric sunset
    isha_angle: float = 0.0  # Degrees below the horizon
    isha_interval: int = 0  # Minutes after Maghrib; nonzero replaces isha_angle
    madhab: Madhab = Madhab.STANDARD
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    method_adjustments: PrayerAdjustments = field(default_factory=PrayerAdjustments)
    adjustments: PrayerAdjustments = field(default_factory=PrayerAdjustments)
    rounding: Rounding = Rounding.NEAREST
    shafaq: Shafaq = Shafaq.GENERAL

    def __post_init__(self) -> None:
        for name in ("fajr_angle", "maghrib_angle", "isha_angle"):
            angle = getattr(self, name)
            if not math.isfinite(angle) or not 0 <= angle < 90:
                raise InputError(f"{name} must be in [0, 90): {angle}")
        if self.isha_interval < 0:
            raise InputError(f"isha_interval must not be negative: {self.isha_interval}")
        if self.isha_interval and self.isha_angle:
            raise InputError(
                "isha_angle and isha_interval are mutually exclusive; "
                f"got {self.isha_angle}° and {self.isha_interval} min"
            )

    def replace(self, **changes) -> "CalculationParameters":
        """Copy with the given fields replaced. The copy is validated again."""
        return dataclasses.replace(self, **changes)

    @property
    def total_adjustments(self) -> PrayerAdjustments:
        return self.method_adjustments + self.adjustments


@dataclass(frozen=True)
class PrayerTimes:
    """Solved prayer instants for one date and location. All instants are UTC."""

    date: CalendarDate
    coordinates: GeoCoordinate
    parameters: CalculationParameters
    fajr: datetime
    sunrise: datetime
    dhuhr: datetime
    asr: datetime
    maghrib: datetime
    isha: datetime

    @property
    def times(self) -> dict[str, datetime]:
        """Prayer name → instant, in chronological order."""
        return {prayer.value: self.time_for(prayer) for prayer in Prayer}

    def time_for(self, prayer: Prayer) -> datetime:
        return getattr(self, prayer.value)


@dataclass(frozen=True)
class SunnahTimes:
    """Night divisions and Duha/Witr windows derived from two days of prayer times."""

    first_third_of_the_night: datetime
    middle_of_the_night: datetime
    last_third_of_the_night: datetime
    sunrise: datetime
    first_time_of_duha: datetime
    last_time_of_duha: datetime
    first_time_of_witr: datetime  # When Isha begins, not when it has been prayed
    last_time_of_witr: datetime  # Next Fajr minus a safety buffer

    @property
    def duha_range(self) -> tuple[datetime, datetime]:
        return self.first_time_of_duha, self.last_time_of_duha

    @property
    def duha_duration(self) -> timedelta:
        return self.last_time_of_duha - self.first_time_of_duha

    def is_duha_time(self, now: datetime) -> bool:
        """True when now falls inside the Duha window, both ends included.

        A naive datetime is read as UTC.
        """
        if now.tzinfo is None:
            now = utc.localize(now)
        return self.first_time_of_duha <= now <= self.last_time_of_duha
