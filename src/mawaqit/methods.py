"""Named calculation methods and their preset parameters.

The solver only ever sees the resulting CalculationParameters; the method
identity is carried along as an informational tag.
"""

from enum import Enum

from mawaqit.models import (
    CalculationParameters,
    HighLatitudeRule,
    PrayerAdjustments,
    Rounding,
)


class CalculationMethod(Enum):
    KARACHI = 1
    NORTH_AMERICA_USA = 2
    MUSLIM_WORLD_LEAGUE = 3
    UMM_AL_QURA = 4
    EGYPTIAN = 5
    DUBAI = 6
    KUWAIT = 7
    QATAR = 8
    SINGAPORE = 9
    ALGERIAN = 10
    FRANCE = 11
    RUSSIA = 12
    TUNISIA = 13
    TURKEY = 14
    MOROCCO = 15
    JORDAN = 16
    OMAN = 17
    MUNICH = 18
    MALDIVES = 19
    NORTH_AMERICA_CANADA = 20
    TAJIKISTAN = 21
    VIENNA = 22
    BELGIUM = 23
    SUDAN = 24
    LIBYA = 25
    IRAQ = 26
    LUXEMBOURG = 27
    TEHRAN = 28
    MOONSIGHTING_COMMITTEE = 29
    OTHER = 30

    @classmethod
    def from_code(cls, code: int) -> "CalculationMethod":
        """Method for a numeric code; unknown codes map to Muslim World League."""
        try:
            return cls(code)
        except ValueError:
            return cls.MUSLIM_WORLD_LEAGUE

    @property
    def parameters(self) -> CalculationParameters:
        fajr_angle, isha, extra = _PRESETS[self]
        if isinstance(isha, str):
            # "<n> min" means an interval after Maghrib
            fields = {"isha_interval": int(isha.split()[0])}
        else:
            fields = {"isha_angle": isha}
        return CalculationParameters(
            method=self.name.lower(), fajr_angle=fajr_angle, **fields, **extra
        )


_DHUHR_PLUS_ONE = {"method_adjustments": PrayerAdjustments(dhuhr=1)}

# method -> (fajr angle, isha angle or "<n> min", extra fields)
_PRESETS: dict[CalculationMethod, tuple[float, float | str, dict]] = {
    CalculationMethod.MUSLIM_WORLD_LEAGUE: (18, 17, _DHUHR_PLUS_ONE),
    CalculationMethod.OTHER: (18, 17, _DHUHR_PLUS_ONE),
    CalculationMethod.EGYPTIAN: (19.5, 17.5, _DHUHR_PLUS_ONE),
    CalculationMethod.KARACHI: (18, 18, _DHUHR_PLUS_ONE),
    CalculationMethod.UMM_AL_QURA: (18.5, "90 min", {}),
    CalculationMethod.DUBAI: (
        18.2,
        18.2,
        {
            "method_adjustments": PrayerAdjustments(
                sunrise=-3, dhuhr=3, asr=3, maghrib=3
            )
        },
    ),
    CalculationMethod.MOONSIGHTING_COMMITTEE: (
        18,
        18,
        {
            "method_adjustments": PrayerAdjustments(dhuhr=5, maghrib=3),
            "high_latitude_rule": HighLatitudeRule.TWILIGHT_ANGLE,
        },
    ),
    CalculationMethod.NORTH_AMERICA_USA: (15, 15, _DHUHR_PLUS_ONE),
    CalculationMethod.NORTH_AMERICA_CANADA: (13, 13, _DHUHR_PLUS_ONE),
    CalculationMethod.KUWAIT: (18, 17.5, {}),
    CalculationMethod.QATAR: (18, "90 min", {}),
    CalculationMethod.SINGAPORE: (
        20,
        18,
        {**_DHUHR_PLUS_ONE, "rounding": Rounding.UP},
    ),
    CalculationMethod.TEHRAN: (17.7, 14, {"maghrib_angle": 4.5}),
    CalculationMethod.TURKEY: (
        18,
        17,
        {
            "method_adjustments": PrayerAdjustments(
                sunrise=-7, dhuhr=5, asr=4, maghrib=7
            )
        },
    ),
    CalculationMethod.ALGERIAN: (18, 17, {}),
    CalculationMethod.FRANCE: (12, 12, {}),
    CalculationMethod.RUSSIA: (16, 15, {}),
    CalculationMethod.TUNISIA: (18, 18, {}),
    CalculationMethod.MOROCCO: (18, 17, {}),
    CalculationMethod.JORDAN: (18.5, "90 min", {}),
    CalculationMethod.OMAN: (18.5, "90 min", {}),
    CalculationMethod.MUNICH: (18, 17, {}),
    CalculationMethod.MALDIVES: (18, 17, {}),
    CalculationMethod.TAJIKISTAN: (18, 17, {}),
    CalculationMethod.VIENNA: (18, 17, {}),
    CalculationMethod.BELGIUM: (18, 17, {}),
    CalculationMethod.SUDAN: (19.5, 17.5, {}),
    CalculationMethod.LIBYA: (19.5, 17.5, {}),
    CalculationMethod.IRAQ: (18, 17, {}),
    CalculationMethod.LUXEMBOURG: (18, 17, {}),
}
