"""Solar position and rise/transit/set solving.

Low-order polynomial expressions from Meeus, *Astronomical Algorithms*
(2nd ed.), chapters 12, 13, 15, 22 and 25. Accurate to well under a minute
for civil and religious twilight work; not a full ephemeris.
"""

import math
from dataclasses import dataclass

from mawaqit.julian import CalendarDate, julian_century
from mawaqit.models import GeoCoordinate

SOLAR_ALTITUDE = -50.0 / 60.0  # Refraction plus solar semi-diameter at rise/set


def unwind_angle(angle: float) -> float:
    """Wrap an angle into [0, 360)."""
    return angle % 360.0


def closest_angle(angle: float) -> float:
    """Equivalent angle in [-180, 180]."""
    if -180.0 <= angle <= 180.0:
        return angle
    return angle - 360.0 * round(angle / 360.0)


def normalize_to_scale(value: float, scale: float) -> float:
    return value - scale * math.floor(value / scale)


# --- Solar position (Meeus) ---


def mean_solar_longitude(t: float) -> float:
    return unwind_angle(280.4664567 + 36000.76983 * t + 0.0003032 * t**2)


def mean_lunar_longitude(t: float) -> float:
    return unwind_angle(218.3165 + 481267.8813 * t)


def ascending_lunar_node_longitude(t: float) -> float:
    return unwind_angle(
        125.04452 - 1934.136261 * t + 0.0020708 * t**2 + t**3 / 450000.0
    )


def mean_solar_anomaly(t: float) -> float:
    return unwind_angle(357.52911 + 35999.05029 * t - 0.0001537 * t**2)


def solar_equation_of_the_center(t: float, mean_anomaly: float) -> float:
    m = math.radians(mean_anomaly)
    term1 = (1.914602 - 0.004817 * t - 0.000014 * t**2) * math.sin(m)
    term2 = (0.019993 - 0.000101 * t) * math.sin(2 * m)
    term3 = 0.000289 * math.sin(3 * m)
    return term1 + term2 + term3


def apparent_solar_longitude(t: float, mean_longitude: float) -> float:
    longitude = mean_longitude + solar_equation_of_the_center(t, mean_solar_anomaly(t))
    omega = 125.04 - 1934.136 * t
    return unwind_angle(longitude - 0.00569 - 0.00478 * math.sin(math.radians(omega)))


def mean_obliquity_of_the_ecliptic(t: float) -> float:
    return 23.439291 - 0.013004167 * t - 0.0000001639 * t**2 + 0.0000005036 * t**3


def apparent_obliquity_of_the_ecliptic(t: float, mean_obliquity: float) -> float:
    omega = 125.04 - 1934.136 * t
    return mean_obliquity + 0.00256 * math.cos(math.radians(omega))


def mean_sidereal_time(t: float) -> float:
    jd = t * 36525.0 + 2451545.0
    theta = (
        280.46061837
        + 360.98564736629 * (jd - 2451545.0)
        + 0.000387933 * t**2
        - t**3 / 38710000.0
    )
    return unwind_angle(theta)


def nutation_in_longitude(
    solar_longitude: float, lunar_longitude: float, ascending_node: float
) -> float:
    l0 = math.radians(solar_longitude)
    lp = math.radians(lunar_longitude)
    omega = math.radians(ascending_node)
    return (
        (-17.2 / 3600) * math.sin(omega)
        - (1.32 / 3600) * math.sin(2 * l0)
        - (0.23 / 3600) * math.sin(2 * lp)
        + (0.21 / 3600) * math.sin(2 * omega)
    )


def nutation_in_obliquity(
    solar_longitude: float, lunar_longitude: float, ascending_node: float
) -> float:
    l0 = math.radians(solar_longitude)
    lp = math.radians(lunar_longitude)
    omega = math.radians(ascending_node)
    return (
        (9.2 / 3600) * math.cos(omega)
        + (0.57 / 3600) * math.cos(2 * l0)
        + (0.10 / 3600) * math.cos(2 * lp)
        - (0.09 / 3600) * math.cos(2 * omega)
    )


def altitude_of_celestial_body(
    latitude: float, declination: float, local_hour_angle: float
) -> float:
    phi = math.radians(latitude)
    delta = math.radians(declination)
    h = math.radians(local_hour_angle)
    return math.degrees(
        math.asin(
            math.sin(phi) * math.sin(delta)
            + math.cos(phi) * math.cos(delta) * math.cos(h)
        )
    )


# --- Interpolation across neighbouring days (Meeus ch. 3) ---


def interpolate(value: float, previous: float, following: float, factor: float) -> float:
    a = value - previous
    b = following - value
    c = b - a
    return value + (factor / 2) * (a + b + factor * c)


def interpolate_angles(
    value: float, previous: float, following: float, factor: float
) -> float:
    a = unwind_angle(value - previous)
    b = unwind_angle(following - value)
    c = b - a
    return value + (factor / 2) * (a + b + factor * c)


@dataclass(frozen=True)
class SolarCoordinates:
    """Apparent position of the sun at one Julian day. All angles in degrees."""

    julian_day: float
    declination: float
    right_ascension: float  # [0, 360)
    apparent_sidereal_time: float  # Greenwich, degrees
    equation_of_time: float  # Minutes; apparent minus mean solar time

    @classmethod
    def at(cls, julian_day: float) -> "SolarCoordinates":
        t = julian_century(julian_day)
        l0 = mean_solar_longitude(t)
        lp = mean_lunar_longitude(t)
        omega = ascending_lunar_node_longitude(t)
        apparent_longitude = math.radians(apparent_solar_longitude(t, l0))

        theta0 = mean_sidereal_time(t)
        delta_psi = nutation_in_longitude(l0, lp, omega)
        delta_epsilon = nutation_in_obliquity(l0, lp, omega)

        epsilon0 = mean_obliquity_of_the_ecliptic(t)
        epsilon_apparent = math.radians(apparent_obliquity_of_the_ecliptic(t, epsilon0))

        declination = math.degrees(
            math.asin(math.sin(epsilon_apparent) * math.sin(apparent_longitude))
        )
        right_ascension = unwind_angle(
            math.degrees(
                math.atan2(
                    math.cos(epsilon_apparent) * math.sin(apparent_longitude),
                    math.cos(apparent_longitude),
                )
            )
        )
        # Nutation in right ascension, expressed in degrees of sidereal time
        apparent_sidereal_time = theta0 + (
            (delta_psi * 3600) * math.cos(math.radians(epsilon0 + delta_epsilon))
        ) / 3600

        # Meeus eq. 28.1, minutes of time
        equation_of_time = 4 * closest_angle(
            l0
            - 0.0057183
            - right_ascension
            + delta_psi * math.cos(math.radians(epsilon0 + delta_epsilon))
        )

        return cls(
            julian_day=julian_day,
            declination=declination,
            right_ascension=right_ascension,
            apparent_sidereal_time=apparent_sidereal_time,
            equation_of_time=equation_of_time,
        )


def approximate_transit(
    longitude: float, sidereal_time: float, right_ascension: float
) -> float:
    """Fraction of the day at which the sun crosses the local meridian (Meeus eq. 15.2).

    The result is kept within half a day of local mean noon, so near the 180th
    meridian it may fall outside [0, 1) and consecutive dates stay a day apart.
    """
    west_longitude = -longitude
    local_noon = 0.5 + west_longitude / 360
    m0 = (right_ascension + west_longitude - sidereal_time) / 360
    return local_noon + normalize_to_scale(m0 - local_noon + 0.5, 1) - 0.5


def corrected_transit(
    approx_transit: float,
    longitude: float,
    sidereal_time: float,
    right_ascension: float,
    previous_right_ascension: float,
    next_right_ascension: float,
) -> float:
    """Solar transit in UTC hours after one refinement pass."""
    west_longitude = -longitude
    theta = unwind_angle(sidereal_time + 360.985647 * approx_transit)
    alpha = unwind_angle(
        interpolate_angles(
            right_ascension, previous_right_ascension, next_right_ascension, approx_transit
        )
    )
    local_hour_angle = closest_angle(theta - west_longitude - alpha)
    delta_m = local_hour_angle / -360
    return (approx_transit + delta_m) * 24


def corrected_hour_angle(
    approx_transit: float,
    angle: float,
    coordinates: GeoCoordinate,
    after_transit: bool,
    sidereal_time: float,
    right_ascension: float,
    previous_right_ascension: float,
    next_right_ascension: float,
    declination: float,
    previous_declination: float,
    next_declination: float,
) -> float | None:
    """UTC hours at which the sun reaches altitude ``angle`` before or after transit.

    Returns None when the sun never reaches that altitude on this day.
    """
    west_longitude = -coordinates.longitude
    phi = math.radians(coordinates.latitude)
    term1 = math.sin(math.radians(angle)) - math.sin(phi) * math.sin(
        math.radians(declination)
    )
    term2 = math.cos(phi) * math.cos(math.radians(declination))
    if term2 == 0:
        return None
    cos_h0 = term1 / term2
    if not -1.0 <= cos_h0 <= 1.0:
        return None
    h0 = math.degrees(math.acos(cos_h0))

    m = approx_transit + h0 / 360 if after_transit else approx_transit - h0 / 360
    theta = unwind_angle(sidereal_time + 360.985647 * m)
    alpha = unwind_angle(
        interpolate_angles(right_ascension, previous_right_ascension, next_right_ascension, m)
    )
    delta = interpolate(declination, previous_declination, next_declination, m)
    local_hour_angle = theta - west_longitude - alpha
    altitude = altitude_of_celestial_body(coordinates.latitude, delta, local_hour_angle)

    denominator = (
        360
        * math.cos(math.radians(delta))
        * math.cos(phi)
        * math.sin(math.radians(local_hour_angle))
    )
    if denominator == 0:
        return None
    delta_m = (altitude - angle) / denominator
    return (m + delta_m) * 24


def _solve_altitude(
    approx_transit: float,
    coordinates: GeoCoordinate,
    solar: SolarCoordinates,
    previous_solar: SolarCoordinates,
    next_solar: SolarCoordinates,
    angle: float,
    after_transit: bool,
) -> float | None:
    return corrected_hour_angle(
        approx_transit,
        angle,
        coordinates,
        after_transit,
        solar.apparent_sidereal_time,
        solar.right_ascension,
        previous_solar.right_ascension,
        next_solar.right_ascension,
        solar.declination,
        previous_solar.declination,
        next_solar.declination,
    )


@dataclass(frozen=True)
class SolarTime:
    """Transit, sunrise and sunset for one date and observer, in UTC hours.

    Hours are measured from 0h UTC of ``date`` and may fall outside [0, 24).
    """

    date: CalendarDate
    coordinates: GeoCoordinate
    solar: SolarCoordinates
    previous_solar: SolarCoordinates
    next_solar: SolarCoordinates
    approx_transit: float
    transit: float
    sunrise: float | None
    sunset: float | None

    @classmethod
    def for_date(cls, date: CalendarDate, coordinates: GeoCoordinate) -> "SolarTime":
        jd = date.julian_day
        previous_solar = SolarCoordinates.at(jd - 1)
        solar = SolarCoordinates.at(jd)
        next_solar = SolarCoordinates.at(jd + 1)

        m0 = approximate_transit(
            coordinates.longitude, solar.apparent_sidereal_time, solar.right_ascension
        )
        transit = corrected_transit(
            m0,
            coordinates.longitude,
            solar.apparent_sidereal_time,
            solar.right_ascension,
            previous_solar.right_ascension,
            next_solar.right_ascension,
        )
        return cls(
            date=date,
            coordinates=coordinates,
            solar=solar,
            previous_solar=previous_solar,
            next_solar=next_solar,
            approx_transit=m0,
            transit=transit,
            sunrise=_solve_altitude(
                m0, coordinates, solar, previous_solar, next_solar, SOLAR_ALTITUDE, False
            ),
            sunset=_solve_altitude(
                m0, coordinates, solar, previous_solar, next_solar, SOLAR_ALTITUDE, True
            ),
        )

    def hour_angle(self, angle: float, after_transit: bool) -> float | None:
        """UTC hours at which the sun stands at ``angle`` degrees of altitude."""
        return _solve_altitude(
            self.approx_transit,
            self.coordinates,
            self.solar,
            self.previous_solar,
            self.next_solar,
            angle,
            after_transit,
        )

    def afternoon(self, shadow_length: int) -> float | None:
        """UTC hours at which an object's shadow reaches ``shadow_length`` times its
        height plus its noon shadow."""
        tangent = abs(self.coordinates.latitude - self.solar.declination)
        inverse = shadow_length + math.tan(math.radians(tangent))
        angle = math.degrees(math.atan(1.0 / inverse))
        return self.hour_angle(angle, after_transit=True)
