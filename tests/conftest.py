from datetime import datetime

import pytest
from pytz import timezone


def _wall_clock(instant: datetime, zone: str) -> str:
    """Format an instant as "M/D/YY, H:MM AM" in the given IANA zone."""
    local = instant.astimezone(timezone(zone))
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{local.month}/{local.day}/{local:%y}, {hour}:{local:%M} {meridiem}"


@pytest.fixture
def wall_clock():
    return _wall_clock
