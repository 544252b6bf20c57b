"""
Day context: the signed day index that drives every rule lookup.

``days_until_weigh_in`` is a calendar-day difference, never elapsed hours:
a weigh-in tomorrow at 07:00 is 1 day out whether it is 06:00 or 23:59
today.  Negative values mean post-competition recovery.

The engine never reads the wall clock; "today" is always passed in.
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Optional, Union

from app.schemas.profile import AthleteProfile

DateLike = Union[datetime.date, datetime.datetime]

# Range used by every multiplier table.
MIN_TABLE_DAY = -1
MAX_TABLE_DAY = 5


class DayBucket(str, Enum):
    """Closed set of day categories used by the macro tables."""

    RECOVERY = "recovery"
    COMPETITION = "competition"
    DAY_1 = "day_1"
    DAY_2 = "day_2"
    DAY_3 = "day_3"
    DAY_4 = "day_4"
    DAY_5 = "day_5"
    TRAINING = "training"


_NUMBERED_BUCKETS: dict[int, DayBucket] = {
    1: DayBucket.DAY_1,
    2: DayBucket.DAY_2,
    3: DayBucket.DAY_3,
    4: DayBucket.DAY_4,
    5: DayBucket.DAY_5,
}


def _as_date(value: DateLike) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    return value


def days_until_weigh_in(weigh_in_date: DateLike, as_of: DateLike) -> int:
    """Calendar days from *as_of* to *weigh_in_date* (negative after)."""
    return (_as_date(weigh_in_date) - _as_date(as_of)).days


def days_until_for_profile(profile: AthleteProfile, as_of: Optional[DateLike] = None) -> int:
    """Day index for a profile, honouring its simulated date override.

    Raises :class:`ValueError` when neither a simulated date nor *as_of*
    is available.
    """
    today = profile.simulated_date or as_of
    if today is None:
        raise ValueError("as_of is required when the profile has no simulated_date")
    return days_until_weigh_in(profile.weigh_in_date, today)


def bucket_for(days_until: int) -> DayBucket:
    """Map any integer day index to exactly one bucket."""
    if days_until < 0:
        return DayBucket.RECOVERY
    if days_until == 0:
        return DayBucket.COMPETITION
    if days_until > MAX_TABLE_DAY:
        return DayBucket.TRAINING
    return _NUMBERED_BUCKETS[days_until]


def clamp_days(days_until: int) -> int:
    """Clamp a day index into the range covered by the multiplier tables."""
    return max(MIN_TABLE_DAY, min(MAX_TABLE_DAY, days_until))


def is_water_loading_day(days_until: int) -> bool:
    return 3 <= days_until <= 5
