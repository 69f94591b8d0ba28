"""Period bookkeeping for habits.

A habit counts completions inside a period (one calendar day or one
Monday-to-Sunday week). Periods are computed in local wall-clock time, so the
same instant can land in different periods for users in different time zones.
"""
import logging
from datetime import datetime, timedelta

from .models import FREQUENCIES

logger = logging.getLogger(__name__)

DEFAULT_TARGETS = {"daily": 1, "weekly": 3}


def local_now():
    return datetime.now()


def get_period_start(frequency, now):
    """Return the start of the period containing ``now``.

    Daily periods start at midnight. Weekly periods start at midnight on the
    Monday of the week, so a Sunday belongs to the week that began six days
    earlier. Any tzinfo on ``now`` is carried through unchanged.
    """
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if frequency == "daily":
        return start
    if frequency == "weekly":
        # weekday(): Monday is 0, Sunday is 6
        return start - timedelta(days=start.weekday())
    raise ValueError(f"Unknown frequency: {frequency!r}")


def reconcile_period(habit, now, save):
    """Reset ``habit`` if ``now`` has moved past its stored period.

    The stored start is compared to the canonical one by exact equality. On a
    mismatch progress drops to zero, the new start is stored and ``save`` is
    called with the habit. Otherwise nothing is touched.
    """
    canonical = get_period_start(habit.frequency, now)
    if habit.period_start != canonical:
        logger.debug(
            f"Habit {habit.id} rolled over from {habit.period_start} to {canonical}, "
            f"resetting progress {habit.progress}"
        )
        habit.progress = 0
        habit.period_start = canonical
        save(habit)
    return habit


def clamp(value, low, high):
    return min(max(low, value), high)


def default_target(frequency):
    return DEFAULT_TARGETS[frequency]


def set_progress(habit, value):
    habit.progress = clamp(value, 0, habit.target)
    return habit


def increment_progress(habit):
    habit.progress = min(habit.progress + 1, habit.target)
    return habit


def set_target(habit, value):
    habit.target = max(1, value)
    habit.progress = min(habit.progress, habit.target)
    return habit


def change_frequency(habit, frequency, now):
    # Always starts a fresh period, even if the old one is still current
    if frequency not in FREQUENCIES:
        raise ValueError(f"Unknown frequency: {frequency!r}")
    habit.frequency = frequency
    habit.period_start = get_period_start(frequency, now)
    habit.progress = 0
    return habit


def touch(habit, now):
    habit.last_updated = now
    return habit
