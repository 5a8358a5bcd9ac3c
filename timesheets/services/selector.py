# timesheets/services/selector.py
from datetime import date, timedelta
from typing import Optional, Sequence

from timesheets.schemas.timesheet import Timesheet

FRIDAY = 4


def week_ending(ref: date) -> date:
    """Friday of the Monday..Sunday calendar week that contains `ref`."""
    return ref - timedelta(days=ref.weekday()) + timedelta(days=FRIDAY)


def select_current(timesheets: Sequence[Timesheet], today: Optional[date] = None) -> Optional[Timesheet]:
    """
    Picks the timesheet whose week-ending date is nearest to `today`.

    At equal distance a present or future week wins over a past one. Remaining
    ties keep the first entry in input order.
    """
    if not timesheets:
        return None
    today = today or date.today()
    return min(
        timesheets,
        key=lambda ts: (abs((ts.week_ending - today).days), ts.week_ending < today),
    )


def is_open_week(week_end: date, today: Optional[date] = None) -> bool:
    """A week stays editable until the calendar week of its Friday is over."""
    return week_end >= week_ending(today or date.today())
