from datetime import date, timedelta

from timesheets.schemas.employee import Employee
from timesheets.schemas.timesheet import Timesheet
from timesheets.services.selector import is_open_week, select_current, week_ending

TODAY = date(2025, 6, 11)
OWNER = Employee(number=1, user_name="alice")


def sheet(offset_days, timesheet_id=None):
    return Timesheet(timesheet_id=timesheet_id, owner=OWNER, week_ending=TODAY + timedelta(days=offset_days))


def test_empty_input_selects_nothing():
    assert select_current([], TODAY) is None


def test_nearest_week_ending_wins():
    sheets = [sheet(-10), sheet(-1), sheet(1), sheet(10)]
    assert select_current(sheets, TODAY).week_ending in (TODAY - timedelta(days=1), TODAY + timedelta(days=1))


def test_future_week_wins_a_tie():
    assert select_current([sheet(-1), sheet(1)], TODAY).week_ending == TODAY + timedelta(days=1)
    assert select_current([sheet(1), sheet(-1)], TODAY).week_ending == TODAY + timedelta(days=1)


def test_exact_match_beats_everything():
    assert select_current([sheet(7), sheet(0), sheet(-7)], TODAY).week_ending == TODAY


def test_remaining_ties_keep_input_order():
    first, second = sheet(2, timesheet_id=1), sheet(2, timesheet_id=2)
    assert select_current([first, second], TODAY).timesheet_id == 1


def test_week_ending_is_the_friday_of_the_calendar_week():
    assert week_ending(date(2025, 6, 9)) == date(2025, 6, 13)   # Monday
    assert week_ending(date(2025, 6, 11)) == date(2025, 6, 13)  # Wednesday
    assert week_ending(date(2025, 6, 13)) == date(2025, 6, 13)  # Friday


def test_weekend_belongs_to_the_friday_just_past():
    assert week_ending(date(2025, 6, 14)) == date(2025, 6, 13)  # Saturday
    assert week_ending(date(2025, 6, 15)) == date(2025, 6, 13)  # Sunday


def test_is_open_week():
    assert is_open_week(date(2025, 6, 13), TODAY)
    assert is_open_week(date(2025, 6, 20), TODAY)
    assert not is_open_week(date(2025, 6, 6), TODAY)


def test_week_stays_open_through_the_weekend():
    assert is_open_week(date(2025, 6, 13), date(2025, 6, 14))
    assert is_open_week(date(2025, 6, 13), date(2025, 6, 15))
    assert not is_open_week(date(2025, 6, 13), date(2025, 6, 16))
