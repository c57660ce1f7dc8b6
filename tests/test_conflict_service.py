from services.conflict_service import (
    build_conflict_message,
    events_conflict,
    find_conflicts,
)
from services.event_types import EventEntry


def _event(event_id, name, time, event_date="3/10/2025"):
    return EventEntry(event_id, name, event_date, time, user_id=1)


def test_thirty_minutes_apart_conflicts():
    team_sync = _event(1, "Team Sync", "2:00 PM")
    standup = _event(None, "Standup", "2:30 PM")
    assert events_conflict(team_sync, standup)
    assert find_conflicts(standup, [team_sync]) == [team_sync]


def test_three_hours_apart_does_not_conflict():
    team_sync = _event(1, "Team Sync", "2:00 PM")
    standup = _event(None, "Standup", "5:00 PM")
    assert not events_conflict(team_sync, standup)
    assert find_conflicts(standup, [team_sync]) == []


def test_threshold_is_strict():
    base = _event(1, "Base", "2:00 PM")
    assert events_conflict(base, _event(2, "Close", "3:59 PM"))
    assert not events_conflict(base, _event(3, "Exactly two hours", "4:00 PM"))
    assert events_conflict(base, _event(4, "Before", "12:01 PM"))


def test_missing_or_unparsable_time_never_conflicts():
    timed = _event(1, "Timed", "2:00 PM")
    assert not events_conflict(timed, _event(2, "Untimed", ""))
    assert not events_conflict(_event(3, "Untimed", ""), _event(4, "Untimed too", ""))
    assert not events_conflict(timed, _event(5, "Garbage", "lunchtime"))


def test_find_conflicts_skips_excluded_id_and_other_dates():
    existing = _event(7, "Team Sync", "2:00 PM")
    other_day = _event(8, "Review", "2:15 PM", event_date="3/11/2025")
    moved = _event(7, "Team Sync", "2:30 PM")
    assert find_conflicts(moved, [existing, other_day], exclude_event_id=7) == []


def test_conflict_message_lists_overlaps():
    candidate = _event(None, "Standup", "2:30 PM")
    message = build_conflict_message(candidate, [_event(1, "Team Sync", "2:00 PM")])
    assert "'Standup' at 2:30 PM" in message
    assert "- Team Sync at 2:00 PM" in message
    assert message.endswith("Do you want to proceed anyway?")


def test_zero_padded_date_is_the_same_day():
    existing = _event(1, "Team Sync", "2:00 PM")
    padded = _event(None, "Standup", "2:30 PM", event_date="03/10/2025")
    assert find_conflicts(padded, [existing]) == [existing]
