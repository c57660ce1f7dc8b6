from datetime import date, timedelta

from services.event_index import EventIndex
from services.event_types import EventEntry
from services.validation_service import format_date

TODAY = date(2025, 3, 10)


def _sample_events():
    return [
        EventEntry(1, "Team Sync", "3/10/2025", "2:00 PM"),
        EventEntry(2, "Dentist", "3/12/2025", "9:00 AM"),
        EventEntry(3, "Team Sync", "3/17/2025", "2:00 PM"),
        EventEntry(4, "Lunch", "3/10/2025", "12:00 PM"),
        EventEntry(5, "Mystery", "not a date"),
        EventEntry(6, "Kickoff", "1/2/2025"),
    ]


def test_peek_next_returns_earliest_date():
    index = EventIndex.build(_sample_events())
    assert index.peek_next().id == 6
    assert EventIndex.build([]).peek_next() is None


def test_rebuilding_twice_gives_identical_contents():
    events = _sample_events()
    assert EventIndex.build(events).snapshot() == EventIndex.build(events).snapshot()


def test_name_lookup_is_last_write_wins_and_case_sensitive():
    index = EventIndex.build(_sample_events())
    assert index.find_by_name("Team Sync").id == 3
    assert index.find_by_name("team sync") is None


def test_date_grouping_keeps_load_order():
    index = EventIndex.build(_sample_events())
    assert [e.id for e in index.events_on("3/10/2025")] == [1, 4]
    assert index.events_on("1/1/1999") == []


def test_composite_lookup_distinguishes_shared_name_or_date():
    index = EventIndex.build(_sample_events())
    assert index.find_by_name_and_date("Team Sync", "3/10/2025").id == 1
    assert index.find_by_name_and_date("Team Sync", "3/17/2025").id == 3
    assert index.find_by_name_and_date("Lunch", "3/10/2025").id == 4
    assert index.find_by_name_and_date("Lunch", "3/17/2025") is None
    assert index.contains("Dentist", "3/12/2025")
    assert not index.contains("Dentist", "3/10/2025")


def test_upcoming_window_is_inclusive_and_skips_far_dates():
    events = [
        EventEntry(1, "Today", format_date(TODAY)),
        EventEntry(2, "Soon", format_date(TODAY + timedelta(days=3))),
        EventEntry(3, "Later", format_date(TODAY + timedelta(days=10))),
        EventEntry(4, "Edge", format_date(TODAY + timedelta(days=7))),
        EventEntry(5, "Past", format_date(TODAY - timedelta(days=1))),
        EventEntry(6, "Broken", "??"),
    ]
    index = EventIndex.build(events)
    assert [e.id for e in index.upcoming(TODAY)] == [1, 2, 4]
    assert [e.id for e in index.upcoming(TODAY, horizon_days=3)] == [1, 2]


def test_upcoming_scenario_today_plus_three_plus_ten():
    events = [
        EventEntry(1, "A", format_date(TODAY)),
        EventEntry(2, "B", format_date(TODAY + timedelta(days=3))),
        EventEntry(3, "C", format_date(TODAY + timedelta(days=10))),
    ]
    assert [e.id for e in EventIndex.build(events).upcoming(TODAY, 7)] == [1, 2]


def test_zero_padded_dates_share_a_day():
    index = EventIndex.build([EventEntry(1, "Team Sync", "03/10/2025", "2:00 PM")])
    assert [e.id for e in index.events_on("3/10/2025")] == [1]
    assert index.contains("Team Sync", "3/10/2025")
    assert index.find_by_name_and_date("Team Sync", "03/10/2025").id == 1
