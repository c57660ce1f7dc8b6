from services.event_types import EventEntry
from services.export_service import (
    CSV_HEADER,
    event_csv_line,
    events_csv_summary,
    events_to_csv,
    export_events_to_csv,
)


def _events():
    return [
        EventEntry(1, "Team Sync", "3/10/2025", "2:00 PM", category_name="Work"),
        EventEntry(2, 'Say "hi", Bob', "3/11/2025"),
    ]


def test_csv_quotes_names_and_leaves_blanks():
    assert event_csv_line(_events()[0]) == '1,"Team Sync",3/10/2025,2:00 PM,Work'
    assert event_csv_line(_events()[1]) == '2,"Say ""hi"", Bob",3/11/2025,,'


def test_csv_document_has_header_and_trailing_newline():
    document = events_to_csv(_events())
    assert document.splitlines()[0] == CSV_HEADER
    assert document.endswith("\n")
    assert events_to_csv([]) == CSV_HEADER + "\n"


def test_export_writes_file(tmp_path):
    target = tmp_path / "nested" / "events_export.csv"
    assert export_events_to_csv(_events(), target)
    assert target.read_text(encoding="utf-8") == events_to_csv(_events())


def test_export_failure_returns_false(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x")
    assert not export_events_to_csv(_events(), blocker / "events.csv")


def test_summary_lists_events_and_category_counts():
    summary = events_csv_summary(7, _events(), {"Work": 1, "Personal": 0})
    lines = summary.splitlines()
    assert lines[0] == "Event Summary for User ID: 7"
    assert lines[2] == "Event Details:"
    assert lines[3] == CSV_HEADER
    assert lines[-3:] == ["Category,Event Count", "Work,1", "Personal,0"]
