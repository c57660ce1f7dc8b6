import logging
from pathlib import Path

logger = logging.getLogger(__name__)

CSV_HEADER = "Event ID,Event Name,Date,Time,Category"
CSV_FILENAME = "events_export.csv"


def _quote(value):
    return '"' + (value or "").replace('"', '""') + '"'


def event_csv_line(event):
    return ",".join([
        str(event.id),
        _quote(event.name),
        event.date or "",
        event.time or "",
        event.category_name or "",
    ])


def events_to_csv(events):
    lines = [CSV_HEADER]
    lines.extend(event_csv_line(event) for event in events)
    return "\n".join(lines) + "\n"


def export_events_to_csv(events, path):
    """Write the CSV document to path; False (and a log line) on I/O errors."""
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(events_to_csv(events), encoding="utf-8")
    except OSError as e:
        logger.error("Error exporting to CSV: %s", e)
        return False
    logger.info("Exported %d events to %s", len(events), target)
    return True


def events_csv_summary(user_id, events, category_counts):
    lines = [f"Event Summary for User ID: {user_id}", "", "Event Details:"]
    lines.append(events_to_csv(events).rstrip("\n"))
    lines.extend(["", "Category Summary:", "Category,Event Count"])
    for name, count in category_counts.items():
        lines.append(f"{name},{count}")
    return "\n".join(lines) + "\n"
