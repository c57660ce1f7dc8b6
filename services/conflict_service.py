from services.validation_service import normalize_date, parse_time

CONFLICT_THRESHOLD_HOURS = 2
CONFLICT_THRESHOLD_MINUTES = CONFLICT_THRESHOLD_HOURS * 60


def _time_to_minutes(t):
    return (t.hour * 60) + t.minute


def events_conflict(first, second, threshold_minutes=CONFLICT_THRESHOLD_MINUTES):
    """
    True when both events carry a parseable time less than the threshold apart.
    An event without a usable time never conflicts with anything.
    """
    first_time = parse_time(first.time)
    second_time = parse_time(second.time)
    if first_time is None or second_time is None:
        return False
    gap = abs(_time_to_minutes(first_time) - _time_to_minutes(second_time))
    return gap < threshold_minutes


def events_sharing_date(event_date, events_on_date, exclude_event_id=None):
    day = normalize_date(event_date)
    return [
        ev for ev in events_on_date
        if normalize_date(ev.date) == day and not (exclude_event_id and ev.id == exclude_event_id)
    ]


def find_conflicts(candidate, events_on_date, exclude_event_id=None):
    if candidate is None or not candidate.date:
        return []
    return [
        ev for ev in events_sharing_date(candidate.date, events_on_date, exclude_event_id)
        if events_conflict(candidate, ev)
    ]


def has_conflicts(candidate, events_on_date, exclude_event_id=None):
    return bool(find_conflicts(candidate, events_on_date, exclude_event_id))


def build_conflict_message(candidate, conflicts):
    """Prompt text offering the user to proceed anyway or cancel."""
    when = f" at {candidate.time}" if candidate.time else ""
    lines = [f"Your event '{candidate.name}'{when} may overlap with:"]
    for ev in conflicts:
        line = f"- {ev.name}"
        if ev.time:
            line += f" at {ev.time}"
        lines.append(line)
    lines.append("")
    lines.append("Do you want to proceed anyway?")
    return "\n".join(lines)
