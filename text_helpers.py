import re
from collections import Counter

MIN_AUTOCOMPLETE_LENGTH = 2
MAX_TITLE_LENGTH = 50
DEFAULT_TITLE = "New Event"

# Checked in order; the first keyword hit decides the type.
EVENT_TYPE_KEYWORDS = [
    ("Meeting", ("meeting", "call", "sync")),
    ("Workout", ("workout", "gym", "exercise")),
    ("Meal", ("lunch", "dinner", "meal")),
    ("Appointment", ("appointment", "doctor", "checkup")),
    ("Break", ("coffee", "break", "rest")),
    ("Planning", ("review", "planning", "strategy")),
    ("Presentation", ("presentation", "demo", "show")),
    ("Discussion", ("interview", "discussion")),
]

TIME_CONTEXT_PREFIXES = {
    "morning": "Morning",
    "afternoon": "Afternoon",
    "evening": "Evening",
    "night": "Night",
}

_SUGGESTION_PREFIX = re.compile(r"^(title|suggestion)\s*:\s*", re.IGNORECASE)


def find_matching_event_name(text, names):
    """Autocomplete: first name starting with text, else first containing it."""
    typed = (text or "").strip().lower()
    if len(typed) < MIN_AUTOCOMPLETE_LENGTH:
        return None
    for name in names:
        if name.lower().startswith(typed):
            return name
    for name in names:
        if typed in name.lower():
            return name
    return None


def extract_event_type(name):
    lowered = (name or "").lower()
    for event_type, keywords in EVENT_TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return event_type
    words = (name or "").split()
    return words[-1] if words else "Event"


def time_based_title(base_type, time_context):
    prefix = TIME_CONTEXT_PREFIXES.get((time_context or "").lower())
    return f"{prefix} {base_type}" if prefix else base_type


def fallback_title(event_names, time_context):
    """
    Local title guess from the user's history (most recent first).
    The most frequent event type wins when it shows up more than once,
    otherwise the most recent event's type is used.
    """
    names = [n for n in (event_names or []) if n and n.strip()]
    if not names:
        return time_based_title("Event", time_context)

    types = [extract_event_type(n) for n in names]
    most_common, frequency = Counter(types).most_common(1)[0]
    if frequency > 1:
        return time_based_title(most_common, time_context)
    return time_based_title(types[0], time_context)


def clean_suggestion(raw):
    if not raw or not raw.strip():
        return DEFAULT_TITLE
    cleaned = raw.strip().splitlines()[0].strip()
    cleaned = cleaned.strip("\"'").strip()
    cleaned = _SUGGESTION_PREFIX.sub("", cleaned).strip().strip("\"'").strip()
    if len(cleaned) > MAX_TITLE_LENGTH:
        cleaned = cleaned[: MAX_TITLE_LENGTH - 3] + "..."
    return cleaned or DEFAULT_TITLE
