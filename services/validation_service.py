import re
from datetime import date, time

MIN_EVENT_NAME_LENGTH = 1
MAX_EVENT_NAME_LENGTH = 100
MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 4
MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15
MAX_CATEGORY_NAME_LENGTH = 50

ERROR_EMPTY_EVENT_NAME = "Event name cannot be empty"
ERROR_EMPTY_EVENT_DATE = "Event date cannot be empty"
ERROR_INVALID_DATE_FORMAT = "Invalid event date format"
ERROR_INVALID_TIME_FORMAT = "Please enter a valid time in h:mm AM/PM format."

DATE_PATTERN = re.compile(r"^(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4})$")
TIME_12H_PATTERN = re.compile(
    r"^(?P<hour>1[0-2]|0?[1-9]):(?P<minute>[0-5][0-9])\s?(?P<ampm>am|pm)$", re.IGNORECASE
)
TIME_24H_PATTERN = re.compile(r"^(?P<hour>[01]?[0-9]|2[0-3]):(?P<minute>[0-5][0-9])$")
COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


class ValidationResult:
    """Outcome of a validation rule: a flag plus a human-readable message."""

    __slots__ = ("is_valid", "error_message")

    def __init__(self, is_valid, error_message=None):
        self.is_valid = is_valid
        self.error_message = error_message

    @classmethod
    def success(cls):
        return cls(True, None)

    @classmethod
    def failure(cls, error_message):
        return cls(False, error_message)

    def __bool__(self):
        return self.is_valid

    def __repr__(self):
        if self.is_valid:
            return "ValidationResult(valid)"
        return f"ValidationResult(invalid: {self.error_message!r})"


def parse_date(value):
    """Parse an M/d/yyyy string into a date; return None on failure."""
    if value is None:
        return None
    if isinstance(value, date):
        return value
    m = DATE_PATTERN.match(str(value).strip())
    if not m:
        return None
    try:
        return date(int(m.group("year")), int(m.group("month")), int(m.group("day")))
    except ValueError:
        return None


def format_date(value):
    if value is None:
        return ""
    return f"{value.month}/{value.day}/{value.year:04d}"


def normalize_date(value):
    """Canonical M/d/yyyy text for a real date; anything else comes back trimmed."""
    parsed = parse_date(value)
    if parsed is None:
        return (value or "").strip()
    return format_date(parsed)


def parse_time(value):
    """Parse 'h:mm AM/PM' or 24h 'HH:mm' strings into a time; None on failure."""
    if not value:
        return None
    if isinstance(value, time):
        return value
    s = str(value).strip()
    m = TIME_12H_PATTERN.match(s)
    if m:
        hour = int(m.group("hour")) % 12
        if m.group("ampm").lower() == "pm":
            hour += 12
        return time(hour=hour, minute=int(m.group("minute")))
    m = TIME_24H_PATTERN.match(s)
    if m:
        return time(hour=int(m.group("hour")), minute=int(m.group("minute")))
    return None


def format_time(value):
    if value is None:
        return ""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def validate_event_name(name):
    trimmed = (name or "").strip()
    if not trimmed:
        return ValidationResult.failure(ERROR_EMPTY_EVENT_NAME)
    if not (MIN_EVENT_NAME_LENGTH <= len(trimmed) <= MAX_EVENT_NAME_LENGTH):
        return ValidationResult.failure(
            f"Event name must be between {MIN_EVENT_NAME_LENGTH} and {MAX_EVENT_NAME_LENGTH} characters."
        )
    return ValidationResult.success()


def validate_event_date(value):
    if not (value or "").strip():
        return ValidationResult.failure(ERROR_EMPTY_EVENT_DATE)
    if parse_date(value) is None:
        return ValidationResult.failure(ERROR_INVALID_DATE_FORMAT)
    return ValidationResult.success()


def validate_event_time(value):
    if not (value or "").strip():
        return ValidationResult.success()  # time is optional
    if not TIME_12H_PATTERN.match(value.strip()):
        return ValidationResult.failure(ERROR_INVALID_TIME_FORMAT)
    return ValidationResult.success()


def validate_event_fields(name, event_date, event_time=None):
    """Run name, date and time checks in order; the first failure wins."""
    for result in (
        validate_event_name(name),
        validate_event_date(event_date),
        validate_event_time(event_time),
    ):
        if not result:
            return result
    return ValidationResult.success()


def validate_phone_number(phone):
    digits = re.sub(r"\D", "", phone or "")
    if not (MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS):
        return ValidationResult.failure(
            f"Phone number must contain between {MIN_PHONE_DIGITS} and {MAX_PHONE_DIGITS} digits."
        )
    return ValidationResult.success()


def validate_username(username):
    trimmed = (username or "").strip()
    if not (MIN_USERNAME_LENGTH <= len(trimmed) <= MAX_USERNAME_LENGTH):
        return ValidationResult.failure(
            f"Username must be between {MIN_USERNAME_LENGTH} and {MAX_USERNAME_LENGTH} characters."
        )
    return ValidationResult.success()


def validate_password(password):
    if len(password or "") < MIN_PASSWORD_LENGTH:
        return ValidationResult.failure(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    return ValidationResult.success()


def validate_credentials(username, password):
    result = validate_username(username)
    if not result:
        return result
    return validate_password(password)


def validate_category_name(name):
    trimmed = (name or "").strip()
    if not (1 <= len(trimmed) <= MAX_CATEGORY_NAME_LENGTH):
        return ValidationResult.failure(
            f"Category name must be between 1 and {MAX_CATEGORY_NAME_LENGTH} characters."
        )
    return ValidationResult.success()


def validate_color(color):
    if not COLOR_PATTERN.match(color or ""):
        return ValidationResult.failure("Color must be a hex code like #2196F3.")
    return ValidationResult.success()


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ["1", "true", "yes", "on"]
