"""Value objects passed between the event store, indices and service."""

from collections import namedtuple
from datetime import date
from enum import Enum

from services.validation_service import (
    ValidationResult,
    normalize_date,
    parse_date,
    parse_time,
    validate_event_fields,
)


class EventEntry:
    """
    Detached snapshot of a stored event.

    Identity is the store-assigned id: two entries with the same id are equal
    whatever their other fields say. Entries order by parsed date, and
    entries whose date does not parse order after every dated entry.
    """

    __slots__ = (
        "id",
        "name",
        "date",
        "time",
        "user_id",
        "category_id",
        "category_name",
        "category_color",
    )

    def __init__(
        self,
        id,
        name,
        date,
        time="",
        user_id=None,
        category_id=None,
        category_name=None,
        category_color=None,
    ):
        self.id = id
        self.name = name
        self.date = date
        self.time = time or ""
        self.user_id = user_id
        self.category_id = category_id
        self.category_name = category_name
        self.category_color = category_color

    @classmethod
    def from_row(cls, row):
        """Build an entry from a mapping such as a view result row."""
        return cls(
            id=row["id"],
            name=row["name"],
            date=row["date"],
            time=row["time"] or "",
            user_id=row["user_id"],
            category_id=row["category_id"],
            category_name=row["category_name"],
            category_color=row["category_color"],
        )

    @property
    def parsed_date(self):
        return parse_date(self.date)

    @property
    def parsed_time(self):
        return parse_time(self.time)

    @property
    def sort_key(self):
        return self.parsed_date or date.max

    def __eq__(self, other):
        if not isinstance(other, EventEntry):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __lt__(self, other):
        if not isinstance(other, EventEntry):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __repr__(self):
        return f"EventEntry(id={self.id!r}, name={self.name!r}, date={self.date!r}, time={self.time!r})"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "time": self.time,
            "user_id": self.user_id,
            "category_id": self.category_id,
            "category_name": self.category_name,
            "category_color": self.category_color,
        }


def _require_positive_id(value, field, optional=False):
    if value is None and optional:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field} must be an int, got {type(value).__name__}")
    if value <= 0:
        raise ValueError(f"{field} must be positive, got {value}")
    return value


class EventRequest:
    """
    Immutable add/update request.

    Wrong types or impossible ids raise straight away since they are caller
    bugs; anything a user could have typed wrong is reported by validate().
    """

    __slots__ = ("name", "date", "time", "user_id", "category_id", "event_id")

    def __init__(self, name, date, user_id, time="", category_id=None, event_id=None):
        if not isinstance(name, str):
            raise TypeError("name must be a string")
        if not isinstance(date, str):
            raise TypeError("date must be a string")
        if time is None:
            time = ""
        if not isinstance(time, str):
            raise TypeError("time must be a string")
        object.__setattr__(self, "name", name.strip())
        object.__setattr__(self, "date", normalize_date(date))
        object.__setattr__(self, "time", time.strip())
        object.__setattr__(self, "user_id", _require_positive_id(user_id, "user_id"))
        object.__setattr__(self, "category_id", _require_positive_id(category_id, "category_id", optional=True))
        object.__setattr__(self, "event_id", _require_positive_id(event_id, "event_id", optional=True))

    def __setattr__(self, key, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def validate(self) -> ValidationResult:
        return validate_event_fields(self.name, self.date, self.time)

    def to_entry(self):
        """Candidate entry used for conflict checks before the row exists."""
        return EventEntry(
            id=self.event_id,
            name=self.name,
            date=self.date,
            time=self.time,
            user_id=self.user_id,
            category_id=self.category_id,
        )

    def _key(self):
        return (self.name, self.date, self.time, self.user_id, self.category_id, self.event_id)

    def __eq__(self, other):
        if not isinstance(other, EventRequest):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return (
            f"EventRequest(name={self.name!r}, date={self.date!r}, time={self.time!r}, "
            f"user_id={self.user_id!r}, category_id={self.category_id!r}, event_id={self.event_id!r})"
        )


class SaveStatus(Enum):
    SAVED = "saved"
    INVALID = "invalid"
    DUPLICATE = "duplicate"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"


class SaveResult:
    """What happened to an add/update/delete; never raised, always returned."""

    __slots__ = ("status", "message", "event", "conflicts")

    def __init__(self, status, message=None, event=None, conflicts=None):
        self.status = status
        self.message = message
        self.event = event
        self.conflicts = list(conflicts or [])

    @property
    def ok(self):
        return self.status is SaveStatus.SAVED

    def __bool__(self):
        return self.ok

    def __repr__(self):
        return f"SaveResult({self.status.name}, message={self.message!r})"

    def to_dict(self):
        return {
            "status": self.status.value,
            "message": self.message,
            "event": self.event.to_dict() if self.event else None,
            "conflicts": [c.to_dict() for c in self.conflicts],
        }


EventChange = namedtuple("EventChange", ["kind", "user_id", "event"])

CHANGE_ADDED = "added"
CHANGE_UPDATED = "updated"
CHANGE_DELETED = "deleted"
