"""Derived lookup structures over one user's events.

An index is never patched in place: every (re)load builds a fresh
``EventIndex`` from the loaded list and the caller swaps it in.
"""

import heapq
from datetime import timedelta

from services.validation_service import normalize_date

DEFAULT_HORIZON_DAYS = 7


def composite_key(name, event_date):
    return f"{normalize_date(event_date)}_{name}"


class EventIndex:
    def __init__(self, events=()):
        self._events = list(events)
        self._heap = []
        self._by_name = {}
        self._by_date = {}
        self._by_composite = {}
        for event in self._events:
            heapq.heappush(self._heap, event)
            self._by_name[event.name] = event
            self._by_date.setdefault(normalize_date(event.date), []).append(event)
            self._by_composite[composite_key(event.name, event.date)] = event

    @classmethod
    def build(cls, events):
        return cls(events)

    def __len__(self):
        return len(self._events)

    @property
    def events(self):
        return list(self._events)

    def peek_next(self):
        """Earliest-dated event, or None when empty. Ties have no defined winner."""
        return self._heap[0] if self._heap else None

    def upcoming(self, today, horizon_days=DEFAULT_HORIZON_DAYS):
        """Events dated within [today, today + horizon_days], earliest first."""
        end = today + timedelta(days=horizon_days)
        matches = []
        for event in self._heap:
            parsed = event.parsed_date
            if parsed is not None and today <= parsed <= end:
                matches.append(event)
        return sorted(matches)

    def find_by_name(self, name):
        return self._by_name.get(name)

    def contains_name(self, name):
        return name in self._by_name

    def events_on(self, event_date):
        return list(self._by_date.get(normalize_date(event_date), []))

    def find_by_name_and_date(self, name, event_date):
        return self._by_composite.get(composite_key(name, event_date))

    def contains(self, name, event_date):
        return composite_key(name, event_date) in self._by_composite

    def snapshot(self):
        """Plain-data view of every structure, for comparing two builds."""
        return {
            "next": self.peek_next().id if self._heap else None,
            "ordered": [e.id for e in sorted(self._heap, key=lambda e: (e.sort_key, e.id))],
            "by_name": {name: e.id for name, e in self._by_name.items()},
            "by_date": {d: [e.id for e in items] for d, items in self._by_date.items()},
            "by_composite": {key: e.id for key, e in self._by_composite.items()},
        }
