"""Event workflow: validate, check duplicates/conflicts, write, reload, notify."""

import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from services.conflict_service import (
    build_conflict_message,
    events_sharing_date,
    find_conflicts,
)
from services.event_index import DEFAULT_HORIZON_DAYS, EventIndex
from services.event_types import (
    CHANGE_ADDED,
    CHANGE_DELETED,
    CHANGE_UPDATED,
    EventChange,
    SaveResult,
    SaveStatus,
)
from text_helpers import find_matching_event_name

logger = logging.getLogger(__name__)

ERROR_DUPLICATE_EVENT = "An event with this name and date already exists"
ERROR_EVENT_NOT_FOUND = "Event not found"
ERROR_UNKNOWN_CATEGORY = "Category not found"
ERROR_DATABASE_OPERATION = "Database operation failed"
SUCCESS_EVENT_ADDED = "Event added successfully!"
SUCCESS_EVENT_UPDATED = "Event updated successfully!"
SUCCESS_EVENT_DELETED = "Event deleted successfully."


class EventService:
    """
    One instance per running app. Holds an EventIndex per user id, replaced
    wholesale on every load, and a list of observers called after each
    successful mutation.
    """

    def __init__(self, store, horizon_days=DEFAULT_HORIZON_DAYS, today_fn=date.today):
        self.store = store
        self.horizon_days = horizon_days
        self.today_fn = today_fn
        self._indices = {}
        self._observers = []

    # --- Observers ---

    def subscribe(self, callback):
        if callback not in self._observers:
            self._observers.append(callback)

    def unsubscribe(self, callback):
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self, change):
        for callback in list(self._observers):
            try:
                callback(change)
            except Exception as exc:
                logger.warning("Event observer %r failed for %s: %s", callback, change.kind, exc)

    # --- Loading ---

    def load_events(self, user_id):
        """Read the user's events and rebuild their index; [] on storage failure."""
        try:
            events = self.store.get_all_events(user_id)
        except SQLAlchemyError as exc:
            self.store.rollback()
            logger.error("Error loading events for user %s: %s", user_id, exc)
            return []
        self._indices[user_id] = EventIndex.build(events)
        return events

    def index_for(self, user_id):
        index = self._indices.get(user_id)
        if index is None:
            self.load_events(user_id)
            index = self._indices.get(user_id, EventIndex())
        return index

    def forget_user(self, user_id):
        self._indices.pop(user_id, None)

    # --- Mutations ---

    def add_event(self, request, allow_conflicts=False):
        validation = request.validate()
        if not validation:
            return SaveResult(SaveStatus.INVALID, validation.error_message)
        if not self._category_allowed(request):
            return SaveResult(SaveStatus.INVALID, ERROR_UNKNOWN_CATEGORY)

        index = self.index_for(request.user_id)
        if index.contains(request.name, request.date):
            return SaveResult(SaveStatus.DUPLICATE, ERROR_DUPLICATE_EVENT)

        candidate = request.to_entry()
        conflicts = find_conflicts(candidate, index.events_on(request.date))
        if conflicts and not allow_conflicts:
            logger.info("Time conflict detected for event %r", request.name)
            return SaveResult(
                SaveStatus.CONFLICT, build_conflict_message(candidate, conflicts), conflicts=conflicts
            )

        created = self.store.add_event(
            request.name, request.date, request.time, request.user_id, request.category_id
        )
        if created is None:
            return SaveResult(SaveStatus.STORAGE_ERROR, ERROR_DATABASE_OPERATION)

        self.load_events(request.user_id)
        self._notify(EventChange(CHANGE_ADDED, request.user_id, created))
        return SaveResult(SaveStatus.SAVED, SUCCESS_EVENT_ADDED, event=created, conflicts=conflicts)

    def _category_allowed(self, request):
        if request.category_id is None:
            return True
        return self.store.category_belongs_to(request.category_id, request.user_id)

    def update_event(self, request, allow_conflicts=False):
        if request.event_id is None:
            raise ValueError("update_event needs a request with event_id")
        validation = request.validate()
        if not validation:
            return SaveResult(SaveStatus.INVALID, validation.error_message)

        existing = self.store.get_event(request.event_id)
        if existing is None or existing.user_id != request.user_id:
            return SaveResult(SaveStatus.NOT_FOUND, ERROR_EVENT_NOT_FOUND)
        if not self._category_allowed(request):
            return SaveResult(SaveStatus.INVALID, ERROR_UNKNOWN_CATEGORY)

        index = self.index_for(request.user_id)
        candidate = request.to_entry()
        conflicts = find_conflicts(candidate, index.events_on(request.date), request.event_id)
        if conflicts and not allow_conflicts:
            logger.info("Time conflict detected for updated event %r", request.name)
            return SaveResult(
                SaveStatus.CONFLICT, build_conflict_message(candidate, conflicts), conflicts=conflicts
            )

        if not self.store.update_event(
            request.event_id, request.name, request.date, request.time, request.category_id
        ):
            return SaveResult(SaveStatus.STORAGE_ERROR, ERROR_DATABASE_OPERATION)

        updated = self.store.get_event(request.event_id)
        self.load_events(request.user_id)
        self._notify(EventChange(CHANGE_UPDATED, request.user_id, updated))
        return SaveResult(SaveStatus.SAVED, SUCCESS_EVENT_UPDATED, event=updated, conflicts=conflicts)

    def delete_event(self, event_id, user_id):
        existing = self.store.get_event(event_id)
        if existing is None or existing.user_id != user_id:
            return SaveResult(SaveStatus.NOT_FOUND, ERROR_EVENT_NOT_FOUND)
        if not self.store.delete_event(event_id):
            return SaveResult(SaveStatus.STORAGE_ERROR, ERROR_DATABASE_OPERATION)

        self.load_events(user_id)
        self._notify(EventChange(CHANGE_DELETED, user_id, existing))
        return SaveResult(SaveStatus.SAVED, SUCCESS_EVENT_DELETED, event=existing)

    # --- Queries ---

    def all_events(self, user_id):
        return self.index_for(user_id).events

    def next_event(self, user_id):
        return self.index_for(user_id).peek_next()

    def upcoming_events(self, user_id, horizon_days=None):
        if horizon_days is None:
            horizon_days = self.horizon_days
        return self.index_for(user_id).upcoming(self.today_fn(), horizon_days)

    def find_event_by_name(self, user_id, name):
        return self.index_for(user_id).find_by_name(name)

    def find_event_by_name_and_date(self, user_id, name, event_date):
        return self.index_for(user_id).find_by_name_and_date(name, event_date)

    def events_on_date(self, user_id, event_date):
        return self.index_for(user_id).events_on(event_date)

    def event_exists(self, user_id, name, event_date=None):
        index = self.index_for(user_id)
        if event_date is None:
            return index.contains_name(name)
        return index.contains(name, event_date)

    def conflicting_events(self, candidate, exclude_event_id=None):
        return find_conflicts(
            candidate, self.events_on_date(candidate.user_id, candidate.date), exclude_event_id
        )

    def has_time_conflicts(self, candidate, exclude_event_id=None):
        return bool(self.conflicting_events(candidate, exclude_event_id))

    def same_day_events(self, user_id, event_date, exclude_event_id=None):
        return events_sharing_date(event_date, self.events_on_date(user_id, event_date), exclude_event_id)

    def event_count_by_category(self, user_id):
        try:
            return self.store.get_event_count_by_category(user_id)
        except SQLAlchemyError as exc:
            logger.error("Error getting event count by category for user %s: %s", user_id, exc)
            return {}

    def recent_events(self, user_id, limit=10):
        """Latest-dated events first; undated ones last."""
        events = self.index_for(user_id).events
        dated = sorted((e for e in events if e.parsed_date), key=lambda e: e.parsed_date, reverse=True)
        undated = [e for e in events if not e.parsed_date]
        return (dated + undated)[:limit]

    def autocomplete(self, user_id, text):
        return find_matching_event_name(text, [e.name for e in self.index_for(user_id).events])
