"""Relational store for users, categories and events (SQLAlchemy session)."""

import logging

from sqlalchemy import func, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import (
    DEFAULT_CATEGORIES,
    DEFAULT_CATEGORY_COLOR,
    EVENT_SUMMARY_VIEW,
    Category,
    Event,
    User,
    db,
)
from services.event_types import EventEntry
from services.validation_service import (
    normalize_date,
    parse_date,
    validate_category_name,
    validate_color,
    validate_credentials,
    validate_event_fields,
    validate_phone_number,
)

logger = logging.getLogger(__name__)

_SELECT_SUMMARY = f"SELECT * FROM {EVENT_SUMMARY_VIEW}"


class EventStore:
    """
    Narrow persistence interface. Mutations validate their input first and
    report failure by return value; nothing is written for rejected input.
    """

    def __init__(self, database=db):
        self.db = database

    # --- Events ---

    def get_all_events(self, user_id):
        rows = self.db.session.execute(
            text(f"{_SELECT_SUMMARY} WHERE user_id = :user_id ORDER BY date ASC, time ASC, id ASC"),
            {"user_id": user_id},
        ).mappings().all()
        return [EventEntry.from_row(row) for row in rows]

    def get_event(self, event_id):
        row = self.db.session.execute(
            text(f"{_SELECT_SUMMARY} WHERE id = :event_id"),
            {"event_id": event_id},
        ).mappings().first()
        return EventEntry.from_row(row) if row else None

    def add_event(self, name, event_date, event_time, user_id, category_id=None):
        """Insert an event; return the stored entry or None on failure."""
        result = validate_event_fields(name, event_date, event_time)
        if not result:
            logger.info("Rejected new event for user %s: %s", user_id, result.error_message)
            return None
        if category_id is not None and not self.category_belongs_to(category_id, user_id):
            logger.info("Category %s is not owned by user %s", category_id, user_id)
            return None

        row = Event(
            name=name.strip(),
            date=normalize_date(event_date),
            time=(event_time or "").strip(),
            user_id=user_id,
            category_id=category_id,
        )
        try:
            self.db.session.add(row)
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.error("Failed to add event for user %s: %s", user_id, exc)
            return None
        return self.get_event(row.id)

    def update_event(self, event_id, name, event_date, event_time, category_id=None):
        """Rewrite an event's fields; a category_id of None clears the category."""
        result = validate_event_fields(name, event_date, event_time)
        if not result:
            logger.info("Rejected update for event %s: %s", event_id, result.error_message)
            return False
        row = self.db.session.get(Event, event_id)
        if row is None:
            return False
        if category_id is not None and not self.category_belongs_to(category_id, row.user_id):
            logger.info("Category %s is not owned by user %s", category_id, row.user_id)
            return False

        row.name = name.strip()
        row.date = normalize_date(event_date)
        row.time = (event_time or "").strip()
        row.category_id = category_id
        try:
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.error("Failed to update event %s: %s", event_id, exc)
            return False
        return True

    def delete_event(self, event_id):
        row = self.db.session.get(Event, event_id)
        if row is None:
            return False
        try:
            self.db.session.delete(row)
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.error("Failed to delete event %s: %s", event_id, exc)
            return False
        return True

    def get_events_by_category_and_date_range(self, user_id, category_id=None, start=None, end=None):
        """Events filtered by category and an inclusive parsed-date range."""
        start_day = parse_date(start) if start else None
        end_day = parse_date(end) if end else None
        matches = []
        for entry in self.get_all_events(user_id):
            if category_id is not None and entry.category_id != category_id:
                continue
            parsed = entry.parsed_date
            if (start_day or end_day) and parsed is None:
                continue
            if start_day and parsed < start_day:
                continue
            if end_day and parsed > end_day:
                continue
            matches.append(entry)
        return sorted(matches)

    # --- Categories ---

    def get_all_categories(self, user_id):
        return Category.query.filter_by(user_id=user_id).order_by(Category.id.asc()).all()

    def add_category(self, name, color, user_id):
        color = color or DEFAULT_CATEGORY_COLOR
        for result in (validate_category_name(name), validate_color(color)):
            if not result:
                logger.info("Rejected category for user %s: %s", user_id, result.error_message)
                return False
        try:
            self.db.session.add(Category(name=name.strip(), color=color, user_id=user_id))
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.error("Failed to add category for user %s: %s", user_id, exc)
            return False
        return True

    def get_event_count_by_category(self, user_id):
        rows = (
            self.db.session.query(Category.name, func.count(Event.id))
            .outerjoin(Event, (Event.category_id == Category.id) & (Event.user_id == Category.user_id))
            .filter(Category.user_id == user_id)
            .group_by(Category.id, Category.name)
            .order_by(Category.id.asc())
            .all()
        )
        return {name: count for name, count in rows}

    def rollback(self):
        self.db.session.rollback()

    def category_belongs_to(self, category_id, user_id):
        category = self.db.session.get(Category, category_id)
        return category is not None and category.user_id == user_id

    # --- Users ---

    def add_user(self, username, password):
        """Create a user with hashed password and the default categories."""
        if not validate_credentials(username, password):
            return False
        user = User(username=username.strip())
        user.set_password(password)
        try:
            self.db.session.add(user)
            self.db.session.flush()
            for name, color in DEFAULT_CATEGORIES:
                self.db.session.add(Category(name=name, color=color, user_id=user.id))
            self.db.session.commit()
        except IntegrityError:
            self.db.session.rollback()
            logger.info("Username %s already exists", username)
            return False
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.error("Failed to add user %s: %s", username, exc)
            return False
        return True

    def check_user(self, username, password):
        user = User.query.filter_by(username=(username or "").strip()).first()
        return bool(user and user.check_password(password or ""))

    def get_user(self, user_id):
        return self.db.session.get(User, user_id)

    def get_user_id(self, username):
        user = User.query.filter_by(username=(username or "").strip()).first()
        return user.id if user else None

    def get_user_phone_number(self, user_id):
        user = self.get_user(user_id)
        return user.phone if user else None

    def update_user_phone_number(self, user_id, phone):
        if not validate_phone_number(phone):
            return False
        return self._update_user(user_id, phone=phone.strip())

    def set_sms_enabled(self, user_id, enabled):
        return self._update_user(user_id, sms_enabled=bool(enabled))

    def _update_user(self, user_id, **fields):
        user = self.get_user(user_id)
        if user is None:
            return False
        for key, value in fields.items():
            setattr(user, key, value)
        try:
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.error("Failed to update user %s: %s", user_id, exc)
            return False
        return True
