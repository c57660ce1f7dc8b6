import sqlite3
from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from sqlalchemy import event as sa_event, text
from sqlalchemy.engine import Engine
from werkzeug.security import generate_password_hash, check_password_hash

db = SQLAlchemy()

DEFAULT_CATEGORY_COLOR = '#2196F3'
DEFAULT_CATEGORIES = [
    ('Work', '#FF5722'),
    ('Personal', '#4CAF50'),
    ('Health', '#2196F3'),
    ('Social', '#9C27B0'),
    ('Education', '#FF9800'),
]

EVENT_SUMMARY_VIEW = 'event_summary_view'


@sa_event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with foreign key enforcement switched off per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    password_hash = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    sms_enabled = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    categories = db.relationship('Category', backref='owner', lazy=True, cascade="all, delete-orphan")
    events = db.relationship('Event', backref='owner', lazy=True, cascade="all, delete-orphan")

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'phone': self.phone,
            'sms_enabled': bool(self.sms_enabled),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Category(db.Model):
    """User-owned label with a display color; events reference it optionally."""
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    color = db.Column(db.String(7), nullable=False, default=DEFAULT_CATEGORY_COLOR)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'user_id': self.user_id,
        }


class Event(db.Model):
    """
    Stored event row. Dates are kept as M/d/yyyy text and times as h:mm AM/PM
    text (or empty); parsing happens in the service layer.
    """
    __tablename__ = 'events'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    date = db.Column(db.String(10), nullable=False)
    time = db.Column(db.String(16), nullable=True, default='')
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True)

    category = db.relationship('Category', lazy=True)


def create_event_summary_view():
    """Create the read view joining events to their category name/color."""
    db.session.execute(text(
        f"CREATE VIEW IF NOT EXISTS {EVENT_SUMMARY_VIEW} AS "
        "SELECT e.id, e.name, e.date, e.time, e.user_id, e.category_id, "
        "c.name AS category_name, c.color AS category_color "
        "FROM events e LEFT JOIN categories c ON e.category_id = c.id"
    ))
    db.session.commit()
