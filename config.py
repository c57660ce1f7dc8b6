import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default=False):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return str(raw).strip().lower() in ["1", "true", "yes", "on"]


def _env_float(name, default):
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


class Config:
    """Settings read from the environment (and a local .env file)."""

    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///events.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY')
    OPENAI_MODEL = os.environ.get('OPENAI_MODEL', 'gpt-4o-mini')
    AI_SUGGESTIONS_ENABLED = _env_bool('AI_SUGGESTIONS_ENABLED', True)
    AI_SUGGESTION_TIMEOUT = _env_float('AI_SUGGESTION_TIMEOUT', 3.0)

    SMS_ENABLED = _env_bool('SMS_ENABLED', False)
    TWILIO_ACCOUNT_SID = os.environ.get('TWILIO_ACCOUNT_SID')
    TWILIO_AUTH_TOKEN = os.environ.get('TWILIO_AUTH_TOKEN')
    TWILIO_FROM_NUMBER = os.environ.get('TWILIO_FROM_NUMBER')

    EXPORT_DIR = os.environ.get('EXPORT_DIR', 'exports')
    UPCOMING_HORIZON_DAYS = _env_int('UPCOMING_HORIZON_DAYS', 7)
