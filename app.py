import logging

from flask import Flask, jsonify

from config import Config
from models import db, create_event_summary_view
from services import event_routes, user_routes
from services.event_service import EventService
from services.event_store import EventStore
from services.notification_service import EventNotifier, SmsSender
from services.suggestion_service import SuggestionService

EXTENSION_KEY = 'event_tracker'


def _configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app.logger.setLevel(level)


def _register_routes(app):
    # Handlers live in services/*_routes.py
    app.route('/api/register', methods=['POST'])(user_routes.register)
    app.route('/api/login', methods=['POST'])(user_routes.login)
    app.route('/api/logout', methods=['POST'])(user_routes.logout)
    app.route('/api/current-user')(user_routes.current_user_info)
    app.route('/api/profile', methods=['GET', 'PUT'])(user_routes.user_profile)

    app.route('/api/events', methods=['GET', 'POST'])(event_routes.handle_events)
    app.route('/api/events/<int:event_id>', methods=['PUT', 'DELETE'])(event_routes.handle_event)
    app.route('/api/events/next')(event_routes.next_event)
    app.route('/api/events/upcoming')(event_routes.upcoming_events)
    app.route('/api/events/by-date')(event_routes.events_by_date)
    app.route('/api/events/by-name')(event_routes.event_by_name)
    app.route('/api/events/conflicts')(event_routes.check_conflicts)
    app.route('/api/events/autocomplete')(event_routes.autocomplete)
    app.route('/api/events/suggest-title')(event_routes.suggest_title)
    app.route('/api/events/export', methods=['GET', 'POST'])(event_routes.export_events)
    app.route('/api/categories', methods=['GET', 'POST'])(event_routes.handle_categories)
    app.route('/api/categories/summary')(event_routes.category_summary)


def create_app(config_overrides=None):
    """Build the Flask app, its database and the per-process event services."""
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)
    _configure_logging(app)

    db.init_app(app)
    with app.app_context():
        db.create_all()
        create_event_summary_view()

    store = EventStore(db)
    service = EventService(store, horizon_days=app.config['UPCOMING_HORIZON_DAYS'])
    sender = SmsSender(
        account_sid=app.config.get('TWILIO_ACCOUNT_SID'),
        auth_token=app.config.get('TWILIO_AUTH_TOKEN'),
        from_number=app.config.get('TWILIO_FROM_NUMBER'),
        enabled=app.config.get('SMS_ENABLED', False),
    )
    service.subscribe(EventNotifier(store, sender))
    suggestions = SuggestionService(
        enabled=bool(app.config.get('AI_SUGGESTIONS_ENABLED') and app.config.get('OPENAI_API_KEY')),
        timeout=app.config['AI_SUGGESTION_TIMEOUT'],
        model=app.config.get('OPENAI_MODEL'),
        api_key=app.config.get('OPENAI_API_KEY'),
    )
    app.extensions[EXTENSION_KEY] = {
        'store': store,
        'events': service,
        'sms': sender,
        'suggestions': suggestions,
    }

    _register_routes(app)

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify({'error': 'Not found'}), 404

    app.logger.info("Event tracker ready (database: %s)", app.config['SQLALCHEMY_DATABASE_URI'])
    return app


if __name__ == '__main__':
    create_app().run(debug=True)
