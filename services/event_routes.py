"""Event, category and export route handlers; URL rules are declared in app.py."""

import os

from flask import Response, current_app, jsonify, request
from werkzeug.utils import secure_filename

from services.event_types import EventEntry, EventRequest, SaveStatus
from services.export_service import (
    CSV_FILENAME,
    events_csv_summary,
    events_to_csv,
    export_events_to_csv,
)
from services.conflict_service import build_conflict_message
from services.user_routes import get_current_user, get_services
from services.validation_service import parse_bool, validate_event_date, validate_event_time

STATUS_CODES = {
    SaveStatus.SAVED: 200,
    SaveStatus.INVALID: 400,
    SaveStatus.DUPLICATE: 409,
    SaveStatus.CONFLICT: 409,
    SaveStatus.NOT_FOUND: 404,
    SaveStatus.STORAGE_ERROR: 500,
}


def _unauthorized():
    return jsonify({'error': 'Not logged in'}), 401


def _optional_int(raw):
    if raw in (None, ''):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _build_request(data, user_id, event_id=None):
    """EventRequest from JSON; bad field types come back as an error string."""
    category_id = data.get('category_id')
    if category_id in ('', None):
        category_id = None
    try:
        return EventRequest(
            name=data.get('name', ''),
            date=data.get('date', ''),
            time=data.get('time') or '',
            user_id=user_id,
            category_id=category_id,
            event_id=event_id,
        ), None
    except (TypeError, ValueError) as exc:
        return None, str(exc)


def _save_response(result, created=False):
    body = result.to_dict()
    if not result.ok:
        body['error'] = result.message
    status = STATUS_CODES[result.status]
    if result.ok and created:
        status = 201
    return jsonify(body), status


def handle_events():
    user = get_current_user()
    if not user:
        return _unauthorized()
    service = get_services()['events']

    if request.method == 'GET':
        category_id = _optional_int(request.args.get('category_id'))
        start = request.args.get('start')
        end = request.args.get('end')
        for bound in (start, end):
            if bound:
                result = validate_event_date(bound)
                if not result:
                    return jsonify({'error': result.error_message}), 400
        if category_id is not None or start or end:
            events = get_services()['store'].get_events_by_category_and_date_range(
                user.id, category_id, start, end
            )
        else:
            events = service.all_events(user.id)
            if request.args.get('sort') == 'date':
                events = sorted(events)
        return jsonify({'events': [e.to_dict() for e in events]})

    data = request.get_json(silent=True) or {}
    event_request, error = _build_request(data, user.id)
    if error:
        return jsonify({'error': error}), 400
    result = service.add_event(event_request, allow_conflicts=parse_bool(data.get('confirm')))
    if result.ok:
        current_app.logger.info("User %s added event %s", user.id, result.event.id)
    return _save_response(result, created=True)


def handle_event(event_id):
    user = get_current_user()
    if not user:
        return _unauthorized()
    service = get_services()['events']

    if request.method == 'DELETE':
        result = service.delete_event(event_id, user.id)
        if result.ok:
            current_app.logger.info("User %s deleted event %s", user.id, event_id)
        return _save_response(result)

    data = request.get_json(silent=True) or {}
    event_request, error = _build_request(data, user.id, event_id=event_id)
    if error:
        return jsonify({'error': error}), 400
    result = service.update_event(event_request, allow_conflicts=parse_bool(data.get('confirm')))
    return _save_response(result)


def next_event():
    user = get_current_user()
    if not user:
        return _unauthorized()
    event = get_services()['events'].next_event(user.id)
    return jsonify({'event': event.to_dict() if event else None})


def upcoming_events():
    user = get_current_user()
    if not user:
        return _unauthorized()
    days = _optional_int(request.args.get('days'))
    if days is not None and days < 0:
        return jsonify({'error': 'days must be zero or more'}), 400
    events = get_services()['events'].upcoming_events(user.id, days)
    return jsonify({'events': [e.to_dict() for e in events]})


def events_by_date():
    user = get_current_user()
    if not user:
        return _unauthorized()
    event_date = (request.args.get('date') or '').strip()
    if not event_date:
        return jsonify({'error': 'date is required'}), 400
    events = get_services()['events'].events_on_date(user.id, event_date)
    return jsonify({'date': event_date, 'events': [e.to_dict() for e in events]})


def event_by_name():
    user = get_current_user()
    if not user:
        return _unauthorized()
    service = get_services()['events']
    name = request.args.get('name') or ''
    event_date = request.args.get('date')
    if event_date:
        event = service.find_event_by_name_and_date(user.id, name, event_date)
    else:
        event = service.find_event_by_name(user.id, name)
    if event is None:
        return jsonify({'error': 'Event not found', 'event': None}), 404
    return jsonify({'event': event.to_dict()})


def check_conflicts():
    """Dry-run conflict check for the add/edit form."""
    user = get_current_user()
    if not user:
        return _unauthorized()
    event_date = (request.args.get('date') or '').strip()
    event_time = (request.args.get('time') or '').strip()
    for result in (validate_event_date(event_date), validate_event_time(event_time)):
        if not result:
            return jsonify({'error': result.error_message}), 400
    exclude_id = _optional_int(request.args.get('exclude_id'))
    candidate = EventEntry(
        id=exclude_id,
        name=request.args.get('name') or '',
        date=event_date,
        time=event_time,
        user_id=user.id,
    )
    service = get_services()['events']
    conflicts = service.conflicting_events(candidate, exclude_id)
    same_day = service.same_day_events(user.id, event_date, exclude_id)
    return jsonify({
        'conflict': bool(conflicts),
        'message': build_conflict_message(candidate, conflicts) if conflicts else None,
        'conflicts': [e.to_dict() for e in conflicts],
        'same_day': [e.to_dict() for e in same_day],
    })


def autocomplete():
    user = get_current_user()
    if not user:
        return _unauthorized()
    suggestion = get_services()['events'].autocomplete(user.id, request.args.get('q') or '')
    return jsonify({'suggestion': suggestion})


def suggest_title():
    user = get_current_user()
    if not user:
        return _unauthorized()
    services = get_services()
    recent = services['events'].recent_events(user.id)
    suggestion = services['suggestions'].suggest(
        recent,
        time_context=request.args.get('time_context'),
        location_context=request.args.get('location'),
    )
    return jsonify({'title': suggestion.title, 'source': suggestion.source})


def handle_categories():
    user = get_current_user()
    if not user:
        return _unauthorized()
    store = get_services()['store']

    if request.method == 'POST':
        data = request.get_json(silent=True) or {}
        if not store.add_category(str(data.get('name') or ''), data.get('color'), user.id):
            return jsonify({'error': 'Invalid category name or color'}), 400
    categories = store.get_all_categories(user.id)
    status = 201 if request.method == 'POST' else 200
    return jsonify({'categories': [c.to_dict() for c in categories]}), status


def category_summary():
    user = get_current_user()
    if not user:
        return _unauthorized()
    counts = get_services()['events'].event_count_by_category(user.id)
    return jsonify({'counts': counts})


def export_events():
    user = get_current_user()
    if not user:
        return _unauthorized()
    service = get_services()['events']
    events = service.all_events(user.id)

    if request.method == 'GET':
        if request.args.get('format') == 'summary':
            body = events_csv_summary(user.id, events, service.event_count_by_category(user.id))
        else:
            body = events_to_csv(events)
        return Response(
            body,
            mimetype='text/csv',
            headers={'Content-Disposition': f'attachment; filename={CSV_FILENAME}'},
        )

    data = request.get_json(silent=True) or {}
    filename = secure_filename(str(data.get('filename') or CSV_FILENAME)) or CSV_FILENAME
    path = os.path.join(current_app.config['EXPORT_DIR'], str(user.id), filename)
    if not export_events_to_csv(events, path):
        return jsonify({'error': 'Failed to export events'}), 500
    return jsonify({'success': True, 'path': path, 'count': len(events)})
