"""Registration, login/session and profile route handlers; URL rules are declared in app.py."""

from flask import current_app, jsonify, request, session

from services.validation_service import (
    parse_bool,
    validate_credentials,
    validate_phone_number,
)


def get_services():
    return current_app.extensions['event_tracker']


def get_current_user():
    """Resolve the logged-in user from the session."""
    user_id = session.get('user_id')
    if user_id:
        return get_services()['store'].get_user(user_id)
    return None


def _start_session(user_id):
    session['user_id'] = user_id
    session.permanent = True
    get_services()['events'].load_events(user_id)


def register():
    store = get_services()['store']
    data = request.get_json(silent=True) or {}
    username = str(data.get('username') or '').strip()
    password = str(data.get('password') or '')
    phone = str(data.get('phone') or '').strip()

    result = validate_credentials(username, password)
    if not result:
        return jsonify({'error': result.error_message}), 400
    if phone:
        phone_result = validate_phone_number(phone)
        if not phone_result:
            return jsonify({'error': phone_result.error_message}), 400
    if store.get_user_id(username) is not None:
        return jsonify({'error': 'Username already exists'}), 400

    if not store.add_user(username, password):
        return jsonify({'error': 'Registration failed. Please try again.'}), 500
    user_id = store.get_user_id(username)
    if phone:
        store.update_user_phone_number(user_id, phone)

    current_app.logger.info("Registered user %s", user_id)
    _start_session(user_id)
    return jsonify({'success': True, 'user_id': user_id, 'username': username}), 201


def login():
    store = get_services()['store']
    data = request.get_json(silent=True) or {}
    username = str(data.get('username') or '').strip()
    password = str(data.get('password') or '')

    if not validate_credentials(username, password):
        return jsonify({'error': 'Invalid credentials format.'}), 400
    if not store.check_user(username, password):
        return jsonify({'error': 'Invalid username or password'}), 401

    user_id = store.get_user_id(username)
    _start_session(user_id)
    return jsonify({'success': True, 'user_id': user_id, 'username': username})


def logout():
    user_id = session.pop('user_id', None)
    if user_id:
        get_services()['events'].forget_user(user_id)
    return jsonify({'success': True})


def current_user_info():
    user = get_current_user()
    if user:
        return jsonify({'user_id': user.id, 'username': user.username})
    return jsonify({'user_id': None, 'username': None})


def user_profile():
    store = get_services()['store']
    user = get_current_user()
    if not user:
        return jsonify({'error': 'Not logged in'}), 401

    if request.method == 'GET':
        return jsonify(user.to_dict())

    data = request.get_json(silent=True) or {}
    if 'phone' in data:
        phone = str(data.get('phone') or '').strip()
        result = validate_phone_number(phone)
        if not result:
            return jsonify({'error': result.error_message}), 400
        if not store.update_user_phone_number(user.id, phone):
            return jsonify({'error': 'Could not save phone number'}), 500
    if 'sms_enabled' in data:
        if not store.set_sms_enabled(user.id, parse_bool(data.get('sms_enabled'))):
            return jsonify({'error': 'Could not save SMS preference'}), 500

    return jsonify({'success': True, **store.get_user(user.id).to_dict()})
