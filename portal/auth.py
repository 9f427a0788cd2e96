from flask import Blueprint, current_app, jsonify, request, session
from flask_login import current_user, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from .middleware import authenticate_user
from .schemas import LoginCredentials
from .storage import storage

auth = Blueprint('auth', __name__)


def _clean(s: str) -> str:
    return (s or '').strip()


def _json_body():
    return request.get_json(silent=True) or {}


@auth.route('/auth/csrf-token', methods=['GET'])
def csrf_token():
    return jsonify(csrfToken=generate_csrf()), 200


@auth.route('/auth/login', methods=['POST'])
def login():
    creds = LoginCredentials.model_validate(_json_body())
    username = _clean(creds.username)

    user = storage.get_user_by_username(username)
    if not user or not user.check_password(creds.password):
        current_app.logger.info("Login failed for %r", username)
        return jsonify(message="Invalid username or password"), 401

    # New session id on every login; the anonymous one is discarded
    current_app.session_interface.regenerate(session)

    login_user(user)
    # The role is captured once here and not refreshed on later requests
    session['user_role'] = user.role
    current_app.logger.info("User %s logged in (%s)", user.id, user.role)
    return jsonify(user.to_dict()), 200


@auth.route('/auth/logout', methods=['POST'])
@authenticate_user
def logout():
    user_id = current_user.id
    logout_user()
    session.clear()
    current_app.logger.info("User %s logged out", user_id)
    return jsonify(message="Logged out successfully"), 200


@auth.route('/auth/me', methods=['GET'])
@authenticate_user
def me():
    user = storage.get_user(current_user.id)
    if user is None:
        return jsonify(message="User not found"), 404
    return jsonify(user.to_dict()), 200
