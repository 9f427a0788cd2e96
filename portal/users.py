from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user
from sqlalchemy.exc import IntegrityError

from . import db
from .mailer import send_email
from .middleware import admin_required, authenticate_user, is_admin_session
from .schemas import RegisterUser, UpdateUser
from .storage import storage

users = Blueprint('users', __name__)


def _email_lower(s: str) -> str:
    return (s or '').strip().lower()


def _constraint_message(exc):
    msg = str(getattr(exc, 'orig', exc)).lower()
    if 'username' in msg:
        return 'Username already exists'
    if 'email' in msg:
        return 'Email already exists'
    if 'program_id' in msg:
        return 'Program ID already exists'
    if 'national_id' in msg:
        return 'National ID already exists'
    return 'Could not save the account due to a database constraint'


def ensure_admin_user():
    """Create the configured administrator account when it does not exist yet."""
    cfg = current_app.config
    admin = storage.get_user_by_username(cfg['ADMIN_USERNAME'])
    if admin is not None:
        return admin

    admin = storage.create_user({
        'username': cfg['ADMIN_USERNAME'],
        'password': cfg['ADMIN_PASSWORD'],
        'email': _email_lower(cfg['ADMIN_EMAIL']),
        'full_name': 'Portal Administrator',
        'national_id': 'ADMIN-NATIONAL-ID',
        'program_id': 'ADMIN-001',
        'phone_number': 'N/A',
        'current_address': 'N/A',
        'country_of_study': 'N/A',
        'university': 'N/A',
        'field_of_study': 'Administration',
        'degree_level': 'N/A',
        'sponsor_group': 'Admin',
        'sponsorship_period': 'N/A',
        'bank_name': 'N/A',
        'bank_address': 'N/A',
        'account_number': 'N/A',
        'swift_code': 'N/A',
        'role': 'admin',
    })
    current_app.logger.info("Administrator account %r created (id %s)", admin.username, admin.id)
    return admin


# ==========================================================
# REGISTER
# ==========================================================
@users.route('/users', methods=['POST'])
def register():
    data = RegisterUser.model_validate(request.get_json(silent=True) or {}).model_dump()
    data['email'] = _email_lower(data['email'])

    if storage.get_user_by_username(data['username']):
        return jsonify(message='Username already exists'), 400
    if storage.get_user_by_email(data['email']):
        return jsonify(message='Email already exists'), 400
    if storage.get_user_by_program_id(data['program_id']):
        return jsonify(message='Program ID already exists'), 400
    if storage.get_user_by_national_id(data['national_id']):
        return jsonify(message='National ID already exists'), 400

    # Self-registration always yields a student account
    data['role'] = 'student'
    try:
        user = storage.create_user(data)
    except IntegrityError as ie:
        db.session.rollback()
        return jsonify(message=_constraint_message(ie)), 400

    current_app.logger.info("Registered user %s (%s)", user.id, user.username)
    send_email(
        user.email,
        'Welcome to the Scholarship Claim Portal',
        f"Dear {user.full_name},\n\n"
        "Your account has been created successfully. You can now log in to the "
        "claim portal with your username and password.\n\n"
        "Best regards,\nScholarship Administration Team",
    )
    return jsonify(user.to_dict()), 201


# ==========================================================
# DIRECTORY (ADMIN)
# ==========================================================
@users.route('/users', methods=['GET'])
@authenticate_user
@admin_required
def list_users():
    return jsonify([u.to_dict() for u in storage.get_all_users()]), 200


# ==========================================================
# UPDATE PROFILE
# ==========================================================
@users.route('/users/<int:user_id>', methods=['PUT'])
@authenticate_user
def update_user(user_id):
    if user_id != current_user.id and not is_admin_session():
        return jsonify(message='Unauthorized'), 403

    payload = UpdateUser.model_validate(request.get_json(silent=True) or {})
    # Every profile column is NOT NULL, so explicit nulls are ignored
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    if 'role' in changes and not is_admin_session():
        return jsonify(message='Only an administrator can change roles'), 403
    if 'email' in changes:
        changes['email'] = _email_lower(changes['email'])

    try:
        user = storage.update_user(user_id, changes)
    except IntegrityError as ie:
        db.session.rollback()
        return jsonify(message=_constraint_message(ie)), 400

    if user is None:
        return jsonify(message='User not found'), 404
    return jsonify(user.to_dict()), 200
