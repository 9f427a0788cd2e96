# portal/middleware.py
"""
Request gates for protected routes.

``authenticate_user`` requires a logged-in session and answers 401 otherwise.
``admin_required`` looks only at the role captured in the session at login
time and answers 403 for anything but ``admin``; stack it under
``authenticate_user``.
"""
from functools import wraps

from flask import jsonify, session
from flask_login import current_user, login_required

authenticate_user = login_required


def session_role():
    return session.get("user_role")


def is_admin_session():
    return session_role() == "admin"


def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not is_admin_session():
            return jsonify(message="Forbidden - Admin only"), 403
        return view(*args, **kwargs)
    return wrapped


def can_access(owner_id):
    """Ownership rule: admins see every row, everyone else only their own."""
    return is_admin_session() or owner_id == current_user.id
