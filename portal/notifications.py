# portal/notifications.py
import logging

from flask import Blueprint, jsonify
from flask_login import current_user

from . import db
from .middleware import authenticate_user
from .storage import storage

logger = logging.getLogger(__name__)

notifications = Blueprint("notifications", __name__)


def notify(user_id, title, message):
    """Create a notification row, best effort.

    A failure is logged and rolled back; the caller's own work is already
    committed and its response is not affected.
    """
    try:
        return storage.create_notification({"user_id": user_id, "title": title, "message": message})
    except Exception:
        db.session.rollback()
        logger.exception("Could not create notification %r for user %s", title, user_id)
        return None


# ==========================================================
# LIST
# ==========================================================
@notifications.route("/notifications", methods=["GET"])
@authenticate_user
def list_notifications():
    rows = storage.get_notifications_by_user(current_user.id)
    return jsonify([n.to_dict() for n in rows]), 200


# ==========================================================
# MARK AS READ
# ==========================================================
@notifications.route("/notifications/<int:notification_id>/read", methods=["PUT"])
@authenticate_user
def mark_read(notification_id):
    notification = storage.get_notification(notification_id)
    if notification is None:
        return jsonify(message="Notification not found"), 404
    if notification.user_id != current_user.id:
        return jsonify(message="Unauthorized"), 403

    updated = storage.mark_notification_as_read(notification_id)
    return jsonify(updated.to_dict()), 200
