# portal/errors.py
import json

from flask import jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from . import db


def validation_error_response(exc):
    # Submitted values (passwords included) are never echoed back
    errors = json.loads(exc.json(include_url=False, include_input=False))
    return jsonify(message="Invalid request", errors=errors), 400


def register_error_handlers(app):
    """Map every failure to a JSON body with a ``message`` key."""

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        return validation_error_response(exc)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        if exc.code is None or exc.code < 400:
            return exc
        return jsonify(message=exc.description), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        # Contained: the fault is logged and answered, the process keeps serving
        db.session.rollback()
        app.logger.exception("Unhandled error: %s", exc)
        return jsonify(message="Internal Server Error"), 500
