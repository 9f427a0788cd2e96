# portal/__init__.py
import logging
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path

import click
from flask import Flask, g, jsonify, request
from flask.logging import default_handler
from flask_login import LoginManager
from flask_mail import Mail
from flask_migrate import Migrate
from flask_session import Session
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect

from .config import config_for_env

# ==========================================================
#  Initialize extensions
# ==========================================================
db = SQLAlchemy()
login_manager = LoginManager()
csrf = CSRFProtect()
migrate = Migrate()
mail = Mail()
server_session = Session()


# ==========================================================
#  Logging
# ==========================================================
def configure_logging(app):
    level = app.config.get("LOG_LEVEL", "INFO")
    app.logger.removeHandler(default_handler)
    app.logger.setLevel(level)
    # app.logger is the shared "portal" logger; handlers are attached once per process
    if app.logger.handlers:
        return

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s in %(module)s: %(message)s"))
    app.logger.addHandler(console)

    log_dir = app.config.get("LOG_DIR")
    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_dir / "app.log", maxBytes=2_000_000, backupCount=5)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(funcName)s: %(message)s"))
        app.logger.addHandler(file_handler)


def register_request_logging(app):
    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_api_request(response):
        if request.path.startswith("/api"):
            started = g.get("request_started")
            elapsed = (time.perf_counter() - started) * 1000 if started else 0.0
            app.logger.info("%s %s %s in %.0fms", request.method, request.path, response.status_code, elapsed)
        return response


def _init_server_session(app):
    # Flask-Session declares its model on db.Model at every init_app; drop the
    # table left by an earlier app so the factory can run more than once
    table = db.metadata.tables.get(app.config["SESSION_SQLALCHEMY_TABLE"])
    if table is not None:
        db.metadata.remove(table)
    server_session.init_app(app)


# ==========================================================
#  Application Factory
# ==========================================================
def create_app(config_class=None):
    app = Flask(__name__)

    # --------------------------
    # Config
    # --------------------------
    app.config.from_object(config_class or config_for_env())
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError("DATABASE_URL must be set. Did you forget to provision a database?")
    app.config["SESSION_SQLALCHEMY"] = db

    configure_logging(app)
    Path(app.config["UPLOAD_FOLDER"]).mkdir(parents=True, exist_ok=True)

    # --------------------------
    # Initialize extensions
    # --------------------------
    db.init_app(app)
    csrf.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)
    login_manager.init_app(app)
    _init_server_session(app)

    # --------------------------
    # Login manager setup
    # --------------------------
    from .models import User  # Import here to avoid circular imports

    login_manager.session_protection = "strong"

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify(message="Unauthorized"), 401

    # --------------------------
    # Create database tables
    # --------------------------
    from .users import ensure_admin_user

    with app.app_context():
        db.create_all()
        if app.config.get("SEED_ADMIN"):
            ensure_admin_user()

    # --------------------------
    # Register Blueprints
    # --------------------------
    from .auth import auth
    from .users import users
    from .claims import claims
    from .academics import academics
    from .notifications import notifications
    from .uploads import uploads, uploaded_files
    from .errors import register_error_handlers

    for bp in (auth, users, claims, academics, notifications, uploads):
        app.register_blueprint(bp, url_prefix="/api")
    app.register_blueprint(uploaded_files)

    register_error_handlers(app)
    register_request_logging(app)

    # --------------------------
    # CLI
    # --------------------------
    @app.cli.command("seed-admin")
    def seed_admin_command():
        """Create the administrator account if it is missing."""
        user = ensure_admin_user()
        click.echo(f"Administrator account: {user.username} (id {user.id})")

    @app.shell_context_processor
    def make_shell_context():
        from .models import Claim, Notification
        from .storage import storage
        return {"db": db, "User": User, "Claim": Claim, "Notification": Notification, "storage": storage}

    app.logger.info("Claim portal ready (debug=%s)", app.debug)
    return app
