import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _database_url():
    url = os.getenv("DATABASE_URL", "")
    # Heroku/Render style URLs are rejected by SQLAlchemy 1.4+
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


class BaseConfig:
    # ---------------------
    # Security & Logging
    # ---------------------
    SECRET_KEY = os.getenv("SESSION_SECRET") or os.getenv("SECRET_KEY", "claim-portal-dev-secret")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "logs")
    WTF_CSRF_ENABLED = _env_flag("WTF_CSRF_ENABLED", True)
    WTF_CSRF_TIME_LIMIT = None

    # ---------------------
    # Database
    # ---------------------
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # ---------------------
    # Sessions (stored in the database)
    # ---------------------
    SESSION_TYPE = "sqlalchemy"
    SESSION_SQLALCHEMY_TABLE = "sessions"
    SESSION_PERMANENT = True
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # ---------------------
    # Uploads
    # ---------------------
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", str(Path.cwd() / "uploads"))
    MAX_UPLOAD_BYTES = 10 * 1024 * 1024
    # Outer bound for the whole request body; the per-file limit is enforced while streaming
    MAX_CONTENT_LENGTH = MAX_UPLOAD_BYTES + 1024 * 1024

    # ---------------------
    # Administrator account
    # ---------------------
    SEED_ADMIN = _env_flag("SEED_ADMIN", True)
    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@claims-portal.org")

    # ---------------------
    # Mail (suppressed unless a server is configured)
    # ---------------------
    MAIL_SERVER = os.getenv("MAIL_SERVER", "localhost")
    MAIL_PORT = int(os.getenv("MAIL_PORT", 25))
    MAIL_USE_TLS = _env_flag("MAIL_USE_TLS", False)
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "no-reply@claims-portal.org")
    MAIL_SUPPRESS_SEND = _env_flag("MAIL_SUPPRESS_SEND", True)


class DevConfig(BaseConfig):
    DEBUG = True


class ProdConfig(BaseConfig):
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True


class TestConfig(BaseConfig):
    TESTING = True
    LOG_LEVEL = "WARNING"
    LOG_DIR = None
    WTF_CSRF_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    # keep tests isolated
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite://")
    SQLALCHEMY_ENGINE_OPTIONS = {}
    ADMIN_PASSWORD = "admin123"


CONFIGS = {
    "development": DevConfig,
    "production": ProdConfig,
    "testing": TestConfig,
}


def config_for_env(name=None):
    name = (name or os.getenv("APP_ENV", "development")).strip().lower()
    return CONFIGS.get(name, DevConfig)
