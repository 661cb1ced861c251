import os
from dotenv import load_dotenv
from pathlib import Path

load_dotenv()

basedir = Path(__file__).resolve().parent


def _env_flag(name: str, default: bool = False) -> bool:
    """Interpret typical truthy strings from environment variables."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "fallback-dev-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{basedir / 'instance' / 'dotback.sqlite'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"  # adjust to Strict if needed
    SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE", default=False)

    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", str(basedir / "uploads"))

    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@dotback.com")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "dotback123")
    ADMIN_NAME = os.getenv("ADMIN_NAME", "DotBack Admin")
    SEED_DEFAULT_LEVELS = _env_flag("SEED_DEFAULT_LEVELS", default=False)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
