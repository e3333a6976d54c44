"""Application configuration helpers and defaults."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict

from sqlalchemy.engine.url import make_url


class InvalidDatabaseURL(RuntimeError):
    """Raised when DATABASE_URL does not meet the expected requirements."""


def _int_from_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:  # pragma: no cover - validated during configuration load
        raise RuntimeError(f"Environment variable {name} must be an integer") from exc


def _bool_from_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _normalize_db_url(raw_url: str, allow_sqlite: bool = False) -> str:
    """Return a normalised PostgreSQL connection URL using psycopg v3.

    Legacy ``postgres://`` URLs are converted to ``postgresql+psycopg://``.
    SQLite is only accepted when ``allow_sqlite`` is set (local runs and the
    test-suite); otherwise it is rejected.
    """

    if not raw_url:
        raise InvalidDatabaseURL("DATABASE_URL is required and must not be empty")

    candidate = raw_url.strip()
    if candidate.startswith("postgres://"):
        candidate = "postgresql://" + candidate[len("postgres://") :]

    try:
        url = make_url(candidate)
    except Exception as exc:  # pragma: no cover - formatting delegated to SQLAlchemy
        raise InvalidDatabaseURL(f"Invalid DATABASE_URL provided: {candidate!r}") from exc

    driver = url.drivername or ""
    if driver.startswith("sqlite"):
        if not allow_sqlite:
            raise InvalidDatabaseURL(
                "SQLite URLs are only accepted with ALLOW_SQLITE=1. Provide a PostgreSQL connection string."
            )
        return candidate

    if driver in {"postgres", "postgresql"} or (
        driver.startswith("postgresql+") and driver != "postgresql+psycopg"
    ):
        url = url.set(drivername="postgresql+psycopg")

    query = dict(url.query)
    if not query.get("sslmode"):
        query["sslmode"] = os.getenv("DB_SSLMODE", "require")
        url = url.set(query=query)

    return url.render_as_string(hide_password=False)


def _default_dir(env_name: str, folder: str) -> str:
    return os.getenv(env_name) or os.path.join(os.getcwd(), folder)


@dataclass
class AppConfig:
    """Collection of configuration defaults applied to the Flask app."""

    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", ""))
    allow_sqlite: bool = field(default_factory=lambda: _bool_from_env("ALLOW_SQLITE", False))
    secret_key: str = field(
        default_factory=lambda: os.getenv("SESSION_SECRET")
        or os.getenv("SECRET_KEY")
        or "dev-secret-key-change-me"
    )
    engine_options: Dict[str, Any] = field(
        default_factory=lambda: {
            "pool_size": _int_from_env("DB_POOL_SIZE", 10),
            "max_overflow": _int_from_env("DB_MAX_OVERFLOW", 5),
            "pool_recycle": _int_from_env("DB_POOL_RECYCLE", 1800),
            "pool_pre_ping": _bool_from_env("DB_POOL_PRE_PING", True),
        }
    )
    log_dir: str = field(default_factory=lambda: _default_dir("LOG_DIR", "logs"))
    reportes_dir: str = field(default_factory=lambda: _default_dir("REPORTES_DIR", "reportes"))
    testing: bool = False

    def __post_init__(self) -> None:
        self.database_url = _normalize_db_url(self.database_url, allow_sqlite=self.allow_sqlite)

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def init_app(self, app) -> None:
        app.secret_key = self.secret_key
        app.config["TESTING"] = self.testing
        app.config.setdefault("SQLALCHEMY_DATABASE_URI", self.database_url)
        # Pool sizing does not apply to SQLite's single-connection pools
        if not self.is_sqlite:
            app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", self.engine_options)
        app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)
        app.config.setdefault("LOG_DIR", self.log_dir)
        app.config.setdefault("REPORTES_DIR", self.reportes_dir)


__all__ = [
    "AppConfig",
    "InvalidDatabaseURL",
    "_normalize_db_url",
]
