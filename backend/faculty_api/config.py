from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

SQL_DIR = Path(__file__).resolve().parent / "sql"


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_path(value: str | None, default: Path) -> Path:
    raw = (value or "").strip()
    if not raw:
        return default
    return Path(raw).expanduser()


def _normalize_database_url(value: str | None, fallback: str) -> str:
    raw = (value or fallback).strip() or fallback
    # Some dashboards accidentally store quoted values.
    if (raw.startswith('"') and raw.endswith('"')) or (raw.startswith("'") and raw.endswith("'")):
        raw = raw[1:-1].strip()

    if "://" not in raw:
        # Bare file path, e.g. DATABASE_URL=./faculty.db
        return f"sqlite:///{raw}"

    # SQLAlchemy expects postgresql://
    if raw.startswith("postgres://"):
        raw = raw.replace("postgres://", "postgresql://", 1)
    return raw


def _default_database_url() -> str:
    db_path = os.getenv("DB_PATH", "").strip()
    if db_path:
        return f"sqlite:///{db_path}"
    return "sqlite:///./faculty.db"


@dataclass(frozen=True)
class Settings:
    env: str
    host: str
    port: int
    database_url: str
    schema_path: Path
    seed_path: Path
    cors_origins: list[str]
    debug: bool
    enable_prometheus_metrics: bool
    log_level: str

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def is_production(self) -> bool:
        return self.env.lower() not in {"development", "dev", "test", "testing"}

    def validate(self) -> None:
        """Raise early on settings the server cannot start with."""
        if not 0 < self.port < 65536:
            raise RuntimeError(f"PORT must be between 1 and 65535, got {self.port}")
        if self.is_production and self.debug:
            raise RuntimeError("DEBUG must be disabled outside development environments")


def load_settings() -> Settings:
    return Settings(
        env=os.getenv("ENV", "development"),
        host=os.getenv("HOST", "0.0.0.0").strip() or "0.0.0.0",
        port=_as_int(os.getenv("PORT"), 3000),
        database_url=_normalize_database_url(os.getenv("DATABASE_URL"), _default_database_url()),
        schema_path=_as_path(os.getenv("SCHEMA_PATH"), SQL_DIR / "schema.sql"),
        seed_path=_as_path(os.getenv("SEED_PATH"), SQL_DIR / "seed.sql"),
        cors_origins=[
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ],
        debug=_as_bool(os.getenv("DEBUG"), False),
        enable_prometheus_metrics=_as_bool(os.getenv("ENABLE_PROMETHEUS_METRICS"), True),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )


settings = load_settings()

settings.validate()
