from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import logging
from pathlib import Path
import sqlite3
from typing import Iterator

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from .config import settings

logger = logging.getLogger("faculty.db")

DEFAULT_FACULTY_NAMES = (
    "Dr. John Smith",
    "Dr. Sarah Johnson",
    "Prof. Michael Brown",
    "Dr. Emily Davis",
    "Prof. Robert Wilson",
    "Dr. Priya Sharma",
    "Dr. David Rodriguez",
    "Dr. Ananya Patil",
    "Prof. Rajesh Kumar",
    "Dr. Meera Nair",
)


class BootstrapError(RuntimeError):
    """Schema or seed data could not be applied."""


@dataclass(frozen=True)
class SeedResult:
    source: str
    inserted: int


def _build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
            future=True,
        )

    return create_engine(database_url, pool_pre_ping=True, future=True)


_ENGINE = _build_engine(settings.database_url)
SessionLocal = sessionmaker(
    bind=_ENGINE,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    class_=Session,
    future=True,
)


def get_engine() -> Engine:
    return _ENGINE


def reset_database_engine(database_url: str | None = None) -> None:
    global _ENGINE
    if database_url:
        object.__setattr__(settings, "database_url", database_url)

    _ENGINE.dispose()
    _ENGINE = _build_engine(settings.database_url)
    SessionLocal.configure(bind=_ENGINE)


@contextmanager
def get_db() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def check_db_connection() -> None:
    with _ENGINE.connect() as connection:
        connection.execute(text("SELECT 1"))


def _read_script(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BootstrapError(f"Cannot read SQL script {path}: {exc}") from exc


def _run_script(sql: str, *, label: str) -> None:
    """Execute a multi-statement SQL script on a raw driver connection."""
    raw = _ENGINE.raw_connection()
    try:
        driver = raw.driver_connection
        if isinstance(driver, sqlite3.Connection):
            driver.executescript(sql)
        else:
            cursor = raw.cursor()
            try:
                for statement in sql.split(";"):
                    if statement.strip():
                        cursor.execute(statement)
            finally:
                cursor.close()
        raw.commit()
    except Exception as exc:
        raw.rollback()
        raise BootstrapError(f"Failed to apply {label}: {exc}") from exc
    finally:
        raw.close()


def apply_schema(schema_path: Path) -> None:
    if not schema_path.is_file():
        raise BootstrapError(f"Missing schema file: {schema_path}")
    _run_script(_read_script(schema_path), label=schema_path.name)


def faculty_count() -> int:
    with get_db() as session:
        return int(session.execute(text("SELECT COUNT(*) FROM faculty")).scalar_one())


def seed_faculty_if_empty(seed_path: Path | None) -> SeedResult:
    if faculty_count() > 0:
        return SeedResult(source="skipped", inserted=0)

    if seed_path is not None and seed_path.is_file():
        _run_script(_read_script(seed_path), label=seed_path.name)
        return SeedResult(source="seed_file", inserted=faculty_count())

    with get_db() as session:
        session.execute(
            text("INSERT INTO faculty (name) VALUES (:name)"),
            [{"name": name} for name in DEFAULT_FACULTY_NAMES],
        )
    return SeedResult(source="fallback", inserted=len(DEFAULT_FACULTY_NAMES))


def bootstrap_database(schema_path: Path | None = None, seed_path: Path | None = None) -> SeedResult:
    schema_path = schema_path or settings.schema_path
    seed_path = seed_path or settings.seed_path

    apply_schema(schema_path)
    result = seed_faculty_if_empty(seed_path)
    logger.info(
        "Database bootstrap complete",
        extra={
            "event": "bootstrap",
            "source": result.source,
            "inserted": result.inserted,
            "db_backend": get_engine().dialect.name,
        },
    )
    return result
