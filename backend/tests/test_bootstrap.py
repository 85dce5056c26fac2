from pathlib import Path

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from faculty_api import init_db
from faculty_api.config import settings
from faculty_api.db import (
    DEFAULT_FACULTY_NAMES,
    BootstrapError,
    apply_schema,
    bootstrap_database,
    faculty_count,
    get_db,
    seed_faculty_if_empty,
)
from faculty_api.main import app


def _names() -> list[str]:
    with get_db() as session:
        return list(session.execute(text("SELECT name FROM faculty ORDER BY id")).scalars().all())


def test_fresh_bootstrap_seeds_from_seed_file():
    result = bootstrap_database()

    assert result.source == "seed_file"
    assert result.inserted == len(DEFAULT_FACULTY_NAMES)
    assert sorted(_names()) == sorted(DEFAULT_FACULTY_NAMES)


def test_fresh_bootstrap_uses_fallback_when_seed_file_missing(tmp_path: Path):
    result = bootstrap_database(seed_path=tmp_path / "missing-seed.sql")

    assert result.source == "fallback"
    assert result.inserted == len(DEFAULT_FACULTY_NAMES)
    assert _names() == list(DEFAULT_FACULTY_NAMES)


def test_custom_seed_file(tmp_path: Path):
    seed = tmp_path / "seed.sql"
    seed.write_text(
        "INSERT INTO faculty (name) VALUES ('Dr. One');\n"
        "INSERT INTO faculty (name) VALUES ('Dr. Two');\n",
        encoding="utf-8",
    )

    result = bootstrap_database(seed_path=seed)

    assert result.source == "seed_file"
    assert result.inserted == 2
    assert _names() == ["Dr. One", "Dr. Two"]


def test_bootstrap_is_idempotent():
    bootstrap_database()
    second = bootstrap_database()

    assert second.source == "skipped"
    assert second.inserted == 0
    assert faculty_count() == len(DEFAULT_FACULTY_NAMES)


def test_seed_skipped_when_table_has_rows():
    apply_schema(settings.schema_path)
    with get_db() as session:
        session.execute(text("INSERT INTO faculty (name) VALUES ('Dr. Existing')"))

    result = seed_faculty_if_empty(settings.seed_path)

    assert result.source == "skipped"
    assert _names() == ["Dr. Existing"]


def test_missing_schema_is_fatal(tmp_path: Path):
    with pytest.raises(BootstrapError, match="Missing schema file"):
        bootstrap_database(schema_path=tmp_path / "nope.sql")


def test_malformed_schema_is_fatal(tmp_path: Path):
    schema = tmp_path / "schema.sql"
    schema.write_text("CREATE TABLE faculty (id INTEGER PRIMARY KEY,;", encoding="utf-8")

    with pytest.raises(BootstrapError, match="Failed to apply schema.sql"):
        apply_schema(schema)


def test_schema_enforces_unique_names():
    bootstrap_database()
    with pytest.raises(IntegrityError):
        with get_db() as session:
            session.execute(text("INSERT INTO faculty (name) VALUES ('Dr. John Smith')"))
    assert faculty_count() == len(DEFAULT_FACULTY_NAMES)


def test_init_db_cli_seeds_and_then_skips(isolated_db: Path, capsys):
    url = f"sqlite:///{isolated_db}"

    assert init_db.main(["--database-url", url]) == 0
    assert "Seeded 10 faculty rows" in capsys.readouterr().out

    assert init_db.main(["--database-url", url]) == 0
    assert "already has data" in capsys.readouterr().out


def test_init_db_cli_fallback_message(tmp_path: Path, capsys):
    code = init_db.main(["--seed", str(tmp_path / "absent.sql")])

    assert code == 0
    assert "(fallback)" in capsys.readouterr().out


def test_init_db_cli_fails_without_schema(tmp_path: Path):
    assert init_db.main(["--schema", str(tmp_path / "absent.sql")]) == 1


def test_startup_bootstraps_database():
    with TestClient(app) as client:
        response = client.get("/api/faculty")

    assert response.status_code == 200
    assert len(response.json()) == len(DEFAULT_FACULTY_NAMES)


def test_startup_fails_without_schema(tmp_path: Path):
    original_schema = settings.schema_path
    object.__setattr__(settings, "schema_path", tmp_path / "absent.sql")
    try:
        with pytest.raises(BootstrapError):
            with TestClient(app):
                pass
    finally:
        object.__setattr__(settings, "schema_path", original_schema)
