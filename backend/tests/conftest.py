from pathlib import Path

from fastapi.testclient import TestClient
import pytest

from faculty_api.config import settings
from faculty_api.db import bootstrap_database, reset_database_engine
from faculty_api.main import app


@pytest.fixture(autouse=True)
def isolated_db(tmp_path: Path):
    original_db_url = settings.database_url
    test_db = tmp_path / "faculty-test.db"
    test_url = f"sqlite:///{test_db}"

    object.__setattr__(settings, "database_url", test_url)
    reset_database_engine(test_url)

    try:
        yield test_db
    finally:
        object.__setattr__(settings, "database_url", original_db_url)
        reset_database_engine(original_db_url)


@pytest.fixture()
def client() -> TestClient:
    bootstrap_database()
    return TestClient(app)
