import os
import shutil
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from answerlens.config.settings import Settings
from answerlens.database.connection import close_pool, get_connection, init_pool
from answerlens.database.repositories.analysis_repository import create_schema


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "answerlens_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings, wait_timeout=5)
    except Exception as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run these tests")
    try:
        with get_connection() as conn:
            create_schema(conn)
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[str], None, None]:
    """Collect analysis ids created by a test and delete them afterwards."""
    cleanup: list[str] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for analysis_id in cleanup:
                cur.execute("DELETE FROM analyses WHERE id = %s", (analysis_id,))
        conn.commit()


@pytest.fixture(scope="session")
def tesseract_available() -> None:
    if shutil.which("tesseract") is None:
        pytest.skip("Tesseract binary not installed")
