"""
Pytest configuration and shared fixtures.
"""

import pytest

from jobriver.database import init_database, get_session, sqlite_url
from jobriver.logger import StructuredLogger, reset_logger

from sample_jobs import FIXED_NOW


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def quiet_logger() -> StructuredLogger:
    """Logger with no console or file output."""
    return StructuredLogger(name="jobriver-test", enable_console=False, enable_file=False)


@pytest.fixture
def fresh_global_logger():
    """Start and finish with no global logger installed."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def db_url(tmp_path) -> str:
    """URL of a freshly initialized SQLite database."""
    url = sqlite_url(tmp_path / "test.db")
    engine = init_database(url)
    engine.dispose()
    return url


@pytest.fixture
def db_session(db_url):
    """Session on the test database. Uncommitted work is discarded on close."""
    session = get_session(db_url)
    yield session
    session.close()
    session.get_bind().dispose()
