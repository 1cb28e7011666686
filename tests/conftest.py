"""Test fixtures for the live-ops console."""

from __future__ import annotations

from pathlib import Path

import pytest

from liveops_web import AppConfig, create_app
from liveops_web.repositories import RecordStore


@pytest.fixture()
def app(tmp_path: Path):
    """Return a Flask app configured for testing."""

    db_path = tmp_path / "test.db"
    config = AppConfig(
        database_url=f"sqlite:///{db_path}",
        secret_key="testing",
        max_content_length=1024 * 1024,
        max_attachment_bytes=64,
    )
    application = create_app(config)
    application.config.update(TESTING=True)
    yield application


@pytest.fixture()
def client(app):
    """Return a Flask test client."""

    return app.test_client()


@pytest.fixture()
def record_store(app) -> RecordStore:
    return RecordStore(app.config["DB_ENGINE"])
