"""Shared fixtures — temporary SQLite database and FastAPI test client.

Every test that touches the database gets a fresh file under
``tmp_path``; ``settings.database_url`` is patched so that both the
service layer and the app lifespan use it.
"""

import os

# Settings are read at import time; pin the values the tests rely on.
os.environ.setdefault("API_PREFIX", "/api")
os.environ.setdefault("APPLICATION_NAME", "amachouApp")
os.environ.setdefault("DEFAULT_PAGE_SIZE", "20")
os.environ.setdefault("MAX_PAGE_SIZE", "2000")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from amachou_api.app.core.config import settings  # noqa: E402
from amachou_api.app.core.db import init_db  # noqa: E402
from amachou_api.app.main import create_app  # noqa: E402
from amachou_api.app.services.disease_service import DiseaseService  # noqa: E402


@pytest.fixture
def database(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "amachou-test.db"))
    init_db()
    return settings.database_url


@pytest.fixture
def service(database):
    return DiseaseService()


@pytest.fixture
def app(database):
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
