from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from library_app.api import create_app
from library_app.config import Settings
from library_app.context import create_context
from library_app.main import LibrarySession
from library_app.ui_helpers import OUTPUT_MODE_ENV


@pytest.fixture
def settings():
    # Built-in demo catalog, regardless of the developer's .env
    return Settings(seed_file=None, log_level="DEBUG", log_file=None)


@pytest.fixture
def context(settings):
    return create_context(settings)


@pytest.fixture
def service(context):
    return context.service


@pytest.fixture
def person_lookups(context, monkeypatch):
    """Spy on person-store lookups made through the shared context."""
    spy = MagicMock(wraps=context.person_store.get)
    monkeypatch.setattr(context.person_store, "get", spy)
    return spy


@pytest.fixture
def client(context):
    with TestClient(create_app(context)) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def fresh_cli_session(monkeypatch):
    # Each CLI test starts with a freshly seeded in-memory catalog and plain output
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")
    LibrarySession.reset()
    yield
    LibrarySession.reset()
