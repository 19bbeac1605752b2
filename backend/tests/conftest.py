# tests/conftest.py

from __future__ import annotations

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from smarttask.api.deps import RequestContext, get_request_context
from smarttask.core.config import Settings
from smarttask.core.database import Storage
from smarttask.server import create_app
from smarttask.services import TaskService

from .fakes import TEST_USER_HEADER


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        session_jwt_key="test-secret",
        session_jwt_algorithms=["HS256"],
        session_jwt_issuer=None,
        auth_dev_user_id=None,
        cors_origins=["http://localhost:5173"],
        log_level="WARNING",
    )


@pytest.fixture()
def storage(test_settings: Settings):
    storage = Storage(test_settings.database_url)
    storage.init_db()
    yield storage
    storage.dispose()


@pytest.fixture()
def session(storage: Storage):
    with storage.session() as session:
        yield session


@pytest.fixture()
def service(session) -> TaskService:
    return TaskService(session)


@pytest.fixture()
def app(test_settings: Settings, storage: Storage):
    return create_app(test_settings, storage)


@pytest.fixture()
def client(app) -> TestClient:
    """
    Client whose caller identity comes from a test header.

    Identity resolution is exercised separately in test_identity.py; here we
    only need to switch between owners per request.
    """
    def _context(request: Request) -> RequestContext:
        return RequestContext(owner_id=request.headers.get(TEST_USER_HEADER, "user-1"))

    app.dependency_overrides[get_request_context] = _context
    yield TestClient(app)
    app.dependency_overrides.clear()
