import logging
import uuid

import pytest
from fastapi.testclient import TestClient

from app.application.services.subscription_service import SubscriptionService
from app.core.app_factory import create_application
from app.core.config import Settings
from app.infrastructure.persistence.sqlite import SQLitePersistence


@pytest.fixture
def persistence(tmp_path):
    store = SQLitePersistence(tmp_path / "subscriptions.db")
    yield store
    store.close()


@pytest.fixture
def service(persistence):
    return SubscriptionService(persistence, logger=logging.getLogger("tests.subscriptions"))


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    return Settings()


@pytest.fixture
def client(settings):
    with TestClient(create_application(settings)) as test_client:
        yield test_client
