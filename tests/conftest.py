import pytest

from progression.core.config import reset_settings
from progression.core.database import reset_engine
from progression.infrastructure.challenge.catalog_config import reload_catalog
from progression.infrastructure.storage.gateway import InMemoryGateway


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    monkeypatch.delenv("CHALLENGE_CATALOG_PATH", raising=False)
    monkeypatch.setenv("PROGRESSION_TIMEZONE", "UTC")
    reset_settings()
    reload_catalog()
    yield
    reset_engine()
    reset_settings()
    reload_catalog()


@pytest.fixture
def gateway():
    return InMemoryGateway()
