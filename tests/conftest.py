from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

# Configure required env vars before importing app settings/app.
os.environ.setdefault("SHOPEE_APP_ID", "123456")
os.environ.setdefault("SHOPEE_APP_SECRET", "demo-secret")
os.environ.setdefault("SHOPEE_GRAPHQL_URL", "https://open-api.affiliate.shopee.vn/graphql")
os.environ.setdefault("RESOLVER_MAX_REDIRECTS", "5")
os.environ.setdefault("ENABLE_DOCS", "true")

from link_converter.core.config import Settings, get_settings, reset_settings_cache  # noqa: E402
from link_converter.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_settings() -> None:
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def client() -> TestClient:
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
