"""Application fixtures: test settings and a TestClient wired to the fake Drive."""
import pytest
from fastapi.testclient import TestClient

from drive_relay.config.settings import Settings, get_settings
from drive_relay.main import create_app
from tests.consts import (
    TEST_CLIENT_ID,
    TEST_CLIENT_SECRET,
    TEST_REFRESH_TOKEN,
    TEST_ROOT_FOLDER_ID,
)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        google_client_id=TEST_CLIENT_ID,
        google_client_secret=TEST_CLIENT_SECRET,
        google_refresh_token=TEST_REFRESH_TOKEN,
        drive_folder_id=TEST_ROOT_FOLDER_ID,
        upload_concurrency=5,
    )


@pytest.fixture
def client(settings, fake_drive, folder_cache):
    app = create_app(settings, drive=fake_drive, cache=folder_cache)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
