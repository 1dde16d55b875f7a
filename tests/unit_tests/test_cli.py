import pytest
from click.testing import CliRunner

from drive_relay import token_minter
from drive_relay.cli import cli
from tests.consts import (
    TEST_CLIENT_ID,
    TEST_CLIENT_SECRET,
    TEST_REFRESH_TOKEN,
    TEST_ROOT_FOLDER_ID,
)

CREDENTIAL_VARS = [
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REFRESH_TOKEN",
    "DRIVE_FOLDER_ID",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in CREDENTIAL_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def full_env(clean_env):
    clean_env.setenv("GOOGLE_CLIENT_ID", TEST_CLIENT_ID)
    clean_env.setenv("GOOGLE_CLIENT_SECRET", TEST_CLIENT_SECRET)
    clean_env.setenv("GOOGLE_REFRESH_TOKEN", TEST_REFRESH_TOKEN)
    clean_env.setenv("DRIVE_FOLDER_ID", TEST_ROOT_FOLDER_ID)
    return clean_env


def test_serve_refuses_to_start_without_credentials(clean_env):
    result = CliRunner().invoke(cli, ["serve"])

    assert result.exit_code == 1
    assert "Missing required env vars" in result.output
    assert "GOOGLE_REFRESH_TOKEN" in result.output


def test_mint_token_requires_client_credentials(clean_env):
    result = CliRunner().invoke(cli, ["mint-token", "--no-browser"])

    assert result.exit_code == 1
    assert "GOOGLE_CLIENT_ID" in result.output
    assert "DRIVE_FOLDER_ID" not in result.output


def test_mint_token_exit_status_comes_from_callback(clean_env, monkeypatch):
    clean_env.setenv("GOOGLE_CLIENT_ID", TEST_CLIENT_ID)
    clean_env.setenv("GOOGLE_CLIENT_SECRET", TEST_CLIENT_SECRET)
    calls = {}

    def fake_run(settings, host, port, open_browser):
        calls.update(host=host, port=port, open_browser=open_browser)
        return 0

    monkeypatch.setattr(token_minter, "run_token_minter", fake_run)

    result = CliRunner().invoke(cli, ["mint-token", "--no-browser", "--port", "3001"])

    assert result.exit_code == 0
    assert calls == {"host": "localhost", "port": 3001, "open_browser": False}


def test_show_config_masks_secrets(full_env):
    result = CliRunner().invoke(cli, ["show-config"])

    assert result.exit_code == 0
    assert f"drive_folder_id: {TEST_ROOT_FOLDER_ID}" in result.output
    assert "Configuration OK" in result.output
    assert TEST_CLIENT_SECRET not in result.output
    assert TEST_REFRESH_TOKEN not in result.output
