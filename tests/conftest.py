# tests/conftest.py
import logging
from unittest.mock import MagicMock

import pytest

from installer.config_models import (
    AppSettings,
    AssistantSettings,
    LauncherSettings,
    OllamaSettings,
    RepositorySettings,
)

# Environment variables read by the settings models that would leak into
# the defaults under test.
SETTINGS_ENV_VARS = [
    "OLLAMA_HOST",
    "OLLAMA_MODEL",
    "REPO_SLUG",
    "REPO_WORKSPACE_DIR",
    "LAUNCHER_BIN_DIR",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def app_settings(tmp_path):
    """Settings whose writable paths all live below tmp_path."""
    return AppSettings(
        interactive=False,
        state_dir=str(tmp_path / "state"),
        repo=RepositorySettings(workspace_dir=str(tmp_path / "workspace")),
        ollama=OllamaSettings(
            startup_timeout=2.0,
            poll_interval=0.01,
            serve_log_path=str(tmp_path / "ollama-serve.log"),
        ),
        assistant=AssistantSettings(
            npm_bin_path=str(tmp_path / "node_modules" / "claude"),
            link_path=str(tmp_path / "bin" / "claude"),
        ),
        launchers=LauncherSettings(
            bin_dir=str(tmp_path / "bin"),
            rc_local_path=str(tmp_path / "etc" / "rc.local"),
        ),
    )


@pytest.fixture
def project_dir(app_settings):
    """An existing (empty) checkout directory."""
    path = app_settings.repo.project_dir
    path.mkdir(parents=True)
    return path
