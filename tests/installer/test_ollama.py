import subprocess
from unittest.mock import MagicMock, call, patch

import pytest
import requests

from installer.components.ollama.ollama_configurator import (
    OllamaConfigurator,
    model_matches,
)
from installer.components.ollama.ollama_installer import OllamaInstaller

INSTALLER_MODULE = "installer.components.ollama.ollama_installer"
CONFIGURATOR_MODULE = "installer.components.ollama.ollama_configurator"
HEALTH_URL = "http://localhost:11434/api/tags"


@patch(f"{INSTALLER_MODULE}.command_exists", return_value=True)
@patch(f"{INSTALLER_MODULE}.run_elevated_command")
@patch(f"{INSTALLER_MODULE}.run_command")
def test_install_pipes_script_to_sh(
    mock_run_command, mock_run_elevated_command, mock_exists, app_settings, mock_logger
):
    mock_run_command.return_value = MagicMock(stdout="#!/bin/sh\n")

    assert OllamaInstaller(app_settings, mock_logger).install()

    mock_run_command.assert_called_once_with(
        ["curl", "-fsSL", "https://ollama.ai/install.sh"],
        app_settings,
        capture_output=True,
        check=True,
        current_logger=mock_logger,
    )
    mock_run_elevated_command.assert_called_once_with(
        ["sh", "-"],
        app_settings,
        cmd_input="#!/bin/sh\n",
        current_logger=mock_logger,
    )


@patch(f"{INSTALLER_MODULE}.run_elevated_command")
@patch(
    f"{INSTALLER_MODULE}.run_command",
    side_effect=subprocess.CalledProcessError(22, "curl"),
)
def test_install_download_failure(
    mock_run_command, mock_run_elevated_command, app_settings, mock_logger
):
    assert not OllamaInstaller(app_settings, mock_logger).install()
    mock_run_elevated_command.assert_not_called()


@pytest.mark.parametrize(
    "installed, wanted, expected",
    [
        ("mistral:latest", "mistral", True),
        ("mistral:7b", "mistral", True),
        ("mistral-nemo:latest", "mistral", False),
        ("mistral:latest", "mistral:7b", False),
        ("mistral:7b", "mistral:7b", True),
    ],
)
def test_model_matches(installed, wanted, expected):
    assert model_matches(installed, wanted) is expected


@pytest.fixture
def mocks():
    """Patches every external interaction of the configurator."""
    with (
        patch(f"{CONFIGURATOR_MODULE}.is_http_endpoint_ready") as ready,
        patch(f"{CONFIGURATOR_MODULE}.wait_for_http_endpoint") as wait,
        patch(f"{CONFIGURATOR_MODULE}.run_background_command") as background,
        patch(f"{CONFIGURATOR_MODULE}.run_command") as run,
    ):
        manager = MagicMock()
        manager.attach_mock(wait, "wait")
        manager.attach_mock(run, "run")
        yield MagicMock(
            ready=ready, wait=wait, background=background, run=run, manager=manager
        )


def test_configure_starts_daemon_and_pulls_after_health_check(
    mocks, app_settings, mock_logger
):
    mocks.ready.return_value = False
    mocks.wait.return_value = True

    assert OllamaConfigurator(app_settings, mock_logger).configure()

    mocks.background.assert_called_once_with(
        ["ollama", "serve"],
        app_settings,
        log_path=app_settings.ollama.serve_log_path,
        current_logger=mock_logger,
    )
    assert mocks.manager.mock_calls == [
        call.wait(
            HEALTH_URL,
            app_settings,
            timeout=app_settings.ollama.startup_timeout,
            interval=app_settings.ollama.poll_interval,
            current_logger=mock_logger,
        ),
        call.run(
            ["ollama", "pull", "mistral"],
            app_settings,
            current_logger=mock_logger,
        ),
    ]


def test_configure_does_not_pull_when_daemon_never_answers(
    mocks, app_settings, mock_logger
):
    mocks.ready.return_value = False
    mocks.wait.return_value = False

    assert not OllamaConfigurator(app_settings, mock_logger).configure()

    mocks.run.assert_not_called()


def test_configure_reuses_running_daemon(mocks, app_settings, mock_logger):
    mocks.ready.return_value = True

    assert OllamaConfigurator(app_settings, mock_logger).configure()

    mocks.background.assert_not_called()
    mocks.wait.assert_not_called()
    mocks.run.assert_called_once()


def test_configure_background_start_failure(mocks, app_settings, mock_logger):
    mocks.ready.return_value = False
    mocks.background.side_effect = FileNotFoundError("ollama")

    assert not OllamaConfigurator(app_settings, mock_logger).configure()

    mocks.wait.assert_not_called()
    mocks.run.assert_not_called()


def test_configure_pull_failure(mocks, app_settings, mock_logger):
    mocks.ready.return_value = True
    mocks.run.side_effect = subprocess.CalledProcessError(1, "ollama")

    assert not OllamaConfigurator(app_settings, mock_logger).configure()


def test_health_url_uses_configured_host(mocks, app_settings, mock_logger):
    app_settings.ollama.host = "gpu-box:11434/"

    configurator = OllamaConfigurator(app_settings, mock_logger)

    assert configurator.health_url == "http://gpu-box:11434/api/tags"


@patch(f"{CONFIGURATOR_MODULE}.requests.get")
def test_is_configured_when_model_present(mock_get, mocks, app_settings, mock_logger):
    mocks.ready.return_value = True
    mock_get.return_value = MagicMock(
        json=MagicMock(return_value={"models": [{"name": "mistral:latest"}]})
    )

    assert OllamaConfigurator(app_settings, mock_logger).is_configured()


@patch(f"{CONFIGURATOR_MODULE}.requests.get")
def test_is_not_configured_without_model(mock_get, mocks, app_settings, mock_logger):
    mocks.ready.return_value = True
    mock_get.return_value = MagicMock(
        json=MagicMock(return_value={"models": [{"name": "llama3:latest"}]})
    )

    assert not OllamaConfigurator(app_settings, mock_logger).is_configured()


def test_is_not_configured_when_daemon_down(mocks, app_settings, mock_logger):
    mocks.ready.return_value = False

    assert not OllamaConfigurator(app_settings, mock_logger).is_configured()


@patch(
    f"{CONFIGURATOR_MODULE}.requests.get",
    side_effect=requests.exceptions.ConnectionError("refused"),
)
def test_list_models_unavailable(mock_get, app_settings, mock_logger):
    assert OllamaConfigurator(app_settings, mock_logger).list_models() == []


def test_bare_host_uses_ollama_port(mocks, app_settings, mock_logger):
    app_settings.ollama.host = "0.0.0.0"

    configurator = OllamaConfigurator(app_settings, mock_logger)

    assert configurator.health_url == "http://0.0.0.0:11434/api/tags"
