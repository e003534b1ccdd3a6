from unittest.mock import MagicMock, patch

import pytest

from installer import config
from installer.components.github_cli.github_cli_configurator import (
    GithubCliConfigurator,
)
from installer.components.github_cli.github_cli_installer import (
    GithubCliInstaller,
)
from installer.errors import AuthenticationError

INSTALLER_MODULE = "installer.components.github_cli.github_cli_installer"
CONFIGURATOR_MODULE = "installer.components.github_cli.github_cli_configurator"


@pytest.fixture
def mock_apt():
    with patch(f"{INSTALLER_MODULE}.AptManager") as mock_apt_class:
        apt = mock_apt_class.return_value
        apt.get_architecture.return_value = "amd64"
        yield apt


@patch(f"{INSTALLER_MODULE}.get_command_version", return_value="gh version 2.40.0")
def test_install_adds_key_repository_and_package(
    mock_version, mock_apt, app_settings, mock_logger
):
    assert GithubCliInstaller(app_settings, mock_logger).install()

    mock_apt.add_gpg_key_from_url.assert_called_once_with(
        config.GITHUB_CLI_KEY_URL, config.GITHUB_CLI_KEYRING_PATH, app_settings
    )
    name, details, settings = mock_apt.add_repository.call_args.args
    assert name == "github-cli"
    assert details == {
        "Types": "deb",
        "URIs": "https://cli.github.com/packages",
        "Suites": "stable",
        "Components": "main",
        "Architectures": "amd64",
        "Signed-By": "/usr/share/keyrings/githubcli-archive-keyring.gpg",
    }
    mock_apt.install.assert_called_once_with("gh", app_settings, update_first=False)


def test_install_stops_when_key_fails(mock_apt, app_settings, mock_logger):
    mock_apt.add_gpg_key_from_url.return_value = False

    assert not GithubCliInstaller(app_settings, mock_logger).install()

    mock_apt.add_repository.assert_not_called()
    mock_apt.install.assert_not_called()


@patch(f"{INSTALLER_MODULE}.command_exists", return_value=True)
def test_is_installed(mock_exists, mock_apt, app_settings, mock_logger):
    assert GithubCliInstaller(app_settings, mock_logger).is_installed()
    mock_exists.assert_called_once_with("gh")


@patch(f"{CONFIGURATOR_MODULE}.run_command")
def test_is_configured_when_auth_status_succeeds(
    mock_run_command, mock_apt, app_settings, mock_logger
):
    mock_run_command.return_value = MagicMock(returncode=0)

    assert GithubCliConfigurator(app_settings, mock_logger).is_configured()

    mock_run_command.assert_called_once_with(
        ["gh", "auth", "status"],
        app_settings,
        check=False,
        capture_output=True,
        current_logger=mock_logger,
    )


@patch(f"{CONFIGURATOR_MODULE}.run_command")
def test_is_not_configured(mock_run_command, mock_apt, app_settings, mock_logger):
    mock_run_command.return_value = MagicMock(returncode=1)

    assert not GithubCliConfigurator(app_settings, mock_logger).is_configured()


@patch("builtins.input")
@patch(f"{CONFIGURATOR_MODULE}.run_command")
def test_configure_logs_in(
    mock_run_command, mock_input, mock_apt, app_settings, mock_logger
):
    mock_run_command.return_value = MagicMock(returncode=0)

    assert GithubCliConfigurator(app_settings, mock_logger).configure()

    mock_run_command.assert_called_once_with(
        ["gh", "auth", "login"],
        app_settings,
        check=False,
        current_logger=mock_logger,
    )
    mock_input.assert_not_called()


@patch("builtins.input", side_effect=EOFError)
@patch(f"{CONFIGURATOR_MODULE}.run_command")
def test_configure_interactive_waits_for_enter(
    mock_run_command, mock_input, mock_apt, app_settings, mock_logger
):
    app_settings.interactive = True
    mock_run_command.return_value = MagicMock(returncode=0)

    assert GithubCliConfigurator(app_settings, mock_logger).configure()

    mock_input.assert_called_once()
    mock_logger.warning.assert_called_once()


@patch(f"{CONFIGURATOR_MODULE}.run_command")
def test_configure_failure_raises_with_guidance(
    mock_run_command, mock_apt, app_settings, mock_logger, capsys
):
    mock_run_command.return_value = MagicMock(returncode=1)

    with pytest.raises(AuthenticationError):
        GithubCliConfigurator(app_settings, mock_logger).configure()

    output = capsys.readouterr().out
    assert "You can try again later with: gh auth login" in output
    assert "runpod-public-setup.sh" in output
