import logging
import subprocess
from unittest.mock import MagicMock

import pytest

from common.command_utils import (
    check_package_installed,
    command_exists,
    get_command_version,
    log_step,
    run_background_command,
    run_command,
    run_elevated_command,
)
from installer.config_models import AppSettings


@pytest.fixture
def mock_app_settings():
    """Fixture to create mock AppSettings for testing."""
    mock_settings = MagicMock(spec=AppSettings)
    mock_settings.symbols = {
        "error": "❌",
        "info": "ℹ️",
        "warning": "!",
        "gear": "⚙️",
    }
    return mock_settings


@pytest.mark.parametrize(
    "level, method",
    [
        ("info", "info"),
        ("success", "info"),
        ("debug", "debug"),
        ("warning", "warning"),
        ("error", "error"),
        ("critical", "critical"),
    ],
)
def test_log_step_dispatches_on_level(mock_logger, level, method):
    log_step("message", level, mock_logger)

    getattr(mock_logger, method).assert_called_once_with(
        "message", exc_info=False
    )


def test_run_command_list(mocker, mock_logger, mock_app_settings):
    mock_run = mocker.patch(
        "common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess(["echo", "hi"], 0, "hi\n", ""),
    )

    result = run_command(
        ["echo", "hi"],
        mock_app_settings,
        capture_output=True,
        current_logger=mock_logger,
        cwd="/tmp",
    )

    assert result.stdout == "hi\n"
    mock_run.assert_called_once_with(
        ["echo", "hi"],
        check=True,
        shell=False,
        capture_output=True,
        text=True,
        input=None,
        cwd="/tmp",
        env=None,
    )
    mock_logger.info.assert_any_call(
        "⚙️ Executing: echo hi (in /tmp)", exc_info=False
    )
    mock_logger.debug.assert_any_call("   stdout: hi", exc_info=False)


def test_run_command_string_is_split_with_warning(
    mocker, mock_logger, mock_app_settings
):
    mock_run = mocker.patch(
        "common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess([], 0),
    )

    run_command("git pull --rebase", mock_app_settings, current_logger=mock_logger)

    assert mock_run.call_args.args[0] == ["git", "pull", "--rebase"]
    mock_logger.warning.assert_called_once()


def test_run_command_reraises_called_process_error(
    mocker, mock_logger, mock_app_settings
):
    mocker.patch(
        "common.command_utils.subprocess.run",
        side_effect=subprocess.CalledProcessError(
            2, ["false"], output="", stderr="boom"
        ),
    )

    with pytest.raises(subprocess.CalledProcessError):
        run_command(["false"], mock_app_settings, current_logger=mock_logger)

    mock_logger.error.assert_any_call(
        "❌ Command `false` failed (rc 2).", exc_info=False
    )
    mock_logger.error.assert_any_call("   stderr: boom", exc_info=False)


def test_run_command_reraises_file_not_found(
    mocker, mock_logger, mock_app_settings
):
    mocker.patch(
        "common.command_utils.subprocess.run",
        side_effect=FileNotFoundError(2, "No such file", "nonexistent"),
    )

    with pytest.raises(FileNotFoundError):
        run_command(["nonexistent"], mock_app_settings, current_logger=mock_logger)

    mock_logger.error.assert_called_once()


def test_run_elevated_command_adds_sudo_for_regular_user(
    mocker, mock_logger, mock_app_settings
):
    mocker.patch("common.command_utils.os.geteuid", return_value=1000)
    mock_run = mocker.patch("common.command_utils.run_command")

    run_elevated_command(
        ["apt-get", "update"], mock_app_settings, current_logger=mock_logger
    )

    assert mock_run.call_args.args[0] == ["sudo", "apt-get", "update"]


def test_run_elevated_command_as_root_runs_unchanged(
    mocker, mock_app_settings
):
    mocker.patch("common.command_utils.os.geteuid", return_value=0)
    mock_run = mocker.patch("common.command_utils.run_command")

    run_elevated_command(["bash", "-"], mock_app_settings, cmd_input="echo")

    assert mock_run.call_args.args[0] == ["bash", "-"]
    assert mock_run.call_args.kwargs["cmd_input"] == "echo"


def test_run_background_command_detaches(
    mocker, tmp_path, mock_logger, mock_app_settings
):
    mock_popen = mocker.patch("common.command_utils.subprocess.Popen")
    log_path = tmp_path / "serve.log"

    process = run_background_command(
        ["ollama", "serve"],
        mock_app_settings,
        log_path=str(log_path),
        current_logger=mock_logger,
    )

    assert process is mock_popen.return_value
    args, kwargs = mock_popen.call_args
    assert args[0] == ["ollama", "serve"]
    assert kwargs["start_new_session"] is True
    assert kwargs["stdin"] == subprocess.DEVNULL
    assert kwargs["stderr"] == subprocess.STDOUT
    assert log_path.exists()


def test_command_exists(mocker):
    mocker.patch(
        "common.command_utils.shutil.which",
        side_effect=lambda name: "/usr/bin/node" if name == "node" else None,
    )

    assert command_exists("node") is True
    assert command_exists("ollama") is False


def test_get_command_version_first_line(mocker, mock_app_settings):
    mocker.patch(
        "common.command_utils.run_command",
        return_value=MagicMock(returncode=0, stdout="gh version 2.40.0\nhttps://...\n"),
    )

    assert get_command_version(["gh", "--version"], mock_app_settings) == "gh version 2.40.0"


def test_get_command_version_missing_command(mocker, mock_app_settings):
    mocker.patch(
        "common.command_utils.run_command", side_effect=FileNotFoundError()
    )

    assert get_command_version(["node", "--version"], mock_app_settings) == "N/A"


def test_check_package_installed_success(mocker, mock_logger, mock_app_settings):
    """Test when the package is installed successfully."""
    run_command_mock = mocker.patch(
        "common.command_utils.run_command",
        return_value=MagicMock(returncode=0, stdout="install ok installed"),
    )

    result = check_package_installed("curl", mock_app_settings, mock_logger)

    assert result is True
    run_command_mock.assert_called_once_with(
        ["dpkg-query", "-W", "-f=${Status}", "curl"],
        mock_app_settings,
        check=False,
        capture_output=True,
        text=True,
        current_logger=mock_logger,
    )


def test_check_package_installed_not_installed(mocker, mock_logger, mock_app_settings):
    mocker.patch(
        "common.command_utils.run_command",
        return_value=MagicMock(returncode=1, stdout=""),
    )

    assert check_package_installed("curl", mock_app_settings, mock_logger) is False


def test_check_package_installed_without_dpkg(mocker, mock_logger, mock_app_settings):
    mocker.patch(
        "common.command_utils.run_command", side_effect=FileNotFoundError()
    )

    assert check_package_installed("curl", mock_app_settings, mock_logger) is False
    mock_logger.error.assert_called_once()
