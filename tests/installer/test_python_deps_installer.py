import hashlib
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from installer.components.python_deps.python_deps_installer import (
    PythonDepsInstaller,
    calculate_file_hash,
)

MODULE = "installer.components.python_deps.python_deps_installer"


@pytest.fixture
def requirements(project_dir):
    path = project_dir / "requirements.txt"
    path.write_text("chromadb\nlangchain\n")
    return path


def test_calculate_file_hash(tmp_path):
    path = tmp_path / "file.txt"
    path.write_bytes(b"abc")

    assert calculate_file_hash(path) == hashlib.sha256(b"abc").hexdigest()


@patch(f"{MODULE}.run_command")
def test_install_runs_pip_and_records_hash(
    mock_run_command, app_settings, project_dir, requirements, mock_logger
):
    installer = PythonDepsInstaller(app_settings, mock_logger)

    assert installer.install()

    mock_run_command.assert_called_once_with(
        ["pip3", "install", "-r", "requirements.txt", "--break-system-packages"],
        app_settings,
        current_logger=mock_logger,
        cwd=str(project_dir),
    )
    recorded = Path(app_settings.state_dir, "requirements.sha256").read_text().strip()
    assert recorded == calculate_file_hash(requirements)
    assert installer.is_installed()


@patch(f"{MODULE}.run_command")
def test_changed_requirements_are_reinstalled(
    mock_run_command, app_settings, requirements, mock_logger
):
    installer = PythonDepsInstaller(app_settings, mock_logger)
    installer.install()

    requirements.write_text("chromadb\nlangchain\nsentence-transformers\n")

    assert not installer.is_installed()


@patch(f"{MODULE}.run_command")
def test_missing_requirements_file(mock_run_command, app_settings, project_dir, mock_logger):
    installer = PythonDepsInstaller(app_settings, mock_logger)

    assert not installer.install()
    assert not installer.is_installed()
    mock_run_command.assert_not_called()


@patch(
    f"{MODULE}.run_command",
    side_effect=subprocess.CalledProcessError(1, "pip3"),
)
def test_pip_failure(mock_run_command, app_settings, requirements, mock_logger):
    installer = PythonDepsInstaller(app_settings, mock_logger)

    assert not installer.install()
    assert not Path(app_settings.state_dir, "requirements.sha256").exists()
