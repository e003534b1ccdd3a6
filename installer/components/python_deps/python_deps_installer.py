"""
Python dependencies installer module.

Installs the application's Python requirements with pip3. The hash of the
requirements file is recorded after a successful installation so that an
unchanged manifest is not reinstalled on the next run.
"""

import hashlib
import logging
from pathlib import Path
from typing import Optional

from common.command_utils import log_step, run_command
from common.file_utils import write_file
from installer.base_component import BaseComponent
from installer.config_models import AppSettings
from installer.registry import ComponentRegistry

REQUIREMENTS_HASH_FILE = "requirements.sha256"


def calculate_file_hash(file_path: Path) -> str:
    """Return the SHA256 hex digest of a file's content."""
    hasher = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


@ComponentRegistry.register(
    name="python_deps",
    metadata={
        "dependencies": ["repository"],
        "estimated_time": 300,
        "description": "Python dependencies of the application (pip3 install -r requirements.txt)",
    },
)
class PythonDepsInstaller(BaseComponent):
    """
    Installer for the application's Python dependencies.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.repo = app_settings.repo
        self.requirements_path = (
            self.repo.project_dir / self.repo.requirements_file
        )
        self.hash_file_path = (
            Path(app_settings.state_dir) / REQUIREMENTS_HASH_FILE
        )

    def install(self) -> bool:
        log_step(
            f"{self.symbols.get('package', '📦')} Installing Python dependencies...",
            "info",
            self.logger,
            self.app_settings,
        )
        if not self.requirements_path.is_file():
            log_step(
                f"{self.symbols.get('error', '❌')} Requirements file not found: {self.requirements_path}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        command = [
            "pip3",
            "install",
            "-r",
            self.repo.requirements_file,
        ] + list(self.repo.pip_extra_args)
        try:
            run_command(
                command,
                self.app_settings,
                current_logger=self.logger,
                cwd=str(self.repo.project_dir),
            )
        except Exception as e:
            log_step(
                f"{self.symbols.get('error', '❌')} pip3 install failed: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        self._record_requirements_hash()
        log_step(
            f"{self.symbols.get('success', '✅')} Python dependencies installed.",
            "success",
            self.logger,
            self.app_settings,
        )
        return True

    def _record_requirements_hash(self) -> None:
        try:
            write_file(
                self.hash_file_path,
                calculate_file_hash(self.requirements_path) + "\n",
                self.app_settings,
                current_logger=self.logger,
            )
        except Exception as e:
            # The install itself succeeded; only the next run loses the shortcut.
            log_step(
                f"{self.symbols.get('warning', '⚠️')} Could not record requirements hash in {self.hash_file_path}: {e}",
                "warning",
                self.logger,
                self.app_settings,
            )

    def is_installed(self) -> bool:
        """
        True if the requirements file is unchanged since the last
        successful installation.
        """
        if not (
            self.requirements_path.is_file() and self.hash_file_path.is_file()
        ):
            return False
        try:
            recorded = self.hash_file_path.read_text(encoding="utf-8").strip()
        except OSError:
            return False
        return recorded == calculate_file_hash(self.requirements_path)
