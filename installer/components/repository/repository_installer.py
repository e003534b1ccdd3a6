"""
Application repository installer module.

Clones the application repository into the workspace with the GitHub CLI.
"""

import logging
from typing import Optional

from common.command_utils import log_step, run_command
from common.file_utils import ensure_directory
from installer.base_component import BaseComponent
from installer.config_models import AppSettings


class RepositoryInstaller(BaseComponent):
    """
    Installer for the application checkout.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.repo = app_settings.repo

    def install(self) -> bool:
        """
        Create the workspace and clone the repository into it.

        Returns:
            True if the clone succeeded, False otherwise.
        """
        log_step(
            f"{self.symbols.get('folder', '📁')} Setting up workspace...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            ensure_directory(
                self.repo.workspace_dir, self.app_settings, self.logger
            )
        except Exception as e:
            log_step(
                f"{self.symbols.get('error', '❌')} Could not create workspace {self.repo.workspace_dir}: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        project_dir = self.repo.project_dir
        if self.is_installed():
            log_step(
                f"{self.symbols.get('info', 'ℹ️')} Repository already cloned at {project_dir}, skipping clone.",
                "info",
                self.logger,
                self.app_settings,
            )
            return True
        if project_dir.exists():
            log_step(
                f"{self.symbols.get('error', '❌')} {project_dir} exists but is not a git checkout. "
                f"Move it away or set repo.dir_name to another name before cloning {self.repo.slug}.",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        log_step(
            f"{self.symbols.get('download', '📥')} Cloning {self.repo.slug} repository...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            run_command(
                ["gh", "repo", "clone", self.repo.slug, self.repo.dir_name],
                self.app_settings,
                current_logger=self.logger,
                cwd=self.repo.workspace_dir,
            )
        except Exception as e:
            log_step(
                f"{self.symbols.get('error', '❌')} Failed to clone {self.repo.slug}: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        log_step(
            f"{self.symbols.get('info', 'ℹ️')} Current location: {self.repo.project_dir}",
            "info",
            self.logger,
            self.app_settings,
        )
        return True

    def is_installed(self) -> bool:
        """True if the project directory is already a git checkout."""
        return (self.repo.project_dir / ".git").is_dir()
