"""
Application repository configurator module.

Brings an existing checkout up to date and creates the project
directories the application expects (documents, vector store, config).
"""

import logging
from typing import Optional

from common.command_utils import log_step, run_command
from common.file_utils import ensure_directory
from installer.base_component import BaseComponent
from installer.components.repository.repository_installer import (
    RepositoryInstaller,
)
from installer.config_models import AppSettings
from installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="repository",
    metadata={
        "dependencies": ["github_cli"],
        "estimated_time": 30,
        "description": "Application repository checkout and project directories",
    },
)
class RepositoryConfigurator(BaseComponent):
    """
    Configurator for the application checkout.

    A checkout that existed before this run is updated with `git pull`;
    a fresh clone is left as is.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.repo = app_settings.repo
        self.installer = RepositoryInstaller(app_settings, self.logger)
        self._cloned_this_run = False

    def install(self) -> bool:
        """Clone the repository by delegating to the installer."""
        already_cloned = self.installer.is_installed()
        success = self.installer.install()
        self._cloned_this_run = success and not already_cloned
        return success

    def is_installed(self) -> bool:
        """Check for an existing checkout by delegating to the installer."""
        return self.installer.is_installed()

    def configure(self) -> bool:
        project_dir = self.repo.project_dir
        if not project_dir.is_dir():
            log_step(
                f"{self.symbols.get('error', '❌')} Project directory {project_dir} does not exist.",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        if self.repo.update_existing and not self._cloned_this_run:
            log_step(
                f"{self.symbols.get('info', 'ℹ️')} Repository already exists, pulling latest changes...",
                "info",
                self.logger,
                self.app_settings,
            )
            try:
                run_command(
                    ["git", "pull"],
                    self.app_settings,
                    current_logger=self.logger,
                    cwd=str(project_dir),
                )
            except Exception as e:
                log_step(
                    f"{self.symbols.get('error', '❌')} git pull failed in {project_dir}: {e}",
                    "error",
                    self.logger,
                    self.app_settings,
                )
                return False

        log_step(
            f"{self.symbols.get('folder', '📁')} Creating project directories...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            for subdir in self.repo.project_subdirs:
                ensure_directory(
                    project_dir / subdir, self.app_settings, self.logger
                )
        except Exception as e:
            log_step(
                f"{self.symbols.get('error', '❌')} Could not create project directories: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False
        return True

    def is_configured(self) -> bool:
        """
        Up to date only when pulling is disabled and every project
        directory exists; with pulling enabled the checkout is refreshed on
        each run.
        """
        if self.repo.update_existing:
            return False
        return all(
            (self.repo.project_dir / subdir).is_dir()
            for subdir in self.repo.project_subdirs
        )
