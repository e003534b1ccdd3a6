"""
Environment file configurator module.

Writes the application's .env file with the model server address and the
Python import path.
"""

import logging
from pathlib import Path
from typing import Optional

from common.command_utils import log_step
from common.file_utils import write_file
from common.network_utils import normalize_base_url
from installer.base_component import BaseComponent
from installer.config import OLLAMA_DEFAULT_PORT
from installer.config_models import AppSettings
from installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="environment",
    metadata={
        "dependencies": ["repository"],
        "estimated_time": 1,
        "description": "Application environment file (.env)",
    },
)
class EnvironmentConfigurator(BaseComponent):
    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.repo = app_settings.repo
        self.env_file_path: Path = self.repo.project_dir / self.repo.env_file_name

    def install(self) -> bool:
        return True

    def is_installed(self) -> bool:
        return True

    def render(self) -> str:
        return self.repo.env_file_template.format(
            ollama_host=normalize_base_url(
                self.app_settings.ollama.host, default_port=OLLAMA_DEFAULT_PORT
            ),
            pythonpath=str(self.repo.project_dir / self.repo.pythonpath_subdir),
        )

    def configure(self) -> bool:
        log_step(
            f"{self.symbols.get('gear', '⚙️')} Creating environment file...",
            "info",
            self.logger,
            self.app_settings,
        )
        if not self.repo.project_dir.is_dir():
            log_step(
                f"{self.symbols.get('error', '❌')} Project directory {self.repo.project_dir} does not exist.",
                "error",
                self.logger,
                self.app_settings,
            )
            return False
        try:
            write_file(
                self.env_file_path,
                self.render(),
                self.app_settings,
                current_logger=self.logger,
            )
        except Exception as e:
            log_step(
                f"{self.symbols.get('error', '❌')} Failed to write {self.env_file_path}: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False
        return True

    def is_configured(self) -> bool:
        try:
            return self.env_file_path.read_text(encoding="utf-8") == self.render()
        except (OSError, UnicodeDecodeError, KeyError, IndexError):
            return False
