"""
Ollama installer module.

Installs the Ollama model-serving daemon with its official install script.
"""

import logging
from typing import Optional

from common.command_utils import (
    command_exists,
    log_step,
    run_command,
    run_elevated_command,
)
from installer.base_component import BaseComponent
from installer.config_models import AppSettings


class OllamaInstaller(BaseComponent):
    """
    Installer for the Ollama daemon and CLI.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.ollama = app_settings.ollama

    def install(self) -> bool:
        log_step(
            f"{self.symbols.get('llama', '🦙')} Installing Ollama...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            script_res = run_command(
                ["curl", "-fsSL", self.ollama.install_script_url],
                self.app_settings,
                capture_output=True,
                check=True,
                current_logger=self.logger,
            )
            run_elevated_command(
                ["sh", "-"],
                self.app_settings,
                cmd_input=script_res.stdout,
                current_logger=self.logger,
            )
        except Exception as e:
            log_step(
                f"{self.symbols.get('error', '❌')} Failed to install Ollama: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        if not command_exists("ollama"):
            log_step(
                f"{self.symbols.get('error', '❌')} Ollama install script finished but 'ollama' is not on PATH.",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        log_step(
            f"{self.symbols.get('success', '✅')} Ollama installed successfully",
            "success",
            self.logger,
            self.app_settings,
        )
        return True

    def is_installed(self) -> bool:
        return command_exists("ollama")
