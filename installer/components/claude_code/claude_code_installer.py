"""
AI coding assistant CLI installer module.

Installs the Claude Code CLI as a global npm package and makes sure its
command is reachable on PATH.
"""

import logging
import os
from typing import Optional

from common.command_utils import (
    command_exists,
    log_step,
    run_elevated_command,
)
from installer.base_component import BaseComponent
from installer.config_models import AppSettings
from installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="claude_code",
    metadata={
        "dependencies": ["nodejs"],
        "estimated_time": 60,
        "description": "Claude Code AI assistant CLI (global npm package)",
    },
)
class ClaudeCodeInstaller(BaseComponent):
    """
    Installer for the AI assistant CLI.

    A failed npm installation fails the component. If npm succeeds but the
    command is still not on PATH afterwards, only a warning with the manual
    installation command is logged.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.assistant = app_settings.assistant

    def install(self) -> bool:
        log_step(
            f"{self.symbols.get('robot', '🤖')} Installing Claude Code CLI...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            run_elevated_command(
                ["npm", "install", "-g", self.assistant.npm_package],
                self.app_settings,
                current_logger=self.logger,
            )
        except Exception as e:
            log_step(
                f"{self.symbols.get('error', '❌')} npm installation of {self.assistant.npm_package} failed: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        self.ensure_symlink()

        if command_exists(self.assistant.command):
            log_step(
                f"{self.symbols.get('success', '✅')} Claude Code installed successfully",
                "success",
                self.logger,
                self.app_settings,
            )
        else:
            log_step(
                f"{self.symbols.get('warning', '⚠️')} Claude Code installation may have failed. "
                f"You can try installing manually with: npm install -g {self.assistant.npm_package}",
                "warning",
                self.logger,
                self.app_settings,
            )
        return True

    def ensure_symlink(self) -> bool:
        """
        Link the binary from the global npm module to link_path when the
        link target is missing and the module binary exists.

        Returns:
            True if a link was created.
        """
        link_path = self.assistant.link_path
        npm_bin_path = self.assistant.npm_bin_path
        if os.path.isfile(link_path) or not os.path.isfile(npm_bin_path):
            return False
        try:
            run_elevated_command(
                ["ln", "-s", npm_bin_path, link_path],
                self.app_settings,
                current_logger=self.logger,
            )
        except Exception as e:
            log_step(
                f"{self.symbols.get('warning', '⚠️')} Could not link {npm_bin_path} to {link_path}: {e}",
                "warning",
                self.logger,
                self.app_settings,
            )
            return False
        return True

    def is_installed(self) -> bool:
        return command_exists(self.assistant.command)
