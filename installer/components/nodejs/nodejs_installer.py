"""
Node.js installer module.

This module provides a self-contained installer for Node.js LTS, which the
AI assistant CLI needs for its global npm installation.
"""

import logging
from typing import Optional, Tuple

from common.command_utils import (
    command_exists,
    get_command_version,
    log_step,
    run_command,
    run_elevated_command,
)
from common.debian.apt_manager import AptManager
from installer import config
from installer.base_component import BaseComponent
from installer.config_models import AppSettings
from installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="nodejs",
    metadata={
        "dependencies": ["prerequisites"],
        "estimated_time": 120,
        "description": "Node.js JavaScript runtime (required for the AI assistant CLI)",
    },
)
class NodejsInstaller(BaseComponent):
    """
    Installer for Node.js JavaScript runtime.

    This installer ensures that Node.js LTS and npm are installed
    using the NodeSource Node.js Binary Distributions.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.apt_manager = AptManager(logger=self.logger)

    def install(self) -> bool:
        """
        Install Node.js LTS and npm.

        Returns:
            True if the installation was successful, False otherwise.
        """
        log_step(
            f"{self.symbols.get('package', '📦')} Installing Node.js using NodeSource...",
            "info",
            self.logger,
            self.app_settings,
        )

        if not self._setup_nodesource_repository():
            return False

        if not self.apt_manager.install(
            "nodejs", self.app_settings, update_first=False
        ):
            log_step(
                f"{self.symbols.get('error', '❌')} Failed to install Node.js package.",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        node_ver, npm_ver = self.get_versions()
        log_step(
            f"{self.symbols.get('success', '✅')} Node.js {node_ver} installed successfully (npm {npm_ver})",
            "success",
            self.logger,
            self.app_settings,
        )
        return True

    def is_installed(self) -> bool:
        """
        Check if the node command is available.

        Returns:
            True if Node.js is installed, False otherwise.
        """
        if not command_exists("node"):
            return False
        node_ver, _ = self.get_versions()
        log_step(
            f"{self.symbols.get('success', '✅')} Node.js already installed: {node_ver}",
            "info",
            self.logger,
            self.app_settings,
        )
        return True

    def _setup_nodesource_repository(self) -> bool:
        """
        Download the NodeSource setup script and run it with bash, which
        adds the NodeSource apt repository and refreshes the package lists.

        Returns:
            True if the setup was successful, False otherwise.
        """
        nodesource_setup_url = f"{config.NODESOURCE_BASE_URL}/{self.app_settings.nodejs_version_setup_script}"
        try:
            log_step(
                f"{self.symbols.get('info', 'ℹ️')} Downloading NodeSource script from {nodesource_setup_url}...",
                "info",
                self.logger,
                self.app_settings,
            )
            curl_res = run_command(
                ["curl", "-fsSL", nodesource_setup_url],
                self.app_settings,
                capture_output=True,
                check=True,
                current_logger=self.logger,
            )

            log_step(
                f"{self.symbols.get('info', 'ℹ️')} Executing NodeSource setup script...",
                "info",
                self.logger,
                self.app_settings,
            )
            run_elevated_command(
                ["bash", "-"],
                self.app_settings,
                cmd_input=curl_res.stdout,
                current_logger=self.logger,
            )
            return True
        except Exception as e:
            log_step(
                f"{self.symbols.get('error', '❌')} Failed to set up NodeSource repository: {str(e)}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

    def get_versions(self) -> Tuple[str, str]:
        """
        Get the installed Node.js and npm versions ("N/A" when unknown).
        """
        node_ver = get_command_version(
            ["node", "--version"], self.app_settings, self.logger
        )
        npm_ver = get_command_version(
            ["npm", "--version"], self.app_settings, self.logger
        )
        return node_ver, npm_ver
