# installer/components/prerequisites/prerequisites_installer.py
# -*- coding: utf-8 -*-
"""
Installer for the system packages every later step relies on.

Updates the apt package lists, optionally upgrades the installed packages,
and installs curl, wget, git, Python 3 with pip and the build toolchain.
"""

import logging
from typing import List, Optional

from common.command_utils import check_package_installed
from common.debian.apt_manager import AptManager
from installer import config
from installer.base_component import BaseComponent
from installer.config_models import AppSettings
from installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="prerequisites",
    metadata={
        "dependencies": [],
        "estimated_time": 180,
        "description": "Updates system packages and installs the essential tools.",
    },
)
class PrerequisitesInstaller(BaseComponent):
    """
    Installer for core system prerequisites.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.apt_manager = AptManager(logger=self.logger)
        self.core_packages: List[str] = list(config.CORE_PREREQ_PACKAGES)

    def install(self) -> bool:
        """
        Update, upgrade and install the essential packages.

        Returns:
            True if the installation was successful, False otherwise.
        """
        self.logger.info(
            f"{self.symbols.get('package', '📦')} Updating system packages..."
        )
        if not self.apt_manager.update(self.app_settings):
            self.logger.error("Failed to update package lists.")
            return False

        if self.app_settings.system_upgrade:
            if not self.apt_manager.upgrade(self.app_settings):
                self.logger.error("Failed to upgrade system packages.")
                return False
        else:
            self.logger.info("System upgrade disabled in configuration.")

        self.logger.info(
            f"{self.symbols.get('gear', '⚙️')} Installing essential packages..."
        )
        if not self.apt_manager.install(
            self.core_packages, self.app_settings, update_first=False
        ):
            self.logger.error("Failed to install essential packages.")
            return False

        self.logger.info(
            f"{self.symbols.get('success', '✅')} Essential packages installed."
        )
        return True

    def is_installed(self) -> bool:
        """
        Check if all essential packages are installed.

        Returns:
            True if all core packages are installed, False otherwise.
        """
        for package in self.core_packages:
            if not check_package_installed(
                package, self.app_settings, self.logger
            ):
                self.logger.info(
                    f"Core prerequisite package '{package}' is not installed."
                )
                return False
        return True
