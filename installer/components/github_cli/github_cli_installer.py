"""
GitHub CLI installer module.

Installs the `gh` command from the official GitHub CLI apt repository.
"""

import logging
from typing import Optional

from common.command_utils import command_exists, get_command_version, log_step
from common.debian.apt_manager import AptManager
from installer import config
from installer.base_component import BaseComponent
from installer.config_models import AppSettings


class GithubCliInstaller(BaseComponent):
    """
    Installer for the GitHub CLI.

    Adds the GitHub CLI signing key and a deb822 source for the host
    architecture, then installs the `gh` package.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.apt_manager = AptManager(logger=self.logger)

    def install(self) -> bool:
        log_step(
            f"{self.symbols.get('package', '📦')} Installing GitHub CLI...",
            "info",
            self.logger,
            self.app_settings,
        )

        if not self.apt_manager.add_gpg_key_from_url(
            config.GITHUB_CLI_KEY_URL,
            config.GITHUB_CLI_KEYRING_PATH,
            self.app_settings,
        ):
            return False

        try:
            arch = self.apt_manager.get_architecture(self.app_settings)
        except Exception as e:
            log_step(
                f"{self.symbols.get('error', '❌')} Could not determine system architecture: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        repo_details = {
            "Types": "deb",
            "URIs": config.GITHUB_CLI_REPO_URL,
            "Suites": "stable",
            "Components": "main",
            "Architectures": arch,
            "Signed-By": config.GITHUB_CLI_KEYRING_PATH,
        }
        if not self.apt_manager.add_repository(
            config.GITHUB_CLI_REPO_NAME,
            repo_details,
            self.app_settings,
            update_after=True,
        ):
            return False

        if not self.apt_manager.install(
            "gh", self.app_settings, update_first=False
        ):
            return False

        log_step(
            f"{self.symbols.get('success', '✅')} GitHub CLI installed successfully ({self.get_version()})",
            "success",
            self.logger,
            self.app_settings,
        )
        return True

    def is_installed(self) -> bool:
        return command_exists("gh")

    def get_version(self) -> str:
        return get_command_version(
            ["gh", "--version"], self.app_settings, self.logger
        )
