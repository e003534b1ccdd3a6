"""
GitHub CLI configurator module.

Authenticates the GitHub CLI so that the application repository can be
cloned. Authentication is interactive (browser based) and is the one step
whose failure aborts the whole setup.
"""

import logging
from typing import Optional

from common.command_utils import log_step, run_command
from installer.base_component import BaseComponent
from installer.components.github_cli.github_cli_installer import (
    GithubCliInstaller,
)
from installer.config_models import AppSettings
from installer.errors import AuthenticationError
from installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="github_cli",
    metadata={
        "dependencies": ["prerequisites"],
        "estimated_time": 60,
        "description": "GitHub CLI, authenticated for cloning the application repository",
    },
)
class GithubCliConfigurator(BaseComponent):
    """
    Configurator for the GitHub CLI.

    Installation is delegated to GithubCliInstaller; configuring means
    logging in with `gh auth login` unless `gh auth status` already
    succeeds.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.installer = GithubCliInstaller(app_settings, self.logger)

    def install(self) -> bool:
        """Install the GitHub CLI by delegating to the installer."""
        return self.installer.install()

    def is_installed(self) -> bool:
        """Check if the GitHub CLI is installed by delegating to the installer."""
        return self.installer.is_installed()

    def is_configured(self) -> bool:
        """
        Check whether the CLI is already authenticated.
        """
        try:
            result = run_command(
                ["gh", "auth", "status"],
                self.app_settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
            )
        except FileNotFoundError:
            return False
        if result.returncode == 0:
            log_step(
                f"{self.symbols.get('success', '✅')} Already authenticated with GitHub",
                "info",
                self.logger,
                self.app_settings,
            )
            return True
        return False

    def configure(self) -> bool:
        """
        Authenticate with GitHub through the browser flow of `gh auth login`.

        Raises:
            AuthenticationError: `gh auth login` did not succeed.
        """
        log_step(
            f"{self.symbols.get('lock', '🔐')} Setting up GitHub authentication...",
            "info",
            self.logger,
            self.app_settings,
        )
        print("You need to authenticate with GitHub to clone the repository.")
        print("Please authenticate with GitHub:")
        print("1. This will open a web browser")
        print("2. Login to GitHub and authorize the CLI")
        print("3. Return here when done")
        print("")

        if self.app_settings.interactive:
            self._wait_for_user()

        try:
            result = run_command(
                ["gh", "auth", "login"],
                self.app_settings,
                check=False,
                current_logger=self.logger,
            )
            login_ok = result.returncode == 0
        except FileNotFoundError:
            login_ok = False

        if not login_ok:
            self._print_auth_failure_guidance()
            raise AuthenticationError("GitHub authentication failed.")

        log_step(
            f"{self.symbols.get('success', '✅')} Git authentication configured via GitHub CLI",
            "success",
            self.logger,
            self.app_settings,
        )
        return True

    def _wait_for_user(self) -> None:
        try:
            input("Press Enter to start authentication...")
        except EOFError:
            log_step(
                f"{self.symbols.get('warning', '!')} No user input (EOF), starting authentication immediately.",
                "warning",
                self.logger,
                self.app_settings,
            )

    def _print_auth_failure_guidance(self) -> None:
        log_step(
            f"{self.symbols.get('error', '❌')} GitHub authentication failed.",
            "error",
            self.logger,
            self.app_settings,
        )
        print("")
        print(f"{self.symbols.get('error', '❌')} GitHub authentication failed.")
        print("You can try again later with: gh auth login")
        print("Or use the public setup script instead: runpod-public-setup.sh")
