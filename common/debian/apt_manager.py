# common/debian/apt_manager.py
# -*- coding: utf-8 -*-
import logging
import os
import subprocess
import tempfile
from typing import Dict, List, Optional, Union

from common.command_utils import (
    command_exists,
    run_command,
    run_elevated_command,
)
from installer.config_models import AppSettings


class AptManager:
    """
    A thin manager for Debian/Ubuntu apt packages using the command-line
    tools, writing third-party sources in the deb822 format.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initializes the AptManager.
        Args:
            logger: An optional logging object.
        """
        self.logger = logger or logging.getLogger(__name__)
        if not command_exists("apt-get"):
            self.logger.critical(
                "'apt-get' command not found. This manager cannot function."
            )
            raise FileNotFoundError(
                "'apt-get' not found. Is this a Debian-based system?"
            )

    def update(
        self, app_settings: AppSettings, raise_error: bool = False
    ) -> bool:
        """
        Updates the list of available packages using 'apt-get update'.

        Args:
            app_settings: The application settings.
            raise_error: Whether to raise an exception on failure.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info("Updating apt package lists via 'apt-get update'...")
        try:
            run_elevated_command(
                ["apt-get", "update", "-yq"],
                app_settings,
                current_logger=self.logger,
            )
            self.logger.info("Apt package lists updated successfully.")
            return True
        except Exception as e:
            self.logger.error(f"Failed to update apt cache: {e}")
            if raise_error:
                raise
            return False

    def upgrade(self, app_settings: AppSettings) -> bool:
        """
        Upgrades installed packages using 'apt-get upgrade'.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info("Upgrading installed packages...")
        try:
            run_elevated_command(
                ["apt-get", "upgrade", "-yq"],
                app_settings,
                current_logger=self.logger,
                env={**os.environ, "DEBIAN_FRONTEND": "noninteractive"},
            )
            self.logger.info("Installed packages upgraded successfully.")
            return True
        except Exception as e:
            self.logger.error(f"Failed to upgrade packages: {e}")
            return False

    def install(
        self,
        packages: Union[List[str], str],
        app_settings: AppSettings,
        update_first: bool = True,
    ) -> bool:
        """
        Installs one or more packages using 'apt-get install', skipping the
        ones dpkg already reports as installed.

        Args:
            packages: A single package name or a list of package names.
            app_settings: The application settings.
            update_first: Whether to update the package lists before installing.

        Returns:
            True if successful, False otherwise.
        """
        if not isinstance(packages, list):
            packages = [packages]

        if update_first:
            if not self.update(app_settings):
                return False

        packages_to_install = []
        for pkg_name in packages:
            try:
                result = run_command(
                    ["dpkg-query", "-W", "-f=${db:Status-Status}", pkg_name],
                    app_settings,
                    capture_output=True,
                    check=True,
                    current_logger=self.logger,
                )
                if result.stdout.strip() == "installed":
                    self.logger.info(
                        f"Package '{pkg_name}' is already installed. Skipping."
                    )
                else:
                    packages_to_install.append(pkg_name)
            except subprocess.CalledProcessError:
                self.logger.info(
                    f"Marking package for installation: {pkg_name}"
                )
                packages_to_install.append(pkg_name)

        if not packages_to_install:
            self.logger.info("All requested packages are already installed.")
            return True

        self.logger.info(
            f"Committing installation for: {', '.join(packages_to_install)}"
        )
        try:
            run_elevated_command(
                ["apt-get", "install", "-yq"] + packages_to_install,
                app_settings,
                current_logger=self.logger,
            )
            self.logger.info("Packages installed successfully.")
            return True
        except Exception as e:
            self.logger.error(f"Failed to install packages: {e}")
            return False

    def get_architecture(self, app_settings: AppSettings) -> str:
        """Return the dpkg architecture of the host (e.g. amd64)."""
        result = run_command(
            ["dpkg", "--print-architecture"],
            app_settings,
            capture_output=True,
            check=True,
            current_logger=self.logger,
        )
        return result.stdout.strip()

    def add_repository(
        self,
        repo_name: str,
        repo_details: Dict[str, str],
        app_settings: AppSettings,
        update_after: bool = True,
    ) -> bool:
        """
        Adds a new apt repository by creating a deb822-style .sources file.

        Args:
            repo_name: The name for the repository file.
            repo_details: Ordered deb822 fields (Types, URIs, Suites, ...).
            app_settings: The application settings.
            update_after: Whether to update package lists after adding.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info(
            f"Adding repository '{repo_name}' using deb822 format..."
        )
        repo_file_path = f"/etc/apt/sources.list.d/{repo_name}.sources"
        deb822_content = "".join(
            f"{key}: {value}\n" for key, value in repo_details.items()
        )

        temp_path = ""
        try:
            with tempfile.NamedTemporaryFile(
                mode="w", delete=False, suffix=".sources", encoding="utf-8"
            ) as temp_f:
                temp_f.write(deb822_content)
                temp_path = temp_f.name
            run_elevated_command(
                ["install", "-m", "0644", temp_path, repo_file_path],
                app_settings,
                current_logger=self.logger,
            )
            self.logger.info(
                f"Successfully created repository file: {repo_file_path}"
            )
        except Exception as e:
            self.logger.error(
                f"Failed to create repository file '{repo_file_path}': {e}"
            )
            return False
        finally:
            if temp_path and os.path.exists(temp_path):
                os.unlink(temp_path)

        if update_after:
            return self.update(app_settings)
        return True

    def add_gpg_key_from_url(
        self, key_url: str, keyring_path: str, app_settings: AppSettings
    ) -> bool:
        """
        Downloads a GPG key from a URL and saves it as a world-readable keyring.

        Args:
            key_url: The URL of the GPG key.
            keyring_path: The path to save the keyring file.
            app_settings: The application settings.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info(f"Adding GPG key from {key_url} to {keyring_path}")

        keyring_dir = os.path.dirname(keyring_path)
        temp_key_path = os.path.join(
            tempfile.gettempdir(), os.path.basename(keyring_path)
        )

        try:
            if not os.path.isdir(keyring_dir):
                run_elevated_command(
                    ["install", "-m", "0755", "-d", keyring_dir],
                    app_settings,
                    current_logger=self.logger,
                )
            run_command(
                ["curl", "-fsSL", key_url, "-o", temp_key_path],
                app_settings,
                check=True,
                current_logger=self.logger,
            )
            run_elevated_command(
                ["install", "-m", "0644", temp_key_path, keyring_path],
                app_settings,
                current_logger=self.logger,
            )
            self.logger.info("GPG key added and permissions set.")
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.error(f"Failed to add GPG key: {e}")
            return False
        finally:
            if os.path.exists(temp_key_path):
                os.unlink(temp_key_path)
