"""
Base component class for all component modules.

This module provides the base class that every step of the bootstrap
sequence inherits from. It defines the common interface the orchestrator
relies on.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from installer.config_models import AppSettings


class BaseComponent(ABC):
    """
    Base class for all component modules.

    A component has two phases, install and configure, and a presence check
    for each. The orchestrator skips a phase whose check already passes.
    Components without a configure phase inherit the no-op defaults.
    """

    # Class-level metadata that can be overridden by the registry decorator
    metadata: Dict[str, Any] = {
        "dependencies": [],  # Components that must run first
        "estimated_time": 0,  # Estimated installation time in seconds
        "description": "",
    }
    component_name: str = ""

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the component.

        Args:
            app_settings: The application settings.
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.symbols = app_settings.symbols

    @abstractmethod
    def install(self) -> bool:
        """
        Install the component.

        Returns:
            True if the installation was successful, False otherwise.
        """

    @abstractmethod
    def is_installed(self) -> bool:
        """
        Check if the component is installed.

        Returns:
            True if the component is installed, False otherwise.
        """

    def configure(self) -> bool:
        """
        Configure the component. Nothing to do by default.

        Returns:
            True if the configuration was successful, False otherwise.
        """
        return True

    def is_configured(self) -> bool:
        """
        Check if the component is configured. Components without a
        configure phase report False so that status output stays honest
        about what has actually been verified.
        """
        return False

    def has_configure_phase(self) -> bool:
        """True if the subclass overrides configure()."""
        return type(self).configure is not BaseComponent.configure
