"""
Orchestrator for the component framework.

This module provides the ComponentOrchestrator class, which imports the
component modules, resolves dependencies, and runs the components in order.

Execution is fail-fast: the first phase that fails stops the run. Nothing is
rolled back or retried. An AuthenticationError is recorded and re-raised so
the caller can abort with guidance. Every phase leaves a ComponentResult in
``orchestrator.results`` so the caller can report what happened.
"""

import importlib
import logging
import os
import pkgutil
from typing import Dict, List, Optional, Type

from installer.base_component import BaseComponent
from installer.config_models import AppSettings, ComponentResult
from installer.errors import AuthenticationError
from installer.registry import ComponentRegistry

STATUS_INSTALLED = "installed"
STATUS_CONFIGURED = "configured"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


def load_all_components(logger: Optional[logging.Logger] = None) -> None:
    """
    Import every installer and configurator module below
    installer/components so that the classes register themselves.
    """
    logger = logger or logging.getLogger(__name__)

    import installer.components

    components_dir = os.path.dirname(installer.components.__file__)
    for module_info in pkgutil.iter_modules([components_dir]):
        if not module_info.ispkg or module_info.name.startswith("__"):
            continue
        component_name = module_info.name
        for suffix in ("installer", "configurator"):
            module_name = f"installer.components.{component_name}.{component_name}_{suffix}"
            try:
                importlib.import_module(module_name)
                logger.debug(f"Imported component module: {module_name}")
            except ModuleNotFoundError as e:
                if e.name != module_name:
                    raise
                logger.debug(f"No {suffix} module found for {component_name}")


class ComponentOrchestrator:
    """
    Runs registered components in dependency order.

    The presence checks of each component (is_installed / is_configured)
    guard its phases, so running the same sequence twice performs no second
    installation unless force is set.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            app_settings: The application settings.
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.results: List[ComponentResult] = []

        load_all_components(self.logger)

    def get_available_components(self) -> Dict[str, Type[BaseComponent]]:
        return ComponentRegistry.get_all_components()

    def resolve_dependencies(self, component_names: List[str]) -> List[str]:
        return ComponentRegistry.resolve_dependencies(component_names)

    def _create_component(self, name: str) -> BaseComponent:
        component_class = ComponentRegistry.get_component(name)
        return component_class(
            self.app_settings, logging.getLogger(component_class.__name__)
        )

    def _record(
        self, name: str, phase: str, status: str, message: str = ""
    ) -> None:
        self.results.append(
            ComponentResult(
                component=name, phase=phase, status=status, message=message
            )
        )

    def _run_install(
        self, name: str, component: BaseComponent, force: bool
    ) -> bool:
        if not force and component.is_installed():
            self.logger.info(
                f"{self.app_settings.symbols.get('success', '✅')} Component {name} is already installed, skipping"
            )
            self._record(name, "install", STATUS_SKIPPED, "already installed")
            return True

        self.logger.info(f"Installing component: {name}")
        try:
            succeeded = component.install()
        except Exception as e:
            self.logger.error(
                f"Error installing component {name}: {str(e)}", exc_info=True
            )
            self._record(name, "install", STATUS_FAILED, str(e))
            return False

        if not succeeded:
            self.logger.error(f"Failed to install component: {name}")
            self._record(name, "install", STATUS_FAILED, "install step failed")
            return False

        self._record(name, "install", STATUS_INSTALLED)
        self.logger.info(f"Successfully installed component: {name}")
        return True

    def _run_configure(
        self, name: str, component: BaseComponent, force: bool
    ) -> bool:
        if not component.has_configure_phase():
            return True

        if not force and component.is_configured():
            self.logger.info(
                f"{self.app_settings.symbols.get('success', '✅')} Component {name} is already configured, skipping"
            )
            self._record(
                name, "configure", STATUS_SKIPPED, "already configured"
            )
            return True

        self.logger.info(f"Configuring component: {name}")
        try:
            succeeded = component.configure()
        except AuthenticationError as e:
            self.logger.error(f"Authentication failed for component {name}: {str(e)}")
            self._record(name, "configure", STATUS_FAILED, str(e))
            raise
        except Exception as e:
            self.logger.error(f"Error configuring component {name}: {str(e)}")
            self._record(name, "configure", STATUS_FAILED, str(e))
            return False

        if not succeeded:
            self.logger.error(f"Failed to configure component: {name}")
            self._record(
                name, "configure", STATUS_FAILED, "configure step failed"
            )
            return False

        self._record(name, "configure", STATUS_CONFIGURED)
        self.logger.info(f"Successfully configured component: {name}")
        return True

    def run(self, component_names: List[str], force: bool = False) -> bool:
        """
        Install and then configure each component before moving on to the
        next one, which is the order the bootstrap sequence needs (e.g. the
        CLI must be authenticated before the repository can be cloned).

        Returns:
            True if every phase succeeded or was skipped, False otherwise.
        """
        return self._execute(component_names, force, install=True, configure=True)

    def install(self, component_names: List[str], force: bool = False) -> bool:
        """Run only the install phase of the given components."""
        return self._execute(component_names, force, install=True, configure=False)

    def configure(
        self, component_names: List[str], force: bool = False
    ) -> bool:
        """Run only the configure phase of the given components."""
        return self._execute(component_names, force, install=False, configure=True)

    def _execute(
        self,
        component_names: List[str],
        force: bool,
        install: bool,
        configure: bool,
    ) -> bool:
        try:
            resolved_names = self.resolve_dependencies(component_names)
        except (KeyError, ValueError) as e:
            self.logger.error(f"Cannot resolve components: {e}")
            return False

        self.logger.info(
            f"Processing components in order: {', '.join(resolved_names)}"
        )

        for name in resolved_names:
            try:
                component = self._create_component(name)
            except Exception as e:
                self.logger.error(f"Cannot set up component {name}: {str(e)}")
                self._record(name, "setup", STATUS_FAILED, str(e))
                return False
            if install and not self._run_install(name, component, force):
                return False
            if configure and not self._run_configure(name, component, force):
                return False

        self.logger.info("All components processed successfully")
        return True

    def check_status(
        self, component_names: List[str]
    ) -> Dict[str, Dict[str, bool]]:
        """
        Check the status of the specified components.

        Returns:
            A dictionary mapping component names to their status
            ("installed", "configured", "has_configure_phase").
        """
        status = {}
        for name in component_names:
            self.logger.debug(f"Checking status of component: {name}")
            try:
                component = self._create_component(name)
                has_configure = component.has_configure_phase()
                status[name] = {
                    "installed": component.is_installed(),
                    "configured": (
                        component.is_configured() if has_configure else False
                    ),
                    "has_configure_phase": has_configure,
                }
            except Exception as e:
                self.logger.error(
                    f"Error checking status of component {name}: {str(e)}"
                )
                status[name] = {
                    "installed": False,
                    "configured": False,
                    "has_configure_phase": False,
                }
        return status
