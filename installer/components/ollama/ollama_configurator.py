"""
Ollama configurator module.

Starts the Ollama daemon in the background, waits until its HTTP API
answers and pulls the configured language model.
"""

import logging
from typing import List, Optional

import requests

from common.command_utils import (
    log_step,
    run_background_command,
    run_command,
)
from common.network_utils import (
    is_http_endpoint_ready,
    normalize_base_url,
    wait_for_http_endpoint,
)
from installer.base_component import BaseComponent
from installer.components.ollama.ollama_installer import OllamaInstaller
from installer.config import OLLAMA_DEFAULT_PORT
from installer.config_models import AppSettings
from installer.registry import ComponentRegistry


def model_matches(installed_name: str, wanted: str) -> bool:
    """
    Compare model names the way `ollama list | grep` would be used: an
    untagged name matches any tag of that model ("mistral" matches
    "mistral:latest"), a tagged name must match exactly.
    """
    if installed_name == wanted:
        return True
    if ":" not in wanted:
        return installed_name.split(":", 1)[0] == wanted
    return False


@ComponentRegistry.register(
    name="ollama",
    metadata={
        "dependencies": ["prerequisites"],
        "estimated_time": 600,
        "description": "Ollama model-serving daemon with the language model pulled",
    },
)
class OllamaConfigurator(BaseComponent):
    """
    Configurator for the Ollama daemon.

    Readiness is decided by polling the daemon's HTTP API instead of
    sleeping for a fixed time; the model pull is only issued once the
    daemon answers.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.ollama = app_settings.ollama
        self.installer = OllamaInstaller(app_settings, self.logger)
        self.base_url = normalize_base_url(
            self.ollama.host, default_port=OLLAMA_DEFAULT_PORT
        )
        self.health_url = f"{self.base_url}{self.ollama.health_check_path}"

    def install(self) -> bool:
        """Install Ollama by delegating to the installer."""
        return self.installer.install()

    def is_installed(self) -> bool:
        """Check if Ollama is installed by delegating to the installer."""
        return self.installer.is_installed()

    def configure(self) -> bool:
        if not self.start_daemon():
            return False
        return self.pull_model()

    def is_configured(self) -> bool:
        """True if the daemon answers and already has the model."""
        if not is_http_endpoint_ready(self.health_url):
            return False
        return any(
            model_matches(name, self.ollama.model)
            for name in self.list_models()
        )

    def start_daemon(self) -> bool:
        """
        Start `ollama serve` unless the daemon already answers, then wait
        for it to become ready.

        Returns:
            True once the daemon answers its health check.
        """
        if is_http_endpoint_ready(self.health_url):
            log_step(
                f"{self.symbols.get('success', '✅')} Ollama service is already running at {self.base_url}",
                "info",
                self.logger,
                self.app_settings,
            )
            return True

        log_step(
            f"{self.symbols.get('rocket', '🚀')} Starting Ollama service...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            run_background_command(
                ["ollama", "serve"],
                self.app_settings,
                log_path=self.ollama.serve_log_path,
                current_logger=self.logger,
            )
        except OSError as e:
            log_step(
                f"{self.symbols.get('error', '❌')} Could not start 'ollama serve': {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        if not wait_for_http_endpoint(
            self.health_url,
            self.app_settings,
            timeout=self.ollama.startup_timeout,
            interval=self.ollama.poll_interval,
            current_logger=self.logger,
        ):
            log_step(
                f"{self.symbols.get('error', '❌')} Ollama did not become ready. See {self.ollama.serve_log_path}.",
                "error",
                self.logger,
                self.app_settings,
            )
            return False
        return True

    def pull_model(self) -> bool:
        log_step(
            f"{self.symbols.get('download', '📥')} Pulling {self.ollama.model} model (this may take a few minutes)...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            run_command(
                ["ollama", "pull", self.ollama.model],
                self.app_settings,
                current_logger=self.logger,
            )
        except Exception as e:
            log_step(
                f"{self.symbols.get('error', '❌')} Failed to pull model {self.ollama.model}: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        log_step(
            f"{self.symbols.get('success', '✅')} Model {self.ollama.model} is available.",
            "success",
            self.logger,
            self.app_settings,
        )
        return True

    def list_models(self) -> List[str]:
        """Names of the models the running daemon has, [] if unavailable."""
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=5)
            response.raise_for_status()
            payload = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            self.logger.debug(f"Could not list Ollama models: {e}")
            return []
        return [
            model.get("name", "")
            for model in payload.get("models", [])
            if isinstance(model, dict)
        ]
