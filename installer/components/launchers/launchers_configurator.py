"""
Launcher scripts configurator module.

Writes the executable launcher scripts that start the application, the
coding assistant inside the project and the Docker variant, plus an
optional boot script that starts Ollama.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from common.command_utils import log_step
from common.file_utils import write_file
from installer.base_component import BaseComponent
from installer.config_models import AppSettings
from installer.registry import ComponentRegistry

LAUNCHER_MODE = 0o755


@ComponentRegistry.register(
    name="launchers",
    metadata={
        "dependencies": ["repository"],
        "estimated_time": 5,
        "description": "Launcher scripts for the application, the assistant and Docker",
    },
)
class LaunchersConfigurator(BaseComponent):
    """
    Configurator for the generated launcher scripts.

    There is nothing to install; configuring (re)writes each script whose
    content differs from the rendered template.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.launchers = app_settings.launchers

    def install(self) -> bool:
        return True

    def is_installed(self) -> bool:
        return True

    def render_launchers(self) -> Dict[Path, str]:
        """Map each launcher path to its rendered content."""
        repo = self.app_settings.repo
        assistant = self.app_settings.assistant
        project_dir = str(repo.project_dir)
        bin_dir = Path(self.launchers.bin_dir)

        return {
            bin_dir / self.launchers.app_name: self.launchers.app_template.format(
                project_dir=project_dir,
                model=self.app_settings.ollama.model,
                app_entrypoint=repo.app_entrypoint,
            ),
            bin_dir / self.launchers.assistant_name: self.launchers.assistant_template.format(
                project_dir=project_dir,
                assistant_command=assistant.command,
                assistant_package=assistant.npm_package,
                assistant_link_path=assistant.link_path,
                assistant_npm_bin=assistant.npm_bin_path,
            ),
            bin_dir / self.launchers.docker_name: self.launchers.docker_template.format(
                project_dir=project_dir,
                compose_command=self.launchers.compose_command,
            ),
        }

    def configure(self) -> bool:
        log_step(
            f"{self.symbols.get('memo', '📝')} Creating launch scripts...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            for path, content in self.render_launchers().items():
                write_file(
                    path,
                    content,
                    self.app_settings,
                    mode=LAUNCHER_MODE,
                    current_logger=self.logger,
                )
            if self.launchers.install_boot_script:
                write_file(
                    self.launchers.rc_local_path,
                    self.launchers.rc_local_template,
                    self.app_settings,
                    mode=LAUNCHER_MODE,
                    backup_existing=True,
                    current_logger=self.logger,
                )
        except (KeyError, IndexError) as e:
            log_step(
                f"{self.symbols.get('error', '❌')} Launcher template references an unknown placeholder: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False
        except Exception as e:
            log_step(
                f"{self.symbols.get('error', '❌')} Failed to write launch scripts: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        log_step(
            f"{self.symbols.get('success', '✅')} Launch scripts created in {self.launchers.bin_dir}",
            "success",
            self.logger,
            self.app_settings,
        )
        return True

    def is_configured(self) -> bool:
        try:
            expected = self.render_launchers()
        except (KeyError, IndexError):
            return False
        if self.launchers.install_boot_script:
            expected[Path(self.launchers.rc_local_path)] = (
                self.launchers.rc_local_template
            )
        for path, content in expected.items():
            if not _file_matches(path, content):
                return False
        return True


def _file_matches(path: Path, content: str) -> bool:
    try:
        return (
            path.read_text(encoding="utf-8") == content
            and (path.stat().st_mode & 0o777) == LAUNCHER_MODE
        )
    except (OSError, UnicodeDecodeError):
        return False
