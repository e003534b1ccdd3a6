# installer/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the pod setup,
including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
"""

from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
LOG_PREFIX_DEFAULT: str = "[POD-SETUP]"
NODEJS_SETUP_SCRIPT_DEFAULT: str = "setup_lts.x"

WORKSPACE_DIR_DEFAULT: str = "/workspace"
REPO_SLUG_DEFAULT: str = "RickFBAG/localRAG"
REPO_DIR_NAME_DEFAULT: str = "localRAG"
REQUIREMENTS_FILE_DEFAULT: str = "requirements.txt"
APP_ENTRYPOINT_DEFAULT: str = "app/main.py"
ENV_FILE_NAME_DEFAULT: str = ".env"

OLLAMA_INSTALL_SCRIPT_URL_DEFAULT: str = "https://ollama.ai/install.sh"
OLLAMA_HOST_DEFAULT: str = "http://localhost:11434"
OLLAMA_MODEL_DEFAULT: str = "mistral"
OLLAMA_HEALTH_PATH_DEFAULT: str = "/api/tags"
OLLAMA_SERVE_LOG_DEFAULT: str = "/tmp/ollama-serve.log"

ASSISTANT_NPM_PACKAGE_DEFAULT: str = "@anthropic-ai/claude-code"
ASSISTANT_COMMAND_DEFAULT: str = "claude"
ASSISTANT_NPM_BIN_DEFAULT: str = (
    "/usr/local/lib/node_modules/@anthropic-ai/claude-code/bin/claude"
)
ASSISTANT_LINK_PATH_DEFAULT: str = "/usr/local/bin/claude"

STATE_DIR_DEFAULT: str = "/var/lib/legal-rag-pod-setup"
LAUNCHER_BIN_DIR_DEFAULT: str = "/usr/local/bin"
RC_LOCAL_PATH_DEFAULT: str = "/etc/rc.local"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
    "lock": "🔐",
    "download": "📥",
    "robot": "🤖",
    "llama": "🦙",
    "folder": "📁",
    "memo": "📝",
}

APP_LAUNCHER_TEMPLATE_DEFAULT: str = """\
#!/bin/bash
cd {project_dir}

# Ensure Ollama is running
if ! pgrep -f "ollama serve" > /dev/null; then
    echo "🦙 Starting Ollama..."
    ollama serve &
    sleep 5
fi

# Check if the model is available
if ! ollama list | grep -q {model}; then
    echo "📥 Pulling {model} model..."
    ollama pull {model}
fi

echo "🏛️  Starting Legal RAG System..."
python3 {app_entrypoint}
"""

ASSISTANT_LAUNCHER_TEMPLATE_DEFAULT: str = """\
#!/bin/bash
cd {project_dir}
echo "🤖 Launching Claude Code in Legal RAG directory..."

# Check if Claude Code is installed
if ! command -v {assistant_command} &> /dev/null; then
    echo "❌ Claude Code not found. Installing now..."
    npm install -g {assistant_package}

    # Create symlink if needed
    if [ ! -f "{assistant_link_path}" ] && [ -f "{assistant_npm_bin}" ]; then
        sudo ln -s {assistant_npm_bin} {assistant_link_path}
    fi

    if ! command -v {assistant_command} &> /dev/null; then
        echo "❌ Failed to install Claude Code"
        echo "Try manually: npm install -g {assistant_package}"
        exit 1
    fi
fi

{assistant_command}
"""

DOCKER_LAUNCHER_TEMPLATE_DEFAULT: str = """\
#!/bin/bash
cd {project_dir}
echo "🐳 Starting Legal RAG with Docker..."
{compose_command}
"""

RC_LOCAL_TEMPLATE_DEFAULT: str = """\
#!/bin/bash
# Start Ollama on boot
sudo -u root ollama serve &
exit 0
"""

ENV_FILE_TEMPLATE_DEFAULT: str = """\
# Legal RAG Environment Configuration
OLLAMA_HOST={ollama_host}
PYTHONPATH={pythonpath}
"""


class RepositorySettings(BaseSettings):
    """Application repository and workspace settings."""
    model_config = SettingsConfigDict(env_prefix="REPO_", extra="ignore")

    slug: str = Field(default=REPO_SLUG_DEFAULT, description="owner/name of the repository on GitHub.")
    workspace_dir: str = Field(default=WORKSPACE_DIR_DEFAULT, description="Directory the repository is cloned into.")
    dir_name: str = Field(default=REPO_DIR_NAME_DEFAULT, description="Name of the checkout directory inside the workspace.")
    requirements_file: str = Field(default=REQUIREMENTS_FILE_DEFAULT,
                                   description="Dependency manifest, relative to the project directory.")
    pip_extra_args: List[str] = Field(default_factory=lambda: ["--break-system-packages"],
                                      description="Extra arguments passed to 'pip3 install'.")
    update_existing: bool = Field(default=True, description="Run 'git pull' in an existing checkout on every run.")
    project_subdirs: List[str] = Field(default_factory=lambda: ["data", "chroma_db", "config"],
                                       description="Directories created inside the project directory.")
    app_entrypoint: str = Field(default=APP_ENTRYPOINT_DEFAULT,
                                description="Application entry point, relative to the project directory.")
    pythonpath_subdir: str = Field(default="app", description="Subdirectory exported as PYTHONPATH in the env file.")
    env_file_name: str = Field(default=ENV_FILE_NAME_DEFAULT, description="Name of the generated environment file.")
    env_file_template: str = Field(
        default=ENV_FILE_TEMPLATE_DEFAULT,
        description="Template for the environment file. Supports {ollama_host} and {pythonpath}."
    )

    @property
    def project_dir(self) -> Path:
        return Path(self.workspace_dir) / self.dir_name


class OllamaSettings(BaseSettings):
    """Model-serving daemon settings."""
    model_config = SettingsConfigDict(env_prefix="OLLAMA_", extra="ignore")

    install_script_url: str = Field(default=OLLAMA_INSTALL_SCRIPT_URL_DEFAULT,
                                    description="URL of the Ollama install script.")
    host: str = Field(default=OLLAMA_HOST_DEFAULT, description="Base URL the daemon listens on. A bare host gets port 11434.")
    model: str = Field(default=OLLAMA_MODEL_DEFAULT, description="Model pulled after the daemon starts.")
    health_check_path: str = Field(default=OLLAMA_HEALTH_PATH_DEFAULT,
                                   description="HTTP path polled to detect a ready daemon.")
    startup_timeout: float = Field(default=60.0, description="Seconds to wait for the daemon to answer.")
    poll_interval: float = Field(default=1.0, description="Seconds between health check attempts.")
    serve_log_path: str = Field(default=OLLAMA_SERVE_LOG_DEFAULT,
                                description="File receiving the output of the background 'ollama serve'.")


class AssistantSettings(BaseSettings):
    """AI coding assistant CLI settings."""
    model_config = SettingsConfigDict(env_prefix="ASSISTANT_", extra="ignore")

    npm_package: str = Field(default=ASSISTANT_NPM_PACKAGE_DEFAULT, description="Global npm package to install.")
    command: str = Field(default=ASSISTANT_COMMAND_DEFAULT, description="Command name of the assistant CLI.")
    npm_bin_path: str = Field(default=ASSISTANT_NPM_BIN_DEFAULT,
                              description="Binary shipped inside the global npm module.")
    link_path: str = Field(default=ASSISTANT_LINK_PATH_DEFAULT,
                           description="Symlink created when the binary is not on PATH.")


class LauncherSettings(BaseSettings):
    """Generated launcher and boot script settings."""
    model_config = SettingsConfigDict(env_prefix="LAUNCHER_", extra="ignore")

    bin_dir: str = Field(default=LAUNCHER_BIN_DIR_DEFAULT, description="Directory on PATH receiving the launchers.")
    app_name: str = Field(default="legal-rag", description="Launcher starting the application.")
    assistant_name: str = Field(default="claude-rag", description="Launcher starting the assistant in the project.")
    docker_name: str = Field(default="legal-rag-docker", description="Launcher starting the Docker variant.")
    compose_command: str = Field(default="docker-compose up --build",
                                 description="Command run by the Docker launcher.")
    app_template: str = Field(default=APP_LAUNCHER_TEMPLATE_DEFAULT,
                              description="Template for the application launcher.")
    assistant_template: str = Field(default=ASSISTANT_LAUNCHER_TEMPLATE_DEFAULT,
                                    description="Template for the assistant launcher.")
    docker_template: str = Field(default=DOCKER_LAUNCHER_TEMPLATE_DEFAULT,
                                 description="Template for the Docker launcher.")
    install_boot_script: bool = Field(default=True, description="Write a boot script that starts Ollama.")
    rc_local_path: str = Field(default=RC_LOCAL_PATH_DEFAULT, description="Boot script location.")
    rc_local_template: str = Field(default=RC_LOCAL_TEMPLATE_DEFAULT, description="Boot script content.")


class AppSettings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(extra="ignore")

    log_prefix: str = Field(default=LOG_PREFIX_DEFAULT,
                            description="Prefix for log messages from the setup script.")
    interactive: bool = Field(default=True,
                              description="Pause for confirmation before browser-based authentication.")
    system_upgrade: bool = Field(default=True, description="Run 'apt-get upgrade' during prerequisites.")
    state_dir: str = Field(default=STATE_DIR_DEFAULT,
                           description="Directory holding setup state such as the installed requirements hash.")
    nodejs_version_setup_script: str = Field(default=NODEJS_SETUP_SCRIPT_DEFAULT,
                                             description="NodeSource setup script name (e.g. setup_lts.x).")

    repo: RepositorySettings = Field(default_factory=RepositorySettings)
    ollama: OllamaSettings = Field(default_factory=OllamaSettings)
    assistant: AssistantSettings = Field(default_factory=AssistantSettings)
    launchers: LauncherSettings = Field(default_factory=LauncherSettings)

    # Static symbols, could also be loaded from a separate static config if preferred
    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))


class ComponentResult(BaseModel):
    """Outcome of one component phase, as recorded by the orchestrator."""

    component: str
    phase: str
    status: str
    message: str = ""
