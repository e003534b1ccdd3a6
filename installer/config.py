# installer/config.py
# -*- coding: utf-8 -*-
"""
Centralized static constants and definitions for the pod setup.

This module defines truly static values for the setup, such as the default
package lists for apt installation, fixed well-known URLs and paths
and the component groups.

Mutable runtime configuration (workspace location, repository, model name,
launcher templates) is handled by 'installer/config_models.py' and
'installer/config_loader.py'.
"""

from pathlib import Path

SCRIPT_VERSION: str = "2.0"

PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent

CORE_PREREQ_PACKAGES: list[str] = [
    "curl",
    "wget",
    "git",
    "python3",
    "python3-pip",
    "build-essential",
]

NODESOURCE_BASE_URL: str = "https://deb.nodesource.com"

GITHUB_CLI_KEY_URL: str = (
    "https://cli.github.com/packages/githubcli-archive-keyring.gpg"
)
GITHUB_CLI_KEYRING_PATH: str = (
    "/usr/share/keyrings/githubcli-archive-keyring.gpg"
)
GITHUB_CLI_REPO_URL: str = "https://cli.github.com/packages"
GITHUB_CLI_REPO_NAME: str = "github-cli"

# Port the Ollama API listens on when OLLAMA_HOST names a bare host.
OLLAMA_DEFAULT_PORT: int = 11434

# Installation order of the complete bootstrap sequence.
COMPONENT_GROUPS: dict[str, list[str]] = {
    "full": [
        "prerequisites",
        "nodejs",
        "github_cli",
        "claude_code",
        "repository",
        "python_deps",
        "ollama",
        "launchers",
        "environment",
    ],
    "tools": [
        "prerequisites",
        "nodejs",
        "github_cli",
        "claude_code",
    ],
    "app": [
        "repository",
        "python_deps",
        "launchers",
        "environment",
    ],
}
