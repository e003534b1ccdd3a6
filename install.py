#!/usr/bin/env python3
# filename: install.py
# -*- coding: utf-8 -*-
"""
Entry point for the Legal RAG GPU pod setup.
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional

import yaml

from common.logging_config import setup_logging
from installer import config as static_config
from installer.config_loader import DEFAULT_CONFIG_FILE, load_app_settings
from installer.config_models import AppSettings
from installer.errors import AuthenticationError
from installer.orchestrator import ComponentOrchestrator

LOGGER_NAME = "legal_rag_pod_setup"


def add_override_arguments(parser: argparse.ArgumentParser) -> None:
    """Options that override values from the configuration file."""
    group = parser.add_argument_group("configuration overrides")
    group.add_argument(
        "--workspace-dir",
        dest="workspace_dir",
        help="Directory the application repository is cloned into",
    )
    group.add_argument(
        "--repo-slug",
        dest="repo_slug",
        help="GitHub repository (owner/name) to clone",
    )
    group.add_argument("--model", help="Model pulled into Ollama")
    group.add_argument(
        "--ollama-host", dest="ollama_host", help="Base URL of the Ollama API"
    )
    group.add_argument(
        "--bin-dir",
        dest="bin_dir",
        help="Directory receiving the launcher scripts",
    )
    group.add_argument(
        "--log-prefix", dest="log_prefix", help="Prefix for log messages"
    )
    group.add_argument(
        "--skip-upgrade",
        dest="skip_upgrade",
        action="store_true",
        help="Do not run 'apt-get upgrade'",
    )


def add_global_arguments(
    parser: argparse.ArgumentParser, config_default: Optional[str]
) -> None:
    """Options accepted before or after the subcommand."""
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--config",
        default=config_default,
        help=f"Path to the YAML configuration file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        help="Also write JSON log lines to this file",
    )
    add_override_arguments(parser)


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Setup for the Legal RAG GPU pod"
    )

    # Global flags may appear before or after the subcommand. Only the
    # options actually given end up in global_args.
    all_args = args if args is not None else sys.argv[1:]
    global_parser = argparse.ArgumentParser(
        add_help=False,
        allow_abbrev=False,
        argument_default=argparse.SUPPRESS,
    )
    add_global_arguments(global_parser, config_default=argparse.SUPPRESS)
    global_args, remaining_args = global_parser.parse_known_args(all_args)

    add_global_arguments(parser, config_default=DEFAULT_CONFIG_FILE)

    subparsers = parser.add_subparsers(
        dest="command", help="Command to execute", required=True
    )

    list_parser = subparsers.add_parser(
        "list", help="List available components"
    )
    list_parser.add_argument(
        "components",
        nargs="*",
        help="Groups to list (if none specified, all components will be listed)",
    )

    full_parser = subparsers.add_parser(
        "full",
        help="Install and configure all components in the recommended order",
    )
    full_parser.add_argument(
        "--force",
        action="store_true",
        help="Run every step even if its presence check passes",
    )
    full_parser.add_argument(
        "--non-interactive",
        dest="non_interactive",
        action="store_true",
        help="Do not wait for Enter before browser authentication",
    )

    install_parser = subparsers.add_parser(
        "install", help="Install components (without configuring)"
    )
    install_parser.add_argument(
        "components", nargs="+", help="Components or groups to install"
    )
    install_parser.add_argument(
        "--force",
        action="store_true",
        help="Install even if already installed",
    )

    configure_parser = subparsers.add_parser(
        "configure", help="Configure components (without installing)"
    )
    configure_parser.add_argument(
        "components", nargs="+", help="Components or groups to configure"
    )
    configure_parser.add_argument(
        "--force",
        action="store_true",
        help="Force reconfiguration even if already configured",
    )
    configure_parser.add_argument(
        "--non-interactive",
        dest="non_interactive",
        action="store_true",
        help="Do not wait for Enter before browser authentication",
    )

    status_parser = subparsers.add_parser(
        "status", help="Check status of components"
    )
    status_parser.add_argument(
        "components",
        nargs="*",
        help="Components to check (if none specified, all components will be checked)",
    )

    subparsers.add_parser(
        "view-config", help="Print the effective configuration as YAML"
    )

    parsed_args = parser.parse_args(remaining_args)

    for key, value in vars(global_args).items():
        setattr(parsed_args, key, value)

    return parsed_args


def expand_components(
    names: List[str], component_groups: Dict[str, List[str]]
) -> List[str]:
    """Replace group names by their members and drop duplicates, keeping order."""
    expanded: List[str] = []
    for name in names:
        for member in component_groups.get(name, [name]):
            if member not in expanded:
                expanded.append(member)
    return expanded


def print_results(orchestrator: ComponentOrchestrator, logger: logging.Logger) -> None:
    """Log the per-step results recorded by the orchestrator as a table."""
    results = orchestrator.results
    if not results:
        logger.info("No steps were run.")
        return

    symbols = orchestrator.app_settings.symbols
    status_symbols = {
        "installed": symbols.get("success", "✅"),
        "configured": symbols.get("success", "✅"),
        "skipped": symbols.get("info", "ℹ️"),
        "failed": symbols.get("error", "❌"),
    }
    col_width = max(len("Component"), *(len(r.component) for r in results)) + 2

    logger.info("Setup summary:")
    header = f"{'Component':<{col_width}}{'Phase':<12}{'Status':<14}Message"
    logger.info(header)
    logger.info("-" * len(header))
    for result in results:
        status = f"{status_symbols.get(result.status, '')} {result.status}"
        logger.info(
            f"{result.component:<{col_width}}{result.phase:<12}{status:<14}{result.message}"
        )


def completion_banner(app_settings: AppSettings) -> str:
    project_dir = app_settings.repo.project_dir
    launchers = app_settings.launchers
    return "\n".join(
        [
            "🎉 Setup completed successfully!",
            "",
            "📋 Available commands:",
            f"  {launchers.app_name:<28} # Launch Legal RAG system",
            f"  {launchers.assistant_name:<28} # Launch Claude Code in project directory",
            f"  {launchers.docker_name:<28} # Launch with Docker (if Docker installed)",
            "",
            "📁 Project structure:",
            f"  {str(project_dir) + '/':<28} # Main project directory",
            f"  {str(project_dir / 'data') + '/':<28} # Add your legal documents here",
            f"  {str(project_dir / 'chroma_db') + '/':<28} # Vector database storage",
            "",
            "🚀 Quick start:",
            f"  1. Add documents to: {project_dir / 'data'}/",
            f"  2. Run: {launchers.app_name}",
            "  3. Ask questions about your documents!",
            "",
            "🤖 Claude Code integration:",
            f"  - Run '{launchers.assistant_name}' to use Claude Code in the project",
            "  - Edit code, run tests, and manage the project with AI assistance",
            "",
            "🔒 Privacy: All processing happens locally on your RunPod!",
            "    No documents or data are sent to external services.",
            "",
            "📖 For more info, check the CLAUDE.md file in the project directory",
        ]
    )


def format_duration(seconds: int) -> str:
    """Render an estimated duration as "45s" or "~10 min"."""
    if seconds < 60:
        return f"{seconds}s"
    return f"~{round(seconds / 60)} min"


def run_list(
    parsed_args: argparse.Namespace,
    orchestrator: ComponentOrchestrator,
    logger: logging.Logger,
) -> int:
    component_groups = static_config.COMPONENT_GROUPS
    components_dict = orchestrator.get_available_components()

    def estimated_time(name: str) -> int:
        component_class = components_dict.get(name)
        if component_class is None:
            return 0
        return int(component_class.metadata.get("estimated_time", 0))

    if parsed_args.components:
        for group_name in parsed_args.components:
            if group_name in component_groups:
                members = component_groups[group_name]
                total = sum(estimated_time(comp) for comp in members)
                logger.info(
                    f"Components in group '{group_name}' (in installation order, "
                    f"estimated {format_duration(total)}):"
                )
                for i, comp in enumerate(members, 1):
                    logger.info(f"  {i}. {comp}")
            else:
                logger.info(
                    f"'{group_name}' is not a recognized component group."
                )
        return 0

    if not components_dict:
        logger.info("No components available.")
        return 0

    logger.info("Available components:")
    for name in sorted(components_dict):
        component_class = components_dict[name]
        description = component_class.metadata.get("description", "")
        dependencies = sorted(component_class.metadata.get("dependencies", []))
        line = f"  - {name}: {description} [{format_duration(estimated_time(name))}]"
        if dependencies:
            line += f" (depends on: {', '.join(dependencies)})"
        logger.info(line)
    for group_name in sorted(component_groups):
        logger.info(
            f"  - {group_name} (group with {len(component_groups[group_name])} components)"
        )
    return 0


def run_status(
    parsed_args: argparse.Namespace,
    orchestrator: ComponentOrchestrator,
    logger: logging.Logger,
) -> int:
    logger.info("Checking component status...")
    if parsed_args.components:
        components_to_check = expand_components(
            parsed_args.components, static_config.COMPONENT_GROUPS
        )
    else:
        components_to_check = sorted(orchestrator.get_available_components())

    status_results = orchestrator.check_status(components_to_check)
    if not status_results:
        logger.info("No components to display status for.")
        return 0

    col_width = max(len("Component"), *(len(n) for n in status_results)) + 2
    header = f"{'Component':<{col_width}}{'Installed':<12}{'Configured':<12}"
    logger.info("Component Status:")
    logger.info(header)
    logger.info("-" * len(header))
    for name, status in status_results.items():
        installed = "✅ Yes" if status["installed"] else "❌ No"
        if status["has_configure_phase"]:
            configured = "✅ Yes" if status["configured"] else "❌ No"
        else:
            configured = "-"
        logger.info(f"{name:<{col_width}}{installed:<12}{configured:<12}")
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the Legal RAG GPU pod setup."""
    # Handle 'help' command as a synonym for '--help'
    if args is None:
        if len(sys.argv) > 1 and sys.argv[1] == "help":
            sys.argv[1] = "--help"
    elif args and args[0] == "help":
        args = ["--help"] + list(args[1:])

    parsed_args = parse_args(args)
    logger = setup_logging(
        LOGGER_NAME,
        log_level="DEBUG" if parsed_args.verbose else None,
        log_file_path=parsed_args.log_file,
    )

    app_settings = load_app_settings(
        parsed_args, config_file_path=parsed_args.config, current_logger=logger
    )

    if parsed_args.command == "view-config":
        print(
            yaml.safe_dump(
                app_settings.model_dump(exclude={"symbols"}),
                sort_keys=False,
                allow_unicode=True,
            )
        )
        return 0

    try:
        orchestrator = ComponentOrchestrator(app_settings, logger)

        if parsed_args.command == "list":
            return run_list(parsed_args, orchestrator, logger)

        if parsed_args.command == "status":
            return run_status(parsed_args, orchestrator, logger)

        if parsed_args.command == "full":
            logger.info(
                f"{app_settings.symbols.get('rocket', '🚀')} Setting up Legal RAG on RunPod with Claude Code "
                f"(setup version {static_config.SCRIPT_VERSION})..."
            )
            success = orchestrator.run(
                static_config.COMPONENT_GROUPS["full"], force=parsed_args.force
            )
            print_results(orchestrator, logger)
            if not success:
                logger.error("Setup stopped at the first failed step.")
                return 1
            print(completion_banner(app_settings))
            return 0

        components = expand_components(
            parsed_args.components, static_config.COMPONENT_GROUPS
        )
        if parsed_args.command == "install":
            success = orchestrator.install(components, force=parsed_args.force)
        else:
            success = orchestrator.configure(components, force=parsed_args.force)
        print_results(orchestrator, logger)
        if not success:
            logger.error(f"The {parsed_args.command} command failed.")
            return 1
        logger.info(
            f"{app_settings.symbols.get('success', '✅')} {parsed_args.command.capitalize()} completed successfully."
        )
        return 0

    except AuthenticationError as e:
        # Guidance was printed by the component; only the summary is left.
        print_results(orchestrator, logger)
        logger.error(f"{app_settings.symbols.get('error', '❌')} {e}")
        return 1
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
