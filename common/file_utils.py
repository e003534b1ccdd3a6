# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: creating directories, writing generated
files and backing up files before they are replaced.

Each helper first tries the operation as the current user and falls back
to an elevated command when permission is denied.
"""

import datetime
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from installer.config_models import AppSettings

from .command_utils import get_symbols, log_step, run_elevated_command

module_logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def ensure_directory(
    directory_path: PathLike,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Create directory_path (and parents) if it does not exist."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    path = Path(directory_path)

    if path.is_dir():
        log_step(
            f"Directory already exists: {path}",
            "debug",
            logger_to_use,
            app_settings,
        )
        return

    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        run_elevated_command(
            ["mkdir", "-p", str(path)],
            app_settings,
            current_logger=logger_to_use,
        )
    log_step(
        f"{symbols.get('folder', '📁')} Created directory: {path}",
        "info",
        logger_to_use,
        app_settings,
    )


def backup_file(
    file_path: PathLike,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[Path]:
    """
    Copy file_path to a timestamped backup next to it.

    Returns:
        The backup path, or None when there was nothing to back up.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    source = Path(file_path)

    if not source.is_file():
        log_step(
            f"{symbols.get('info', 'ℹ️')} File {source} does not exist or is not a regular file. No backup needed.",
            "info",
            logger_to_use,
            app_settings,
        )
        return None

    timestamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    backup_path = source.with_name(f"{source.name}.bak.{timestamp}")
    try:
        shutil.copy2(source, backup_path)
    except PermissionError:
        run_elevated_command(
            ["cp", "-a", str(source), str(backup_path)],
            app_settings,
            current_logger=logger_to_use,
        )
    log_step(
        f"{symbols.get('success', '✅')} Backed up {source} to {backup_path}",
        "success",
        logger_to_use,
        app_settings,
    )
    return backup_path


def write_file(
    file_path: PathLike,
    content: str,
    app_settings: Optional[AppSettings],
    mode: int = 0o644,
    backup_existing: bool = False,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Write content to file_path and set its permission bits to mode.

    An existing file with identical content is left alone (only its mode is
    enforced). With backup_existing, a differing existing file is backed up
    before it is replaced.

    Returns:
        True if the file was written, False if it was already up to date.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    path = Path(file_path)

    if path.is_file():
        try:
            current_content: Optional[str] = path.read_text(encoding="utf-8")
        except (PermissionError, UnicodeDecodeError):
            current_content = None
        if current_content == content:
            _set_mode(path, mode, app_settings, logger_to_use)
            log_step(
                f"{symbols.get('info', 'ℹ️')} {path} is already up to date.",
                "info",
                logger_to_use,
                app_settings,
            )
            return False
        if backup_existing:
            backup_file(path, app_settings, logger_to_use)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        os.chmod(path, mode)
    except PermissionError:
        _write_file_elevated(path, content, mode, app_settings, logger_to_use)

    log_step(
        f"{symbols.get('memo', '📝')} Wrote {path} (mode {oct(mode)})",
        "info",
        logger_to_use,
        app_settings,
    )
    return True


def _set_mode(
    path: Path,
    mode: int,
    app_settings: Optional[AppSettings],
    logger_to_use: logging.Logger,
) -> None:
    if (path.stat().st_mode & 0o777) == mode:
        return
    try:
        os.chmod(path, mode)
    except PermissionError:
        run_elevated_command(
            ["chmod", format(mode, "o"), str(path)],
            app_settings,
            current_logger=logger_to_use,
        )


def _write_file_elevated(
    path: Path,
    content: str,
    mode: int,
    app_settings: Optional[AppSettings],
    logger_to_use: logging.Logger,
) -> None:
    temp_file_path = ""
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            delete=False,
            prefix="podsetup_",
            encoding="utf-8",
        ) as temp_f:
            temp_f.write(content)
            temp_file_path = temp_f.name
        run_elevated_command(
            ["install", "-D", "-m", format(mode, "o"), temp_file_path, str(path)],
            app_settings,
            current_logger=logger_to_use,
        )
    finally:
        if temp_file_path and os.path.exists(temp_file_path):
            os.unlink(temp_file_path)
