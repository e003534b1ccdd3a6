# common/network_utils.py
# -*- coding: utf-8 -*-
"""
Network-related utility functions.
"""
import logging
import time
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import requests

from installer.config_models import AppSettings

from .command_utils import get_symbols, log_step

module_logger = logging.getLogger(__name__)


def normalize_base_url(host: str, default_port: Optional[int] = None) -> str:
    """
    Turn a host setting into a base URL: "localhost:11434" and
    "http://localhost:11434/" both become "http://localhost:11434".

    A host given without a scheme and without a port ("0.0.0.0") gets
    default_port when one is passed. A URL with an explicit scheme keeps
    the scheme's own port.
    """
    base = host.strip()
    if "://" not in base:
        base = f"http://{base}"
        if default_port is not None:
            parts = urlsplit(base)
            if parts.hostname and parts.port is None:
                base = urlunsplit(
                    parts._replace(netloc=f"{parts.netloc}:{default_port}")
                )
    return base.rstrip("/")


def is_http_endpoint_ready(url: str, request_timeout: float = 2.0) -> bool:
    """Return True if a GET on url answers with a 2xx status."""
    try:
        response = requests.get(url, timeout=request_timeout)
    except requests.exceptions.RequestException:
        return False
    return response.ok


def wait_for_http_endpoint(
    url: str,
    app_settings: Optional[AppSettings],
    timeout: float = 60.0,
    interval: float = 1.0,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Poll url until it answers or timeout seconds have elapsed.

    Returns:
        True once the endpoint answered, False on timeout.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    deadline = time.monotonic() + timeout
    attempts = 0

    while True:
        attempts += 1
        if is_http_endpoint_ready(url, request_timeout=max(interval, 1.0)):
            log_step(
                f"{symbols.get('success', '✅')} {url} is responding (after {attempts} attempt(s)).",
                "success",
                logger_to_use,
                app_settings,
            )
            return True
        if time.monotonic() >= deadline:
            break
        log_step(
            f"Waiting for {url} (attempt {attempts})...",
            "debug",
            logger_to_use,
            app_settings,
        )
        time.sleep(interval)

    log_step(
        f"{symbols.get('error', '❌')} {url} did not respond within {timeout:g}s.",
        "error",
        logger_to_use,
        app_settings,
    )
    return False
