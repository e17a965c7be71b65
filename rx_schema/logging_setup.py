"""
Logging setup for applications embedding rx-schema.

The library itself only creates module loggers; call setup_logging()
from an application entry point to configure output.
"""

from __future__ import annotations

import logging
from typing import Optional

import json_log_formatter

from .config import RxSettings, get_settings


def setup_logging(settings: Optional[RxSettings] = None) -> logging.Handler:
    """Configure the root logger based on settings.

    Args:
        settings: Settings to use (defaults to the environment)

    Returns:
        The installed handler
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        formatter: logging.Formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    return handler
