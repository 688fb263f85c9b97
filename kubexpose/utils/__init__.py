"""Utility modules for kubexpose."""

from .logging import get_logger, setup_logging
from .template import DEFAULT_URL_TEMPLATE, URLTemplate

__all__ = [
    "setup_logging",
    "get_logger",
    "URLTemplate",
    "DEFAULT_URL_TEMPLATE",
]
