"""Utility modules for logging and JSON handling."""

from nuget_switch.utils.logging import setup_logging, get_logger
from nuget_switch.utils.json_utils import JsonHandler

__all__ = [
    "setup_logging",
    "get_logger",
    "JsonHandler",
]
