"""Utility modules for the calendar engine"""

from .logger import (
    get_logger,
    log_function_call,
    setup_logging,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "log_function_call",
]
