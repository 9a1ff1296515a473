"""Core infrastructure: settings loading and logging."""

from oss_output.core.config import JobSettings, OutputSettings, load_settings
from oss_output.core.logging import configure_logging, get_logger

__all__ = [
    "JobSettings",
    "OutputSettings",
    "configure_logging",
    "get_logger",
    "load_settings",
]
