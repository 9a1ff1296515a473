"""Shared contracts for cross-boundary data types.

This package is a leaf module: it imports nothing from core, engine or
plugins.
"""

from oss_output.contracts.enums import CannedAcl, SessionState
from oss_output.contracts.errors import (
    ConfigurationError,
    IllegalSessionStateError,
    OssOutputError,
    StagingFileError,
    UploadError,
)
from oss_output.contracts.results import JobResult, TaskReport

__all__ = [
    "CannedAcl",
    "ConfigurationError",
    "IllegalSessionStateError",
    "JobResult",
    "OssOutputError",
    "SessionState",
    "StagingFileError",
    "TaskReport",
    "UploadError",
]
