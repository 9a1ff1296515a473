# src/oss_output/contracts/errors.py
"""Exception hierarchy for OSS output.

Every failure surfaced to the host derives from OssOutputError so a
coordinator can tell connector failures from its own bugs.

Propagation rules:
    - ConfigurationError is raised before any task starts.
    - IllegalSessionStateError is a host protocol bug, never retried.
    - StagingFileError and UploadError are fatal to the owning task.
"""


class OssOutputError(Exception):
    """Base class for all OSS output failures."""


class ConfigurationError(OssOutputError, ValueError):
    """Raised when output configuration is invalid or incomplete.

    Subclasses ValueError so pydantic validators can raise it directly and
    have it reported as a field validation failure.
    """


class IllegalSessionStateError(OssOutputError):
    """Raised when the host calls a session operation in the wrong state.

    Example: append() before open_next_partition().
    """


class StagingFileError(OssOutputError):
    """Raised when a local staging file cannot be created, written or removed.

    Attributes:
        path: Staging file path, if one had been created.
    """

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class UploadError(OssOutputError):
    """Raised when putting an object or setting its ACL fails.

    Attributes:
        bucket: Target bucket name.
        key: Object key whose upload failed.
    """

    def __init__(self, message: str, *, bucket: str, key: str) -> None:
        super().__init__(message)
        self.bucket = bucket
        self.key = key
