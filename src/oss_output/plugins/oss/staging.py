# src/oss_output/plugins/oss/staging.py
"""Local staging files backing the currently open partition.

A staging file is created when a partition opens, receives every appended
buffer, and is removed once its bytes have been uploaded (or the partition
is discarded). Deletion is idempotent because it runs from the success
path, the failure paths and abort().
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from oss_output.contracts.errors import StagingFileError

DEFAULT_TMP_PATH_PREFIX = "embulk-output-oss-"
STAGING_FILE_SUFFIX = ".tmp"


@dataclass
class StagingFile:
    """Handle to one staging file.

    Attributes:
        path: Location of the file on local disk
        stream: Open binary stream, or None once closed
        size_bytes: Bytes written so far
    """

    path: Path
    stream: BinaryIO | None
    size_bytes: int = 0

    @property
    def is_open(self) -> bool:
        return self.stream is not None


class StagingFileManager:
    """Creates and removes staging files in one directory.

    Args:
        directory: Directory override; None uses the platform temp dir
        prefix: File name prefix; a unique suffix is appended
    """

    def __init__(self, directory: str | None = None, prefix: str = DEFAULT_TMP_PATH_PREFIX) -> None:
        self._directory = directory
        self._prefix = prefix

    @property
    def directory(self) -> str:
        return self._directory if self._directory is not None else tempfile.gettempdir()

    def create(self) -> StagingFile:
        """Create a new empty staging file opened for writing.

        Raises:
            StagingFileError: If the directory is missing or not writable.
        """
        try:
            fd, name = tempfile.mkstemp(prefix=self._prefix, suffix=STAGING_FILE_SUFFIX, dir=self._directory)
        except OSError as e:
            raise StagingFileError(f"Failed to create staging file in {self.directory!r}: {e}") from e

        try:
            stream = os.fdopen(fd, "wb")
        except OSError as e:
            os.close(fd)
            Path(name).unlink(missing_ok=True)
            raise StagingFileError(f"Failed to open staging file {name!r}: {e}", path=name) from e

        return StagingFile(path=Path(name), stream=stream)

    def write(self, handle: StagingFile, data: bytes | bytearray | memoryview) -> None:
        """Append bytes to an open staging file.

        The caller is responsible for deleting the file when this raises.

        Raises:
            StagingFileError: If the handle is closed or the write fails.
        """
        if handle.stream is None:
            raise StagingFileError(f"Staging file {str(handle.path)!r} is closed", path=str(handle.path))
        try:
            handle.stream.write(data)
        except OSError as e:
            raise StagingFileError(f"Failed to write staging file {str(handle.path)!r}: {e}", path=str(handle.path)) from e
        handle.size_bytes += len(data)

    def flush(self, handle: StagingFile) -> None:
        """Push buffered bytes to the file so it can be read back for upload."""
        if handle.stream is None:
            return
        try:
            handle.stream.flush()
        except OSError as e:
            raise StagingFileError(f"Failed to flush staging file {str(handle.path)!r}: {e}", path=str(handle.path)) from e

    def close(self, handle: StagingFile) -> None:
        """Close the stream. Idempotent."""
        stream = handle.stream
        if stream is None:
            return
        handle.stream = None
        try:
            stream.close()
        except OSError as e:
            raise StagingFileError(f"Failed to close staging file {str(handle.path)!r}: {e}", path=str(handle.path)) from e

    def delete(self, handle: StagingFile | None) -> None:
        """Close (if needed) and remove a staging file.

        Idempotent: a None handle or an already-removed file is a no-op.
        The file is removed even when closing the stream fails.

        Raises:
            StagingFileError: If closing or removing the file fails.
        """
        if handle is None:
            return
        try:
            self.close(handle)
        finally:
            try:
                handle.path.unlink(missing_ok=True)
            except OSError as e:
                raise StagingFileError(f"Failed to delete staging file {str(handle.path)!r}: {e}", path=str(handle.path)) from e
