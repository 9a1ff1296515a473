# src/oss_output/plugins/oss/session.py
"""Per-task partition output session.

One session exists per parallel task. It stages each partition in a local
file, uploads the file under a deterministic key when the partition closes,
and removes the staging file on every exit path.

State machine:

    IDLE --open_next_partition()--> OPEN
    OPEN --open_next_partition()--> OPEN      (closes the current partition first)
    OPEN --close_partition()/finish()--> IDLE (upload succeeded)
    any  --failure or abort()--> FAILED       (terminal)

Lifecycle contract (driven by the host coordinator, one thread per task):
    open_session -> [open_next_partition -> append*]* -> finish -> commit
    On any failure the host calls abort(). close() is pure teardown and is
    safe in every state.

Failure guarantees:
    - A failed upload never advances the partition index.
    - The staging file is deleted whether the upload succeeded or not.
    - Cleanup failures are logged and never replace the original error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from oss_output.contracts.enums import SessionState
from oss_output.contracts.errors import IllegalSessionStateError, StagingFileError
from oss_output.contracts.results import TaskReport
from oss_output.plugins.oss.naming import KeyNamer
from oss_output.plugins.oss.staging import StagingFile, StagingFileManager
from oss_output.plugins.oss.uploader import ObjectUploader

if TYPE_CHECKING:
    from botocore.client import BaseClient

    from oss_output.plugins.oss.config import OssOutputConfig

logger = structlog.get_logger(__name__)


class PartitionOutputSession:
    """Stages, uploads and cleans up the partitions of one task.

    Not thread-safe: a session belongs to exactly one task and every call
    blocks until its write or upload completes.

    Args:
        task_index: Index of the owning task; embedded in every key
        namer: Derives object keys
        staging: Creates and removes staging files
        uploader: Uploads finished staging files (owned by this session)
    """

    def __init__(
        self,
        task_index: int,
        *,
        namer: KeyNamer,
        staging: StagingFileManager,
        uploader: ObjectUploader,
    ) -> None:
        if task_index < 0:
            raise ValueError(f"task_index must be non-negative, got {task_index}")
        self._task_index = task_index
        self._namer = namer
        self._staging = staging
        self._uploader = uploader

        self._state = SessionState.IDLE
        self._partition_index = 0
        self._current: StagingFile | None = None
        self._log = logger.bind(task_index=task_index, bucket=uploader.bucket)

    @property
    def task_index(self) -> int:
        return self._task_index

    @property
    def partition_index(self) -> int:
        """Index of the open partition, or of the next one when IDLE."""
        return self._partition_index

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def staging_file(self) -> StagingFile | None:
        return self._current

    def current_key(self) -> str:
        """Key the open (or next) partition will be uploaded under."""
        return self._namer.build_key(self._task_index, self._partition_index)

    # === Host lifecycle ===

    def open_next_partition(self) -> None:
        """Start a new partition, closing the open one first.

        Raises:
            IllegalSessionStateError: If the session has failed.
            StagingFileError: If the staging file cannot be created.
            UploadError: If closing the previous partition failed.
        """
        self._require_not_failed("open_next_partition")
        self.close_partition()

        try:
            self._current = self._staging.create()
        except StagingFileError:
            self._state = SessionState.FAILED
            raise

        self._state = SessionState.OPEN
        self._log.info(
            "partition_opened",
            key=self.current_key(),
            partition_index=self._partition_index,
            staging_path=str(self._current.path),
        )

    def append(self, data: bytes | bytearray | memoryview) -> None:
        """Append bytes to the open partition.

        Raises:
            IllegalSessionStateError: If no partition is open.
            StagingFileError: If the write fails (staging file is deleted).
        """
        if self._state is not SessionState.OPEN or self._current is None:
            raise IllegalSessionStateError(
                f"open_next_partition() must be called before append() (task {self._task_index}, state {self._state})"
            )

        try:
            self._staging.write(self._current, data)
        except StagingFileError:
            self._state = SessionState.FAILED
            self._discard_current(suppress_errors=True)
            raise

    def close_partition(self) -> None:
        """Upload the open partition and remove its staging file.

        No-op when no partition is open, so calling it twice in a row never
        re-uploads.

        Raises:
            IllegalSessionStateError: If the session has failed.
            UploadError: If the put or ACL update fails.
            StagingFileError: If flushing or removing the staging file fails.
        """
        self._require_not_failed("close_partition")
        if self._state is SessionState.IDLE:
            return

        staging_file = self._current
        if staging_file is None:
            raise IllegalSessionStateError(f"Session for task {self._task_index} is OPEN without a staging file")
        key = self.current_key()

        try:
            self._staging.flush(staging_file)
            self._staging.close(staging_file)
            self._uploader.upload(staging_file.path, key)
        except Exception:
            self._state = SessionState.FAILED
            self._log.error(
                "partition_close_failed",
                key=key,
                partition_index=self._partition_index,
                size_bytes=staging_file.size_bytes,
            )
            self._discard_current(suppress_errors=True)
            raise

        # Uploaded: the object exists remotely, so the index advances even
        # if removing the local file fails below.
        self._partition_index += 1
        try:
            self._discard_current()
        except StagingFileError:
            self._state = SessionState.FAILED
            raise
        self._state = SessionState.IDLE

    def finish(self) -> None:
        """Normal end of task: close the open partition."""
        self.close_partition()

    def abort(self) -> None:
        """Discard any staged data without uploading it.

        Idempotent. The session is FAILED afterwards.

        Raises:
            StagingFileError: If the staging file cannot be removed.
        """
        discarded = self._current
        self._state = SessionState.FAILED
        self._discard_current()
        if discarded is not None:
            self._log.warning(
                "partition_aborted",
                partition_index=self._partition_index,
                discarded_bytes=discarded.size_bytes,
            )

    def commit(self) -> TaskReport:
        """Acknowledge a finished task.

        Performs no I/O.

        Raises:
            IllegalSessionStateError: If a partition is still open or the session failed.
        """
        if self._state is not SessionState.IDLE:
            raise IllegalSessionStateError(f"commit() requires a finished session (task {self._task_index}, state {self._state})")
        return TaskReport()

    def close(self) -> None:
        """Release the staging file and the storage client.

        Safe in every state. An open partition is discarded, never uploaded.
        """
        try:
            if self._current is not None:
                self._state = SessionState.FAILED
                self._discard_current()
        finally:
            self._uploader.close()

    # === Internal helpers ===

    def _require_not_failed(self, operation: str) -> None:
        if self._state is SessionState.FAILED:
            raise IllegalSessionStateError(f"{operation}() called on failed session for task {self._task_index}")

    def _discard_current(self, *, suppress_errors: bool = False) -> None:
        """Close and delete the current staging file, if any.

        The handle is released only once the file is gone, so a later
        abort() or close() retries a deletion that failed here. With
        suppress_errors, a cleanup failure is logged instead of raised so
        it cannot replace the error already propagating.
        """
        staging_file = self._current
        try:
            self._staging.delete(staging_file)
        except StagingFileError as e:
            if not suppress_errors:
                raise
            self._log.warning(
                "staging_cleanup_failed",
                staging_path=e.path,
                error=str(e),
            )
            return
        self._current = None


def open_session(
    config: OssOutputConfig,
    task_index: int,
    *,
    client: BaseClient | None = None,
) -> PartitionOutputSession:
    """Open the output session for one task.

    Args:
        config: Validated output configuration (shared by all tasks)
        task_index: Index of the task within the job
        client: Storage client to use; when None the session creates and owns one

    Returns:
        Session in the IDLE state.
    """
    owns_client = client is None
    if client is None:
        client = config.get_auth_config().create_client()
    return PartitionOutputSession(
        task_index,
        namer=KeyNamer(config.file_path, config.sequence_format, config.file_ext),
        staging=StagingFileManager(config.tmp_path, config.tmp_path_prefix),
        uploader=ObjectUploader(client, config.bucket, config.canned_acl, owns_client=owns_client),
    )
