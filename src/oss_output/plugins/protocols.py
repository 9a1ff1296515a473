# src/oss_output/plugins/protocols.py
"""Protocols for the objects a host engine drives.

Used for type checking and isinstance() checks on instances; plugin
classes themselves are discovered through pluggy hooks.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from oss_output.contracts.results import TaskReport


@runtime_checkable
class TransactionalFileOutput(Protocol):
    """Per-task output that receives byte buffers file by file.

    Lifecycle:
    1. open_next_partition() - start a file (closes the previous one)
    2. append(data) - called any number of times per file
    3. finish() - end of task, closes the last file
    4. commit() - acknowledge; returns the task report
    On failure the host calls abort() instead of finish()/commit().
    close() is always called last.
    """

    def open_next_partition(self) -> None: ...

    def append(self, data: bytes | bytearray | memoryview) -> None: ...

    def finish(self) -> None: ...

    def abort(self) -> None: ...

    def commit(self) -> "TaskReport": ...

    def close(self) -> None: ...
