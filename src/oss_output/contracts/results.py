# src/oss_output/contracts/results.py
"""Result types returned from sessions and jobs."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class TaskReport:
    """Acknowledgment returned by a session's commit().

    Currently carries no payload. The data mapping is the slot for commit
    metadata that a host may persist alongside the job.
    """

    data: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_empty(self) -> bool:
        return not self.data


@dataclass(frozen=True)
class JobResult:
    """Aggregated outcome of one output job across all tasks.

    Attributes:
        task_count: Number of tasks the job ran
        reports: TaskReport for each task that committed, keyed by task index
        failures: Error description for each failed task, keyed by task index
    """

    task_count: int
    reports: Mapping[int, TaskReport] = field(default_factory=dict)
    failures: Mapping[int, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    @property
    def successful_reports(self) -> list[TaskReport]:
        """Reports of committed tasks in task-index order."""
        return [self.reports[index] for index in sorted(self.reports)]
