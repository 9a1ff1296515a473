# src/oss_output/engine/coordinator.py
"""Reference host coordinator for file output plugins.

Drives the transaction protocol the way a pipeline engine would:

    plugin.transaction(config, task_count, control)
        control(task):
            for each task (in parallel, one thread per task):
                output = plugin.open(task, index)
                for each partition:
                    output.open_next_partition()
                    output.append(chunk) ...
                output.finish()
                report = output.commit()
            on failure: output.abort()
            always: output.close()
    plugin.cleanup(task, task_count, successful_reports)

Tasks share nothing; each owns its output. A failing task never stops the
others, and its error is recorded in the JobResult. Configuration errors
are raised before any task starts.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from oss_output.contracts.errors import OssOutputError
from oss_output.contracts.results import JobResult, TaskReport
from oss_output.core.logging import get_logger
from oss_output.plugins.base import BaseFileOutputPlugin

logger = get_logger(__name__)

# One task's input: a sequence of partitions, each an iterable of byte chunks
Partition = Iterable[bytes]
TaskInput = Sequence[Partition]


class TransactionCoordinator:
    """Runs every task of an output job and aggregates the outcome.

    Args:
        plugin: Output plugin instance
        max_workers: Maximum number of tasks running concurrently
    """

    def __init__(self, plugin: BaseFileOutputPlugin, *, max_workers: int = 4) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._plugin = plugin
        self._max_workers = max_workers

    def run(self, config: dict[str, Any], tasks: Sequence[TaskInput]) -> JobResult:
        """Run an output job.

        Args:
            config: Raw plugin configuration (validated before any task opens)
            tasks: Input for each task, indexed by task index

        Returns:
            JobResult with a report per committed task and an error per failed task.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        task_count = len(tasks)
        reports: dict[int, TaskReport] = {}
        failures: dict[int, str] = {}
        validated: list[Any] = []

        def control(task: Any) -> list[TaskReport]:
            validated.append(task)
            with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="oss-output-task") as pool:
                futures = {index: pool.submit(self._run_task, task, index, partitions) for index, partitions in enumerate(tasks)}
                for index, future in futures.items():
                    try:
                        reports[index] = future.result()
                    except Exception as e:
                        failures[index] = f"{type(e).__name__}: {e}"
            return [reports[index] for index in sorted(reports)]

        self._plugin.transaction(config, task_count, control)

        if not validated:
            # resume() returned without running the tasks: nothing was written
            logger.warning("tasks_not_run", plugin=self._plugin.name, task_count=task_count)
            not_run = {index: "Task never ran: plugin did not invoke the transaction control" for index in range(task_count)}
            return JobResult(task_count=task_count, reports={}, failures=not_run)

        result = JobResult(task_count=task_count, reports=reports, failures=failures)
        self._plugin.cleanup(validated[0], task_count, result.successful_reports)

        logger.info(
            "job_completed",
            plugin=self._plugin.name,
            task_count=task_count,
            committed=len(reports),
            failed=len(failures),
        )
        return result

    def _run_task(self, task: Any, task_index: int, partitions: TaskInput) -> TaskReport:
        """Run one task to commit, aborting its output on any failure."""
        log = logger.bind(task_index=task_index)
        output = self._plugin.open(task, task_index)
        try:
            try:
                for partition in partitions:
                    output.open_next_partition()
                    for chunk in partition:
                        output.append(chunk)
                output.finish()
                return output.commit()
            except Exception as e:
                log.error("task_failed", error_type=type(e).__name__, error=str(e))
                try:
                    output.abort()
                except OssOutputError as abort_error:
                    # The task's own failure is what gets reported
                    log.warning("task_abort_failed", error=str(abort_error))
                raise
        finally:
            output.close()
