"""Tests for task and job result types."""

import dataclasses

import pytest

from oss_output.contracts.results import JobResult, TaskReport


class TestTaskReport:
    def test_default_report_is_empty(self) -> None:
        report = TaskReport()

        assert report.is_empty
        assert dict(report.data) == {}

    def test_default_data_is_read_only(self) -> None:
        report = TaskReport()

        with pytest.raises(TypeError):
            report.data["key"] = "value"  # type: ignore[index]

    def test_report_is_frozen(self) -> None:
        report = TaskReport()

        with pytest.raises(dataclasses.FrozenInstanceError):
            report.data = {}  # type: ignore[misc]

    def test_report_with_data_is_not_empty(self) -> None:
        assert not TaskReport(data={"objects": 3}).is_empty


class TestJobResult:
    def test_succeeded_without_failures(self) -> None:
        result = JobResult(task_count=2, reports={0: TaskReport(), 1: TaskReport()})

        assert result.succeeded
        assert len(result.successful_reports) == 2

    def test_failure_marks_job_failed(self) -> None:
        result = JobResult(task_count=2, reports={0: TaskReport()}, failures={1: "UploadError: boom"})

        assert not result.succeeded
        assert result.failures[1] == "UploadError: boom"

    def test_successful_reports_in_task_order(self) -> None:
        first = TaskReport(data={"task": 0})
        second = TaskReport(data={"task": 1})
        third = TaskReport(data={"task": 2})
        result = JobResult(task_count=3, reports={2: third, 0: first, 1: second})

        assert result.successful_reports == [first, second, third]
