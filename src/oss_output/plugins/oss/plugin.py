# src/oss_output/plugins/oss/plugin.py
"""OSS file output plugin.

Writes each task's partitions to Alibaba Cloud OSS as discrete objects
named ``<file_path><sequence><file_ext>``.

Config options:
    - endpoint: OSS endpoint URL (default: ap-northeast-1)
    - region: signing region (optional)
    - access_key_id / access_key_secret: credentials (required)
    - bucket: target bucket (required)
    - file_path: key prefix (default: "tmp")
    - file_ext: key extension (required)
    - sequence_format: printf template for (task, partition) (default: ".%03d.%02d")
    - tmp_path / tmp_path_prefix: staging file location and name prefix
    - canned_acl: ACL applied to each object (default: "default")
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from oss_output.contracts.results import TaskReport
from oss_output.plugins.base import BaseFileOutputPlugin
from oss_output.plugins.oss.config import OssOutputConfig
from oss_output.plugins.oss.session import PartitionOutputSession, open_session

if TYPE_CHECKING:
    from botocore.client import BaseClient


class OssOutputPlugin(BaseFileOutputPlugin):
    """Host-facing entry point for OSS output.

    Args:
        client: Storage client shared by sessions opened from this instance.
            Intended for tests and emulators; by default every session creates
            and owns its own client.
    """

    name = "oss"
    plugin_version = "1.0.0"
    config_class = OssOutputConfig

    def __init__(self, *, client: BaseClient | None = None) -> None:
        self._client = client

    def load_config(self, config: dict[str, Any]) -> OssOutputConfig:
        """Validate settings, including the sequence format probe.

        Raises:
            ConfigurationError: If any setting is invalid.
        """
        return OssOutputConfig.from_dict(config)

    def cleanup(
        self,
        task: Any,
        task_count: int,
        successful_reports: Sequence[TaskReport],
    ) -> None:
        """Nothing to clean: every session removes its own staging files."""

    def open(self, task: OssOutputConfig, task_index: int) -> PartitionOutputSession:
        """Open the output session for one task."""
        return open_session(task, task_index, client=self._client)
