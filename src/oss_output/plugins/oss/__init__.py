"""Alibaba Cloud OSS file output plugin."""

from oss_output.plugins.oss.config import OssOutputConfig
from oss_output.plugins.oss.naming import KeyNamer, validate_sequence_format
from oss_output.plugins.oss.plugin import OssOutputPlugin
from oss_output.plugins.oss.session import PartitionOutputSession, open_session
from oss_output.plugins.oss.staging import StagingFile, StagingFileManager
from oss_output.plugins.oss.uploader import ObjectUploader

__all__ = [
    "KeyNamer",
    "ObjectUploader",
    "OssOutputConfig",
    "OssOutputPlugin",
    "PartitionOutputSession",
    "StagingFile",
    "StagingFileManager",
    "open_session",
    "validate_sequence_format",
]
