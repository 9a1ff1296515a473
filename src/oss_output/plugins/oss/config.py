# src/oss_output/plugins/oss/config.py
"""Configuration for the OSS output plugin.

Example configuration:

    endpoint: "http://oss-cn-hangzhou.aliyuncs.com"
    region: "oss-cn-hangzhou"
    access_key_id: "${OSS_ACCESS_KEY_ID}"
    access_key_secret: "${OSS_ACCESS_KEY_SECRET}"
    bucket: "analytics-exports"
    file_path: "exports/orders"
    file_ext: ".csv"
    sequence_format: ".%03d.%02d"
    canned_acl: private

camelCase keys (accessKeyId, filePath, fileExt, sequenceFormat, tmpPath,
tmpPathPrefix, cannedAcl) are accepted as aliases so existing camelCase
configurations load unchanged.
"""

from typing import Any, Self

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator

from oss_output.contracts.enums import CannedAcl
from oss_output.plugins.config_base import PluginConfig
from oss_output.plugins.oss.auth import OssAuthConfig
from oss_output.plugins.oss.naming import DEFAULT_SEQUENCE_FORMAT, validate_sequence_format
from oss_output.plugins.oss.staging import DEFAULT_TMP_PATH_PREFIX

DEFAULT_ENDPOINT = "http://oss-ap-northeast-1.aliyuncs.com"


class OssOutputConfig(PluginConfig):
    """Validated settings for one OSS output job.

    Immutable once loaded and shared read-only by every task's session.
    """

    endpoint: str = Field(
        default=DEFAULT_ENDPOINT,
        description="OSS endpoint URL",
    )
    region: str | None = Field(
        default=None,
        description="Signing region, e.g. 'oss-cn-hangzhou' (default: resolved by the SDK)",
    )
    access_key_id: str = Field(
        ...,
        validation_alias=AliasChoices("access_key_id", "accessKeyId", "accessKeyID"),
        description="Access key ID",
    )
    access_key_secret: SecretStr = Field(
        ...,
        validation_alias=AliasChoices("access_key_secret", "accessKeySecret"),
        description="Access key secret",
    )
    bucket: str = Field(..., description="Target bucket name")
    file_path: str = Field(
        default="tmp",
        validation_alias=AliasChoices("file_path", "filePath"),
        description="Prefix prepended to every object key",
    )
    file_ext: str = Field(
        ...,
        validation_alias=AliasChoices("file_ext", "fileExt"),
        description="Extension appended to every object key (e.g. '.csv')",
    )
    sequence_format: str = Field(
        default=DEFAULT_SEQUENCE_FORMAT,
        validation_alias=AliasChoices("sequence_format", "sequenceFormat"),
        description="printf-style template applied to (task index, partition index)",
    )
    tmp_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices("tmp_path", "tmpPath"),
        description="Directory for staging files (default: platform temp dir)",
    )
    tmp_path_prefix: str = Field(
        default=DEFAULT_TMP_PATH_PREFIX,
        validation_alias=AliasChoices("tmp_path_prefix", "tmpPathPrefix"),
        description="Staging file name prefix",
    )
    canned_acl: CannedAcl = Field(
        default=CannedAcl.DEFAULT,
        validation_alias=AliasChoices("canned_acl", "cannedAcl"),
        description="Canned ACL applied to uploaded objects",
    )

    @model_validator(mode="after")
    def validate_auth_config(self) -> Self:
        """Validate endpoint and credentials via OssAuthConfig."""
        self.get_auth_config()
        return self

    @field_validator("bucket", "file_ext")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Reject empty or whitespace-only values."""
        if not v or not v.strip():
            raise ValueError("cannot be empty")
        return v

    @field_validator("sequence_format")
    @classmethod
    def validate_sequence(cls, v: str) -> str:
        """Probe the sequence format with (0, 0) at load time."""
        return validate_sequence_format(v)

    @field_validator("canned_acl", mode="before")
    @classmethod
    def parse_canned_acl(cls, v: Any) -> Any:
        """Accept OSS SDK constant names; an explicit null is an error."""
        if v is None:
            raise ValueError("canned_acl cannot be null; omit it to use 'default'")
        if isinstance(v, str) and not isinstance(v, CannedAcl):
            return CannedAcl.parse(v)
        return v

    def get_auth_config(self) -> OssAuthConfig:
        """Get the OssAuthConfig for this output configuration."""
        return OssAuthConfig(
            endpoint=self.endpoint,
            access_key_id=self.access_key_id,
            access_key_secret=self.access_key_secret,
            region=self.region,
        )
