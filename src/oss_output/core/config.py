# src/oss_output/core/config.py
"""Job settings loaded from YAML with environment overrides.

Settings are frozen (immutable) after construction. The output plugin's own
options stay a plain dict here and are validated by the plugin itself
(see OssOutputConfig), so a settings file can name any registered output.

Example settings.yaml:

    max_workers: 4
    output:
      plugin: oss
      options:
        endpoint: "http://oss-cn-hangzhou.aliyuncs.com"
        access_key_id: "${OSS_ACCESS_KEY_ID}"
        access_key_secret: "${OSS_ACCESS_KEY_SECRET}"
        bucket: analytics-exports
        file_path: "exports/orders"
        file_ext: ".csv"
"""

import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from oss_output.contracts.errors import ConfigurationError

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


class OutputSettings(BaseModel):
    """Which output plugin to use and its options."""

    model_config = {"frozen": True, "extra": "forbid"}

    plugin: str = Field(default="oss", description="Registered output plugin name")
    options: dict[str, Any] = Field(default_factory=dict, description="Plugin configuration")


class JobSettings(BaseModel):
    """Top-level settings for an output job."""

    model_config = {"frozen": True, "extra": "forbid"}

    output: OutputSettings
    max_workers: int = Field(default=4, ge=1, description="Tasks run concurrently")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Args:
        config: Configuration dict (may contain nested structures)

    Returns:
        New dict with environment variables expanded
    """

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default = match.group(2)  # None if no default specified
            env_value = os.environ.get(var_name)
            if env_value is not None:
                return env_value
            if default is not None:
                return default
            # No env var and no default - keep original (will likely cause error)
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lowercase_top_level(raw: dict[str, Any]) -> dict[str, Any]:
    """Dynaconf uppercases top-level keys; nested plugin options keep their case."""
    return {k.lower(): v for k, v in raw.items()}


def load_settings(config_path: Path) -> JobSettings:
    """Load settings from a YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (OSS_OUTPUT_*) - highest priority
    2. Settings file
    3. Defaults from the Pydantic models - lowest priority

    Environment variable format: OSS_OUTPUT_OUTPUT__OPTIONS__BUCKET for nested keys.

    Args:
        config_path: Path to YAML settings file

    Returns:
        Validated JobSettings instance

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        ConfigurationError: If the settings fail validation
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Settings file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="OSS_OUTPUT",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = _lowercase_top_level({k: v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys})
    raw_config = _expand_env_vars(raw_config)

    try:
        return JobSettings.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {config_path}: {e}") from e
