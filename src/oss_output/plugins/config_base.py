# src/oss_output/plugins/config_base.py
"""Base class for typed output plugin configurations.

Plugins inherit from PluginConfig to get:
- Strict validation (reject unknown fields)
- Immutability once loaded (settings are shared read-only by all tasks)
- A factory method that reports every failure as ConfigurationError

Example usage:
    class MyOutputConfig(PluginConfig):
        bucket: str

    cfg = MyOutputConfig.from_dict(config)
"""

from typing import Any, Self

from pydantic import BaseModel, ValidationError

from oss_output.contracts.errors import ConfigurationError


class PluginConfig(BaseModel):
    """Base class for typed plugin configurations."""

    model_config = {"extra": "forbid", "frozen": True}

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Create config from dict with clear error on validation failure.

        Args:
            config: Dictionary of configuration values.

        Returns:
            Validated configuration instance.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        if not isinstance(config, dict):
            raise ConfigurationError(f"Invalid configuration for {cls.__name__}: config must be a dict, got {type(config).__name__}.")

        try:
            return cls.model_validate(config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration for {cls.__name__}: {e}") from e
