"""Tests for the plugin configuration base class."""

import pytest

from oss_output.contracts.errors import ConfigurationError
from oss_output.plugins.config_base import PluginConfig


class _SampleConfig(PluginConfig):
    bucket: str
    parts: int = 1


class TestPluginConfigFromDict:
    def test_valid_config(self) -> None:
        cfg = _SampleConfig.from_dict({"bucket": "b", "parts": 3})

        assert cfg.bucket == "b"
        assert cfg.parts == 3

    def test_missing_field_raises_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid configuration for _SampleConfig"):
            _SampleConfig.from_dict({})

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="extra"):
            _SampleConfig.from_dict({"bucket": "b", "bukket": "typo"})

    def test_non_dict_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="config must be a dict, got list"):
            _SampleConfig.from_dict(["bucket"])  # type: ignore[arg-type]

    def test_config_is_frozen(self) -> None:
        cfg = _SampleConfig.from_dict({"bucket": "b"})

        with pytest.raises(ValueError):
            cfg.bucket = "other"  # type: ignore[misc]
