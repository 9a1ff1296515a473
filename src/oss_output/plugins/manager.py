# src/oss_output/plugins/manager.py
"""Plugin manager for output plugin registration and lookup.

Uses pluggy for hook-based plugin registration.
"""

from typing import Any

import pluggy

from oss_output.plugins.base import BaseFileOutputPlugin
from oss_output.plugins.hookspecs import PROJECT_NAME, OutputPluginSpec, hookimpl


class _BuiltinOutputs:
    """Registers the output plugins shipped with this package."""

    @hookimpl
    def oss_output_get_outputs(self) -> list[type[BaseFileOutputPlugin]]:
        from oss_output.plugins.oss.plugin import OssOutputPlugin

        return [OssOutputPlugin]


class PluginManager:
    """Manages output plugin registration and lookup.

    Usage:
        manager = PluginManager()
        manager.register_builtin_plugins()

        plugin_cls = manager.get_output_by_name("oss")
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(OutputPluginSpec)
        self._outputs: dict[str, type[BaseFileOutputPlugin]] = {}

    def register_builtin_plugins(self) -> None:
        """Register all built-in output plugins. Call once at startup."""
        self.register(_BuiltinOutputs())

    def register(self, plugin: Any) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin instance implementing hook methods

        Raises:
            ValueError: If an output with the same name is already registered
        """
        self._pm.register(plugin)
        try:
            self._refresh_caches()
        except ValueError:
            self._pm.unregister(plugin)
            raise

    def _refresh_caches(self) -> None:
        new_outputs: dict[str, type[BaseFileOutputPlugin]] = {}
        for outputs in self._pm.hook.oss_output_get_outputs():
            for cls in outputs:
                name = cls.name
                if name in new_outputs:
                    raise ValueError(f"Duplicate output plugin name: '{name}'. Already registered by {new_outputs[name].__name__}")
                new_outputs[name] = cls

        self._outputs = new_outputs

    def get_outputs(self) -> list[type[BaseFileOutputPlugin]]:
        """Get all registered output plugins."""
        return list(self._outputs.values())

    def get_output_by_name(self, name: str) -> type[BaseFileOutputPlugin] | None:
        """Get output plugin by name."""
        return self._outputs.get(name)


def get_plugin_description(plugin_cls: type) -> str:
    """Extract description from plugin class docstring.

    Returns the first non-empty line of the docstring. If no docstring
    exists, returns a default message using the plugin name.
    """
    if plugin_cls.__doc__:
        for line in plugin_cls.__doc__.strip().split("\n"):
            cleaned = line.strip()
            if cleaned:
                return cleaned

    name = getattr(plugin_cls, "name", plugin_cls.__name__)
    return f"{name} plugin"
