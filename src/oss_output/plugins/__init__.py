"""Output plugin system: base class, protocols, registration."""

from oss_output.plugins.base import BaseFileOutputPlugin
from oss_output.plugins.config_base import PluginConfig
from oss_output.plugins.hookspecs import hookimpl
from oss_output.plugins.manager import PluginManager
from oss_output.plugins.protocols import TransactionalFileOutput

__all__ = [
    "BaseFileOutputPlugin",
    "PluginConfig",
    "PluginManager",
    "TransactionalFileOutput",
    "hookimpl",
]
