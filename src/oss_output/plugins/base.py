# src/oss_output/plugins/base.py
"""Base class for file output plugins.

Plugins MUST subclass BaseFileOutputPlugin: the PluginManager keys plugins
by their ``name`` class attribute, and __init_subclass__ rejects a concrete
plugin that forgets to declare one.

Transaction contract (driven by the host coordinator):
    transaction(config, task_count, control)
        -> validates config before any task exists
        -> resume(task, task_count, control)
            -> control(task) runs every task: open(task, i) per task
        -> returns a config diff for the next run
    cleanup(task, task_count, successful_reports)
        -> called once after all tasks, with reports of committed tasks
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

from oss_output.contracts.results import TaskReport
from oss_output.plugins.config_base import PluginConfig
from oss_output.plugins.protocols import TransactionalFileOutput

# Runs all tasks for a validated configuration and returns their reports
TransactionControl = Callable[[Any], Sequence[TaskReport]]


class BaseFileOutputPlugin(ABC):
    """Base class for plugins that write task output as discrete files."""

    name: str
    plugin_version: str = "0.0.0"
    config_class: type[PluginConfig] = PluginConfig

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Subclasses that still leave open() abstract are intermediate bases
        if getattr(cls.open, "__isabstractmethod__", False):
            return
        if not isinstance(getattr(cls, "name", None), str):
            raise TypeError(f"{cls.__name__} must declare a string 'name' class attribute")

    def load_config(self, config: dict[str, Any]) -> Any:
        """Validate a raw configuration dict.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        return self.config_class.from_dict(config)

    def transaction(
        self,
        config: dict[str, Any],
        task_count: int,
        control: TransactionControl,
    ) -> dict[str, Any]:
        """Validate the configuration, then run all tasks.

        Validation happens here so a bad configuration fails before any
        task is opened.
        """
        task = self.load_config(config)
        return self.resume(task, task_count, control)

    def resume(
        self,
        task: Any,
        task_count: int,
        control: TransactionControl,
    ) -> dict[str, Any]:
        """Run all tasks for an already validated configuration.

        Returns:
            Config diff for the next run (empty by default).
        """
        control(task)
        return {}

    def cleanup(  # noqa: B027 - optional override, not abstract
        self,
        task: Any,
        task_count: int,
        successful_reports: Sequence[TaskReport],
    ) -> None:
        """Called once after all tasks finished. No-op by default."""

    @abstractmethod
    def open(self, task: Any, task_index: int) -> TransactionalFileOutput:
        """Open the transactional output for one task."""
