# src/oss_output/plugins/hookspecs.py
"""pluggy hook specifications for output plugins.

Usage (implementing a plugin):
    from oss_output.plugins.hookspecs import hookimpl

    class MyPlugin:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def oss_output_get_outputs(self):
            return [MyOutputPlugin]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from oss_output.plugins.base import BaseFileOutputPlugin

PROJECT_NAME = "oss_output"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class OutputPluginSpec:
    """Hook specifications for file output plugins."""

    @hookspec
    def oss_output_get_outputs(self) -> list[type["BaseFileOutputPlugin"]]:  # type: ignore[empty-body]
        """Return output plugin classes.

        Returns:
            List of output plugin classes (not instances)
        """
