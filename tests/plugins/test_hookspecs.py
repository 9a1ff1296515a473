"""Tests for pluggy hook specifications."""

import pluggy

from oss_output.plugins.hookspecs import PROJECT_NAME, OutputPluginSpec, hookimpl, hookspec


class TestHookMarkers:
    def test_markers_use_project_name(self) -> None:
        assert hookspec.project_name == PROJECT_NAME
        assert hookimpl.project_name == PROJECT_NAME

    def test_spec_defines_output_hook(self) -> None:
        assert hasattr(OutputPluginSpec, "oss_output_get_outputs")

    def test_hook_callable_through_pluggy(self) -> None:
        class _Provider:
            @hookimpl
            def oss_output_get_outputs(self) -> list[type]:
                return [int]

        pm = pluggy.PluginManager(PROJECT_NAME)
        pm.add_hookspecs(OutputPluginSpec)
        pm.register(_Provider())

        assert pm.hook.oss_output_get_outputs() == [[int]]
