# src/oss_output/cli.py
"""oss-output Command Line Interface.

Entry point for the oss-output CLI tool.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from oss_output import __version__
from oss_output.contracts.errors import ConfigurationError

if TYPE_CHECKING:
    from oss_output.core.config import JobSettings
    from oss_output.plugins.base import BaseFileOutputPlugin
    from oss_output.plugins.manager import PluginManager

__all__ = ["app"]

DEFAULT_CHUNK_SIZE = 1024 * 1024

# Module-level singleton for plugin manager
_plugin_manager_cache: PluginManager | None = None


def _get_plugin_manager() -> PluginManager:
    """Get initialized plugin manager (singleton).

    Returns:
        PluginManager with all built-in plugins registered
    """
    global _plugin_manager_cache

    from oss_output.plugins.manager import PluginManager

    if _plugin_manager_cache is None:
        manager = PluginManager()
        manager.register_builtin_plugins()
        _plugin_manager_cache = manager
    return _plugin_manager_cache


app = typer.Typer(
    name="oss-output",
    help="oss-output: transactional file output to Alibaba Cloud OSS.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"oss-output version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from a .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(f"Error: .env file not found: {env_file}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)  # Don't override existing env vars


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR).",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """oss-output: transactional file output to Alibaba Cloud OSS."""
    from oss_output.core.logging import configure_logging

    if log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
        typer.secho(f"Error: invalid log level '{log_level}'", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)
    configure_logging(json_output=json_logs, level=log_level)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho("Warning: --env-file ignored because --no-dotenv is set.", fg=typer.colors.YELLOW, err=True)


def _load_job(settings_path: Path) -> tuple[JobSettings, BaseFileOutputPlugin]:
    """Load settings and instantiate the configured output plugin.

    Raises:
        typer.Exit: On missing file, invalid settings, or unknown plugin.
    """
    from oss_output.core.config import load_settings

    try:
        settings = load_settings(settings_path)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None
    except ConfigurationError as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None

    plugin_cls = _get_plugin_manager().get_output_by_name(settings.output.plugin)
    if plugin_cls is None:
        available = ", ".join(sorted(cls.name for cls in _get_plugin_manager().get_outputs()))
        typer.secho(
            f"Error: unknown output plugin '{settings.output.plugin}'. Available: {available}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(1)

    return settings, plugin_cls()


@app.command()
def validate(
    settings_path: Path = typer.Argument(..., help="Path to settings YAML file."),
) -> None:
    """Validate a settings file without uploading anything."""
    from oss_output.plugins.oss.config import OssOutputConfig
    from oss_output.plugins.oss.naming import KeyNamer

    settings, plugin = _load_job(settings_path)
    try:
        config = plugin.load_config(settings.output.options)
    except ConfigurationError as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None

    typer.secho("Configuration valid.", fg=typer.colors.GREEN)
    if isinstance(config, OssOutputConfig):
        namer = KeyNamer(config.file_path, config.sequence_format, config.file_ext)
        typer.echo(f"First object key: {namer.build_key(0, 0)}")


def _read_chunks(path: Path, chunk_size: int) -> Iterator[bytes]:
    """Yield a file's bytes in fixed-size chunks."""
    with path.open("rb") as f:
        while chunk := f.read(chunk_size):
            yield chunk


@app.command()
def upload(
    settings_path: Path = typer.Argument(..., help="Path to settings YAML file."),
    files: list[Path] = typer.Argument(..., help="Local files; each becomes one object."),
    tasks: int = typer.Option(1, "--tasks", "-t", min=1, help="Number of parallel tasks."),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", min=1, help="Bytes per appended buffer."),
) -> None:
    """Upload local files, one object per file, distributed across tasks."""
    from oss_output.engine.coordinator import TransactionCoordinator

    missing = [str(path) for path in files if not path.is_file()]
    if missing:
        typer.secho(f"Error: file(s) not found: {', '.join(missing)}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    settings, plugin = _load_job(settings_path)

    # Round-robin: file i goes to task i % tasks, preserving order within a task
    task_inputs = [[_read_chunks(path, chunk_size) for path in files[index::tasks]] for index in range(min(tasks, len(files)))]

    coordinator = TransactionCoordinator(plugin, max_workers=settings.max_workers)
    try:
        result = coordinator.run(settings.output.options, task_inputs)
    except ConfigurationError as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None

    for index in sorted(result.failures):
        typer.secho(f"Task {index} failed: {result.failures[index]}", fg=typer.colors.RED, err=True)

    if not result.succeeded:
        typer.secho(
            f"Upload failed: {len(result.failures)} of {result.task_count} task(s) failed.",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(1)

    typer.secho(f"Uploaded {len(files)} file(s) in {result.task_count} task(s).", fg=typer.colors.GREEN)


@app.command("plugins")
def plugins_list() -> None:
    """List available output plugins."""
    from oss_output.plugins.manager import get_plugin_description

    outputs = _get_plugin_manager().get_outputs()
    typer.echo("OUTPUTS:")
    if not outputs:
        typer.echo("  (none available)")
    for cls in outputs:
        typer.echo(f"  {cls.name:20} - {get_plugin_description(cls)}")


if __name__ == "__main__":
    app()
