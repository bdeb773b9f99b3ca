"""CLI module for mkvbatch."""

import logging
from pathlib import Path

import click

from mkvbatch.cli.exit_codes import ExitCode
from mkvbatch.cli.output import error_exit
from mkvbatch.config import ConfigError, get_config, set_active_config
from mkvbatch.logging import configure_logging

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(ctx: click.Context) -> None:
    """Configure logging once from the active configuration."""
    global _logging_configured
    if _logging_configured:
        return

    configure_logging(ctx.obj["config"].logging)
    _logging_configured = True


@click.group()
@click.version_option(package_name="mkvbatch")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to config file (default: ~/.mkvbatch/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """mkvbatch - Select, convert and remux tracks of Matroska files in bulk."""
    ctx.ensure_object(dict)

    # Tests may inject a ready-made config
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(
                config_path=config_path,
                log_level=log_level.lower() if log_level else None,
                log_file=log_file,
                log_format="json" if log_json else None,
            )
        except ConfigError as e:
            error_exit(str(e), ExitCode.CONFIG_ERROR)

    set_active_config(ctx.obj["config"])
    _configure_logging(ctx)


# Defer import to avoid circular dependency
def _register_commands():
    from mkvbatch.cli.process import process_command
    from mkvbatch.cli.profile import match_command, validate_command

    main.add_command(process_command)
    main.add_command(validate_command)
    main.add_command(match_command)


_register_commands()
