"""CLI command for processing a profile's batch of media files."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from mkvbatch.cli.exit_codes import ExitCode
from mkvbatch.cli.output import error_exit
from mkvbatch.cli.profile import load_profile_or_exit
from mkvbatch.executor.interface import ToolNotFoundError
from mkvbatch.policy.types import OnErrorMode
from mkvbatch.workflow.matcher import MatchError
from mkvbatch.workflow.media_file import FileResult
from mkvbatch.workflow.processor import BatchProcessor, BatchSummary

logger = logging.getLogger(__name__)


def _echo_progress(position: int, total: int, result: FileResult) -> None:
    """Print a one-line status for a finished file."""
    if result.success:
        status = click.style("OK", fg="green")
        detail = result.output_path.name
    else:
        status = click.style("FAILED", fg="red")
        detail = f"{result.stage}: {result.message}"
    click.echo(
        f"[{position}/{total}] {status} {result.input_path.name} "
        f"({result.duration_seconds:.1f}s) {detail}"
    )


def _echo_summary(summary: BatchSummary) -> None:
    click.echo("")
    click.echo(
        f"Processed {len(summary.results)} of {summary.total} file(s) "
        f"in {summary.duration_seconds:.1f}s: "
        f"{summary.succeeded} succeeded, {summary.failed} failed, "
        f"{summary.skipped} skipped"
    )
    if summary.halted:
        click.echo(
            "Batch stopped after the first failure "
            "(use --continue-on-error to keep going).",
            err=True,
        )


@click.command("process")
@click.argument(
    "profile_path",
    metavar="PROFILE",
    type=click.Path(path_type=Path, dir_okay=False),
)
@click.option(
    "--continue-on-error",
    is_flag=True,
    default=False,
    help="Keep processing remaining files after a failure.",
)
@click.pass_context
def process_command(
    ctx: click.Context,
    profile_path: Path,
    continue_on_error: bool,
) -> None:
    """Select, convert and remux the tracks of every file in PROFILE.

    Exits 0 when every file succeeded, 1 when any file failed, and 2 on
    configuration errors.
    """
    config = ctx.obj["config"]
    profile = load_profile_or_exit(profile_path)

    processor = BatchProcessor(
        profile,
        config.paths.temp_directory,
        on_error=OnErrorMode.CONTINUE if continue_on_error else None,
        progress_callback=_echo_progress,
    )

    try:
        processor.check_tools()
        matched = processor.match()
    except (ToolNotFoundError, MatchError) as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR)

    logger.info(
        "Processing %d file(s) from %s", len(matched), profile.input_dir
    )
    summary = processor.run(matched)
    _echo_summary(summary)

    if not summary.success:
        ctx.exit(ExitCode.FILE_FAILURES)
