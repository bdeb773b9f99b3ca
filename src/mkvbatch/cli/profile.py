"""CLI commands for inspecting a profile without processing it."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from mkvbatch.cli.exit_codes import ExitCode
from mkvbatch.cli.output import error_exit
from mkvbatch.executor.interface import check_tool_availability
from mkvbatch.policy.exceptions import ProfileError
from mkvbatch.policy.loader import load_profile
from mkvbatch.policy.types import Profile
from mkvbatch.workflow.matcher import FileMatcher, MatchError

logger = logging.getLogger(__name__)


def load_profile_or_exit(profile_path: Path) -> Profile:
    """Load a profile, exiting with CONFIG_ERROR if it cannot be loaded."""
    try:
        return load_profile(profile_path)
    except FileNotFoundError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR)
    except ProfileError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR)


@click.command("validate")
@click.argument(
    "profile_path",
    metavar="PROFILE",
    type=click.Path(path_type=Path, dir_okay=False),
)
def validate_command(profile_path: Path) -> None:
    """Load and validate PROFILE without touching any media file."""
    profile = load_profile_or_exit(profile_path)
    params = profile.processing_params
    click.echo(f"Profile is valid: {profile_path}")
    click.echo(f"  Input:  {profile.input_dir}")
    click.echo(f"  Output: {profile.output_dir}")
    click.echo(f"  Names:  {profile.output_names_file_path}")
    for label, policy in (
        ("Video", params.video_tracks),
        ("Audio", params.audio_tracks),
        ("Subtitle", params.subtitle_tracks),
    ):
        quota = "all" if policy.total_to_retain is None else policy.total_to_retain
        click.echo(f"  {label} tracks to retain: {quota}")

    click.echo("Tools:")
    for name, available in check_tool_availability().items():
        click.echo(f"  {name}: {'found' if available else 'not found'}")


@click.command("match")
@click.argument(
    "profile_path",
    metavar="PROFILE",
    type=click.Path(path_type=Path, dir_okay=False),
)
def match_command(profile_path: Path) -> None:
    """Print how input files of PROFILE pair with output names."""
    profile = load_profile_or_exit(profile_path)
    try:
        matched = FileMatcher(profile).match()
    except MatchError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR)

    for item in matched:
        click.echo(f"{item.input_path.name} -> {item.output_path.name}")
        click.echo(f"    title: {item.title}")
    click.echo(f"{len(matched)} file(s) matched")
