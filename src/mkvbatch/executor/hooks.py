"""Hook command execution.

Hook commands are user-supplied executables run at fixed pipeline stages.
Argument tokens are substituted before launch:

- ``%i%``: input media file path
- ``%o%``: output media file path
- ``%t%``: per-file temp directory
- ``%log%``: removed; when file logging is inactive the whole argument
  containing it is dropped

Hook failures never fail the media file; they are logged only.
"""

import logging
import subprocess  # nosec B404 - subprocess is required for hook execution
from collections.abc import Callable, Sequence
from pathlib import Path

from mkvbatch.core.subprocess_utils import run_command
from mkvbatch.domain.enums import HookStage
from mkvbatch.executor.interface import ExecutorResult, ToolOutcome
from mkvbatch.logging.config import is_file_logging_active
from mkvbatch.policy.types import HookCommand

logger = logging.getLogger(__name__)

LOG_TOKEN = "%log%"


def substitute_tokens(
    arguments: Sequence[str],
    input_path: Path,
    output_path: Path,
    temp_dir: Path,
    logging_active: bool,
) -> list[str]:
    """Apply hook token substitution to an argument list.

    Args:
        arguments: Raw arguments (without the executable).
        input_path: Replacement for ``%i%``.
        output_path: Replacement for ``%o%``.
        temp_dir: Replacement for ``%t%``.
        logging_active: Whether file logging is active.

    Returns:
        Substituted argument list.
    """
    if not logging_active:
        arguments = [arg for arg in arguments if LOG_TOKEN not in arg]

    return [
        arg.replace("%i%", str(input_path))
        .replace("%o%", str(output_path))
        .replace("%t%", str(temp_dir))
        .replace(LOG_TOKEN, "")
        for arg in arguments
    ]


class HookRunner:
    """Run the hook commands configured for a stage."""

    def __init__(
        self,
        commands: Sequence[HookCommand],
        logging_active: Callable[[], bool] = is_file_logging_active,
    ) -> None:
        """Initialize the runner.

        Args:
            commands: All configured hook commands.
            logging_active: Callable reporting whether file logging is on.
        """
        self._commands = tuple(commands)
        self._logging_active = logging_active

    def commands_for(self, stage: HookStage) -> list[HookCommand]:
        """Get the commands configured for a stage, in profile order."""
        return [c for c in self._commands if c.stage == stage]

    def run_stage(
        self,
        stage: HookStage,
        input_path: Path,
        output_path: Path,
        temp_dir: Path,
    ) -> list[ExecutorResult]:
        """Run every command of a stage synchronously.

        A command whose executable does not exist stops the remaining
        commands of the stage.

        Returns:
            One result per command that was attempted.
        """
        commands = self.commands_for(stage)
        if not commands:
            logger.debug("No %s commands configured", stage.value)
            return []

        results: list[ExecutorResult] = []
        for command in commands:
            if not command.path.exists():
                logger.error(
                    "Hook command path does not exist, skipping remaining "
                    "%s commands: %s",
                    stage.value,
                    command.path,
                )
                results.append(
                    ExecutorResult(
                        success=False,
                        message=f"Command not found: {command.path}",
                        outcome=ToolOutcome.HARD_FAILURE,
                    )
                )
                break

            args = substitute_tokens(
                command.arguments,
                input_path,
                output_path,
                temp_dir,
                self._logging_active(),
            )
            results.append(self._run(stage, command.path, args))

        return results

    def _run(self, stage: HookStage, path: Path, args: list[str]) -> ExecutorResult:
        logger.info("Running %s command: %s", stage.value, path)
        try:
            stdout, stderr, returncode = run_command([path, *args])
        except (OSError, subprocess.SubprocessError) as e:
            logger.error("Hook command could not be run: %s: %s", path, e)
            return ExecutorResult(
                success=False,
                message=f"Hook command could not be run: {e}",
                outcome=ToolOutcome.HARD_FAILURE,
            )

        for line in stdout.splitlines():
            logger.info("  %s", line)
        for line in stderr.splitlines():
            logger.info("  %s", line)

        if returncode != 0:
            logger.warning(
                "Hook command exited with status %d: %s", returncode, path
            )
            return ExecutorResult(
                success=False,
                message=f"Hook command exited with status {returncode}",
                outcome=ToolOutcome.SOFT_FAILURE,
                returncode=returncode,
            )

        return ExecutorResult(success=True, returncode=returncode)
