"""Batch processor.

Runs the media file pipeline over every matched file of a profile, in
order, with a single shared batch context. By default the batch stops at
the first failed file; ``misc.on_error: continue`` records the failure and
moves on. A requested shutdown runs once after the batch, whatever the
outcome.
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from mkvbatch.executor.ffmpeg import FfmpegEncoder
from mkvbatch.executor.hooks import HookRunner
from mkvbatch.executor.interface import require_tool
from mkvbatch.executor.mkvtoolnix import MkvextractExecutor, MkvmergeExecutor
from mkvbatch.executor.shutdown import request_shutdown
from mkvbatch.introspector.interface import MediaIntrospector
from mkvbatch.introspector.mediainfo import MediaInfoIntrospector
from mkvbatch.policy.types import OnErrorMode, Profile
from mkvbatch.workflow.matcher import FileMatcher, MatchedFile
from mkvbatch.workflow.media_file import FileResult, MediaFile

logger = logging.getLogger(__name__)


class BatchContext:
    """Shared state for one batch run.

    Hands out sequential media file ids; safe to call from several threads.
    """

    def __init__(self, temp_root: Path, start: int = 1) -> None:
        self.temp_root = temp_root
        self._ids = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        """Get the next unique media file id."""
        with self._lock:
            return next(self._ids)


@dataclass
class BatchSummary:
    """Outcome of a batch run."""

    results: list[FileResult] = field(default_factory=list)
    total: int = 0  # Number of matched files
    halted: bool = False  # True when a failure stopped the batch early
    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def skipped(self) -> int:
        """Matched files never attempted because the batch halted."""
        return self.total - len(self.results)

    @property
    def success(self) -> bool:
        return self.failed == 0 and self.skipped == 0


# Called after each file with (position, total, result)
ProgressCallback = Callable[[int, int, FileResult], None]


class BatchProcessor:
    """Process every matched file of a profile."""

    def __init__(
        self,
        profile: Profile,
        temp_root: Path,
        introspector: MediaIntrospector | None = None,
        mkvextract: MkvextractExecutor | None = None,
        mkvmerge: MkvmergeExecutor | None = None,
        encoder: FfmpegEncoder | None = None,
        on_error: OnErrorMode | None = None,
        progress_callback: ProgressCallback | None = None,
        shutdown: Callable[[], object] = request_shutdown,
    ) -> None:
        """Initialize the processor.

        Args:
            profile: Validated profile.
            temp_root: Root directory for per-file temp directories.
            introspector: Metadata extractor (defaults to mediainfo).
            mkvextract: mkvextract adapter.
            mkvmerge: mkvmerge adapter.
            encoder: ffmpeg adapter.
            on_error: Override for the profile's ``misc.on_error``.
            progress_callback: Optional per-file progress callback.
            shutdown: Callable requesting system shutdown.
        """
        self.profile = profile
        self.context = BatchContext(temp_root)
        self._introspector = introspector
        self._mkvextract = mkvextract or MkvextractExecutor()
        self._mkvmerge = mkvmerge or MkvmergeExecutor()
        self._encoder = encoder or FfmpegEncoder()
        self._on_error = on_error or profile.processing_params.misc.on_error
        self._progress_callback = progress_callback
        self._shutdown = shutdown
        self._hooks = HookRunner(profile.processing_params.misc.run)

    def required_tools(self) -> list[str]:
        """Names of the external tools this profile needs."""
        tools = ["mediainfo", "mkvextract", "mkvmerge"]
        conversion = self.profile.processing_params.audio_tracks.conversion
        if conversion is not None and conversion.codec is not None:
            tools.append("ffmpeg")
        return tools

    def check_tools(self) -> None:
        """Verify that every required tool is available.

        Raises:
            ToolNotFoundError: If a tool is missing.
        """
        for tool_name in self.required_tools():
            require_tool(tool_name)

    def match(self) -> list[MatchedFile]:
        """Pair inputs with output names (see FileMatcher.match)."""
        return FileMatcher(self.profile).match()

    def _get_introspector(self) -> MediaIntrospector:
        if self._introspector is None:
            self._introspector = MediaInfoIntrospector()
        return self._introspector

    def process_file(self, matched: MatchedFile) -> FileResult:
        """Run the pipeline for one matched file."""
        media = MediaFile(
            file_id=self.context.next_id(),
            input_path=matched.input_path,
            temp_root=self.context.temp_root,
            introspector=self._get_introspector(),
            mkvextract=self._mkvextract,
            mkvmerge=self._mkvmerge,
            encoder=self._encoder,
        )
        return media.process(
            matched.output_path,
            matched.title,
            self.profile.processing_params,
            hooks=self._hooks,
        )

    def run(self, matched: list[MatchedFile] | None = None) -> BatchSummary:
        """Process the batch.

        Args:
            matched: Pre-computed matches; computed from the profile if None.

        Returns:
            BatchSummary of the run.

        Raises:
            MatchError: If inputs and output names cannot be paired.
        """
        if matched is None:
            matched = self.match()

        summary = BatchSummary(total=len(matched))
        start_time = time.monotonic()
        try:
            for position, item in enumerate(matched, 1):
                result = self.process_file(item)
                summary.results.append(result)
                if self._progress_callback is not None:
                    self._progress_callback(position, len(matched), result)

                if (
                    not result.success
                    and result.halts_batch
                    and self._on_error == OnErrorMode.FAIL
                ):
                    summary.halted = True
                    logger.error(
                        "Stopping batch after failure of %s", item.input_path.name
                    )
                    break
        finally:
            summary.duration_seconds = round(time.monotonic() - start_time, 3)
            logger.info(
                "Batch finished: %d succeeded, %d failed, %d skipped",
                summary.succeeded,
                summary.failed,
                summary.skipped,
            )
            if self.profile.processing_params.misc.shutdown_upon_completion:
                self._shutdown()

        return summary
