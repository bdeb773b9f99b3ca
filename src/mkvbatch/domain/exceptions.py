"""Base exception types shared across mkvbatch packages."""


class MediaFileError(Exception):
    """Base class for hard failures while processing a single media file.

    Raising a subclass aborts the remaining stages for that file. The media
    file pipeline catches these and reports them as a failed FileResult.
    Unless ``halts_batch`` is False, the failure also stops a batch running
    with ``on_error: fail``.
    """

    stage: str = "process"
    halts_batch: bool = True
