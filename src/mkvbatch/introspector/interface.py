"""MediaIntrospector interface for Matroska metadata extraction."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from mkvbatch.domain.exceptions import MediaFileError
from mkvbatch.domain.models import Track


class MediaIntrospectionError(MediaFileError):
    """Raised when media introspection fails."""

    stage = "introspect"


@dataclass
class IntrospectionResult:
    """Result of media file introspection."""

    file_path: Path
    tracks: list[Track]
    attachment_names: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class MediaIntrospector(Protocol):
    """Protocol for media introspection implementations.

    Implementations run an external metadata tool and return the tracks of
    the file in metadata order, starting with the general pseudo-track.
    """

    def get_file_info(self, path: Path, file_id: int = 0) -> IntrospectionResult:
        """Extract metadata from a media file.

        Args:
            path: Path to the media file.
            file_id: Owning media file id, stamped onto every track.

        Returns:
            IntrospectionResult containing tracks and attachment names.

        Raises:
            MediaIntrospectionError: If the file cannot be introspected.
        """
        ...
