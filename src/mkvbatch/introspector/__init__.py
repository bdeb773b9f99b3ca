"""Media introspection package.

Extracts track and attachment metadata from Matroska files.
"""

from mkvbatch.introspector.interface import (
    IntrospectionResult,
    MediaIntrospectionError,
    MediaIntrospector,
)
from mkvbatch.introspector.mediainfo import MediaInfoIntrospector

__all__ = [
    "IntrospectionResult",
    "MediaInfoIntrospector",
    "MediaIntrospectionError",
    "MediaIntrospector",
]
