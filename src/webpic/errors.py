"""Exception hierarchy for per-file pipeline failures.

Each class carries the ``code`` the orchestrator reports in its
:class:`~webpic.services.result.ServiceError`.  I/O failures are plain
``OSError`` and decode failures are Pillow's own exceptions; both are mapped
at the orchestrator boundary rather than wrapped here.
"""

from __future__ import annotations


class WebpicError(Exception):
    """Base class for errors that abort processing of a single file."""

    code = "WEBPIC_ERROR"


class MetadataError(WebpicError):
    """Orientation metadata exists but is unreadable or ambiguous."""

    code = "METADATA_ERROR"


class UnsupportedFormatError(WebpicError):
    """The source's codec family has no encoder path."""

    code = "UNSUPPORTED_FORMAT"


class UnsupportedOrientationError(WebpicError):
    """Orientation code outside the EXIF range 1-8."""

    code = "UNSUPPORTED_ORIENTATION"

    def __init__(self, orientation: int) -> None:
        super().__init__(f"cannot work with orientation {orientation} for image")
        self.orientation = orientation
