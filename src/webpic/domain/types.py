"""Source families and output codecs.

INVARIANT: a family's codec tuple is ordered.  That order is the order groups
are appended to the artifact index, and the markup generator relies on it to
pick the fallback ``<img>`` (last codec of the last width).
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import PurePath

from webpic.errors import UnsupportedFormatError


class Codec(StrEnum):
    """Output codecs, valued by the name used in ``type="image/..."``."""

    WEBP = "webp"
    JPEG = "jpeg"
    PNG = "png"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"


_EXTENSIONS: dict[Codec, str] = {
    Codec.WEBP: "webp",
    Codec.JPEG: "jpg",
    Codec.PNG: "png",
}


class SourceFamily(StrEnum):
    """Photographic sources go lossy; flat-color sources stay lossless."""

    PHOTOGRAPHIC = "photographic"
    FLAT = "flat"

    @property
    def codecs(self) -> tuple[Codec, ...]:
        return FAMILY_CODECS[self]


FAMILY_CODECS: dict[SourceFamily, tuple[Codec, ...]] = {
    SourceFamily.PHOTOGRAPHIC: (Codec.WEBP, Codec.JPEG),
    SourceFamily.FLAT: (Codec.PNG,),
}

# Source extension (lowercase, no dot) -> family.
SOURCE_EXTENSIONS: dict[str, SourceFamily] = {
    "jpg": SourceFamily.PHOTOGRAPHIC,
    "jpeg": SourceFamily.PHOTOGRAPHIC,
    "heic": SourceFamily.PHOTOGRAPHIC,
    "heif": SourceFamily.PHOTOGRAPHIC,
    "png": SourceFamily.FLAT,
}


def family_for(path: PurePath) -> SourceFamily:
    """Classify a source file by its extension.

    Raises:
        UnsupportedFormatError: The extension has no encoder path.
    """
    ext = path.suffix.lower().lstrip(".")
    family = SOURCE_EXTENSIONS.get(ext)
    if family is None:
        msg = f"don't know how to handle {ext or 'extensionless'} files"
        raise UnsupportedFormatError(msg)
    return family
