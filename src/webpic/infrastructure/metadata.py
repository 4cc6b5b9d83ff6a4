"""EXIF orientation extraction.

Pillow locates the EXIF block (JPEG APP1 or the HEIF item), piexif parses
the IFDs.  Tag 0x0112 may be stored as a bare SHORT or as a one-element
sequence depending on the writer; :func:`parse_orientation_value` is the
single place both shapes collapse into one integer.

Every IFD that can carry 0x0112 is checked, the thumbnail IFD included.  A
file whose IFDs disagree aborts with :class:`~webpic.errors.MetadataError`
instead of guessing which rotation is current.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Any

import piexif
from PIL import Image

from webpic.errors import MetadataError

logger = logging.getLogger(__name__)

ORIENTATION_TAG = piexif.ImageIFD.Orientation

# IFDs where 0x0112 means Orientation (GPS and Interop number their own tags).
_ORIENTATION_IFDS = ("0th", "Exif", "1st")


def extract_exif(data: bytes) -> bytes | None:
    """Return the raw EXIF block embedded in *data*, or None if there is none."""
    with Image.open(BytesIO(data)) as img:
        exif = img.info.get("exif")
    return exif or None


def parse_orientation_value(value: Any) -> int:
    """Normalize a decoded orientation tag value to a single integer.

    Raises:
        MetadataError: *value* is neither an integer nor a one-element
            sequence of integers.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, (tuple, list)):
        if len(value) != 1:
            msg = f"orientation captures {len(value)} values"
            raise MetadataError(msg)
        return parse_orientation_value(value[0])
    msg = f"orientation value is not of right type: {type(value).__name__}"
    raise MetadataError(msg)


def read_orientation(exif: bytes) -> int | None:
    """Parse *exif* and return its orientation code, or None when absent.

    The code is returned as stored; range checking is the transformer's job.

    Raises:
        MetadataError: The block is malformed, or IFDs disagree on orientation.
    """
    try:
        exif_dict = piexif.load(exif)
    except Exception as exc:
        msg = f"malformed EXIF data: {exc}"
        raise MetadataError(msg) from exc

    found: dict[str, int] = {}
    for ifd in _ORIENTATION_IFDS:
        tags = exif_dict.get(ifd) or {}
        if ORIENTATION_TAG in tags:
            found[ifd] = parse_orientation_value(tags[ORIENTATION_TAG])

    values = set(found.values())
    if len(values) > 1:
        msg = f"conflicting orientation values: {found}"
        raise MetadataError(msg)
    if not values:
        return None
    logger.debug("Orientation tag found in %s", ", ".join(found))
    return values.pop()
