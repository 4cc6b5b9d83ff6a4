"""Pillow-backed pixel codecs: decode, orient, resize, encode.

HEIC/HEIF decoding comes from pillow-heif, registered as a Pillow opener by
the package on import.  Everything here operates on in-memory buffers;
writing bytes to disk is :mod:`webpic.infrastructure.filesystem`'s job.
"""

from __future__ import annotations

from io import BytesIO

from PIL import Image

from webpic.domain.orientation import Step, steps_for
from webpic.domain.types import Codec, SourceFamily
from webpic.domain.variants import scaled_height

RESAMPLE = Image.Resampling.LANCZOS

_TRANSPOSE: dict[Step, Image.Transpose] = {
    Step.FLIP_HORIZONTAL: Image.Transpose.FLIP_LEFT_RIGHT,
    Step.ROTATE_90: Image.Transpose.ROTATE_90,
    Step.ROTATE_180: Image.Transpose.ROTATE_180,
    Step.ROTATE_270: Image.Transpose.ROTATE_270,
}

# Modes the flat-color path keeps as-is; anything else (palette, 1-bit,
# 16-bit) goes to RGBA so Lanczos resampling applies.
_FLAT_MODES = frozenset({"L", "LA", "RGB", "RGBA"})


def decode(data: bytes, family: SourceFamily) -> Image.Image:
    """Decode *data* fully into memory in a mode suitable for *family*.

    Raises:
        PIL.UnidentifiedImageError: *data* is not a recognised image.
        OSError: The image is truncated or otherwise undecodable.
    """
    with Image.open(BytesIO(data)) as img:
        img.load()
        if family is SourceFamily.PHOTOGRAPHIC:
            return img.convert("RGB") if img.mode != "RGB" else img.copy()
        return img.convert("RGBA") if img.mode not in _FLAT_MODES else img.copy()


def orient(img: Image.Image, orientation: int) -> Image.Image:
    """Apply the rotate/flip steps for *orientation*, returning an upright image."""
    for step in steps_for(orientation):
        img = img.transpose(_TRANSPOSE[step])
    return img


def resize_to_width(img: Image.Image, width: int) -> Image.Image:
    """Lanczos-resize to *width*, height following the source aspect ratio."""
    height = scaled_height(img.width, img.height, width)
    return img.resize((width, height), RESAMPLE)


def encode(img: Image.Image, codec: Codec, quality: int) -> bytes:
    """Encode *img* as *codec*.  *quality* is ignored for lossless PNG."""
    buf = BytesIO()
    if codec is Codec.JPEG:
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        img.save(buf, format="JPEG", quality=quality)
    elif codec is Codec.WEBP:
        img.save(buf, format="WEBP", quality=quality)
    elif codec is Codec.PNG:
        img.save(buf, format="PNG")
    else:
        msg = f"no encoder for {codec!r}"
        raise ValueError(msg)
    return buf.getvalue()
