"""EXIF orientation codes and the rotate/flip steps that undo them.

Rotations are counter-clockwise, the convention shared by the EXIF table and
Pillow's ``Image.Transpose.ROTATE_*``.  Codes 5-8 involve a quarter turn and
therefore swap the image's width and height.
"""

from __future__ import annotations

from enum import StrEnum

from webpic.errors import UnsupportedOrientationError

DEFAULT_ORIENTATION = 1


class Step(StrEnum):
    FLIP_HORIZONTAL = "flip_horizontal"
    ROTATE_90 = "rotate_90"
    ROTATE_180 = "rotate_180"
    ROTATE_270 = "rotate_270"


ORIENTATION_STEPS: dict[int, tuple[Step, ...]] = {
    1: (),
    2: (Step.FLIP_HORIZONTAL,),
    3: (Step.ROTATE_180,),
    4: (Step.ROTATE_180, Step.FLIP_HORIZONTAL),
    5: (Step.ROTATE_270, Step.FLIP_HORIZONTAL),
    6: (Step.ROTATE_270,),
    7: (Step.ROTATE_90, Step.FLIP_HORIZONTAL),
    8: (Step.ROTATE_90,),
}


def steps_for(orientation: int) -> tuple[Step, ...]:
    """Return the ordered steps that make an image with *orientation* upright.

    Raises:
        UnsupportedOrientationError: *orientation* is not in 1-8.
    """
    try:
        return ORIENTATION_STEPS[orientation]
    except KeyError:
        raise UnsupportedOrientationError(orientation) from None


def swaps_dimensions(orientation: int) -> bool:
    """True when undoing *orientation* turns the image a quarter turn."""
    return any(s in (Step.ROTATE_90, Step.ROTATE_270) for s in steps_for(orientation))
