"""Variant geometry: width tokens, (width x density) specs, and target sizes.

INVARIANT: heights are never configured.  Every variant's height is derived
from the source aspect ratio with one rounding rule, so the same source and
target width always produce the same pixel dimensions.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class VariantSpec:
    """One cell of the variant matrix."""

    width: int
    density: int

    def __post_init__(self) -> None:
        if self.width <= 0:
            msg = f"width must be positive, got {self.width}"
            raise ValueError(msg)
        if self.density <= 0:
            msg = f"density must be positive, got {self.density}"
            raise ValueError(msg)

    @property
    def pixel_width(self) -> int:
        return self.width * self.density

    @property
    def stem(self) -> str:
        """File stem, unique per (width, density) for one source."""
        return f"{self.width}w{self.density}d"


def parse_width_tokens(raw: str) -> tuple[list[int], list[str]]:
    """Split a comma-separated width list.

    Returns ``(widths, rejected_tokens)``.  Tokens that don't parse as an
    integer are rejected rather than fatal; range and duplicate checks belong
    to configuration validation.
    """
    widths: list[int] = []
    rejected: list[str] = []
    for token in raw.split(","):
        token = token.strip()
        try:
            widths.append(int(token))
        except ValueError:
            rejected.append(token)
    return widths, rejected


def scaled_height(src_width: int, src_height: int, target_width: int) -> int:
    """Height for *target_width* preserving aspect ratio.

    Rounds half up and never returns less than one pixel.
    """
    if src_width <= 0 or src_height <= 0:
        msg = f"invalid source size {src_width}x{src_height}"
        raise ValueError(msg)
    return max(1, (2 * target_width * src_height + src_width) // (2 * src_width))


def variant_matrix(
    widths: Sequence[int], max_density: int
) -> Iterator[tuple[int, list[VariantSpec]]]:
    """Yield ``(width, specs)`` in request order, densities ascending from 1."""
    if max_density < 1:
        msg = f"density ceiling must be at least 1, got {max_density}"
        raise ValueError(msg)
    for width in widths:
        yield width, [VariantSpec(width, d) for d in range(1, max_density + 1)]
