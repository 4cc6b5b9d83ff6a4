"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, webpic.toml only contains overrides.
An empty file (or no file at all) reproduces the stock command-line defaults.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field, field_validator

# --- webpic.toml sections ---


class RenditionConfig(BaseModel):
    """[rendition] section — what gets generated for every source file.

    Passed explicitly to the matrix builder (``widths``, ``density``), the
    encoder (``quality``) and the markup generator (``prefix``,
    ``breakpoints``).
    """

    model_config = {"frozen": True}

    prefix: str = "/"
    density: int = Field(default=3, ge=1)
    quality: int = Field(default=25, ge=1, le=100)
    widths: tuple[int, ...] = (288,)
    breakpoints: dict[int, int] = Field(default_factory=dict)

    @field_validator("widths")
    @classmethod
    def _check_widths(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if not value:
            msg = "at least one width is required"
            raise ValueError(msg)
        bad = [w for w in value if w <= 0]
        if bad:
            msg = f"widths must be positive, got {', '.join(map(str, bad))}"
            raise ValueError(msg)
        seen: set[int] = set()
        dupes = [w for w in value if w in seen or seen.add(w)]
        if dupes:
            msg = f"duplicate widths: {', '.join(map(str, dupes))}"
            raise ValueError(msg)
        return value

    @field_validator("breakpoints")
    @classmethod
    def _check_breakpoints(cls, value: dict[int, int]) -> dict[int, int]:
        for width, px in value.items():
            if px <= 0:
                msg = f"breakpoint for width {width} must be positive, got {px}"
                raise ValueError(msg)
        return value


def _default_workers() -> int:
    return os.cpu_count() or 1


class BatchConfig(BaseModel):
    """[batch] section."""

    model_config = {"frozen": True}

    workers: int = Field(default_factory=_default_workers, ge=1)
