"""Shared pytest fixtures and test helpers for webpic tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import piexif
import pytest
from click.testing import CliRunner
from PIL import Image

from webpic.config.models import RenditionConfig


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep config discovery away from the developer's real files and env."""
    for name in [n for n in os.environ if n.startswith("WEBPIC_")]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() calls made by the CLI under test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    webpic = logging.getLogger("webpic")
    webpic_level = webpic.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    webpic.setLevel(webpic_level)


@pytest.fixture
def rendition() -> RenditionConfig:
    """The photo.jpg scenario: two widths, 2x density, quality 80, /img prefix."""
    return RenditionConfig(prefix="/img", density=2, quality=80, widths=(288, 576))


# ---------------------------------------------------------------------------
# Test image helpers
# ---------------------------------------------------------------------------


def marked_image(size: tuple[int, int] = (40, 20), mode: str = "RGB") -> Image.Image:
    """White image with a red top-left pixel so transforms are observable."""
    img = Image.new(mode, size, "white")
    img.putpixel((0, 0), (255, 0, 0) if mode == "RGB" else (255, 0, 0, 255))
    return img


def write_jpeg(
    path: Path,
    *,
    size: tuple[int, int] = (40, 20),
    orientation: int | None = None,
) -> Path:
    """Write a JPEG, optionally tagged with an EXIF orientation."""
    img = marked_image(size)
    if orientation is None:
        img.save(path, "JPEG", quality=95)
    else:
        exif = piexif.dump({"0th": {piexif.ImageIFD.Orientation: orientation}})
        img.save(path, "JPEG", quality=95, exif=exif)
    return path


def write_png(path: Path, *, size: tuple[int, int] = (40, 20), mode: str = "RGBA") -> Path:
    marked_image(size, mode=mode).save(path, "PNG")
    return path


@pytest.fixture
def photo_jpg(tmp_path: Path) -> Path:
    return write_jpeg(tmp_path / "photo.jpg", size=(400, 300))


@pytest.fixture
def flat_png(tmp_path: Path) -> Path:
    return write_png(tmp_path / "flat.png", size=(200, 100))
