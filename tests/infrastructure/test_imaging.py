"""Tests for Pillow-backed decode/orient/resize/encode."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image, UnidentifiedImageError

from tests.conftest import marked_image, write_jpeg, write_png
from webpic.domain.types import Codec, SourceFamily
from webpic.infrastructure import imaging

RED = (255, 0, 0)


class TestOrient:
    # Where the top-left marker of a 3x2 image ends up after each transform.
    @pytest.mark.parametrize(
        ("code", "size", "marker"),
        [
            (1, (3, 2), (0, 0)),
            (2, (3, 2), (2, 0)),
            (3, (3, 2), (2, 1)),
            (4, (3, 2), (0, 1)),
            (5, (2, 3), (0, 0)),
            (6, (2, 3), (1, 0)),
            (7, (2, 3), (1, 2)),
            (8, (2, 3), (0, 2)),
        ],
    )
    def test_marker_position(
        self, code: int, size: tuple[int, int], marker: tuple[int, int]
    ) -> None:
        upright = imaging.orient(marked_image((3, 2)), code)
        assert upright.size == size
        assert upright.getpixel(marker) == RED

    @pytest.mark.parametrize("code", range(1, 9))
    def test_bounding_box(self, code: int) -> None:
        upright = imaging.orient(Image.new("RGB", (40, 20)), code)
        assert upright.size == ((20, 40) if code >= 5 else (40, 20))

    def test_matches_pillow_exif_transpose(self) -> None:
        from PIL import ImageOps

        for code in range(1, 9):
            img = marked_image((5, 3))
            exif = img.getexif()
            exif[0x0112] = code
            buf = BytesIO()
            img.save(buf, "PNG", exif=exif)
            expected = ImageOps.exif_transpose(Image.open(BytesIO(buf.getvalue())))
            assert imaging.orient(img, code).tobytes() == expected.convert("RGB").tobytes()


class TestDecode:
    def test_photographic_is_rgb(self, tmp_path: Path) -> None:
        data = write_jpeg(tmp_path / "a.jpg").read_bytes()
        img = imaging.decode(data, SourceFamily.PHOTOGRAPHIC)
        assert img.mode == "RGB"
        assert img.size == (40, 20)

    def test_flat_keeps_alpha(self, tmp_path: Path) -> None:
        data = write_png(tmp_path / "a.png").read_bytes()
        assert imaging.decode(data, SourceFamily.FLAT).mode == "RGBA"

    def test_palette_png_promoted(self, tmp_path: Path) -> None:
        path = tmp_path / "p.png"
        Image.new("RGB", (8, 8), "blue").convert("P").save(path)
        assert imaging.decode(path.read_bytes(), SourceFamily.FLAT).mode == "RGBA"

    def test_garbage_rejected(self) -> None:
        with pytest.raises(UnidentifiedImageError):
            imaging.decode(b"not an image", SourceFamily.PHOTOGRAPHIC)


class TestResize:
    def test_aspect_ratio(self) -> None:
        out = imaging.resize_to_width(Image.new("RGB", (400, 300)), 288)
        assert out.size == (288, 216)

    def test_upscale(self) -> None:
        out = imaging.resize_to_width(Image.new("RGB", (40, 20)), 100)
        assert out.size == (100, 50)


class TestEncode:
    @pytest.mark.parametrize(
        ("codec", "fmt"),
        [(Codec.JPEG, "JPEG"), (Codec.WEBP, "WEBP"), (Codec.PNG, "PNG")],
    )
    def test_format(self, codec: Codec, fmt: str) -> None:
        data = imaging.encode(marked_image(), codec, 80)
        with Image.open(BytesIO(data)) as img:
            assert img.format == fmt
            assert img.size == (40, 20)

    def test_deterministic(self) -> None:
        src = imaging.resize_to_width(marked_image((400, 300)), 288)
        for codec in Codec:
            assert imaging.encode(src, codec, 80) == imaging.encode(src, codec, 80)

    def test_quality_affects_lossy(self) -> None:
        src = Image.effect_noise((64, 64), 50).convert("RGB")
        assert len(imaging.encode(src, Codec.JPEG, 10)) < len(imaging.encode(src, Codec.JPEG, 95))

    def test_jpeg_drops_alpha(self) -> None:
        data = imaging.encode(marked_image(mode="RGBA"), Codec.JPEG, 80)
        with Image.open(BytesIO(data)) as img:
            assert img.mode == "RGB"

    def test_png_lossless(self) -> None:
        src = marked_image(mode="RGBA")
        with Image.open(BytesIO(imaging.encode(src, Codec.PNG, 1))) as img:
            assert img.tobytes() == src.tobytes()
