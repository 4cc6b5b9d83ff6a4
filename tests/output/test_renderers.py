"""Tests for human and quiet rendering."""

from __future__ import annotations

from webpic.output.renderers import render_quiet, render_result
from webpic.services.result import ServiceError, ServiceResult

MARKUP = '<picture>\n\t<img src="/photo/288w1d.jpg" alt="" width="288">\n</picture>\n'


def _success() -> ServiceResult:
    return ServiceResult(ok=True, op="generate", data={"source": "photo.jpg", "markup": MARKUP})


def _failure() -> ServiceResult:
    return ServiceResult(
        ok=False,
        op="generate",
        data={"source": "odd.jpg"},
        error=ServiceError(
            code="UNSUPPORTED_ORIENTATION",
            message="cannot work with orientation 9 for image",
            detail={"source": "odd.jpg", "stage": "transforming"},
        ),
    )


class TestRenderResult:
    def test_generate_header_and_markup(self) -> None:
        assert render_result(_success()) == "HTML for file: photo.jpg\n" + MARKUP.rstrip()

    def test_markup_not_wrapped(self) -> None:
        long_url = "/" + "x" * 300 + ".jpg"
        markup = f'<picture>\n\t<img src="{long_url}" alt="" width="288">\n</picture>\n'
        result = ServiceResult(ok=True, op="generate", data={"source": "a.jpg", "markup": markup})
        assert markup.rstrip() in render_result(result)

    def test_error_line(self) -> None:
        out = render_result(_failure())
        assert out == (
            "ERROR generate odd.jpg [transforming]: cannot work with orientation 9 for image"
        )

    def test_error_verbose_shows_code(self) -> None:
        out = render_result(_failure(), verbose=True)
        assert "code: UNSUPPORTED_ORIENTATION" in out

    def test_batch_summary(self) -> None:
        result = ServiceResult(
            ok=True,
            op="generate_batch",
            data={"processed": 3, "succeeded": 2, "failed": ["odd.jpg"]},
        )
        assert render_result(result) == "OK 3 files processed, 2 succeeded, 1 failed"

    def test_batch_summary_all_good(self) -> None:
        result = ServiceResult(
            ok=True,
            op="generate_batch",
            data={"processed": 2, "succeeded": 2, "failed": []},
        )
        assert render_result(result) == "OK 2 files processed, 2 succeeded"


class TestRenderQuiet:
    def test_markup_only(self) -> None:
        assert render_quiet(_success()) == MARKUP.rstrip("\n")

    def test_error_one_line(self) -> None:
        assert render_quiet(_failure()) == (
            "ERROR: odd.jpg: cannot work with orientation 9 for image"
        )

    def test_batch_silent(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="generate_batch")) == ""
