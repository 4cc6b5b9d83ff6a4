"""PipelineService — derivative generation for a single source file.

Stages run strictly in order::

    resolving -> decoding -> transforming -> resizing -> encoding -> rendering -> done

Any failure moves the run to ``failed`` and returns immediately; nothing is
retried.  Markup is only rendered once every artifact has been written, so a
failed file never yields a fragment.  Artifacts written before a late failure
stay on disk unreferenced.
"""

from __future__ import annotations

import logging
import time
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import UnidentifiedImageError
from structlog.contextvars import bound_contextvars

from webpic.domain.artifacts import (
    ArtifactGroup,
    ArtifactIndex,
    OutputArtifact,
    artifact_name,
    artifact_url,
    output_dir_for,
)
from webpic.domain.markup import render_picture
from webpic.domain.orientation import DEFAULT_ORIENTATION
from webpic.domain.types import SourceFamily, family_for
from webpic.domain.variants import VariantSpec, variant_matrix
from webpic.errors import WebpicError
from webpic.infrastructure import imaging, metadata
from webpic.infrastructure.filesystem import ensure_dir, write_bytes_atomic
from webpic.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from PIL import Image

    from webpic.config.models import RenditionConfig

logger = logging.getLogger(__name__)


class Stage(StrEnum):
    RESOLVING = "resolving"
    DECODING = "decoding"
    TRANSFORMING = "transforming"
    RESIZING = "resizing"
    ENCODING = "encoding"
    RENDERING = "rendering"
    DONE = "done"
    FAILED = "failed"


class PipelineService:
    """Turns one source image into derivatives plus a ``<picture>`` fragment.

    Holds only the read-only rendition config, so one instance is safely
    shared by every batch worker.
    """

    def __init__(self, rendition: RenditionConfig) -> None:
        self._config = rendition

    def generate(self, source: Path) -> ServiceResult:
        """Run every stage for *source*.

        Returns a ``generate`` result.  On success ``data`` carries
        ``source``, ``output_dir``, ``family``, ``orientation``,
        ``artifacts`` and ``markup``.  On failure ``error.detail`` names the
        ``stage`` that failed.
        """
        stage = Stage.RESOLVING
        started = time.perf_counter()
        with bound_contextvars(source=str(source)):
            logger.info("Generating output for file %s", source)
            try:
                family = family_for(source)
                data = source.read_bytes()
                orientation = self._resolve_orientation(data, family)

                stage = Stage.DECODING
                img = imaging.decode(data, family)

                stage = Stage.TRANSFORMING
                upright = imaging.orient(img, orientation)
                del img

                stage = Stage.RESIZING
                matrix = self._build_matrix(upright)
                del upright

                stage = Stage.ENCODING
                index = self._encode_all(source, family, matrix)

                stage = Stage.RENDERING
                markup = render_picture(index, self._config.breakpoints)
            except WebpicError as exc:
                return self._failure(source, stage, exc.code, str(exc))
            except UnidentifiedImageError as exc:
                return self._failure(source, stage, "DECODE_ERROR", str(exc))
            except OSError as exc:
                code = "DECODE_ERROR" if stage is Stage.DECODING else "IO_ERROR"
                return self._failure(source, stage, code, str(exc))

            stage = Stage.DONE
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.debug("Generated %d artifacts in %.1f ms", len(index.artifacts()), elapsed_ms)
            return ServiceResult(
                ok=True,
                op="generate",
                data={
                    "source": str(source),
                    "output_dir": str(output_dir_for(source)),
                    "family": family.value,
                    "orientation": orientation,
                    "artifacts": [a.to_dict() for a in index.artifacts()],
                    "markup": markup,
                },
                meta={"stage": stage.value, "duration_ms": elapsed_ms},
            )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_orientation(data: bytes, family: SourceFamily) -> int:
        """Stored orientation, or the default when the file carries none.

        Flat-color sources have no orientation standard and are never read.
        """
        if family is SourceFamily.FLAT:
            return DEFAULT_ORIENTATION
        exif = metadata.extract_exif(data)
        if exif is None:
            return DEFAULT_ORIENTATION
        orientation = metadata.read_orientation(exif)
        return DEFAULT_ORIENTATION if orientation is None else orientation

    def _build_matrix(
        self, upright: Image.Image
    ) -> list[tuple[int, list[tuple[VariantSpec, Image.Image]]]]:
        """Resize *upright* once per (width, density), in request order."""
        matrix = []
        for width, specs in variant_matrix(self._config.widths, self._config.density):
            row = [(spec, imaging.resize_to_width(upright, spec.pixel_width)) for spec in specs]
            matrix.append((width, row))
        return matrix

    def _encode_all(
        self,
        source: Path,
        family: SourceFamily,
        matrix: list[tuple[int, list[tuple[VariantSpec, Image.Image]]]],
    ) -> ArtifactIndex:
        """Encode and write every variant, indexing groups in codec order."""
        out_dir = ensure_dir(output_dir_for(source))
        index = ArtifactIndex()
        for width, row in matrix:
            for codec in family.codecs:
                artifacts = []
                for spec, img in row:
                    path = out_dir / artifact_name(spec, codec)
                    write_bytes_atomic(path, imaging.encode(img, codec, self._config.quality))
                    artifacts.append(
                        OutputArtifact(
                            codec=codec,
                            width=spec.width,
                            density=spec.density,
                            path=path,
                            url=artifact_url(self._config.prefix, source, spec, codec),
                        )
                    )
                index.append(ArtifactGroup(codec=codec, width=width, artifacts=tuple(artifacts)))
        return index

    @staticmethod
    def _failure(source: Path, stage: Stage, code: str, message: str) -> ServiceResult:
        logger.info("Failed while %s: %s", stage.value, message)
        return ServiceResult(
            ok=False,
            op="generate",
            data={"source": str(source)},
            error=ServiceError(
                code=code,
                message=message,
                detail={"source": str(source), "stage": stage.value},
            ),
            meta={"stage": Stage.FAILED.value},
        )
