"""BatchService — fan one pipeline run per input file across a worker pool.

Files share nothing but the read-only config and the output sink.  The sink
is guarded by a single lock around exactly the "emit this file's result"
step, so fragments from different files never interleave.

INVARIANT: One file's failure never affects another file or the batch.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from webpic.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

    from webpic.services.pipeline import PipelineService

logger = logging.getLogger(__name__)

Emitter = Callable[[ServiceResult], None]


class BatchService:
    """Bounded fan-out/fan-in over :class:`PipelineService`.

    Parameters:
        pipeline: Shared per-file pipeline.
        workers: Maximum files processed concurrently.  Decoded images can be
            large, so this bounds peak memory as well as CPU.
    """

    def __init__(self, pipeline: PipelineService, *, workers: int) -> None:
        if workers < 1:
            msg = f"workers must be at least 1, got {workers}"
            raise ValueError(msg)
        self._pipeline = pipeline
        self._workers = workers
        self._sink_lock = threading.Lock()

    def run(self, sources: Sequence[Path], emit: Emitter) -> ServiceResult:
        """Process every source, emitting each result as its file finishes.

        Blocks until the last worker is done.  Returns a ``generate_batch``
        summary; per-file failures appear as warnings, not as a failed batch.
        """
        if not sources:
            return ServiceResult(
                ok=True,
                op="generate_batch",
                data={"processed": 0, "succeeded": 0, "failed": []},
            )

        def work(source: Path) -> ServiceResult:
            result = self._generate_isolated(source)
            with self._sink_lock:
                emit(result)
            return result

        pool_size = min(self._workers, len(sources))
        logger.debug("Processing %d files with %d workers", len(sources), pool_size)
        with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="webpic") as pool:
            results = list(pool.map(work, sources))

        failed = [r.data.get("source", "") for r in results if not r.ok]
        return ServiceResult(
            ok=True,
            op="generate_batch",
            data={
                "processed": len(results),
                "succeeded": len(results) - len(failed),
                "failed": failed,
            },
            warnings=[f"Could not generate output for {src}" for src in failed],
        )

    def _generate_isolated(self, source: Path) -> ServiceResult:
        """Run the pipeline, turning anything unexpected into a failed result."""
        try:
            return self._pipeline.generate(source)
        except Exception as exc:
            logger.exception("Unexpected error processing %s", source)
            return ServiceResult(
                ok=False,
                op="generate",
                data={"source": str(source)},
                error=ServiceError(
                    code="INTERNAL_ERROR",
                    message=f"{type(exc).__name__}: {exc}",
                    detail={"source": str(source)},
                ),
            )
