"""Output mode selection.

The CLI renders a ServiceResult for humans (default), for scripts that only
want the markup (``--quiet``), or for machines (``--json``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from webpic.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from webpic.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON (one document per line) wins over quiet; quiet wins over verbose.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json()
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
