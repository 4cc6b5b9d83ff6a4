"""AppContext — one CLI invocation's settings, logging, and output routing.

Created by the root command once configuration has validated.  Owns the
service wiring and decides where each ServiceResult is written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from webpic.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from webpic.config.settings import WebpicSettings
    from webpic.services.result import ServiceResult


class AppContext:
    """Shared context for a single ``webpic`` run."""

    def __init__(self, settings: WebpicSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )

        from webpic.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def run(self, sources: Sequence[Path]) -> ServiceResult:
        """Generate derivatives for every source and emit each result."""
        from webpic.services.batch import BatchService
        from webpic.services.pipeline import PipelineService

        pipeline = PipelineService(self.settings.rendition)
        batch = BatchService(pipeline, workers=self.settings.batch.workers)
        summary = batch.run(sources, self.emit_file)
        self.emit_summary(summary)
        return summary

    def emit_file(self, result: ServiceResult) -> None:
        """Write one file's result.

        * Success: header + fragment to stdout; warnings to stderr.
        * Failure: error to stderr.  Never exits; other files carry on.

        In JSON mode every result goes to stdout as a JSON document.
        """
        output = format_result(result, settings=self.output)
        if self.output.json_output:
            click.echo(output)
            return
        if result.ok:
            if output:
                click.echo(output)
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)

    def emit_summary(self, summary: ServiceResult) -> None:
        """Write the batch summary: stdout in JSON mode, stderr otherwise."""
        if self.output.json_output:
            click.echo(format_result(summary, settings=self.output))
            return
        if self.output.quiet:
            return
        if self.output.verbose or summary.data.get("failed"):
            click.echo(format_result(summary, settings=self.output), err=True)
