"""Operation-specific renderers for ServiceResult.

``generate`` successes are rendered as plain text (a header line plus the
fragment) so the markup is byte-exact and never wrapped.  Errors and the
batch summary go through a Rich console for styling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from webpic.output.console import create_console, get_output

if TYPE_CHECKING:
    from webpic.services.result import ServiceResult

HEADER = "HTML for file: {source}"


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult for a human reader."""
    if not result.ok:
        return _render_error(result, verbose=verbose)
    if result.op == "generate":
        return _render_generate(result)
    if result.op == "generate_batch":
        return _render_batch(result)
    return f"OK: {result.op}"


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: bare markup, a one-line error, or nothing."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.data.get('source', result.op)}: {msg}"
    if result.op == "generate":
        return str(result.data["markup"]).rstrip("\n")
    return ""


def _render_generate(result: ServiceResult) -> str:
    header = HEADER.format(source=result.data["source"])
    return f"{header}\n{str(result.data['markup']).rstrip()}"


def _render_error(result: ServiceResult, *, verbose: bool) -> str:
    console = create_console()
    error = result.error
    detail = error.detail if error else {}
    line = Text()
    line.append("ERROR ", style="webpic.error")
    line.append(result.op, style="webpic.op")
    source = detail.get("source") or result.data.get("source")
    if source:
        line.append(f" {source}", style="webpic.path")
    if "stage" in detail:
        line.append(f" [{detail['stage']}]", style="webpic.stage")
    line.append(f": {error.message if error else 'Unknown error'}")
    console.print(line, soft_wrap=True)
    if verbose and error:
        console.print(f"  code: {error.code}", soft_wrap=True, markup=False)
    return get_output(console).rstrip("\n")


def _render_batch(result: ServiceResult) -> str:
    console = create_console()
    failed = result.data.get("failed", [])
    line = Text()
    line.append("OK ", style="webpic.ok")
    line.append(f"{result.data.get('processed', 0)}", style="webpic.count")
    line.append(" files processed, ")
    line.append(f"{result.data.get('succeeded', 0)}", style="webpic.count")
    line.append(" succeeded")
    if failed:
        line.append(", ")
        line.append(f"{len(failed)}", style="webpic.error")
        line.append(" failed")
    console.print(line, soft_wrap=True)
    return get_output(console).rstrip("\n")
