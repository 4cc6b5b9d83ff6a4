"""Root ``webpic`` command: validate options, then fan out over input files."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from webpic import __version__
from webpic.commands._base import WebpicCommand
from webpic.commands._context import AppContext
from webpic.config.settings import ConfigFileError, WebpicSettings
from webpic.domain.variants import parse_width_tokens

_EXAMPLES = """\
  webpic photo.jpg
  webpic --widths 576,288 --dpr 2 --qual 80 --pre /img photo.jpg banner.heic
  webpic --widths 100 --dpr 1 logo.png
  webpic --json --workers 2 *.jpg > picture.jsonl"""


def _describe(exc: ValidationError) -> str:
    """Flatten a pydantic error into ``field: reason`` clauses."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


@click.command(
    cls=WebpicCommand,
    examples=_EXAMPLES,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="webpic")
@click.option(
    "--pre",
    "prefix",
    default=None,
    help="The HTML prefix to the image path. [default: /]",
)
@click.option(
    "--dpr",
    "density",
    type=int,
    default=None,
    help="Highest device pixel ratio to generate images for. [default: 3]",
)
@click.option(
    "--qual",
    "quality",
    type=int,
    default=None,
    help="Quality of lossy encodes (worst 1 <-> 100 best). [default: 25]",
)
@click.option(
    "--widths",
    default=None,
    help="Comma-separated pixel widths to generate. [default: 288]",
)
@click.option("--workers", type=int, default=None, help="Files processed in parallel.")
@click.option("--json", "json_output", is_flag=True, help="One JSON result per line.")
@click.option("-q", "--quiet", is_flag=True, help="Print markup only.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logs.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.argument("files", nargs=-1, type=click.Path(path_type=Path))
@click.pass_context
def cli(
    ctx: click.Context,
    prefix: str | None,
    density: int | None,
    quality: int | None,
    widths: str | None,
    workers: int | None,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    files: tuple[Path, ...],
) -> None:
    """Generate responsive image derivatives and a <picture> element per file.

    For each INPUT_FILE ``name.ext`` a sibling directory ``name/`` receives
    ``{width}w{density}d.{ext}`` files; the matching markup goes to stdout.
    """
    if not files:
        click.echo(ctx.get_usage(), err=True)
        click.echo(f"Try '{ctx.command_path} --help' for help.", err=True)
        ctx.exit(1)

    width_list: list[int] | None = None
    if widths is not None:
        width_list, rejected = parse_width_tokens(widths)
        for token in rejected:
            click.echo(
                f"WARNING: invalid, non-integer width provided: {token!r}, ignoring", err=True
            )

    try:
        settings = WebpicSettings.from_cli(
            config_path=config_path,
            rendition={
                "prefix": prefix,
                "density": density,
                "quality": quality,
                "widths": width_list,
            },
            batch={"workers": workers},
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    except ValidationError as exc:
        raise click.UsageError(f"invalid configuration: {_describe(exc)}", ctx=ctx) from exc
    except ConfigFileError as exc:
        raise click.UsageError(str(exc), ctx=ctx) from exc

    AppContext(settings).run(files)
