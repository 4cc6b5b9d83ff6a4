"""``<picture>`` rendering from an artifact index.

Pure data-in/string-out.  Each line inside ``<picture>`` is indented with a
single tab character (drawn as two spaces here)::

    <picture>
      <source media="(min-width: 576px)" type="image/webp" srcset="a.webp, a2.webp 2x">
      <source media="(min-width: 576px)" type="image/jpeg" srcset="a.jpg, a2.jpg 2x">
      <source type="image/webp" srcset="b.webp, b2.webp 2x">
      <img src="b.jpg" srcset="b2.jpg 2x" alt="" width="288">
    </picture>

INVARIANT: ``len(index) - 1`` sources and exactly one ``<img>``, built from
the last group.  Only sources before the trailing same-width run carry a
``media`` breakpoint; that run is the default the browser falls through to.
"""

from __future__ import annotations

from collections.abc import Mapping
from html import escape

from webpic.domain.artifacts import ArtifactGroup, ArtifactIndex, OutputArtifact


def last_width_index(index: ArtifactIndex) -> int:
    """Earliest position of the trailing run of groups sharing the last width."""
    last = len(index) - 1
    width = index[last].width
    start = last
    while start > 0 and index[start - 1].width == width:
        start -= 1
    return start


def _candidate(artifact: OutputArtifact) -> str:
    url = escape(artifact.url, quote=True)
    if artifact.density == 1:
        return url
    return f"{url} {artifact.density}x"


def _source(group: ArtifactGroup, media_px: int | None) -> str:
    media = f' media="(min-width: {media_px}px)"' if media_px is not None else ""
    srcset = ", ".join(_candidate(a) for a in group.artifacts)
    return f'<source{media} type="{group.codec.mime_type}" srcset="{srcset}">'


def _img(group: ArtifactGroup) -> str:
    attrs = [f'src="{escape(group.base.url, quote=True)}"']
    if len(group.artifacts) > 1:
        attrs.append(f'srcset="{", ".join(_candidate(a) for a in group.artifacts[1:])}"')
    attrs.append('alt=""')
    attrs.append(f'width="{group.width}"')
    return f"<img {' '.join(attrs)}>"


def render_picture(index: ArtifactIndex, breakpoints: Mapping[int, int] | None = None) -> str:
    """Render the ``<picture>`` fragment for one source file.

    Args:
        index: Complete, non-empty index for the file.
        breakpoints: Optional width -> ``min-width`` pixel value.  Widths
            without an entry use their own requested width.

    Raises:
        ValueError: *index* is empty.
    """
    if not len(index):
        msg = "cannot render markup for an empty artifact index"
        raise ValueError(msg)

    breakpoints = breakpoints or {}
    last = len(index) - 1
    cutoff = last_width_index(index)

    lines = ["<picture>"]
    for i, group in enumerate(index):
        if i == last:
            lines.append(f"\t{_img(group)}")
            continue
        media_px = breakpoints.get(group.width, group.width) if i < cutoff else None
        lines.append(f"\t{_source(group, media_px)}")
    lines.append("</picture>")
    return "\n".join(lines) + "\n"
