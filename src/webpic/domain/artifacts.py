"""Output artifacts and the ordered index the markup generator consumes.

INVARIANT: group order is generation order — widths as requested, codecs in
the family's fixed order.  No sorting happens anywhere downstream.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from webpic.domain.types import Codec
from webpic.domain.variants import VariantSpec


@dataclass(frozen=True)
class OutputArtifact:
    """A written file. ``url`` is what markup references."""

    codec: Codec
    width: int
    density: int
    path: Path
    url: str

    def to_dict(self) -> dict[str, object]:
        return {
            "codec": self.codec.value,
            "width": self.width,
            "density": self.density,
            "path": str(self.path),
            "url": self.url,
        }


@dataclass(frozen=True)
class ArtifactGroup:
    """Same-width, same-codec artifacts across densities 1..N."""

    codec: Codec
    width: int
    artifacts: tuple[OutputArtifact, ...]

    def __post_init__(self) -> None:
        if not self.artifacts:
            msg = f"empty artifact group for {self.codec} at {self.width}w"
            raise ValueError(msg)
        for expected, artifact in enumerate(self.artifacts, start=1):
            if artifact.density != expected:
                msg = (
                    f"{self.codec} {self.width}w densities must run 1..N without gaps, "
                    f"found {[a.density for a in self.artifacts]}"
                )
                raise ValueError(msg)
            if artifact.codec != self.codec or artifact.width != self.width:
                msg = f"artifact {artifact.path} does not belong to {self.codec} {self.width}w"
                raise ValueError(msg)

    @property
    def base(self) -> OutputArtifact:
        """The density-1 artifact."""
        return self.artifacts[0]


@dataclass
class ArtifactIndex:
    """Ordered groups for one source file."""

    groups: list[ArtifactGroup] = field(default_factory=list)

    def append(self, group: ArtifactGroup) -> None:
        self.groups.append(group)

    def __len__(self) -> int:
        return len(self.groups)

    def __iter__(self) -> Iterator[ArtifactGroup]:
        return iter(self.groups)

    def __getitem__(self, i: int) -> ArtifactGroup:
        return self.groups[i]

    def artifacts(self) -> list[OutputArtifact]:
        return [a for g in self.groups for a in g.artifacts]


# --- naming ---


def output_dir_for(source: Path) -> Path:
    """Sibling directory named after the source file without its extension."""
    return source.with_suffix("")


def artifact_name(spec: VariantSpec, codec: Codec) -> str:
    return f"{spec.stem}.{codec.extension}"


def artifact_url(prefix: str, source: Path, spec: VariantSpec, codec: Codec) -> str:
    """URL path for an artifact: ``{prefix}/{stem}/{w}w{d}d.{ext}``.

    Exactly one slash separates *prefix* from the relative path; an empty
    prefix yields a relative URL.
    """
    rel = f"{source.stem}/{artifact_name(spec, codec)}"
    if not prefix:
        return rel
    return f"{prefix.rstrip('/')}/{rel}"
