"""Filesystem writes for generated artifacts.

Each file is written to a temporary sibling and moved into place, so a
failure mid-write never leaves a truncated image under its final name.
"""

from __future__ import annotations

import os
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_bytes_atomic(target: Path, data: bytes) -> None:
    """Write *data* to *target* via a temp file + ``os.replace``.

    Raises:
        OSError: The directory is missing or the write/rename failed.
    """
    tmp = target.with_name(target.name + ".tmp")
    try:
        with open(tmp, "wb") as f:
            f.write(data)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
