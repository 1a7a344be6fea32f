"""Path utilities for the Deep Zoom output layout."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from deepzoom.config import FILES_SUFFIX

from .errors import FileSystemError
from .types import TileCoord, ImageFormat


def tiles_dir_for(destination: Path) -> Path:
    """Tile directory for a descriptor path: ``out/image.dzi`` -> ``out/image_files``."""
    destination = Path(destination)
    return destination.with_name(destination.stem + FILES_SUFFIX)


def level_dir_for(tiles_dir: Path, level: int) -> Path:
    return tiles_dir / str(level)


def tile_path_for(tiles_dir: Path, coord: TileCoord, fmt: ImageFormat) -> Path:
    return level_dir_for(tiles_dir, coord.level) / coord.filename(fmt)


def ensure_dir(path: Path) -> Path:
    """Create ``path`` (and parents) if missing.

    Raises:
        FileSystemError: If the directory cannot be created
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileSystemError(f"Cannot create directory {path}: {e}") from e
    return path


def atomic_text_save(path: Path, text: str) -> None:
    """Atomically write text to a file.

    Writes to a temp file in the same directory, then replaces the target.
    ``os.replace()`` is atomic on both POSIX and Windows (same filesystem).

    Raises:
        FileSystemError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent, suffix=".tmp", prefix=path.stem
        )
    except OSError as e:
        raise FileSystemError(f"Cannot write {path}: {e}") from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except BaseException as e:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        if isinstance(e, OSError):
            raise FileSystemError(f"Cannot write {path}: {e}") from e
        raise
