"""Run boundary for a single pyramid build.

Turns any pipeline failure into an error result so the caller decides how
to report it and which exit status to use.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .creator import ImageCreator, ProgressCallback

logger = logging.getLogger(__name__)


def create_deep_zoom(
    source: Path,
    destination: Path,
    format: str,
    tile_size: int,
    overlap: int,
    quality: float,
    resize_filter: str,
    workers: int = 1,
    progress_callback: ProgressCallback | None = None,
) -> tuple[Path | None, str | None]:
    """Build a Deep Zoom pyramid for one image.

    Args:
        source: Path to the source JPEG/PNG
        destination: Path of the ``.dzi`` descriptor to write
        format: Source format (``jpg`` or ``png``)
        tile_size: Tile size in pixels
        overlap: Tile overlap in pixels
        quality: JPEG quality as a 0.0-1.0 fraction
        resize_filter: Resampling filter name
        workers: Tile encoding threads per level
        progress_callback: Optional callback(stage, current, total)

    Returns:
        Tuple of (descriptor_path, error_message)
        - descriptor_path: Path to the written .dzi, or None on error
        - error_message: Error string if failed, None otherwise
    """
    source = Path(source)
    logger.info("Processing %s", source.name)
    try:
        creator = ImageCreator.open(
            source,
            format,
            tile_size=tile_size,
            overlap=overlap,
            quality=quality,
            resize_filter=resize_filter,
        )
        result = creator.create(destination, progress_callback, workers=workers)
        return result, None
    except Exception as e:
        logger.error("Failed to process %s: %s", source.name, e)
        return None, str(e)
