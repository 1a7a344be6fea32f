"""Centralized configuration for deepzoom.

All tunable parameters are defined here with sensible defaults.
Values can be overridden via environment variables.

Environment Variables:
    DEEPZOOM_TILE_SIZE: Tile edge length in pixels (default: 256)
    DEEPZOOM_OVERLAP: Pixels shared between adjacent tiles (default: 0)
    DEEPZOOM_QUALITY: JPEG quality as a 0.0-1.0 fraction (default: 0.8)
    DEEPZOOM_RESIZE_FILTER: Resampling filter name (default: bicubic)
    DEEPZOOM_WORKERS: Threads used to encode the tiles of a level (default: 1)
    DEEPZOOM_MAX_IMAGE_PIXELS: Largest source Pillow will decode, 0 for no limit (default: 0)
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def _get_env_int(name: str, default: int) -> int:
    """Get an integer from environment variable with fallback."""
    value = os.environ.get(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            logger.warning(
                "Invalid integer for %s: %r, using default %d", name, value, default
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Get a float from environment variable with fallback."""
    value = os.environ.get(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            logger.warning(
                "Invalid number for %s: %r, using default %.2f", name, value, default
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    """Get a string from environment variable with fallback."""
    return os.environ.get(name, default)


# =============================================================================
# Tile Generation Defaults
# =============================================================================

#: Default tile size in pixels
DEFAULT_TILE_SIZE: int = _get_env_int("DEEPZOOM_TILE_SIZE", 256)

#: Default overlap in pixels
DEFAULT_OVERLAP: int = _get_env_int("DEEPZOOM_OVERLAP", 0)

#: Default output quality (fraction, mapped to the JPEG 0-100 scale)
DEFAULT_QUALITY: float = _get_env_float("DEEPZOOM_QUALITY", 0.8)

#: Default resampling filter name
DEFAULT_RESIZE_FILTER: str = _get_env_str("DEEPZOOM_RESIZE_FILTER", "bicubic")

#: Default number of tile encoding threads (1 = sequential)
DEFAULT_WORKERS: int = _get_env_int("DEEPZOOM_WORKERS", 1)

#: Decoder pixel limit for source images (0 = unlimited)
MAX_IMAGE_PIXELS: int = _get_env_int("DEEPZOOM_MAX_IMAGE_PIXELS", 0)


# =============================================================================
# Output Format
# =============================================================================

#: XML namespace of the .dzi descriptor
DZI_NAMESPACE: str = "http://schemas.microsoft.com/deepzoom/2008"

#: Supported source formats (also used as the tile file extension)
SUPPORTED_FORMATS: tuple[str, ...] = ("jpg", "png")

#: Suffix appended to the descriptor stem for the tile directory
FILES_SUFFIX: str = "_files"


# =============================================================================
# Validation
# =============================================================================


def _validate_config() -> None:
    """Validate configuration values and log warnings for out-of-range settings."""
    global DEFAULT_TILE_SIZE, DEFAULT_OVERLAP, DEFAULT_QUALITY, DEFAULT_WORKERS, MAX_IMAGE_PIXELS

    if DEFAULT_TILE_SIZE < 1:
        logger.warning(
            "DEFAULT_TILE_SIZE=%d is too low, falling back to 256", DEFAULT_TILE_SIZE
        )
        DEFAULT_TILE_SIZE = 256

    if DEFAULT_OVERLAP < 0:
        logger.warning(
            "DEFAULT_OVERLAP=%d is negative, clamping to 0", DEFAULT_OVERLAP
        )
        DEFAULT_OVERLAP = 0

    if not 0.0 <= DEFAULT_QUALITY <= 1.0:
        clamped = min(max(DEFAULT_QUALITY, 0.0), 1.0)
        logger.warning(
            "DEFAULT_QUALITY=%.2f is outside 0.0-1.0, clamping to %.2f",
            DEFAULT_QUALITY,
            clamped,
        )
        DEFAULT_QUALITY = clamped

    if DEFAULT_WORKERS < 1:
        logger.warning(
            "DEFAULT_WORKERS=%d is too low, clamping to 1", DEFAULT_WORKERS
        )
        DEFAULT_WORKERS = 1

    if MAX_IMAGE_PIXELS < 0:
        logger.warning(
            "MAX_IMAGE_PIXELS=%d is negative, treating as unlimited", MAX_IMAGE_PIXELS
        )
        MAX_IMAGE_PIXELS = 0


_validate_config()
