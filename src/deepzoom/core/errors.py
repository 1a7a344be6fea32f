"""Exceptions raised by the pyramid geometry and tiling pipeline."""

from __future__ import annotations


class DeepZoomError(Exception):
    """Base class for all deepzoom failures."""


class InvalidFormatError(DeepZoomError, ValueError):
    """Source format is not one of the supported raster kinds."""


class InvalidLevelError(DeepZoomError, IndexError):
    """Pyramid level outside ``[0, num_levels)``."""


class InvalidTileCoordinateError(DeepZoomError, IndexError):
    """Tile column/row outside the level's tile count."""


class FileSystemError(DeepZoomError):
    """A directory or file could not be created or written."""


class DecodeError(DeepZoomError):
    """The source image could not be read."""


class EncodeError(DeepZoomError):
    """A tile or the descriptor could not be encoded."""
