"""Pyramid geometry and descriptor model."""

from .descriptor import PyramidDescriptor
from .errors import (
    DecodeError,
    DeepZoomError,
    EncodeError,
    FileSystemError,
    InvalidFormatError,
    InvalidLevelError,
    InvalidTileCoordinateError,
)
from .types import ImageFormat, LevelInfo, TileBounds, TileCoord

__all__ = [
    "PyramidDescriptor",
    "ImageFormat",
    "LevelInfo",
    "TileBounds",
    "TileCoord",
    "DeepZoomError",
    "DecodeError",
    "EncodeError",
    "FileSystemError",
    "InvalidFormatError",
    "InvalidLevelError",
    "InvalidTileCoordinateError",
]
