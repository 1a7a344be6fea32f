"""Tile pyramid generation for Deep Zoom viewers."""

from .backends import PillowBackend, quality_to_jpeg
from .creator import ImageCreator, TileInfo
from .filters import ResizeFilter, obtain_filter, resolve_filter
from .worker import create_deep_zoom

__all__ = [
    "ImageCreator",
    "TileInfo",
    "PillowBackend",
    "ResizeFilter",
    "create_deep_zoom",
    "obtain_filter",
    "quality_to_jpeg",
    "resolve_filter",
]
