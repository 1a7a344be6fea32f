"""Shared type definitions for the deepzoom core module."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from .errors import InvalidFormatError


class ImageFormat(str, Enum):
    """Supported source formats.

    The value doubles as the tile file extension and the descriptor's
    ``Format`` attribute.
    """

    JPG = "jpg"
    PNG = "png"

    @classmethod
    def parse(cls, value: str | ImageFormat) -> ImageFormat:
        """Return the format named by ``value``.

        Raises:
            InvalidFormatError: If ``value`` is not ``jpg`` or ``png``
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidFormatError(
                f"Unsupported format {value!r}: only jpg and png are supported"
            ) from None


class TileCoord(NamedTuple):
    """Coordinate of a tile in the pyramid.

    Attributes:
        level: Pyramid level (0 = lowest resolution)
        col: Column index (0-based)
        row: Row index (0-based)
    """

    level: int
    col: int
    row: int

    def filename(self, fmt: ImageFormat) -> str:
        return f"{self.col}_{self.row}.{fmt.value}"


class TileBounds(NamedTuple):
    """Half-open pixel box ``[left, right) x [top, bottom)`` in a level raster.

    Field order matches the box tuple Pillow's ``Image.crop`` expects.
    """

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top


@dataclass(frozen=True)
class LevelInfo:
    """Information about a pyramid level.

    Attributes:
        level: Level index (0 = lowest resolution)
        width: Level raster width in pixels
        height: Level raster height in pixels
        cols: Number of tile columns at this level
        rows: Number of tile rows at this level
    """

    level: int
    width: int
    height: int
    cols: int
    rows: int

    @property
    def tile_count(self) -> int:
        return self.cols * self.rows
