"""Deep Zoom pyramid geometry and the ``.dzi`` descriptor record."""

from __future__ import annotations

import logging
import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from PIL import Image

from deepzoom.config import DZI_NAMESPACE

from .errors import (
    DecodeError,
    InvalidFormatError,
    InvalidLevelError,
    InvalidTileCoordinateError,
)
from .paths import atomic_text_save
from .types import ImageFormat, LevelInfo, TileBounds, TileCoord

logger = logging.getLogger(__name__)

_IMAGE_TAG = f"{{{DZI_NAMESPACE}}}Image"
_SIZE_TAG = f"{{{DZI_NAMESPACE}}}Size"

ET.register_namespace("", DZI_NAMESPACE)


@dataclass(frozen=True)
class PyramidDescriptor:
    """Geometric contract of a Deep Zoom pyramid.

    Level 0 is the coarsest level (close to 1x1 pixel) and level
    ``num_levels - 1`` reproduces the source resolution exactly. Each level
    halves the resolution of the one above it, rounding up.

    Attributes:
        width: Source image width in pixels
        height: Source image height in pixels
        tile_size: Tile edge length in pixels, excluding overlap
        overlap: Pixels of border shared between adjacent tiles
        format: Tile format recorded in the descriptor
        num_levels: Number of pyramid levels, computed once at construction
    """

    width: int
    height: int
    tile_size: int = 256
    overlap: int = 0
    format: ImageFormat = ImageFormat.JPG
    num_levels: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.tile_size < 1:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.overlap < 0:
            raise ValueError(f"overlap must be non-negative, got {self.overlap}")

        object.__setattr__(self, "format", ImageFormat.parse(self.format))
        # floor(log2(n)) + 1 == n.bit_length() for n >= 1, without float rounding
        object.__setattr__(self, "num_levels", max(self.width, self.height).bit_length())

    @classmethod
    def from_image(
        cls,
        image: Image.Image,
        tile_size: int = 256,
        overlap: int = 0,
        format: ImageFormat | str = ImageFormat.JPG,
    ) -> PyramidDescriptor:
        """Build a descriptor from a decoded raster's pixel dimensions."""
        width, height = image.size
        return cls(width, height, tile_size, overlap, ImageFormat.parse(format))

    @property
    def max_level(self) -> int:
        return self.num_levels - 1

    def _check_level(self, level: int) -> None:
        if not 0 <= level < self.num_levels:
            raise InvalidLevelError(
                f"Invalid pyramid level {level}: expected 0..{self.max_level}"
            )

    def scale(self, level: int) -> float:
        """Scale factor of ``level`` relative to the source resolution."""
        self._check_level(level)
        return math.ldexp(1.0, level - self.max_level)

    def dimensions(self, level: int) -> tuple[int, int]:
        """Pixel dimensions (width, height) of ``level``.

        Computed as ``ceil(size * scale)`` with integer shifts, so the top
        level is exactly the source size.
        """
        self._check_level(level)
        shift = self.max_level - level
        round_up = (1 << shift) - 1
        return (self.width + round_up) >> shift, (self.height + round_up) >> shift

    def tile_count(self, level: int) -> tuple[int, int]:
        """Number of tiles (columns, rows) at ``level``."""
        width, height = self.dimensions(level)
        return -(-width // self.tile_size), -(-height // self.tile_size)

    def tile_bounds(self, level: int, col: int, row: int) -> TileBounds:
        """Pixel box of tile ``(col, row)`` in the raster of ``level``.

        The box is widened by ``overlap`` towards each neighbouring tile and
        clipped to the level's right and bottom edges. Tiles in the first
        column/row have no leading overlap.

        Raises:
            InvalidLevelError: If ``level`` is out of range
            InvalidTileCoordinateError: If ``col``/``row`` exceed the tile count
        """
        cols, rows = self.tile_count(level)
        if not (0 <= col < cols and 0 <= row < rows):
            raise InvalidTileCoordinateError(
                f"Invalid tile ({col}, {row}) at level {level}: "
                f"level has {cols}x{rows} tiles"
            )

        level_width, level_height = self.dimensions(level)
        left = max(col * self.tile_size - (self.overlap if col else 0), 0)
        top = max(row * self.tile_size - (self.overlap if row else 0), 0)
        # Trailing overlap always added; clipping removes it on the last tile
        right = min((col + 1) * self.tile_size + self.overlap, level_width)
        bottom = min((row + 1) * self.tile_size + self.overlap, level_height)
        return TileBounds(left, top, right, bottom)

    def tiles(self, level: int) -> Iterator[TileCoord]:
        """Iterate over every tile coordinate of ``level`` in row-major order."""
        cols, rows = self.tile_count(level)
        for row in range(rows):
            for col in range(cols):
                yield TileCoord(level, col, row)

    def levels(self) -> list[LevelInfo]:
        """Summaries of all levels, coarsest first."""
        result = []
        for level in range(self.num_levels):
            width, height = self.dimensions(level)
            cols, rows = self.tile_count(level)
            result.append(LevelInfo(level, width, height, cols, rows))
        return result

    @property
    def total_tiles(self) -> int:
        return sum(info.tile_count for info in self.levels())

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_xml(self) -> str:
        """Serialize to the ``.dzi`` XML document."""
        root = ET.Element(
            _IMAGE_TAG,
            {
                "Format": self.format.value,
                "Overlap": str(self.overlap),
                "TileSize": str(self.tile_size),
            },
        )
        ET.SubElement(root, _SIZE_TAG, {"Height": str(self.height), "Width": str(self.width)})
        body = ET.tostring(root, encoding="unicode")
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'

    @classmethod
    def from_xml(cls, text: str) -> PyramidDescriptor:
        """Parse a ``.dzi`` XML document.

        Raises:
            DecodeError: If the document is malformed or missing attributes
            InvalidFormatError: If the recorded format is unsupported
        """
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise DecodeError(f"Malformed descriptor: {e}") from e

        size = root.find(_SIZE_TAG)
        if root.tag != _IMAGE_TAG or size is None:
            raise DecodeError("Descriptor is not a Deep Zoom <Image> document")

        try:
            return cls(
                width=int(size.attrib["Width"]),
                height=int(size.attrib["Height"]),
                tile_size=int(root.attrib["TileSize"]),
                overlap=int(root.attrib["Overlap"]),
                format=ImageFormat.parse(root.attrib["Format"]),
            )
        except KeyError as e:
            raise DecodeError(f"Descriptor missing attribute {e}") from e
        except InvalidFormatError:
            raise
        except ValueError as e:
            raise DecodeError(f"Invalid descriptor value: {e}") from e

    def save(self, path: Path) -> None:
        """Write the descriptor to ``path`` atomically."""
        atomic_text_save(Path(path), self.to_xml())
        logger.debug("Wrote descriptor %s", path)

    @classmethod
    def load(cls, path: Path) -> PyramidDescriptor:
        """Read a descriptor previously written by :meth:`save`."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise DecodeError(f"Cannot read descriptor {path}: {e}") from e
        return cls.from_xml(text)
