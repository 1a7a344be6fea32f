"""Deep Zoom pyramid generation from a single in-memory raster."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from PIL import Image

from deepzoom.config import (
    DEFAULT_OVERLAP,
    DEFAULT_QUALITY,
    DEFAULT_RESIZE_FILTER,
    DEFAULT_TILE_SIZE,
    DEFAULT_WORKERS,
)
from deepzoom.core.descriptor import PyramidDescriptor
from deepzoom.core.paths import ensure_dir, level_dir_for, tile_path_for, tiles_dir_for
from deepzoom.core.types import ImageFormat, LevelInfo, TileBounds, TileCoord

from .backends import PillowBackend, quality_to_jpeg
from .filters import ResizeFilter, obtain_filter

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


@dataclass
class TileInfo:
    """A cropped tile together with its position in the pyramid."""

    coord: TileCoord
    bounds: TileBounds
    image: Image.Image


class ImageCreator:
    """Cuts a source raster into a Deep Zoom tile pyramid.

    Each level is resampled from the source exactly once and every tile of
    that level is cropped from the shared level raster. Tiles are always
    JPEG-encoded; ``format`` only names the source kind, the tile file
    extension and the descriptor's ``Format`` attribute.

    Args:
        image: Decoded source raster (never modified)
        format: Source format, ``jpg`` or ``png``
        tile_size: Tile size in pixels, excluding overlap
        overlap: Pixels shared between adjacent tiles
        quality: JPEG quality as a 0.0-1.0 fraction
        resize_filter: Resampling filter name (unknown names use nearest)
    """

    def __init__(
        self,
        image: Image.Image,
        format: ImageFormat | str = ImageFormat.JPG,
        tile_size: int = DEFAULT_TILE_SIZE,
        overlap: int = DEFAULT_OVERLAP,
        quality: float = DEFAULT_QUALITY,
        resize_filter: str | ResizeFilter = DEFAULT_RESIZE_FILTER,
    ) -> None:
        if image.mode != "RGB":
            image = image.convert("RGB")
        self.image = image
        self.descriptor = PyramidDescriptor.from_image(image, tile_size, overlap, format)
        self.jpeg_quality = quality_to_jpeg(quality)
        self.resize_filter = obtain_filter(resize_filter)

    @classmethod
    def open(
        cls,
        source: Path,
        format: ImageFormat | str = ImageFormat.JPG,
        **kwargs,
    ) -> ImageCreator:
        """Decode ``source`` and build a creator for it.

        The format is checked before the file is touched, so an unsupported
        format fails without producing any output.

        Raises:
            InvalidFormatError: If ``format`` is unsupported
            DecodeError: If the source cannot be decoded
        """
        fmt = ImageFormat.parse(format)
        source = Path(source)
        logger.info("Loading %s", source.name)
        image = PillowBackend.load(source, fmt)
        logger.info("Loaded %s: %d x %d px", source.name, image.width, image.height)
        return cls(image, fmt, **kwargs)

    @property
    def format(self) -> ImageFormat:
        return self.descriptor.format

    def level_image(self, level: int) -> Image.Image:
        """Raster for ``level``.

        Returns the source itself when the level is at full resolution,
        otherwise a new image resampled to exactly ``dimensions(level)``.
        """
        size = self.descriptor.dimensions(level)
        if size == self.image.size:
            return self.image
        return PillowBackend.resize(self.image, size, self.resize_filter.resampling)

    def tile_image(self, level_image: Image.Image, bounds: TileBounds) -> Image.Image:
        return PillowBackend.crop(level_image, bounds)

    def iter_tiles(
        self, level: int, level_image: Image.Image | None = None
    ) -> Iterator[TileInfo]:
        """Iterate over the cropped tiles of ``level``.

        Args:
            level: Pyramid level
            level_image: Pre-computed level raster; resampled once if omitted

        Yields:
            TileInfo for each tile, row-major
        """
        if level_image is None:
            level_image = self.level_image(level)
        for coord in self.descriptor.tiles(level):
            bounds = self.descriptor.tile_bounds(*coord)
            yield TileInfo(coord=coord, bounds=bounds, image=self.tile_image(level_image, bounds))

    def create(
        self,
        destination: Path,
        progress_callback: ProgressCallback | None = None,
        workers: int = DEFAULT_WORKERS,
    ) -> Path:
        """Write the tile pyramid and its descriptor.

        Tiles go to ``<destination stem>_files/<level>/<col>_<row>.<format>``;
        the descriptor is written to ``destination`` after the last tile.

        Args:
            destination: Path of the ``.dzi`` descriptor
            progress_callback: Optional callback(stage, current, total)
            workers: Threads encoding the tiles of a level (1 = sequential)

        Returns:
            Path to the written descriptor

        Raises:
            FileSystemError: If a directory or file cannot be written
            EncodeError: If a tile cannot be encoded
        """
        destination = Path(destination)
        tiles_dir = ensure_dir(tiles_dir_for(destination))
        total = self.descriptor.total_tiles
        done = 0

        logger.info(
            "Generating %d levels (%d tiles) into %s",
            self.descriptor.num_levels,
            total,
            tiles_dir,
        )
        for info in self.descriptor.levels():
            ensure_dir(level_dir_for(tiles_dir, info.level))
            level_image = self.level_image(info.level)
            logger.debug(
                "Level %d: %d x %d px, %d x %d tiles",
                info.level, info.width, info.height, info.cols, info.rows,
            )

            if workers > 1 and info.tile_count > 1:
                done = self._write_level_parallel(
                    info, level_image, tiles_dir, workers, done, total, progress_callback
                )
            else:
                done = self._write_level(
                    info, level_image, tiles_dir, done, total, progress_callback
                )

        self.descriptor.save(destination)
        logger.info("Wrote %s", destination)
        return destination

    def _write_tile(self, level_image: Image.Image, coord: TileCoord, tiles_dir: Path) -> None:
        bounds = self.descriptor.tile_bounds(*coord)
        tile = self.tile_image(level_image, bounds)
        PillowBackend.save_jpeg(tile, tile_path_for(tiles_dir, coord, self.format), self.jpeg_quality)

    def _write_level(
        self,
        info: LevelInfo,
        level_image: Image.Image,
        tiles_dir: Path,
        done: int,
        total: int,
        progress_callback: ProgressCallback | None,
    ) -> int:
        """Write the tiles of one level sequentially.

        Returns:
            Running count of tiles written
        """
        for tile in self.iter_tiles(info.level, level_image):
            path = tile_path_for(tiles_dir, tile.coord, self.format)
            PillowBackend.save_jpeg(tile.image, path, self.jpeg_quality)
            done += 1
            if progress_callback:
                progress_callback("tiles", done, total)
        return done

    def _write_level_parallel(
        self,
        info: LevelInfo,
        level_image: Image.Image,
        tiles_dir: Path,
        workers: int,
        done: int,
        total: int,
        progress_callback: ProgressCallback | None,
    ) -> int:
        """Write the tiles of one level on a thread pool.

        All workers read the same level raster; each tile has its own output
        file. The first failure cancels pending tiles and is re-raised.
        """
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._write_tile, level_image, coord, tiles_dir)
                for coord in self.descriptor.tiles(info.level)
            ]
            try:
                for future in as_completed(futures):
                    future.result()
                    done += 1
                    if progress_callback:
                        progress_callback("tiles", done, total)
            except BaseException:
                for future in futures:
                    future.cancel()
                raise
        return done
