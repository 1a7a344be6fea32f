"""Image processing backend using Pillow.

Wraps decoding, resampling, cropping and JPEG encoding behind static
helpers that translate codec and filesystem failures into deepzoom errors.

Usage:
    from deepzoom.tiling.backends import PillowBackend

    img = PillowBackend.load(Path("input.jpg"), ImageFormat.JPG)
    resized = PillowBackend.resize(img, (256, 192), Image.Resampling.BICUBIC)
    PillowBackend.save_jpeg(resized, Path("output.jpg"), quality=80)
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from deepzoom.config import MAX_IMAGE_PIXELS
from deepzoom.core.errors import DecodeError, EncodeError, FileSystemError, InvalidFormatError
from deepzoom.core.types import ImageFormat, TileBounds

# Pyramid sources are routinely larger than Pillow's decompression-bomb guard
Image.MAX_IMAGE_PIXELS = MAX_IMAGE_PIXELS or None

# Pillow format names accepted for each source format
_PIL_FORMATS: dict[ImageFormat, str] = {
    ImageFormat.JPG: "JPEG",
    ImageFormat.PNG: "PNG",
}


def quality_to_jpeg(quality: float) -> int:
    """Map a 0.0-1.0 quality fraction onto the JPEG encoder's 0-100 scale."""
    if not 0.0 <= quality <= 1.0:
        raise ValueError(f"quality must be within 0.0-1.0, got {quality}")
    return int(round(quality * 100))


class PillowBackend:
    """Pillow-based image processing backend.

    Source rasters are held fully in memory as RGB ``Image`` objects; level
    rasters and tiles are derived from them without mutating the source.
    """

    @staticmethod
    def from_numpy(arr: np.ndarray) -> Image.Image:
        """Convert a numpy array to a Pillow image.

        Args:
            arr: numpy array (H, W, 3) RGB uint8

        Returns:
            Image in RGB mode
        """
        return Image.fromarray(np.ascontiguousarray(arr, dtype=np.uint8))

    @staticmethod
    def to_numpy(img: Image.Image) -> np.ndarray:
        """Convert a Pillow image to a numpy array.

        Args:
            img: Image in any mode

        Returns:
            numpy array (H, W, 3) RGB uint8
        """
        if img.mode != "RGB":
            img = img.convert("RGB")
        return np.asarray(img, dtype=np.uint8)

    @staticmethod
    def load(path: Path, fmt: ImageFormat | str = ImageFormat.JPG) -> Image.Image:
        """Decode a source image fully into memory.

        Args:
            path: Path to the source file
            fmt: Expected source format

        Returns:
            Image in RGB mode

        Raises:
            InvalidFormatError: If ``fmt`` is unsupported or the file is another format
            DecodeError: If the file cannot be read or decoded, or exceeds
                ``DEEPZOOM_MAX_IMAGE_PIXELS``
        """
        fmt = ImageFormat.parse(fmt)
        try:
            with Image.open(path, formats=[_PIL_FORMATS[fmt]]) as img:
                img.load()
                # JPEG has no alpha; flatten anything else to RGB
                return img.convert("RGB")
        except UnidentifiedImageError as e:
            raise InvalidFormatError(
                f"{path} is not a readable {fmt.value} image"
            ) from e
        except Image.DecompressionBombError as e:
            raise DecodeError(f"Cannot decode {path}: {e}") from e
        except (OSError, SyntaxError) as e:
            raise DecodeError(f"Cannot decode {path}: {e}") from e

    @staticmethod
    def resize(
        img: Image.Image,
        size: tuple[int, int],
        resample: Image.Resampling = Image.Resampling.BICUBIC,
    ) -> Image.Image:
        """Resize an image to exactly ``size``.

        Args:
            img: Image to resize
            size: Target size as (width, height)
            resample: Pillow resampling filter

        Returns:
            New resized image
        """
        return img.resize(size, resample=resample)

    @staticmethod
    def crop(img: Image.Image, bounds: TileBounds) -> Image.Image:
        """Crop ``bounds`` out of ``img`` into an independent image."""
        return img.crop(tuple(bounds))

    @staticmethod
    def save_jpeg(img: Image.Image, path: Path, quality: int = 80) -> None:
        """Save an image as JPEG, regardless of the file extension.

        Args:
            img: Image to save
            path: Output path
            quality: JPEG quality (0-100)

        Raises:
            FileSystemError: If the file cannot be created or written
            EncodeError: If the encoder rejects the image
        """
        try:
            img.save(path, format="JPEG", quality=quality)
        except OSError as e:
            # Pillow encoder failures are OSErrors without an errno
            if e.errno is not None:
                raise FileSystemError(f"Cannot write tile {path}: {e}") from e
            raise EncodeError(f"Cannot encode tile {path}: {e}") from e
        except ValueError as e:
            raise EncodeError(f"Cannot encode tile {path}: {e}") from e

