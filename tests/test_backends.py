"""Tests for the Pillow image backend."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from deepzoom.core.errors import DecodeError, FileSystemError, InvalidFormatError
from deepzoom.core.types import ImageFormat, TileBounds
from deepzoom.tiling.backends import PillowBackend, quality_to_jpeg


class TestQualityMapping:
    @pytest.mark.parametrize(
        "quality, expected",
        [(0.8, 80), (0.29, 29), (0.0, 0), (1.0, 100), (0.5, 50)],
    )
    def test_fraction_to_jpeg_scale(self, quality: float, expected: int) -> None:
        assert quality_to_jpeg(quality) == expected

    @pytest.mark.parametrize("quality", [-0.1, 1.5])
    def test_out_of_range(self, quality: float) -> None:
        with pytest.raises(ValueError):
            quality_to_jpeg(quality)


class TestPillowBackend:
    """Tests for the Pillow backend."""

    def test_numpy_round_trip(self, sample_rgb_array: np.ndarray) -> None:
        img = PillowBackend.from_numpy(sample_rgb_array)
        assert img.mode == "RGB"
        assert img.size == (512, 384)
        np.testing.assert_array_equal(PillowBackend.to_numpy(img), sample_rgb_array)

    def test_to_numpy_converts_mode(self) -> None:
        gray = Image.new("L", (4, 3), 7)
        arr = PillowBackend.to_numpy(gray)
        assert arr.shape == (3, 4, 3)
        assert (arr == 7).all()

    def test_load_jpeg(self, source_jpg: Path) -> None:
        img = PillowBackend.load(source_jpg, ImageFormat.JPG)
        assert img.mode == "RGB"
        assert img.size == (512, 384)

    def test_load_png_is_lossless(self, source_png: Path, sample_rgb_array: np.ndarray) -> None:
        img = PillowBackend.load(source_png, "png")
        np.testing.assert_array_equal(PillowBackend.to_numpy(img), sample_rgb_array)

    def test_load_flattens_alpha(self, temp_dir: Path) -> None:
        path = temp_dir / "alpha.png"
        Image.new("RGBA", (8, 8), (10, 20, 30, 128)).save(path)
        assert PillowBackend.load(path, "png").mode == "RGB"

    def test_load_wrong_format(self, source_png: Path) -> None:
        with pytest.raises(InvalidFormatError):
            PillowBackend.load(source_png, ImageFormat.JPG)

    def test_load_unsupported_format(self, source_jpg: Path) -> None:
        with pytest.raises(InvalidFormatError):
            PillowBackend.load(source_jpg, "gif")

    def test_load_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(DecodeError):
            PillowBackend.load(temp_dir / "missing.jpg")

    def test_resize_exact_size(self, sample_image: Image.Image) -> None:
        result = PillowBackend.resize(sample_image, (129, 97))
        assert result.size == (129, 97)
        assert sample_image.size == (512, 384)

    def test_crop(self, sample_image: Image.Image, sample_rgb_array: np.ndarray) -> None:
        bounds = TileBounds(250, 180, 300, 200)
        tile = PillowBackend.crop(sample_image, bounds)
        assert tile.size == (50, 20)
        np.testing.assert_array_equal(
            PillowBackend.to_numpy(tile), sample_rgb_array[180:200, 250:300]
        )

    def test_save_jpeg_ignores_extension(self, sample_image: Image.Image, temp_dir: Path) -> None:
        """Tiles are JPEG-encoded even when named after a PNG source."""
        path = temp_dir / "0_0.png"
        PillowBackend.save_jpeg(sample_image, path, quality=80)
        with Image.open(path) as img:
            assert img.format == "JPEG"
            assert img.size == (512, 384)

    def test_save_jpeg_quality_affects_size(self, sample_image: Image.Image, temp_dir: Path) -> None:
        low = temp_dir / "low.jpg"
        high = temp_dir / "high.jpg"
        PillowBackend.save_jpeg(sample_image, low, quality=10)
        PillowBackend.save_jpeg(sample_image, high, quality=95)
        assert low.stat().st_size < high.stat().st_size

    def test_save_jpeg_missing_directory(self, sample_image: Image.Image, temp_dir: Path) -> None:
        with pytest.raises(FileSystemError):
            PillowBackend.save_jpeg(sample_image, temp_dir / "nope" / "0_0.jpg")

    @pytest.mark.filterwarnings("error::PIL.Image.DecompressionBombWarning")
    def test_load_large_source(self, temp_dir: Path) -> None:
        """Sources past Pillow's default pixel limit still decode."""
        path = temp_dir / "large.png"
        Image.new("1", (20000, 10000), 1).save(path)
        img = PillowBackend.load(path, "png")
        assert img.size == (20000, 10000)

    def test_load_over_pixel_limit(self, source_png: Path, monkeypatch) -> None:
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        with pytest.raises(DecodeError):
            PillowBackend.load(source_png, "png")
