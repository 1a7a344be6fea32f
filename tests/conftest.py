"""Test fixtures for deepzoom tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_rgb_array() -> np.ndarray:
    """Create a 512x384 RGB test image with colored quadrants and a gradient."""
    img = np.full((384, 512, 3), 255, dtype=np.uint8)

    # Top-left: red
    img[0:192, 0:256] = [200, 50, 50]

    # Top-right: green
    img[0:192, 256:512] = [50, 200, 50]

    # Bottom-left: blue
    img[192:384, 0:256] = [50, 50, 200]

    # Bottom-right: purple
    img[192:384, 256:512] = [150, 50, 150]

    # Horizontal gradient in the green channel of the top rows so tiles differ
    img[0:16, :, 1] = (np.arange(512) // 2).astype(np.uint8)

    return img


@pytest.fixture
def sample_image(sample_rgb_array: np.ndarray) -> Image.Image:
    return Image.fromarray(sample_rgb_array)


@pytest.fixture
def source_jpg(temp_dir: Path, sample_image: Image.Image) -> Path:
    path = temp_dir / "source.jpg"
    sample_image.save(path, format="JPEG", quality=95)
    return path


@pytest.fixture
def source_png(temp_dir: Path, sample_image: Image.Image) -> Path:
    path = temp_dir / "source.png"
    sample_image.save(path, format="PNG")
    return path
