"""Tests for the resize filter registry."""

from __future__ import annotations

import pytest
from PIL import Image

from deepzoom.tiling.filters import (
    FALLBACK_FILTER,
    ResizeFilter,
    filter_names,
    obtain_filter,
    resolve_filter,
)


class TestResolveFilter:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("bilinear", Image.Resampling.BILINEAR),
            ("bicubic", Image.Resampling.BICUBIC),
            ("nearest", Image.Resampling.NEAREST),
            ("lanczos", Image.Resampling.LANCZOS),
        ],
    )
    def test_known_names(self, name: str, expected: Image.Resampling) -> None:
        assert resolve_filter(name) == expected

    @pytest.mark.parametrize("name", ["xyz", "", "lanczos3", "box"])
    def test_unknown_name_falls_back_to_nearest(self, name: str) -> None:
        """Unknown names are not an error."""
        assert resolve_filter(name) == Image.Resampling.NEAREST
        assert obtain_filter(name) is FALLBACK_FILTER is ResizeFilter.NEAREST

    def test_name_is_case_insensitive(self) -> None:
        assert obtain_filter(" Lanczos ") is ResizeFilter.LANCZOS

    def test_enum_member_passes_through(self) -> None:
        assert obtain_filter(ResizeFilter.BILINEAR) is ResizeFilter.BILINEAR

    def test_filter_names(self) -> None:
        assert filter_names() == ["bilinear", "bicubic", "nearest", "lanczos"]
