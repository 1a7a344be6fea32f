"""Named resampling filters used when downscaling pyramid levels."""

from __future__ import annotations

import logging
from enum import Enum

from PIL import Image

logger = logging.getLogger(__name__)


class ResizeFilter(str, Enum):
    """Filter names accepted on the command line and in configuration."""

    BILINEAR = "bilinear"
    BICUBIC = "bicubic"
    NEAREST = "nearest"
    LANCZOS = "lanczos"

    @property
    def resampling(self) -> Image.Resampling:
        return _RESAMPLING[self]


_RESAMPLING: dict[ResizeFilter, Image.Resampling] = {
    ResizeFilter.BILINEAR: Image.Resampling.BILINEAR,
    ResizeFilter.BICUBIC: Image.Resampling.BICUBIC,
    ResizeFilter.NEAREST: Image.Resampling.NEAREST,
    ResizeFilter.LANCZOS: Image.Resampling.LANCZOS,
}

#: Filter used for any name not in :class:`ResizeFilter`
FALLBACK_FILTER: ResizeFilter = ResizeFilter.NEAREST


def obtain_filter(name: str | ResizeFilter) -> ResizeFilter:
    """Return the filter named ``name``, or :data:`FALLBACK_FILTER` if unknown.

    Unknown names are not an error.
    """
    if isinstance(name, ResizeFilter):
        return name
    try:
        return ResizeFilter(str(name).strip().lower())
    except ValueError:
        logger.debug("Unknown resize filter %r, using %s", name, FALLBACK_FILTER.value)
        return FALLBACK_FILTER


def resolve_filter(name: str | ResizeFilter) -> Image.Resampling:
    """Map a filter name to the Pillow resampling algorithm."""
    return obtain_filter(name).resampling


def filter_names() -> list[str]:
    return [f.value for f in ResizeFilter]
