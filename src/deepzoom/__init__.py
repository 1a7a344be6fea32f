"""deepzoom - Convert a raster image into a Deep Zoom tile pyramid."""

__version__ = "0.1.0"
