"""Entry point for ``python -m deepzoom``."""

from deepzoom.tiling.__main__ import main

if __name__ == "__main__":
    main()
