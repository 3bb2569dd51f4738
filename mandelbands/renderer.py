"""Rendering primitives for bands of a Mandelbrot image."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .escape import BOUNDED, escape_time, escape_time_grid
from .geometry import pixel_to_point, point_grid
from .palette import BACKGROUND, calculate_rgb, calculate_rgb_array

DEFAULT_LIMIT = 255
DEFAULT_WORKERS = 8


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set."""

    width: int
    height: int
    upper_left: complex
    lower_right: complex
    max_iterations: int = DEFAULT_LIMIT
    workers: int = DEFAULT_WORKERS
    backend: str = "python"

    @property
    def bounds(self) -> tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class Band:
    """A horizontal strip of rows ``[top, bottom)`` rendered by one worker."""

    index: int
    top: int
    bottom: int

    @property
    def height(self) -> int:
        return self.bottom - self.top

    def view(self, pixels: np.ndarray) -> np.ndarray:
        return pixels[self.top:self.bottom]


@dataclass(frozen=True)
class RenderResult:
    """Container for a finished render and the partition used to produce it."""

    pixels: np.ndarray
    bands: tuple[Band, ...]


def new_pixel_buffer(bounds: tuple[int, int]) -> np.ndarray:
    """Allocate a zeroed, row-major RGB buffer for an image of ``bounds``."""

    width, height = bounds
    return np.zeros((height, width, 3), dtype=np.uint8)


def render_band(
    pixels: np.ndarray,
    bounds: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    limit: int = DEFAULT_LIMIT,
) -> None:
    """Render a rectangle of the Mandelbrot set into a buffer of pixels.

    The ``bounds`` argument gives the width and height of the buffer
    ``pixels``, which holds one RGB triple per pixel. The ``upper_left`` and
    ``lower_right`` arguments specify points on the complex plane
    corresponding to the upper-left and lower-right corners of the buffer.
    """

    width, height = bounds
    assert pixels.shape[:2] == (height, width)
    for row in range(height):
        for column in range(width):
            point = pixel_to_point(bounds, (column, row), upper_left, lower_right)
            count = escape_time(point, limit)
            if count is None:
                pixels[row, column] = BACKGROUND
            else:
                pixels[row, column] = calculate_rgb(limit, float(count))


def render_band_vectorized(
    pixels: np.ndarray,
    bounds: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    limit: int = DEFAULT_LIMIT,
    *,
    device: Optional[str] = None,
) -> None:
    """Same as :func:`render_band`, iterating the whole band at once with TensorFlow."""

    width, height = bounds
    assert pixels.shape[:2] == (height, width)
    counts = escape_time_grid(point_grid(bounds, upper_left, lower_right), limit, device=device)
    bounded = counts == BOUNDED
    colors = calculate_rgb_array(limit, counts.astype(np.float64))
    colors[bounded] = BACKGROUND
    pixels[...] = colors
