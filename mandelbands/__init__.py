"""Public API for banded Mandelbrot rendering."""

from .escape import BOUNDED, escape_time, escape_time_grid
from .geometry import band_corners, pixel_to_point, point_grid
from .output import read_image, write_image
from .palette import BACKGROUND, calculate_rgb, calculate_rgb_array
from .parsing import parse_complex, parse_pair
from .renderer import (
    DEFAULT_LIMIT,
    DEFAULT_WORKERS,
    Band,
    RenderParameters,
    RenderResult,
    new_pixel_buffer,
    render_band,
    render_band_vectorized,
)
from .scheduler import BACKENDS, BandRenderError, partition_bands, render, render_image

__all__ = [
    "BACKENDS",
    "BACKGROUND",
    "BOUNDED",
    "Band",
    "BandRenderError",
    "DEFAULT_LIMIT",
    "DEFAULT_WORKERS",
    "RenderParameters",
    "RenderResult",
    "band_corners",
    "calculate_rgb",
    "calculate_rgb_array",
    "escape_time",
    "escape_time_grid",
    "new_pixel_buffer",
    "parse_complex",
    "parse_pair",
    "partition_bands",
    "pixel_to_point",
    "point_grid",
    "read_image",
    "render",
    "render_band",
    "render_band_vectorized",
    "render_image",
    "write_image",
]
