"""Mapping between the pixel grid and the complex plane."""

from __future__ import annotations

import numpy as np


def pixel_to_point(
    bounds: tuple[int, int],
    pixel: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
) -> complex:
    """Return the point of the complex plane under ``pixel``.

    ``bounds`` gives the width and height of the image in pixels and ``pixel``
    is a ``(column, row)`` pair. Either coordinate may equal the matching
    bound, which addresses the edge one past the last column or row.
    ``upper_left`` and ``lower_right`` designate the area the image covers.

    The map is evaluated as a weighted sum of the two corners so that pixel
    ``(0, 0)`` lands exactly on ``upper_left`` and ``bounds`` lands exactly
    on ``lower_right``.
    """

    width, height = bounds
    column, row = pixel
    tx = column / width
    ty = row / height
    re = upper_left.real * (1.0 - tx) + lower_right.real * tx
    im = upper_left.imag * (1.0 - ty) + lower_right.imag * ty
    return complex(re, im)


def band_corners(
    bounds: tuple[int, int],
    top: int,
    bottom: int,
    upper_left: complex,
    lower_right: complex,
) -> tuple[complex, complex]:
    """Corners of the horizontal strip covering rows ``[top, bottom)``."""

    band_upper_left = pixel_to_point(bounds, (0, top), upper_left, lower_right)
    band_lower_right = pixel_to_point(bounds, (bounds[0], bottom), upper_left, lower_right)
    return band_upper_left, band_lower_right


def point_grid(bounds: tuple[int, int], upper_left: complex, lower_right: complex) -> np.ndarray:
    """Complex points for every pixel of ``bounds`` as a ``(height, width)`` array.

    Uses the same arithmetic as :func:`pixel_to_point`, one axis at a time.
    """

    width, height = bounds
    tx = np.arange(width, dtype=np.float64) / np.float64(width)
    ty = np.arange(height, dtype=np.float64) / np.float64(height)
    re = np.float64(upper_left.real) * (1.0 - tx) + np.float64(lower_right.real) * tx
    im = np.float64(upper_left.imag) * (1.0 - ty) + np.float64(lower_right.imag) * ty
    grid = np.empty((height, width), dtype=np.complex128)
    grid.real = re[np.newaxis, :]
    grid.imag = im[:, np.newaxis]
    return grid
