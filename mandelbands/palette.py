"""Gaussian color gradient for escape counts."""

from __future__ import annotations

import numpy as np

# Converts a full width at half maximum into a standard deviation, 2 * sqrt(2 * ln 2).
FWHM_TO_SIGMA = 2.3548

BACKGROUND = (40, 40, 40)


def gaussian_parameters(limit: int) -> tuple[np.ndarray, float]:
    """Return the red, green and blue curve centers and their shared sigma.

    The centers split ``limit`` into thirds, shifted left by a sixth, so the
    curves peak at 1/6 (blue), 1/2 (green) and 5/6 (red) of the limit. The
    width of each curve is derived from a FWHM of half the limit.
    """

    fwhm = limit / 2.0
    sigma = fwhm / FWHM_TO_SIGMA

    blue = limit / 6.0
    green = blue + limit / 3.0
    red = green + limit / 3.0
    return np.array([red, green, blue], dtype=np.float64), sigma


def calculate_rgb_array(limit: int, values) -> np.ndarray:
    """Colors for an array of iteration counts, shape ``values.shape + (3,)``.

    Each channel is a Gaussian probability density evaluated at the value and
    multiplied by ``limit * sqrt(2 * pi * sigma ** 2)``. The normalization
    constants cancel, leaving ``limit * exp(-(value - mean) ** 2 / (2 * sigma ** 2))``,
    which is the form evaluated here so a curve's peak maps onto ``limit``.
    """

    means, sigma = gaussian_parameters(limit)
    values = np.asarray(values, dtype=np.float64)[..., np.newaxis]
    channels = limit * np.exp(-((values - means) ** 2) / (2.0 * sigma * sigma))
    channels = np.clip(np.nan_to_num(channels, nan=0.0), 0.0, 255.0)
    return channels.astype(np.uint8)


def calculate_rgb(limit: int, value: float) -> tuple[int, int, int]:
    """Calculate the RGB color of a single iteration count.

    The color is the superposition of three Gaussian curves, one per channel,
    so the gradient blends smoothly from blue through green to red as the
    count approaches ``limit``.
    """

    red, green, blue = calculate_rgb_array(limit, value)
    return int(red), int(green), int(blue)
