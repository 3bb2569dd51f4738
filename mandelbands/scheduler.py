"""Split a render into horizontal bands and compute them in parallel."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, wait

import numpy as np

from .geometry import band_corners
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

BACKENDS = {
    "python": render_band,
    "tensorflow": render_band_vectorized,
}


class BandRenderError(RuntimeError):
    """A worker failed while rendering one band; the whole render is discarded."""

    def __init__(self, band: Band) -> None:
        super().__init__(f"band {band.index} (rows {band.top}-{band.bottom}) failed to render")
        self.band = band


def partition_bands(bounds: tuple[int, int], workers: int) -> list[Band]:
    """Cut ``bounds`` into ``workers`` consecutive row ranges.

    Every band but possibly the trailing ones holds ``height // workers + 1``
    rows, so together they always cover the whole image. Trailing bands may be
    short or empty.
    """

    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    height = bounds[1]
    rows_per_band = height // workers + 1
    bands = []
    for index in range(workers):
        top = min(index * rows_per_band, height)
        bottom = min(top + rows_per_band, height)
        bands.append(Band(index=index, top=top, bottom=bottom))
    return bands


def render(
    pixels: np.ndarray,
    bounds: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    workers: int = DEFAULT_WORKERS,
    limit: int = DEFAULT_LIMIT,
    backend: str = "python",
) -> list[Band]:
    """Fill ``pixels`` with the Mandelbrot set over the given window.

    The buffer is partitioned before any worker starts; each worker receives
    only the view of its own rows, and this function returns once every
    worker has finished. Returns the bands that were used.
    """

    try:
        render_fn = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown backend '{backend}'. Valid choices: {', '.join(sorted(BACKENDS))}.") from None

    bands = partition_bands(bounds, workers)
    width = bounds[0]
    assert pixels.shape[:2] == (bounds[1], width)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {}
        for band in bands:
            if not band.height:
                continue
            band_upper_left, band_lower_right = band_corners(bounds, band.top, band.bottom, upper_left, lower_right)
            future = executor.submit(
                render_fn,
                band.view(pixels),
                (width, band.height),
                band_upper_left,
                band_lower_right,
                limit,
            )
            futures[future] = band
        wait(futures)

    # Futures were submitted in band order, so the first failure is the lowest band.
    for future, band in futures.items():
        error = future.exception()
        if error is not None:
            raise BandRenderError(band) from error

    return bands


def render_image(params: RenderParameters) -> RenderResult:
    """Render a complete image given the supplied parameters."""

    pixels = new_pixel_buffer(params.bounds)
    bands = render(
        pixels,
        params.bounds,
        params.upper_left,
        params.lower_right,
        workers=params.workers,
        limit=params.max_iterations,
        backend=params.backend,
    )
    return RenderResult(pixels=pixels, bands=tuple(bands))
