import threading

import numpy as np
import pytest

from mandelbands import (
    BACKGROUND,
    Band,
    BandRenderError,
    RenderParameters,
    new_pixel_buffer,
    partition_bands,
    render,
    render_band,
    render_band_vectorized,
    render_image,
)
from mandelbands import scheduler

UPPER_LEFT = complex(-1.0, 1.0)
LOWER_RIGHT = complex(1.0, -1.0)


@pytest.mark.parametrize("height", [1, 2, 3, 7, 8, 9, 16, 100, 101])
@pytest.mark.parametrize("workers", [1, 2, 3, 8, 12, 200])
def test_bands_tile_the_image(height, workers):
    width = 5
    bands = partition_bands((width, height), workers)

    assert len(bands) == workers
    assert [band.index for band in bands] == list(range(workers))
    assert bands[0].top == 0
    assert bands[-1].bottom == height
    for previous, current in zip(bands, bands[1:]):
        assert current.top == previous.bottom
    assert all(band.height >= 0 for band in bands)
    assert sum(band.height * width for band in bands) == width * height


def test_partition_of_100_rows_into_8_workers():
    bands = partition_bands((100, 100), 8)

    assert [(band.top, band.bottom) for band in bands] == [
        (0, 13), (13, 26), (26, 39), (39, 52), (52, 65), (65, 78), (78, 91), (91, 100),
    ]


def test_more_workers_than_rows_leaves_empty_bands():
    bands = partition_bands((4, 3), 8)

    assert [band.height for band in bands] == [1, 1, 1, 0, 0, 0, 0, 0]


def test_partition_rejects_zero_workers():
    with pytest.raises(ValueError, match="at least 1"):
        partition_bands((10, 10), 0)


def test_band_views_are_disjoint_slices_of_the_buffer():
    pixels = new_pixel_buffer((4, 10))
    bands = partition_bands((4, 10), 3)

    for band in bands:
        band.view(pixels)[...] = band.index + 1

    for band in bands:
        assert np.all(pixels[band.top:band.bottom] == band.index + 1)
        assert np.shares_memory(band.view(pixels), pixels)


def test_render_end_to_end():
    pixels = new_pixel_buffer((100, 100))

    render(pixels, (100, 100), UPPER_LEFT, LOWER_RIGHT, workers=8, limit=255)

    assert pixels.shape == (100, 100, 3)
    assert pixels.reshape(-1, 3).shape == (100 * 100, 3)
    assert tuple(pixels[50, 50]) == BACKGROUND
    # Every pixel was written, and no escape count maps to black.
    assert not np.any(np.all(pixels == 0, axis=-1))


def test_worker_count_does_not_change_the_image():
    single = new_pixel_buffer((100, 100))
    parallel = new_pixel_buffer((100, 100))

    render(single, (100, 100), UPPER_LEFT, LOWER_RIGHT, workers=1, limit=255)
    render(parallel, (100, 100), UPPER_LEFT, LOWER_RIGHT, workers=8, limit=255)

    assert single.tobytes() == parallel.tobytes()


def test_single_worker_matches_a_direct_band_render():
    bounds = (30, 20)
    upper_left, lower_right = complex(-2.0, 1.2), complex(1.0, -1.2)
    direct = new_pixel_buffer(bounds)
    scheduled = new_pixel_buffer(bounds)

    render_band(direct, bounds, upper_left, lower_right, 64)
    render(scheduled, bounds, upper_left, lower_right, workers=1, limit=64)

    np.testing.assert_array_equal(direct, scheduled)


def test_each_worker_gets_only_its_own_rows(monkeypatch):
    seen = []
    lock = threading.Lock()

    def fill(pixels, bounds, upper_left, lower_right, limit):
        with lock:
            seen.append((bounds, upper_left, lower_right, limit))
        pixels[...] = 7

    monkeypatch.setitem(scheduler.BACKENDS, "python", fill)
    pixels = new_pixel_buffer((10, 16))

    bands = render(pixels, (10, 16), UPPER_LEFT, LOWER_RIGHT, workers=4, limit=99)

    assert np.all(pixels == 7)
    assert sorted(bounds for bounds, *_ in seen) == [(10, 1), (10, 5), (10, 5), (10, 5)]
    assert all(limit == 99 for *_, limit in seen)
    assert sum(band.height for band in bands) == 16


def test_failing_band_is_reported(monkeypatch):
    def fail_below_real_axis(pixels, bounds, upper_left, lower_right, limit):
        if upper_left.imag < 0:
            raise ValueError("bad band")
        pixels[...] = 1

    monkeypatch.setitem(scheduler.BACKENDS, "python", fail_below_real_axis)
    pixels = new_pixel_buffer((10, 16))

    with pytest.raises(BandRenderError) as excinfo:
        render(pixels, (10, 16), UPPER_LEFT, LOWER_RIGHT, workers=4)

    assert excinfo.value.band == Band(index=2, top=10, bottom=15)
    assert isinstance(excinfo.value.__cause__, ValueError)
    assert "band 2" in str(excinfo.value)


def test_unknown_backend_is_rejected():
    with pytest.raises(ValueError, match="Unknown backend"):
        render(new_pixel_buffer((4, 4)), (4, 4), UPPER_LEFT, LOWER_RIGHT, backend="opencl")


def test_tensorflow_backend_matches_python_backend():
    bounds = (24, 16)
    upper_left, lower_right = complex(-2.0, 1.2), complex(1.0, -1.2)
    python = new_pixel_buffer(bounds)
    vectorized = new_pixel_buffer(bounds)

    render(python, bounds, upper_left, lower_right, workers=3, limit=64)
    render(vectorized, bounds, upper_left, lower_right, workers=3, limit=64, backend="tensorflow")

    np.testing.assert_array_equal(python, vectorized)


def test_vectorized_band_paints_background():
    pixels = new_pixel_buffer((3, 3))

    render_band_vectorized(pixels, (3, 3), complex(-0.1, 0.1), complex(0.1, -0.1), 50)

    assert np.all(pixels == BACKGROUND)


def test_render_image():
    params = RenderParameters(width=40, height=30, upper_left=complex(-2.0, 1.2), lower_right=complex(1.0, -1.2),
                              max_iterations=80, workers=4)

    result = render_image(params)

    assert result.pixels.shape == (30, 40, 3)
    assert len(result.bands) == 4
    assert result.bands[-1].bottom == 30
    expected = new_pixel_buffer(params.bounds)
    render(expected, params.bounds, params.upper_left, params.lower_right, workers=4, limit=80)
    np.testing.assert_array_equal(result.pixels, expected)
