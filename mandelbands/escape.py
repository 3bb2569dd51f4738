"""Escape-time iteration for the quadratic map ``z -> z * z + c``."""

from __future__ import annotations

from typing import Optional

import numpy as np
import tensorflow as tf

# Squared escape radius. Once |z| > 2 the orbit is proven to diverge.
HORIZON = 4.0

BOUNDED = -1


def escape_time(c: complex, limit: int) -> Optional[int]:
    """Try to determine whether ``c`` is in the Mandelbrot set using at most ``limit`` iterations.

    If ``c`` is not a member, return ``i``, the 0-based index of the iteration
    whose result left the circle of radius two centered on the origin. If
    ``c`` seems to be a member (more precisely, the iteration limit was reached
    without proving that ``c`` is not a member), return ``None``.
    """

    z = 0j
    for i in range(limit):
        z = z * z + c
        if z.real * z.real + z.imag * z.imag > HORIZON:
            return i
    return None


@tf.function
def _escape_step(
    i: tf.Tensor,
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    escaped_at: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Perform a single iteration for points whose orbit has not escaped yet."""

    zr_new = (zr * zr - zi * zi) + cr
    zi_new = (zr * zi + zi * zr) + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    horizon = tf.constant(HORIZON, dtype=zr.dtype)
    escaping = tf.logical_and(active, zr * zr + zi * zi > horizon)
    escaped_at = tf.where(escaping, tf.fill(tf.shape(escaped_at), i), escaped_at)
    active = tf.logical_and(active, tf.logical_not(escaping))
    return zr, zi, escaped_at, active


@tf.function(
    input_signature=(
        tf.TensorSpec(shape=[None, None], dtype=tf.float64),
        tf.TensorSpec(shape=[None, None], dtype=tf.float64),
        tf.TensorSpec(shape=[], dtype=tf.int32),
    )
)
def _escape_run(cr: tf.Tensor, ci: tf.Tensor, limit: tf.Tensor) -> tf.Tensor:
    """Iterate every point of the grid using a TensorFlow while loop."""

    i = tf.constant(0, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    escaped_at = tf.fill(tf.shape(cr), tf.constant(BOUNDED, dtype=tf.int32))
    active = tf.ones_like(cr, tf.bool)

    def cond(i, zr, zi, escaped_at, active):
        return tf.logical_and(tf.less(i, limit), tf.reduce_any(active))

    def body(i, zr, zi, escaped_at, active):
        zr, zi, escaped_at, active = _escape_step(i, zr, zi, cr, ci, escaped_at, active)
        return i + 1, zr, zi, escaped_at, active

    _, _, _, escaped_at, _ = tf.while_loop(cond, body, (i, zr, zi, escaped_at, active))
    return escaped_at


def escape_time_grid(points: np.ndarray, limit: int, *, device: Optional[str] = None) -> np.ndarray:
    """Vectorized :func:`escape_time` over a 2-D array of complex points.

    Returns an ``int32`` array of the same shape holding the escape index of
    each point, or ``BOUNDED`` (-1) where no escape was observed.
    """

    points = np.asarray(points, dtype=np.complex128)
    with tf.device(device if device is not None else "/CPU:0"):
        cr = tf.convert_to_tensor(np.ascontiguousarray(points.real), dtype=tf.float64)
        ci = tf.convert_to_tensor(np.ascontiguousarray(points.imag), dtype=tf.float64)
        escaped_at = _escape_run(cr, ci, tf.constant(limit, dtype=tf.int32))
    return escaped_at.numpy()
