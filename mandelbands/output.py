"""Encoding finished pixel buffers to image files."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import imageio.v2 as imageio
import numpy as np
import PIL.Image


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def image_format_for(path: Union[str, Path], image_format: Optional[str] = None) -> str:
    """Normalize ``image_format``, falling back to the suffix of ``path`` and then to png."""

    image_format = (image_format or Path(path).suffix or "png").lower().lstrip(".")
    return image_format or "png"


def write_image(path: Union[str, Path], pixels: np.ndarray, image_format: Optional[str] = None) -> Path:
    """Write an RGB pixel buffer of shape ``(height, width, 3)`` to ``path``.

    I/O failures are raised to the caller unchanged.
    """

    output_path = Path(path).expanduser()
    pil_format = _pil_format_name(image_format_for(output_path, image_format))
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image = PIL.Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    image.save(str(output_path), format=pil_format)
    return output_path


def read_image(path: Union[str, Path]) -> np.ndarray:
    """Read an image back as a ``(height, width, 3)`` uint8 array."""

    frame = np.asarray(imageio.imread(str(path)))
    if frame.ndim == 2:
        frame = np.stack((frame,) * 3, axis=-1)
    return frame[..., :3].astype(np.uint8, copy=False)
