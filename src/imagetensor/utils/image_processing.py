"""Image processing utilities.

Thin wrappers around Pillow for resizing, rotating and creating solid-colour
images, plus the bitmap resampler the pixel extractor depends on.
"""

from __future__ import annotations

import logging
import math
from typing import Tuple

import numpy as np
from PIL import Image

from ..data.bitmap import Bitmap

__all__: Tuple[str, ...] = ("resize", "resample_bitmap", "rotate", "solid_color_image")

logger = logging.getLogger(__name__)


def _pixel_size(size: Tuple[float, float], scale: float) -> Tuple[int, int]:
    return int(size[0] * scale), int(size[1] * scale)


def resize(image: Image.Image, size: Tuple[float, float], scale: float = 1.0) -> Image.Image:
    """Return a resized copy of *image*.

    Parameters
    ----------
    image : PIL.Image.Image
        Source image.
    size : tuple of float
        Target ``(width, height)`` in points.
    scale : float, default=1.0
        Points-to-pixels factor. If this is 1, *size* is the size in pixels.
    """
    return image.resize(_pixel_size(size, scale), Image.Resampling.LANCZOS)


def resample_bitmap(bitmap: Bitmap, size: Tuple[int, int]) -> Bitmap | None:
    """Resample *bitmap* to exactly ``size`` pixels.

    The pixel layout is preserved and the returned bitmap has no row
    padding. Resampling to the bitmap's own size leaves the pixel values
    untouched.

    Parameters
    ----------
    bitmap : Bitmap
        Source bitmap.
    size : tuple of int
        Target ``(width, height)`` in pixels.

    Returns
    -------
    Bitmap or None
        ``None`` if the target size is not positive or Pillow cannot produce
        the resampled image.
    """
    width, height = int(size[0]), int(size[1])
    if width <= 0 or height <= 0:
        logger.warning("Cannot resample %dx%d bitmap to %dx%d", bitmap.width, bitmap.height, width, height)
        return None

    # Each byte plane is resized as its own "L" image so Pillow never
    # premultiplies the colour bytes by whichever byte holds alpha
    pixels = bitmap.pixels()
    try:
        planes = [
            np.asarray(
                Image.fromarray(np.ascontiguousarray(pixels[..., k])).resize((width, height), Image.Resampling.LANCZOS),
                dtype=np.uint8,
            )
            for k in range(bitmap.bytes_per_pixel)
        ]
    except (ValueError, OSError, MemoryError) as e:
        logger.warning("Resampling %dx%d bitmap to %dx%d failed: %s", bitmap.width, bitmap.height, width, height, e)
        return None

    return Bitmap.from_array(np.stack(planes, axis=-1), layout=bitmap.layout)


def rotate(image: Image.Image, degrees: float, keep_size: bool = True) -> Image.Image:
    """Rotate *image* around its centre.

    Positive angles turn the picture clockwise. Uncovered regions are black.

    Args:
        image: Source image.
        degrees: Rotation angle in degrees.
        keep_size: If True, the result has the size of the original image, so
            corners may be cropped off. If False, the canvas expands to fit
            all the pixels.

    Returns:
        New RGBA image.
    """
    width, height = image.size
    if keep_size:
        new_width, new_height = width, height
    else:
        radians = math.radians(degrees)
        cos_a, sin_a = abs(math.cos(radians)), abs(math.sin(radians))
        # Trim float noise so e.g. a 90 degree turn does not gain a pixel
        new_width = math.floor(round(width * cos_a + height * sin_a, 6))
        new_height = math.floor(round(width * sin_a + height * cos_a, 6))

    # Pillow rotates counter-clockwise, hence the sign flip
    rotated = image.convert("RGBA").rotate(
        -degrees,
        resample=Image.Resampling.BICUBIC,
        expand=True,
        fillcolor=(0, 0, 0, 255),
    )

    canvas = Image.new("RGBA", (new_width, new_height), (0, 0, 0, 255))
    offset = ((new_width - rotated.width) // 2, (new_height - rotated.height) // 2)
    canvas.paste(rotated, offset)
    return canvas


def solid_color_image(color, size: Tuple[float, float] = (1, 1), scale: float = 1.0) -> Image.Image:
    """Return an RGBA image filled with *color*.

    *color* is anything Pillow accepts as a fill value: an RGB(A) tuple or a
    colour string such as ``"#ff8800"`` or ``"red"``.
    """
    return Image.new("RGBA", _pixel_size(size, scale), color)
