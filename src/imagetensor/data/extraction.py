"""
Pixel extraction: turn 4-byte-per-pixel bitmaps into flat, normalized,
channel-major float arrays ready to be reshaped into ``[1, C, H, W]`` model
inputs.

Two levels are provided:

* ``extract_rgb`` / ``extract_grayscale`` / ``extract_masked_composite`` walk
  a bitmap that already has the wanted size. They only need the raw buffer.
* ``PixelExtractor`` resamples every input to a fixed target size first and
  returns an empty array when that is impossible.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Tuple, Union

import numpy as np
from PIL import Image

from ..config import DEFAULT_SCALE, TARGET_SIZE
from .bitmap import Bitmap

logger = logging.getLogger(__name__)

ImageSource = Union[Bitmap, Image.Image, None]
Resampler = Callable[[Bitmap, Tuple[int, int]], Union[Bitmap, None]]


@dataclass(frozen=True)
class PreprocessParameters:
    """Scale and per-channel bias applied as ``value * scale + bias``."""

    scale: float = DEFAULT_SCALE
    r_bias: float = 0.0
    g_bias: float = 0.0
    b_bias: float = 0.0


def _empty() -> np.ndarray:
    return np.empty(0, dtype=np.float64)


def _channel(pixels: np.ndarray, offset: int) -> np.ndarray:
    # (H, W) plane of one byte position, flattened row-major
    return pixels[..., offset].reshape(-1).astype(np.float64)


def extract_rgb(bitmap: Bitmap, scale: float = DEFAULT_SCALE, r_bias: float = 0.0,
                g_bias: float = 0.0, b_bias: float = 0.0) -> np.ndarray:
    """
    Read bytes 1, 2 and 3 of every pixel as red, green and blue.

    Byte 0 (alpha in the default layout) is skipped.

    Args:
        bitmap (Bitmap): Source bitmap, walked with its own stride
        scale (float): Multiplier applied to every byte value
        r_bias, g_bias, b_bias (float): Added after scaling

    Returns:
        np.ndarray: float64 array of length ``3 * width * height``, all red
        values first, then green, then blue
    """
    pixels = bitmap.pixels()
    return np.concatenate([
        _channel(pixels, 1) * scale + r_bias,
        _channel(pixels, 2) * scale + g_bias,
        _channel(pixels, 3) * scale + b_bias,
    ])


def extract_grayscale(bitmap: Bitmap, scale: float = DEFAULT_SCALE, bias: float = 0.0) -> np.ndarray:
    """
    Read byte 0 of every pixel as a single channel.

    In the default ARGB layout byte 0 is alpha; decode colour images with
    ``Bitmap.from_image(image.convert("L"))`` to get luminance there.

    Returns:
        np.ndarray: float64 array of length ``width * height``
    """
    return _channel(bitmap.pixels(), 0) * scale + bias


def extract_masked_composite(output_image: Bitmap, input_image: Bitmap, mask_image: Bitmap, scale: float = 1.0,
                             r_bias: float = 0.0, g_bias: float = 0.0, b_bias: float = 0.0) -> np.ndarray:
    """
    Composite two bitmaps pixel-wise under a mask.

    Where byte 0 of the mask is non-zero the colour comes from *output_image*
    bytes 0, 1, 2; elsewhere from *input_image* bytes 1, 2, 3. The two sources are
    read at different offsets, so an ARGB *output_image* contributes (A, R, G).
    Pass *output_image* in RGBA layout to line the channels up.

    All three bitmaps must share the same width and height.

    Returns:
        np.ndarray: float64 array of length ``3 * width * height``
    """
    shapes = {(b.width, b.height) for b in (output_image, input_image, mask_image)}
    if len(shapes) != 1:
        raise ValueError(f"Composite sources differ in size: {sorted(shapes)}")

    selected = mask_image.pixels()[..., 0].reshape(-1) > 0
    out_pixels = output_image.pixels()
    in_pixels = input_image.pixels()

    channels = []
    for out_offset, in_offset, bias in ((0, 1, r_bias), (1, 2, g_bias), (2, 3, b_bias)):
        values = np.where(selected, _channel(out_pixels, out_offset), _channel(in_pixels, in_offset))
        channels.append(values * scale + bias)
    return np.concatenate(channels)


class PixelExtractor:
    """Resample images to a fixed size and extract normalized channel arrays.

    Every method accepts either a :class:`Bitmap` or a Pillow image. When an
    input is missing or cannot be resampled to ``target_size`` the method
    returns an empty array instead of raising; callers must check the length
    before feeding the result to a fixed-shape tensor.
    """

    def __init__(self, target_size: Tuple[int, int] = TARGET_SIZE, resampler: Resampler | None = None):
        if resampler is None:
            from ..utils.image_processing import resample_bitmap
            resampler = resample_bitmap
        self.target_size = (int(target_size[0]), int(target_size[1]))
        self.resampler = resampler

    @property
    def pixel_count(self) -> int:
        return self.target_size[0] * self.target_size[1]

    def prepare(self, source: ImageSource, grayscale: bool = False) -> Bitmap | None:
        """Return *source* as a bitmap of ``target_size`` pixels, or None.

        With *grayscale*, Pillow sources are reduced to luminance first so
        byte 0 holds the gray value instead of alpha.
        """
        if source is None:
            logger.warning("No source image given, extraction unavailable")
            return None
        if isinstance(source, Image.Image):
            try:
                source = Bitmap.from_image(source.convert("L") if grayscale else source)
            except ValueError as e:
                logger.warning("Could not decode %s image of size %s, extraction unavailable: %s",
                               source.mode, source.size, e)
                return None
        resampled = self.resampler(source, self.target_size)
        if resampled is None:
            logger.warning("Could not resample %dx%d image to %dx%d, extraction unavailable",
                           source.width, source.height, *self.target_size)
        return resampled

    def extract_rgb(self, source: ImageSource, scale: float = DEFAULT_SCALE, r_bias: float = 0.0,
                    g_bias: float = 0.0, b_bias: float = 0.0) -> np.ndarray:
        bitmap = self.prepare(source)
        if bitmap is None:
            return _empty()
        return extract_rgb(bitmap, scale, r_bias, g_bias, b_bias)

    def extract_grayscale(self, source: ImageSource, scale: float = DEFAULT_SCALE, bias: float = 0.0) -> np.ndarray:
        """Byte-0 extraction. Pillow images are converted to luminance first;
        bitmaps are read as-is, so an ARGB bitmap yields its alpha plane."""
        bitmap = self.prepare(source, grayscale=True)
        if bitmap is None:
            return _empty()
        return extract_grayscale(bitmap, scale, bias)

    def extract_masked_composite(self, output_image: ImageSource, input_image: ImageSource, mask_image: ImageSource,
                                 scale: float = 1.0, r_bias: float = 0.0, g_bias: float = 0.0,
                                 b_bias: float = 0.0) -> np.ndarray:
        """Resample the three sources independently, then composite them."""
        bitmaps = []
        for source in (output_image, input_image, mask_image):
            bitmap = self.prepare(source)
            if bitmap is None:
                return _empty()
            bitmaps.append(bitmap)
        return extract_masked_composite(*bitmaps, scale, r_bias, g_bias, b_bias)

    def extract_with(self, source: ImageSource, params: PreprocessParameters) -> np.ndarray:
        """RGB extraction using a :class:`PreprocessParameters` bundle."""
        return self.extract_rgb(source, params.scale, params.r_bias, params.g_bias, params.b_bias)
