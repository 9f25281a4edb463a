"""
Pack extracted channel arrays into ``[1, C, H, W]`` torch tensors.
"""
from __future__ import annotations

import numpy as np
import torch

from ..config import DEFAULT_SCALE
from .extraction import ImageSource, PixelExtractor


class ExtractionUnavailableError(ValueError):
    """Raised when an image could not be turned into a full-size channel array."""


def _to_tensor(values: np.ndarray, channels: int, extractor: PixelExtractor) -> torch.Tensor:
    width, height = extractor.target_size
    expected = channels * width * height
    if values.size == 0 or values.size != expected:
        raise ExtractionUnavailableError(
            f"Expected {expected} values for a [1, {channels}, {height}, {width}] tensor, got {values.size}"
        )
    return torch.from_numpy(values).reshape(1, channels, height, width)


def rgb_tensor(source: ImageSource, scale: float = DEFAULT_SCALE, r_bias: float = 0.0, g_bias: float = 0.0,
               b_bias: float = 0.0, *, extractor: PixelExtractor | None = None) -> torch.Tensor:
    """
    Extract RGB channels and return them as a float64 tensor of shape [1, 3, H, W].

    Raises:
        ExtractionUnavailableError: If the image could not be resampled
    """
    extractor = extractor or PixelExtractor()
    values = extractor.extract_rgb(source, scale, r_bias, g_bias, b_bias)
    return _to_tensor(values, 3, extractor)


def grayscale_tensor(source: ImageSource, scale: float = DEFAULT_SCALE, bias: float = 0.0, *,
                     extractor: PixelExtractor | None = None) -> torch.Tensor:
    """Single-channel variant of :func:`rgb_tensor`, shape [1, 1, H, W]."""
    extractor = extractor or PixelExtractor()
    values = extractor.extract_grayscale(source, scale, bias)
    return _to_tensor(values, 1, extractor)


def composite_tensor(output_image: ImageSource, input_image: ImageSource, mask_image: ImageSource, scale: float = DEFAULT_SCALE,
                     r_bias: float = 0.0, g_bias: float = 0.0, b_bias: float = 0.0, *,
                     extractor: PixelExtractor | None = None) -> torch.Tensor:
    """Masked composite of *output_image* over *input_image*, shape [1, 3, H, W]."""
    extractor = extractor or PixelExtractor()
    values = extractor.extract_masked_composite(output_image, input_image, mask_image, scale, r_bias, g_bias, b_bias)
    return _to_tensor(values, 3, extractor)
