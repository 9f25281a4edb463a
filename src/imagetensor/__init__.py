"""
imagetensor: image helpers and pixel extraction for model tensor inputs.
"""

from .data import (
    Bitmap,
    ExtractionUnavailableError,
    PixelExtractor,
    PreprocessParameters,
    composite_tensor,
    grayscale_tensor,
    rgb_tensor,
)
from .utils import resize, resample_bitmap, rotate, solid_color_image

__version__ = "0.1.0"

__all__ = [
    "Bitmap",
    "ExtractionUnavailableError",
    "PixelExtractor",
    "PreprocessParameters",
    "composite_tensor",
    "grayscale_tensor",
    "rgb_tensor",
    "resize",
    "resample_bitmap",
    "rotate",
    "solid_color_image",
]
