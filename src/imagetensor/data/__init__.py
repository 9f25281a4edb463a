"""Bitmap decoding, pixel extraction and tensor storage."""

from .bitmap import Bitmap, LAYOUTS
from .extraction import (
    PixelExtractor,
    PreprocessParameters,
    extract_rgb,
    extract_grayscale,
    extract_masked_composite,
)
from .tensors import (
    ExtractionUnavailableError,
    rgb_tensor,
    grayscale_tensor,
    composite_tensor,
)
from .lazy_tensors import (
    load_lazy_tensors,
    get_available_modes,
    get_available_images,
    get_tensor_shape,
)

__all__ = [
    "Bitmap",
    "LAYOUTS",
    "PixelExtractor",
    "PreprocessParameters",
    "extract_rgb",
    "extract_grayscale",
    "extract_masked_composite",
    "ExtractionUnavailableError",
    "rgb_tensor",
    "grayscale_tensor",
    "composite_tensor",
    "load_lazy_tensors",
    "get_available_modes",
    "get_available_images",
    "get_tensor_shape",
]
