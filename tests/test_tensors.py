#!/usr/bin/env python3
"""Unit tests for the [1, C, H, W] tensor wrappers."""
from __future__ import annotations

import numpy as np
import pytest
import torch

from imagetensor.data.bitmap import Bitmap
from imagetensor.data.extraction import PixelExtractor
from imagetensor.data.tensors import (
    ExtractionUnavailableError,
    composite_tensor,
    grayscale_tensor,
    rgb_tensor,
)


def make_bitmap(width: int, height: int, pixel) -> Bitmap:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[...] = pixel
    return Bitmap.from_array(pixels)


def test_rgb_tensor_shape_and_planes() -> None:
    extractor = PixelExtractor(target_size=(5, 3))
    tensor = rgb_tensor(make_bitmap(5, 3, (255, 51, 102, 204)), extractor=extractor)
    assert tuple(tensor.shape) == (1, 3, 3, 5)
    assert tensor.dtype == torch.float64
    assert torch.allclose(tensor[0, 0], torch.full((3, 5), 0.2, dtype=torch.float64))
    assert torch.allclose(tensor[0, 1], torch.full((3, 5), 0.4, dtype=torch.float64))
    assert torch.allclose(tensor[0, 2], torch.full((3, 5), 0.8, dtype=torch.float64))


def test_rgb_tensor_keeps_pixel_positions() -> None:
    pixels = np.zeros((2, 3, 4), dtype=np.uint8)
    pixels[1, 2] = (0, 255, 0, 0)  # bottom-right pixel is red
    tensor = rgb_tensor(Bitmap.from_array(pixels), extractor=PixelExtractor(target_size=(3, 2)))
    assert tensor[0, 0, 1, 2].item() == pytest.approx(1.0)
    assert tensor[0, 0].sum().item() == pytest.approx(1.0)


def test_grayscale_tensor_shape() -> None:
    extractor = PixelExtractor(target_size=(4, 4))
    tensor = grayscale_tensor(make_bitmap(4, 4, (128, 0, 0, 0)), scale=1.0, bias=-128.0, extractor=extractor)
    assert tuple(tensor.shape) == (1, 1, 4, 4)
    assert torch.count_nonzero(tensor).item() == 0


def test_composite_tensor_forwards_parameters() -> None:
    extractor = PixelExtractor(target_size=(2, 2))
    output = make_bitmap(2, 2, (255, 0, 0, 0))
    background = make_bitmap(2, 2, (0, 0, 0, 0))
    mask = make_bitmap(2, 2, (1, 0, 0, 0))
    tensor = composite_tensor(output, background, mask, scale=1 / 255, r_bias=-1.0, extractor=extractor)
    assert tuple(tensor.shape) == (1, 3, 2, 2)
    assert torch.allclose(tensor[0, 0], torch.zeros((2, 2), dtype=torch.float64))
    assert torch.allclose(tensor[0, 1], torch.zeros((2, 2), dtype=torch.float64))


def test_unavailable_extraction_raises() -> None:
    bitmap = make_bitmap(2, 2, 0)
    with pytest.raises(ExtractionUnavailableError):
        rgb_tensor(None, extractor=PixelExtractor(target_size=(2, 2)))
    with pytest.raises(ExtractionUnavailableError):
        grayscale_tensor(bitmap, extractor=PixelExtractor(target_size=(0, 0)))
    with pytest.raises(ValueError):
        composite_tensor(bitmap, bitmap, None, extractor=PixelExtractor(target_size=(2, 2)))


if __name__ == "__main__":
    test_rgb_tensor_shape_and_planes()
    test_unavailable_extraction_raises()
    print("All tensor tests passed!")
