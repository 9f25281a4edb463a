#!/usr/bin/env python3
"""Minimal extraction example for a single image."""
from __future__ import annotations

import argparse

from imagetensor import PixelExtractor, rgb_tensor, rotate
from imagetensor.data.loaders import load_bitmap
from imagetensor.data.bitmap import Bitmap


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Turn one image into a [1, 3, H, W] tensor")
    parser.add_argument("--image", required=True, help="Path to a PNG or JPG file")
    parser.add_argument("--size", type=int, default=512, help="Square target resolution (default: 512)")
    parser.add_argument("--rotate", type=float, default=0.0, help="Rotate clockwise by this many degrees first")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    bitmap = load_bitmap(args.image)
    if args.rotate:
        bitmap = Bitmap.from_image(rotate(bitmap.to_image(), args.rotate, keep_size=False))

    tensor = rgb_tensor(bitmap, extractor=PixelExtractor(target_size=(args.size, args.size)))
    print(f"Source: {bitmap.width}x{bitmap.height}, stride {bitmap.bytes_per_row} bytes")
    print(f"Tensor: shape {tuple(tensor.shape)}, dtype {tensor.dtype}")
    for name, plane in zip("RGB", tensor[0]):
        print(f"  {name}: mean {plane.mean().item():.4f}, min {plane.min().item():.4f}, max {plane.max().item():.4f}")


if __name__ == "__main__":
    main()
