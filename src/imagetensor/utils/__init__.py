"""Pillow-backed image helpers."""

from .image_processing import resize, resample_bitmap, rotate, solid_color_image

__all__ = ["resize", "resample_bitmap", "rotate", "solid_color_image"]
