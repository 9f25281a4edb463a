"""Utilities for listing and loading source images for tensor extraction."""
from __future__ import annotations

import os
from typing import List

from PIL import Image

from ..config import IMAGE_EXTENSIONS
from .bitmap import Bitmap


def get_image_set(image_folder: str) -> List[str]:
    """Return sorted, unique image base names (without extension) for .png/.jpg files."""
    if not os.path.isdir(image_folder):
        raise FileNotFoundError(f"Image folder not found: {image_folder}")
    return sorted({os.path.splitext(f)[0] for f in os.listdir(image_folder) if f.lower().endswith(IMAGE_EXTENSIONS)})


def find_image_path(image_folder: str, image_name: str) -> str:
    """Return the path of *image_name* in *image_folder*.

    Extensions match case-insensitively. When several files share the name,
    the one whose extension comes first in ``IMAGE_EXTENSIONS`` wins.
    """
    candidates = {}
    for f in os.listdir(image_folder):
        stem, ext = os.path.splitext(f)
        if stem == image_name and ext.lower() in IMAGE_EXTENSIONS:
            candidates.setdefault(ext.lower(), f)
    for ext in IMAGE_EXTENSIONS:
        if ext in candidates:
            return os.path.join(image_folder, candidates[ext])
    raise FileNotFoundError(f"No image named {image_name} in {image_folder}")


def load_bitmap(image_path: str, layout: str | None = None, grayscale: bool = False) -> Bitmap:
    """Open an image file and decode it into a :class:`Bitmap`.

    With *grayscale* the image is first reduced to luminance, which then sits
    in byte 0 of every pixel where grayscale extraction reads it.
    """
    if not os.path.exists(image_path):
        raise FileNotFoundError(f"Image path does not exist: {image_path}")
    with Image.open(image_path) as img:
        if grayscale:
            img = img.convert("L")
        return Bitmap.from_image(img, layout=layout)
