"""Raw 4-byte-per-pixel bitmap buffers.

A :class:`Bitmap` is the decoded form every extraction routine works on: a
flat byte buffer plus the stride and dimension metadata needed to walk it.
Conversion to and from Pillow images lives here as well so the rest of the
extraction code never has to touch Pillow directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np
from PIL import Image

from ..config import BYTES_PER_PIXEL, DEFAULT_LAYOUT, GRAYSCALE_LAYOUT

__all__: Tuple[str, ...] = ("Bitmap", "LAYOUTS")

# Index into an RGBA pixel for each byte position of a layout
LAYOUTS = {
    "RGBA": (0, 1, 2, 3),
    "ARGB": (3, 0, 1, 2),
    "BGRA": (2, 1, 0, 3),
    "ABGR": (3, 2, 1, 0),
}

_SINGLE_BAND_MODES = {"1", "L", "LA", "I", "I;16", "F"}


@dataclass(frozen=True)
class Bitmap:
    """Decoded raster image stored as bytes with an explicit row stride.

    Parameters
    ----------
    width, height : int
        Pixel dimensions.
    bytes_per_row : int
        Distance in bytes between the starts of two consecutive rows. May be
        larger than ``width * bytes_per_pixel`` when rows are padded.
    data : bytes
        Pixel buffer of length ``bytes_per_row * height``.
    bytes_per_pixel : int, default=4
        Only 4-byte pixels are supported.
    layout : str, default="ARGB"
        Channel byte order inside a pixel, one of :data:`LAYOUTS`. Only used
        when converting to a Pillow image; extraction reads fixed offsets.

    Raises
    ------
    ValueError
        If the metadata and the buffer are inconsistent.
    """

    width: int
    height: int
    bytes_per_row: int
    data: bytes = field(repr=False)
    bytes_per_pixel: int = BYTES_PER_PIXEL
    layout: str = DEFAULT_LAYOUT

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Bitmap dimensions must be positive, got {self.width}x{self.height}")
        if self.bytes_per_pixel != BYTES_PER_PIXEL:
            raise ValueError(f"Only {BYTES_PER_PIXEL} bytes per pixel are supported, got {self.bytes_per_pixel}")
        if self.bytes_per_row < self.width * self.bytes_per_pixel:
            raise ValueError(
                f"bytes_per_row={self.bytes_per_row} is smaller than one row of pixels "
                f"({self.width * self.bytes_per_pixel} bytes)"
            )
        if self.layout not in LAYOUTS:
            raise ValueError(f"Unknown pixel layout: {self.layout}")
        expected = self.bytes_per_row * self.height
        if len(self.data) != expected:
            raise ValueError(f"Expected {expected} bytes of pixel data, got {len(self.data)}")

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height), the Pillow convention."""
        return self.width, self.height

    def pixels(self) -> np.ndarray:
        """Return a read-only ``(height, width, 4)`` uint8 view without row padding."""
        rows = np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.bytes_per_row)
        row_bytes = self.width * self.bytes_per_pixel
        return rows[:, :row_bytes].reshape(self.height, self.width, self.bytes_per_pixel)

    @classmethod
    def from_array(cls, pixels: np.ndarray, *, bytes_per_row: int | None = None, layout: str = DEFAULT_LAYOUT) -> "Bitmap":
        """Pack a ``(height, width, 4)`` uint8 array, optionally padding every row."""
        pixels = np.asarray(pixels, dtype=np.uint8)
        if pixels.ndim != 3 or pixels.shape[2] != BYTES_PER_PIXEL:
            raise ValueError(f"Expected an array of shape (H, W, {BYTES_PER_PIXEL}), got {pixels.shape}")
        height, width = pixels.shape[:2]
        row_bytes = width * BYTES_PER_PIXEL
        if bytes_per_row is None:
            bytes_per_row = row_bytes
        if bytes_per_row < row_bytes:
            raise ValueError(f"bytes_per_row={bytes_per_row} is smaller than one row of pixels ({row_bytes} bytes)")

        buffer = np.zeros((height, bytes_per_row), dtype=np.uint8)
        buffer[:, :row_bytes] = pixels.reshape(height, row_bytes)
        return cls(
            width=width,
            height=height,
            bytes_per_row=bytes_per_row,
            data=buffer.tobytes(),
            layout=layout,
        )

    @classmethod
    def from_image(cls, image: Image.Image, *, layout: str | None = None, bytes_per_row: int | None = None) -> "Bitmap":
        """Decode a Pillow image into a bitmap.

        Args:
            image: Any Pillow image; it is converted to RGBA first.
            layout: Byte order to store. Defaults to ``"ARGB"`` for colour
                images and ``"RGBA"`` for single-band ones, so grayscale
                luminance ends up in byte 0.
            bytes_per_row: Optional padded stride.

        Returns:
            Bitmap holding a copy of the pixel data.
        """
        if layout is None:
            layout = GRAYSCALE_LAYOUT if image.mode in _SINGLE_BAND_MODES else DEFAULT_LAYOUT
        if layout not in LAYOUTS:
            raise ValueError(f"Unknown pixel layout: {layout}")

        rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
        return cls.from_array(rgba[..., list(LAYOUTS[layout])], bytes_per_row=bytes_per_row, layout=layout)

    def to_image(self) -> Image.Image:
        """Return the bitmap as an RGBA Pillow image."""
        order = LAYOUTS[self.layout]
        rgba = np.empty((self.height, self.width, BYTES_PER_PIXEL), dtype=np.uint8)
        rgba[..., list(order)] = self.pixels()
        return Image.fromarray(rgba)
