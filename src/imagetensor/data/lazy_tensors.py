"""
Lazy-loading dictionary classes for memory-efficient access to HDF5 tensor files
written by ``runners/run_extract_tensors.py``.

File layout: ``{mode}/{image_name}`` datasets of shape ``(1, C, H, W)``, where
mode is ``"rgb"`` or ``"grayscale"``.
"""
import h5py
import numpy as np
from typing import List


class LazyImageDict:
    """Dictionary-like access to the tensors of one extraction mode, loaded on-demand."""

    def __init__(self, h5_path: str, mode: str):
        """
        Args:
            h5_path: Path to HDF5 file
            mode: Extraction mode group ("rgb" or "grayscale")
        """
        self.h5_path = h5_path
        self.mode = mode
        self._cache = {}

        with h5py.File(h5_path, "r") as f:
            self._image_names = list(f[mode].keys())

    def __getitem__(self, image_name: str) -> np.ndarray:
        """Load and return the tensor stored for *image_name*."""
        if image_name in self._cache:
            return self._cache[image_name]

        if image_name not in self._image_names:
            raise KeyError(f"Image {image_name} not found in mode {self.mode}")

        with h5py.File(self.h5_path, "r") as f:
            data = f[self.mode][image_name][:]

        # Only cache small tensors (< 10MB)
        if data.nbytes < 10 * 1024 * 1024:
            self._cache[image_name] = data

        return data

    def __contains__(self, image_name: str) -> bool:
        return image_name in self._image_names

    def __len__(self) -> int:
        return len(self._image_names)

    def keys(self):
        """Return available image names."""
        return self._image_names

    def clear_cache(self):
        """Clear the tensor cache to free memory."""
        self._cache.clear()


class LazyTensorDict:
    """Top-level lazy dictionary: ``tensors[mode][image_name] -> np.ndarray``."""

    def __init__(self, h5_path: str):
        self.h5_path = h5_path
        self._cache = {}

        try:
            with h5py.File(h5_path, "r") as f:
                self._modes = list(f.keys())
        except OSError as e:
            raise ValueError(f"Cannot open HDF5 file {h5_path}: {e}") from e

    def __getitem__(self, mode: str) -> LazyImageDict:
        if mode in self._cache:
            return self._cache[mode]

        if mode not in self._modes:
            raise KeyError(f"Mode {mode} not found in tensor file")

        image_dict = LazyImageDict(self.h5_path, mode)
        self._cache[mode] = image_dict
        return image_dict

    def __contains__(self, mode: str) -> bool:
        return mode in self._modes

    def keys(self):
        """Return available extraction modes."""
        return self._modes

    def close(self):
        """Clear all caches and free memory."""
        for image_dict in self._cache.values():
            image_dict.clear_cache()
        self._cache.clear()


def load_lazy_tensors(h5_path: str) -> LazyTensorDict:
    """
    Open a tensor file for lazy, dictionary-like access.

    Example:
        >>> tensors = load_lazy_tensors("tensors_root.h5")
        >>> x = tensors["rgb"]["object_01"]  # Only loads this image
    """
    return LazyTensorDict(h5_path)


def get_available_modes(h5_path: str) -> List[str]:
    """Return the extraction modes stored in *h5_path*."""
    with h5py.File(h5_path, "r") as f:
        return list(f.keys())


def get_available_images(h5_path: str, mode: str) -> List[str]:
    """Return the image names stored for *mode*."""
    with h5py.File(h5_path, "r") as f:
        if mode not in f:
            raise KeyError(f"Mode {mode} not found in {h5_path}")
        return list(f[mode].keys())


def get_tensor_shape(h5_path: str, mode: str, sample_image: str = None) -> tuple:
    """
    Get the shape of the tensors stored for *mode*.

    Args:
        h5_path: Path to HDF5 tensor file
        mode: Extraction mode
        sample_image: Image to sample from (if None, uses first image)

    Returns:
        Tuple ``(1, C, H, W)``
    """
    with h5py.File(h5_path, "r") as f:
        if mode not in f:
            raise KeyError(f"Mode {mode} not found in {h5_path}")

        if sample_image is None:
            images = list(f[mode].keys())
            if not images:
                raise ValueError(f"No images found for mode {mode}")
            sample_image = images[0]

        if sample_image not in f[mode]:
            raise KeyError(f"Image {sample_image} not found in mode {mode}")

        return f[mode][sample_image].shape
