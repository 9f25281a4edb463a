"""
Script for extracting model-input tensors from image folders and saving them to HDF5.
"""
import argparse
import os
from typing import Iterable

import h5py
from tqdm import tqdm

from imagetensor.config import DEFAULT_SCALE, TARGET_SIZE
from imagetensor.data import loaders
from imagetensor.data.extraction import PixelExtractor
from imagetensor.data.tensors import grayscale_tensor, rgb_tensor

MODES = ("rgb", "grayscale")


def _resolve_folder(stimuli_root: str, folder: str) -> str:
    if os.path.isabs(folder):
        return folder
    return os.path.join(stimuli_root, folder)


def main(
    *,
    stimuli_root: str,
    output_dir: str,
    folders: Iterable[str] = (".",),
    modes: Iterable[str] = MODES,
    size: int = TARGET_SIZE[0],
    scale: float = DEFAULT_SCALE,
    output_prefix: str = "tensors",
):
    """
    Extract tensors for every image in *folders* and write one HDF5 file per folder.

    Args:
        stimuli_root (str): Base directory the folders are resolved against
        output_dir (str): Where the ``<output_prefix>_<folder>.h5`` files go
        folders (iterable): Folders relative to stimuli_root ('.' for the root)
        modes (iterable): Any of "rgb" and "grayscale"
        size (int): Side length of the square target resolution
        scale (float): Multiplier applied to every byte value

    Returns:
        list: Paths of the written HDF5 files
    """
    stimuli_root = os.path.abspath(stimuli_root)
    output_dir = os.path.abspath(output_dir)
    folders = list(folders)
    modes = list(modes)

    if not folders:
        raise ValueError("At least one folder must be provided via --folders")
    unknown = set(modes) - set(MODES)
    if unknown:
        raise ValueError(f"Unknown modes: {sorted(unknown)}")

    os.makedirs(output_dir, exist_ok=True)
    print(f"Stimuli root: {stimuli_root}")
    print(f"Output directory: {output_dir}")

    extractor = PixelExtractor(target_size=(size, size))
    written = []

    for folder_name in folders:
        folder_path = _resolve_folder(stimuli_root, folder_name)
        display_name = os.path.basename(folder_path.rstrip(os.sep)) or "root"

        if not os.path.exists(folder_path):
            print(f"Warning: Folder {folder_path} not found, skipping...")
            continue

        images = loaders.get_image_set(folder_path)
        if not images:
            print(f"Warning: No images found in {folder_path}, skipping...")
            continue
        print(f"Found {len(images)} images in {display_name}")

        sanitized = folder_name.strip("./").replace(os.sep, "_") or "root"
        output_path = os.path.join(output_dir, f"{output_prefix}_{sanitized}.h5")
        process_folder(folder_path, output_path, images, extractor, modes, scale=scale)
        written.append(output_path)

    print("\nTensor extraction complete!")
    for output_path in written:
        print(f"Saved to: {output_path}")
    return written


def process_folder(image_folder, output_path, image_set, extractor, modes, *, scale: float = DEFAULT_SCALE):
    """Extract every image of one folder into a single HDF5 file."""
    with h5py.File(output_path, "w") as f:
        for mode in modes:
            f.create_group(mode)

        for image_name in tqdm(image_set, desc=f"Processing {os.path.basename(image_folder) or 'root'}"):
            try:
                image_path = loaders.find_image_path(image_folder, image_name)
                for mode in modes:
                    if mode == "rgb":
                        bitmap = loaders.load_bitmap(image_path)
                        tensor = rgb_tensor(bitmap, scale, extractor=extractor)
                    else:
                        bitmap = loaders.load_bitmap(image_path, grayscale=True)
                        tensor = grayscale_tensor(bitmap, scale, extractor=extractor)
                    f[mode].create_dataset(image_name, data=tensor.numpy())
            except (OSError, ValueError) as e:
                print(f"Error processing {image_name}: {str(e)}")
                continue


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Extract model-input tensors from images")
    parser.add_argument("--stimuli_root", required=True, help="Base directory containing image folders (absolute or relative).")
    parser.add_argument("--folders", nargs="+", default=["."], help="One or more folders within the stimuli root to process (use '.' for the root).")
    parser.add_argument("--output_dir", required=True, help="Directory where tensor HDF5 files will be stored.")
    parser.add_argument("--output_prefix", default="tensors", help="Prefix for output HDF5 files (default: tensors).")
    parser.add_argument("--modes", nargs="+", default=list(MODES), choices=MODES, help="Extraction modes (default: rgb grayscale).")
    parser.add_argument("--size", type=int, default=TARGET_SIZE[0], help=f"Square target resolution (default: {TARGET_SIZE[0]}).")
    parser.add_argument("--scale", type=float, default=DEFAULT_SCALE, help="Multiplier applied to byte values (default: 1/255).")
    args = parser.parse_args()

    main(
        stimuli_root=args.stimuli_root,
        output_dir=args.output_dir,
        folders=args.folders,
        modes=args.modes,
        size=args.size,
        scale=args.scale,
        output_prefix=args.output_prefix,
    )
