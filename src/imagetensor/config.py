"""
Default constants shared by the extraction pipeline.
"""

# Every input is resampled to this (width, height) before extraction
TARGET_SIZE = (512, 512)

BYTES_PER_PIXEL = 4

# 8-bit channel values are mapped into [0, 1]
DEFAULT_SCALE = 1 / 255

# Byte order inside one pixel. Colour images default to alpha-first so that
# bytes 1..3 hold red, green and blue; single-band images put the luminance in
# byte 0.
DEFAULT_LAYOUT = "ARGB"
GRAYSCALE_LAYOUT = "RGBA"

IMAGE_EXTENSIONS = (".png", ".jpg")
