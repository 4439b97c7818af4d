"""
imaging.transform: Resize, center-crop and JPEG encoding

The pipeline for one image is

    resize_image()      shorter side -> target_size, aspect ratio preserved
    crop_and_encode()   center crop to target_size x target_size, write JPEG

Both stages read the dimensions of their input exactly once and pass them
explicitly to the pure helpers (resize_params, compute_crop).
"""
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image

from .errors import ResolutionTooLowError
from .metadata import (
    Dimensions,
    ImageSource,
    Orientation,
    classify_orientation,
    open_image,
)


DEFAULT_MIN_RESOLUTION = 512
DEFAULT_TARGET_SIZE = 512
DEFAULT_JPEG_QUALITY = 80


# Single-channel modes holding more than 8 bits per sample
HIGH_BIT_DEPTH_MODES = ("I", "I;16", "I;16B", "I;16L", "I;16N", "F")


def to_8bit(image: Image.Image) -> Image.Image:
    """
    Convert any image to 8-bit RGB or grayscale.

    16-bit and 32-bit samples are rescaled by 1/256 first; a plain convert
    would clip everything above 255 to white.
    """
    if image.mode in HIGH_BIT_DEPTH_MODES:
        if image.mode != "F":
            image = image.convert("I")
        image = image.point(lambda v: v * (1 / 256)).convert("L")
    if image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    return image


def _div_round_half_up(numerator: int, denominator: int) -> int:
    """round(numerator / denominator) with .5 rounded up, for non-negative ints."""
    return (2 * numerator + denominator) // (2 * denominator)


@dataclass(frozen=True)
class ResizeParams:
    """Single-axis resize target; the other axis follows the aspect ratio."""

    width: Optional[int] = None
    height: Optional[int] = None

    def __post_init__(self):
        if (self.width is None) == (self.height is None):
            raise ValueError("Exactly one of width or height must be set")

    def output_size(self, dimensions: Dimensions) -> Tuple[int, int]:
        if self.height is not None:
            width = _div_round_half_up(dimensions.width * self.height, dimensions.height)
            return (max(width, 1), self.height)
        height = _div_round_half_up(dimensions.height * self.width, dimensions.width)
        return (self.width, max(height, 1))


@dataclass(frozen=True)
class CropBox:
    left: int
    top: int
    width: int
    height: int

    def as_box(self) -> Tuple[int, int, int, int]:
        """(left, upper, right, lower) as expected by Image.crop."""
        return (self.left, self.top, self.left + self.width, self.top + self.height)


def resize_params(
    dimensions: Dimensions,
    min_resolution: int = DEFAULT_MIN_RESOLUTION,
    target_size: int = DEFAULT_TARGET_SIZE,
) -> ResizeParams:
    """
    Choose the fixed axis for the initial resize.

    Landscape (and square) images are scaled to a fixed height, portrait
    images to a fixed width, so the shorter side ends up at target_size.

    Raises:
        ResolutionTooLowError: if either side is below min_resolution
    """
    if dimensions.width < min_resolution or dimensions.height < min_resolution:
        raise ResolutionTooLowError(dimensions.width, dimensions.height, min_resolution)

    if classify_orientation(dimensions) is Orientation.LANDSCAPE:
        return ResizeParams(height=target_size)
    return ResizeParams(width=target_size)


def resize_image(
    source: ImageSource,
    min_resolution: int = DEFAULT_MIN_RESOLUTION,
    target_size: int = DEFAULT_TARGET_SIZE,
) -> Image.Image:
    """
    Resize an image so its shorter side equals target_size.

    The resolution check runs on the header alone, before any pixel data
    is decoded. Nothing is written to disk.

    Args:
        source: Path, raw bytes, binary file object or PIL image
        min_resolution: Minimum accepted width and height
        target_size: Length of the shorter side after resizing

    Returns:
        New in-memory RGB (or grayscale) image
    """
    with open_image(source) as img:
        dimensions = Dimensions(*img.size)
        params = resize_params(dimensions, min_resolution, target_size)
        size = params.output_size(dimensions)

        logging.debug(
            f"Resizing {dimensions.width}x{dimensions.height} -> {size[0]}x{size[1]}"
        )

        return to_8bit(img).resize(size, Image.Resampling.LANCZOS)


def compute_crop(dimensions: Dimensions, target_size: int = DEFAULT_TARGET_SIZE) -> CropBox:
    """
    Center crop rectangle along the longer axis of a resized image.

    Landscape images keep top == 0 and center horizontally; portrait images
    keep left == 0 and center vertically. Offsets round half up.
    """
    if dimensions.width < target_size or dimensions.height < target_size:
        raise ValueError(
            f"Cannot crop {target_size}x{target_size} from "
            f"{dimensions.width}x{dimensions.height} image"
        )

    if classify_orientation(dimensions) is Orientation.LANDSCAPE:
        top = 0
        left = _div_round_half_up(dimensions.width - target_size, 2)
    else:
        top = _div_round_half_up(dimensions.height - target_size, 2)
        left = 0

    return CropBox(left=left, top=top, width=target_size, height=target_size)


def crop_image(resized: Image.Image, target_size: int = DEFAULT_TARGET_SIZE) -> Image.Image:
    box = compute_crop(Dimensions(*resized.size), target_size)
    return resized.crop(box.as_box())


def encode_jpeg(image: Image.Image, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Encode as an optimized progressive JPEG, dropping any alpha channel."""
    image = to_8bit(image)

    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality, optimize=True, progressive=True)
    return buffer.getvalue()


def crop_and_encode(
    resized: ImageSource,
    output_path: Union[str, Path],
    target_size: int = DEFAULT_TARGET_SIZE,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> Path:
    """
    Center crop a resized image and write it as JPEG.

    An existing file at output_path is overwritten. The parent directory is
    created when missing.

    Returns:
        Path of the written file
    """
    with open_image(resized) as img:
        cropped = crop_image(img, target_size)

    data = encode_jpeg(cropped, quality)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)

    logging.debug(f"Wrote {len(data)} bytes to {output_path}")
    return output_path


def prepare_image(
    source: ImageSource,
    output_path: Union[str, Path],
    min_resolution: int = DEFAULT_MIN_RESOLUTION,
    target_size: int = DEFAULT_TARGET_SIZE,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> Path:
    """Resize, crop and write a single image. Errors propagate."""
    resized = resize_image(source, min_resolution, target_size)
    return crop_and_encode(resized, output_path, target_size, quality)
