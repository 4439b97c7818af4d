"""
imaging.metadata: Image handles, dimensions and orientation
"""
import io
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterator, Union

from PIL import Image

# Anything the pipeline accepts as an image
ImageSource = Union[str, Path, bytes, bytearray, BinaryIO, Image.Image]


class Orientation(str, Enum):
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


@dataclass(frozen=True)
class Dimensions:
    """Pixel size of a decoded or on-disk image."""

    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid image dimensions: {self.width}x{self.height}")

    @property
    def shorter(self) -> int:
        return min(self.width, self.height)

    @property
    def longer(self) -> int:
        return max(self.width, self.height)


@contextmanager
def open_image(source: ImageSource) -> Iterator[Image.Image]:
    """
    Open an image handle without decoding its pixels.

    Decoded PIL images are yielded as-is and left open for the caller.
    Paths and buffers are opened lazily and closed on exit; file objects
    supplied by the caller are not closed.
    """
    if isinstance(source, Image.Image):
        yield source
        return

    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    with Image.open(source) as img:
        yield img


def read_dimensions(source: ImageSource) -> Dimensions:
    """
    Read the width and height of an image.

    Only the header is parsed for paths and buffers. Decoder errors
    (unknown format, truncated header) are propagated to the caller.

    Args:
        source: Path, raw bytes, binary file object or PIL image

    Returns:
        Dimensions of the image
    """
    with open_image(source) as img:
        width, height = img.size
    return Dimensions(width=int(width), height=int(height))


def classify_orientation(dimensions: Dimensions) -> Orientation:
    """Square images count as landscape."""
    if dimensions.width >= dimensions.height:
        return Orientation.LANDSCAPE
    return Orientation.PORTRAIT


def get_orientation(source: ImageSource) -> Orientation:
    return classify_orientation(read_dimensions(source))
