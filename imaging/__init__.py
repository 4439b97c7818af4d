"""
imaging: Resize and center-crop stages of the preparation pipeline
"""

from .errors import ConfigError, DirectoryListingError, ResolutionTooLowError
from .metadata import Dimensions, Orientation, classify_orientation, get_orientation, read_dimensions
from .transform import (
    CropBox,
    ResizeParams,
    compute_crop,
    crop_and_encode,
    encode_jpeg,
    prepare_image,
    resize_image,
    resize_params,
)

__all__ = [
    'ConfigError',
    'DirectoryListingError',
    'ResolutionTooLowError',
    'Dimensions',
    'Orientation',
    'classify_orientation',
    'get_orientation',
    'read_dimensions',
    'CropBox',
    'ResizeParams',
    'compute_crop',
    'crop_and_encode',
    'encode_jpeg',
    'prepare_image',
    'resize_image',
    'resize_params',
]
