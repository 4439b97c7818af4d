"""
Dreambooth image preparation

Resizes and center crops a directory of photos to fixed-size square JPEGs
ready for Dreambooth-style fine-tuning.
"""

__version__ = "1.0.0"
__author__ = "Research Team"
__email__ = "research@example.com"

from .imaging import prepare_image, resize_image, crop_and_encode
from .utils import PipelineConfig, configure_logger

__all__ = [
    "prepare_image",
    "resize_image",
    "crop_and_encode",
    "PipelineConfig",
    "configure_logger",
]
