"""
imaging.errors: Exceptions raised by the preparation pipeline
"""


class ResolutionTooLowError(ValueError):
    """Source image is smaller than the minimum resolution on either axis."""

    def __init__(self, width: int, height: int, min_resolution: int):
        self.width = width
        self.height = height
        self.min_resolution = min_resolution
        super().__init__(f"Image must be at least {min_resolution}x{min_resolution}px")


class DirectoryListingError(OSError):
    """The input directory could not be enumerated."""


class ConfigError(ValueError):
    """Invalid pipeline configuration."""
