"""
utils.image_io: Input discovery and output naming
"""
import logging
from pathlib import Path
from typing import List, Tuple, Union

from imaging.errors import DirectoryListingError


JPEG_EXTENSION = ".jpg"


def list_input_files(directory: Union[str, Path]) -> List[Path]:
    """
    List the regular files directly inside a directory, sorted by name.

    Every file is returned regardless of extension; files the decoder
    cannot read fail individually later on.

    Raises:
        DirectoryListingError: if the directory cannot be read
    """
    directory = Path(directory)
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        logging.debug(f"Listing {directory} failed: {e}")
        raise DirectoryListingError("Error getting directory information.") from e

    return sorted(p for p in entries if p.is_file())


def derive_output_name(
    filename: Union[str, Path],
    target_size: int = 512,
    force_jpeg_extension: bool = False,
) -> str:
    """
    Insert a size suffix before the extension of a file name.

    The last '.' separates the extension, so "a.b.jpg" becomes "a.b-512.jpg".
    Names without an extension get the suffix appended.

    Args:
        filename: Source file name or path (only the final component is used)
        target_size: Size written into the suffix
        force_jpeg_extension: Replace the source extension with ".jpg"

    Returns:
        Output file name
    """
    path = Path(filename)
    suffix = JPEG_EXTENSION if force_jpeg_extension else path.suffix
    return f"{path.stem}-{target_size}{suffix}"


def plan_outputs(
    files: List[Path],
    output_dir: Path,
    target_size: int = 512,
    force_jpeg_extension: bool = False,
) -> List[Tuple[Path, Path]]:
    """Pair each input file with its output path."""
    plan = []
    seen = {}
    for src in files:
        dst = output_dir / derive_output_name(src.name, target_size, force_jpeg_extension)
        if dst in seen:
            logging.warning(f"{src.name} and {seen[dst].name} both map to {dst.name} and will overwrite each other")
        seen[dst] = src
        plan.append((src, dst))
    return plan
