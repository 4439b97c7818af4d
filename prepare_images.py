#!/usr/bin/env python3
"""
Resize and center crop images to 512x512 JPEGs for Dreambooth fine-tuning.

Every image in the input directory is scaled so its shorter side is 512px,
center cropped to a square and written to the output directory as
"<name>-512<ext>". Images smaller than 512px on either side are rejected.

Usage:
    python prepare_images.py --input process-images --output processed-images
    python prepare_images.py --file process-images/portrait.jpg --output-name portrait-512.jpg
"""

from __future__ import annotations
import argparse
import logging
import os
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from tqdm import tqdm

try:  # pragma: no cover - supports both package and script execution
    from .imaging import DirectoryListingError, prepare_image
    from .utils.config import PipelineConfig, build_config
    from .utils.image_io import derive_output_name, list_input_files, plan_outputs
    from .utils.logging_setup import configure_logger
except ImportError:  # pragma: no cover
    from imaging import DirectoryListingError, prepare_image
    from utils.config import PipelineConfig, build_config
    from utils.image_io import derive_output_name, list_input_files, plan_outputs
    from utils.logging_setup import configure_logger


@dataclass
class ProcessResult:
    """Settled outcome of one image."""

    source: Path
    output: Path
    success: bool
    error: Optional[Exception] = None

    @property
    def message(self) -> str:
        if self.success:
            return f"{self.source} -> {self.output}"
        return f"Error processing {self.source}: {self.error}"


@dataclass
class BatchReport:
    results: List[ProcessResult] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def failures(self) -> List[ProcessResult]:
        return [r for r in self.results if not r.success]


def process_single_image(source: Path, output_path: Path, config: PipelineConfig) -> ProcessResult:
    """
    Run the full pipeline for one image, capturing any failure.

    Used as the unit of work for the batch so one bad file never takes down
    the others.
    """
    try:
        prepare_image(
            source,
            output_path,
            min_resolution=config.min_resolution,
            target_size=config.target_size,
            quality=config.jpeg_quality,
        )
    except Exception as e:
        return ProcessResult(source=source, output=output_path, success=False, error=e)
    return ProcessResult(source=source, output=output_path, success=True)


def process_file(
    source: Union[str, Path],
    config: PipelineConfig,
    output_name: Optional[str] = None,
) -> Path:
    """
    Single-file mode: process one image into config.output_dir.

    Args:
        source: Image to process
        config: Pipeline settings
        output_name: File name to write; derived from the source name if omitted

    Returns:
        Path of the written JPEG

    Raises:
        Whatever the pipeline raises; nothing is caught here
    """
    source = Path(source)
    if output_name is None:
        output_name = derive_output_name(source.name, config.target_size, config.force_jpeg_extension)
    output_path = config.output_dir / output_name

    logging.info(f"Processing {source} -> {output_path}")
    return prepare_image(
        source,
        output_path,
        min_resolution=config.min_resolution,
        target_size=config.target_size,
        quality=config.jpeg_quality,
    )


def _log_outcome(result: ProcessResult) -> None:
    if result.success:
        logging.debug(result.message)
    else:
        logging.warning(result.message)


def process_directory(
    config: PipelineConfig,
    dry_run: bool = False,
    show_progress: bool = True,
) -> BatchReport:
    """
    Process every file in config.input_dir.

    Files are dispatched independently; each one settles into a
    ProcessResult and the report lists them in input order.

    Args:
        config: Pipeline settings
        dry_run: Only log what would be done
        show_progress: Show a tqdm progress bar

    Raises:
        DirectoryListingError: if the input directory cannot be listed,
            before any file is touched
    """
    files = list_input_files(config.input_dir)
    plan = plan_outputs(files, config.output_dir, config.target_size, config.force_jpeg_extension)

    if not plan:
        logging.warning(f"No files found in {config.input_dir}")
        return BatchReport()

    logging.info(f"Found {len(plan)} files to process")
    logging.info(f"Output: {config.target_size}x{config.target_size} JPEG in {config.output_dir}")

    if dry_run:
        logging.info("[DRY RUN] Would process:")
        for src, dst in plan[:10]:
            logging.info(f"  {src} -> {dst}")
        if len(plan) > 10:
            logging.info(f"  ... and {len(plan) - 10} more")
        return BatchReport()

    num_workers = config.num_workers or os.cpu_count() or 4
    results: Dict[int, ProcessResult] = {}

    if num_workers == 1:
        for i, (src, dst) in enumerate(tqdm(plan, desc="Preparing images", disable=not show_progress)):
            results[i] = process_single_image(src, dst, config)
            _log_outcome(results[i])
    else:
        logging.debug(f"Using {num_workers} worker threads")
        with ThreadPoolExecutor(max_workers=num_workers) as executor:
            futures = {
                executor.submit(process_single_image, src, dst, config): i
                for i, (src, dst) in enumerate(plan)
            }

            for future in tqdm(
                as_completed(futures),
                total=len(futures),
                desc=f"Preparing images ({num_workers} workers)",
                disable=not show_progress,
            ):
                i = futures[future]
                results[i] = future.result()
                _log_outcome(results[i])

    return BatchReport(results=[results[i] for i in range(len(plan))])


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = PipelineConfig()
    p = argparse.ArgumentParser(
        description="Resize and center crop images to square JPEGs for Dreambooth",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Process every image in ./process-images into ./processed-images
    python prepare_images.py

    # Custom directories, force .jpg output names
    python prepare_images.py -i photos -o dataset --force-jpg

    # Single image with a fixed output name
    python prepare_images.py --file photos/portrait.jpg --output-name portrait-512.jpg
"""
    )
    p.add_argument("--input", "-i", type=Path,
                   help=f"Input directory (default: {defaults.input_dir})")
    p.add_argument("--output", "-o", type=Path,
                   help=f"Output directory (default: {defaults.output_dir})")
    p.add_argument("--file", type=Path,
                   help="Process a single image instead of a directory")
    p.add_argument("--output-name",
                   help="Output file name in single-file mode")
    p.add_argument("--min-resolution", type=int,
                   help=f"Reject images smaller than this on either side (default: {defaults.min_resolution})")
    p.add_argument("--size", type=int,
                   help=f"Output square size in pixels (default: {defaults.target_size})")
    p.add_argument("--quality", type=int,
                   help=f"JPEG quality 1-100 (default: {defaults.jpeg_quality})")
    p.add_argument("--force-jpg", action="store_true",
                   help="Always use a .jpg extension for output names")
    p.add_argument("--workers", "-w", type=int,
                   help="Worker threads, 0 = one per CPU, 1 = sequential (default: 0)")
    p.add_argument("--config", type=Path,
                   help="YAML or JSON file with pipeline settings; flags override it")
    p.add_argument("--dry-run", action="store_true",
                   help="Only print what would be done")
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="Increase verbosity (-v, -vv)")
    p.add_argument("--log-file", type=str,
                   help="Also write the full log to this file")

    args = p.parse_args(argv)

    if args.output_name and not args.file:
        p.error("--output-name requires --file")
    if args.file and args.input:
        p.error("Cannot use both --file and --input")

    return args


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    configure_logger(args.verbose, args.log_file)

    overrides = {
        "input_dir": args.input,
        "output_dir": args.output,
        "min_resolution": args.min_resolution,
        "target_size": args.size,
        "jpeg_quality": args.quality,
        "force_jpeg_extension": True if args.force_jpg else None,
        "num_workers": args.workers,
    }
    try:
        config = build_config(args.config, overrides)
    except (ValueError, OSError) as e:
        logging.error(f"Invalid configuration: {e}")
        sys.exit(1)

    if args.file:
        if args.dry_run:
            name = args.output_name or derive_output_name(
                args.file.name, config.target_size, config.force_jpeg_extension
            )
            logging.info(f"[DRY RUN] Would process: {args.file} -> {config.output_dir / name}")
            return
        try:
            written = process_file(args.file, config, args.output_name)
        except Exception as e:
            logging.error(f"Error processing {args.file}: {e}")
            sys.exit(1)
        logging.info(f"Wrote {written}")
        return

    try:
        report = process_directory(config, dry_run=args.dry_run)
    except DirectoryListingError as e:
        logging.error(f"{e} ({config.input_dir}: {e.__cause__})")
        sys.exit(1)

    if args.dry_run:
        return

    logging.info(f"Done! Processed {report.processed} images with {report.failed} errors")

    if report.failed:
        for result in report.failures[:10]:
            logging.error(f"  {result.message}")
        if report.failed > 10:
            logging.error(f"  ... and {report.failed - 10} more")
        sys.exit(1)


if __name__ == "__main__":
    main()
