"""
utils: Configuration, file discovery and logging helpers
"""

from .config import PipelineConfig, build_config, load_config_file
from .image_io import derive_output_name, list_input_files, plan_outputs
from .logging_setup import configure_logger

__all__ = [
    'PipelineConfig',
    'build_config',
    'load_config_file',
    'derive_output_name',
    'list_input_files',
    'plan_outputs',
    'configure_logger',
]
