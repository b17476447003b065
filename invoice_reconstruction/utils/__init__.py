"""
Utility Module for the Invoice Reconstruction System.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Exception hierarchy
    - File helpers
"""

from .logger import setup_logger, get_logger
from .helpers import ensure_directory, get_file_extension, generate_timestamp, safe_filename

__all__ = [
    'setup_logger',
    'get_logger',
    'ensure_directory',
    'get_file_extension',
    'generate_timestamp',
    'safe_filename'
]
