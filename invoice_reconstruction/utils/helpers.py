"""
Helper Utilities Module.

Small filesystem and formatting helpers shared by the capture readers
and the exporters.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - generate_timestamp: Generate formatted timestamps
    - safe_filename: Sanitize filenames for filesystem
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/documents")
        PosixPath('outputs/documents')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Return the lowercase extension of a path, including the dot.

    Example:
        >>> get_file_extension("capture.TXT")
        '.txt'
    """
    return Path(filepath).suffix.lower()


def generate_timestamp(format_str: str = "%Y%m%d_%H%M%S") -> str:
    """
    Generate a formatted timestamp string.

    Args:
        format_str: strftime format string.

    Returns:
        Formatted timestamp string.
    """
    return datetime.now().strftime(format_str)


def safe_filename(filename: str, replacement: str = "_") -> str:
    """
    Sanitize a filename by replacing characters that are invalid on
    common filesystems.

    Dedup keys embed service periods such as "Jan 1 - Jan 31" or
    "01/01/2024 - 01/31/2024", so slashes must be replaced before a key
    can become part of a filename.

    Args:
        filename: Original filename.
        replacement: Character to replace invalid characters with.

    Returns:
        Sanitized filename safe for filesystem.

    Example:
        >>> safe_filename("invoice_123_01/01 - 01/31.html")
        'invoice_123_01_01 - 01_31.html'
    """
    invalid_chars = r'[<>:"/\\|?*\x00-\x1f]'
    sanitized = re.sub(invalid_chars, replacement, filename)

    sanitized = sanitized.strip('. ')

    if not sanitized:
        sanitized = "unnamed"

    return sanitized
