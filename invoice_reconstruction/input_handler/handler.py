"""
Main Input Handler Module.

This module provides the InputHandler class that loads capture files
produced by the page-capture layer: plain text files holding the
visible text of a billing page, and JSON files holding captured GraphQL
payloads.

Usage:
    from invoice_reconstruction.input_handler import InputHandler

    handler = InputHandler()
    capture = handler.load("billing_page.txt")

    # Process a capture directory
    captures = handler.load_batch("./captures/")

Classes:
    CaptureInput: Result of loading one capture file
    InputHandler: Main class for capture file handling
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union

from config import get_config
from invoice_reconstruction.utils.logger import get_logger
from invoice_reconstruction.utils.helpers import get_file_extension
from invoice_reconstruction.utils.exceptions import (
    InputError,
    InputFileNotFoundError,
    PayloadFormatError,
    UnsupportedFileTypeError,
)

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class CaptureInput:
    """
    Data class representing one loaded capture file.

    Attributes:
        filepath: Original file path
        filename: Original filename
        kind: 'text' or 'payload' ('unknown' if loading failed)
        text: Visible text blob for text captures
        payloads: Decoded JSON payloads for payload captures
        success: Whether loading was successful
        error: Error message if loading failed
    """
    filepath: str
    filename: str
    kind: str
    text: Optional[str] = None
    payloads: List[Any] = field(default_factory=list)
    success: bool = True
    error: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"CaptureInput(filename='{self.filename}', "
            f"kind='{self.kind}', "
            f"success={self.success})"
        )


class InputHandler:
    """
    Loader for capture files.

    Attributes:
        text_extensions: Extensions treated as visible-text captures
        payload_extensions: Extensions treated as JSON payload captures

    Example:
        >>> handler = InputHandler()
        >>> capture = handler.load("billing_page.txt")
        >>> if capture.success:
        ...     session.ingest(capture)
    """

    TEXT_EXTENSIONS = ['.txt', '.text']
    PAYLOAD_EXTENSIONS = ['.json']

    def __init__(self) -> None:
        self.text_extensions = {
            ext.lower() for ext in get_config("capture.text_extensions", self.TEXT_EXTENSIONS)
        }
        self.payload_extensions = {
            ext.lower() for ext in get_config("capture.payload_extensions", self.PAYLOAD_EXTENSIONS)
        }

        logger.debug(
            f"InputHandler initialized (text: {sorted(self.text_extensions)}, "
            f"payload: {sorted(self.payload_extensions)})"
        )

    @property
    def supported_extensions(self) -> List[str]:
        return sorted(self.text_extensions | self.payload_extensions)

    def detect_input_type(self, filepath: Union[str, Path]) -> str:
        """
        Detect the kind of capture file.

        Returns:
            'text' or 'payload'.

        Raises:
            UnsupportedFileTypeError: If the extension is not supported.
        """
        extension = get_file_extension(filepath)

        if extension in self.text_extensions:
            return 'text'
        if extension in self.payload_extensions:
            return 'payload'
        raise UnsupportedFileTypeError(extension, self.supported_extensions)

    def validate_file(self, filepath: Union[str, Path]) -> Path:
        """
        Validate that a capture file exists and has a supported type.

        Raises:
            InputFileNotFoundError: If file doesn't exist.
            InputError: If the path is not a regular file.
            UnsupportedFileTypeError: If file type is not supported.
        """
        path = Path(filepath)

        if not path.exists():
            raise InputFileNotFoundError(str(filepath))

        if not path.is_file():
            raise InputError(f"Path is not a file: {filepath}")

        self.detect_input_type(path)
        return path

    def read_payloads(self, path: Path) -> List[Any]:
        """
        Decode a JSON capture file.

        A file may hold a single payload or a list of payloads.

        Raises:
            PayloadFormatError: If the file is not valid JSON.
        """
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except ValueError as e:
            raise PayloadFormatError(str(path), str(e))

        return data if isinstance(data, list) else [data]

    def load(self, filepath: Union[str, Path]) -> CaptureInput:
        """
        Load one capture file.

        Input problems are reported on the returned CaptureInput rather
        than raised, so one bad file never stops a batch.

        Args:
            filepath: Path to a .txt or .json capture.

        Returns:
            CaptureInput with the text or the decoded payloads.
        """
        filepath = str(filepath)
        logger.info(f"Loading capture: {filepath}")

        try:
            path = self.validate_file(filepath)
            kind = self.detect_input_type(path)

            if kind == 'text':
                text = path.read_text(encoding='utf-8', errors='replace')
                capture = CaptureInput(filepath, path.name, kind, text=text)
                logger.debug(f"Loaded {len(text)} characters from {path.name}")
            else:
                payloads = self.read_payloads(path)
                capture = CaptureInput(filepath, path.name, kind, payloads=payloads)
                logger.debug(f"Loaded {len(payloads)} payload(s) from {path.name}")

            return capture

        except InputError as e:
            logger.error(f"Input error for {filepath}: {e}")
            return CaptureInput(
                filepath=filepath,
                filename=Path(filepath).name,
                kind='unknown',
                success=False,
                error=str(e)
            )

        except OSError as e:
            logger.error(f"Could not read {filepath}: {e}")
            return CaptureInput(
                filepath=filepath,
                filename=Path(filepath).name,
                kind='unknown',
                success=False,
                error=f"Read error: {e}"
            )

    def load_batch(
        self,
        directory: Union[str, Path],
        recursive: bool = False
    ) -> List[CaptureInput]:
        """
        Load all supported capture files in a directory, sorted by name.

        Raises:
            InputFileNotFoundError: If the directory doesn't exist.
            InputError: If the path is not a directory.
        """
        directory = Path(directory)

        if not directory.exists():
            raise InputFileNotFoundError(str(directory))

        if not directory.is_dir():
            raise InputError(f"Path is not a directory: {directory}")

        pattern = "**/*" if recursive else "*"
        files = sorted(
            path for path in directory.glob(pattern)
            if path.is_file() and get_file_extension(path) in self.supported_extensions
        )

        logger.info(f"Found {len(files)} capture file(s) in {directory}")

        results = [self.load(path) for path in files]

        successful = sum(1 for r in results if r.success)
        logger.info(
            f"Capture loading complete: {successful} loaded, "
            f"{len(results) - successful} failed"
        )
        return results
