"""
Custom Exceptions Module.

This module defines the exceptions used throughout the invoice
reconstruction system. Parse-time anomalies are absorbed inside the
parser; only input, store and output problems reach callers.

Exception Hierarchy:
    InvoiceReconstructionError (base)
    ├── InputError
    │   ├── InputFileNotFoundError
    │   ├── UnsupportedFileTypeError
    │   └── PayloadFormatError
    ├── ParseError
    │   └── MalformedSegmentError
    ├── StoreError
    │   └── RecordNotFoundError
    └── OutputError
        ├── ExportError
        └── ExcelExportError
"""


class InvoiceReconstructionError(Exception):
    """
    Base exception for all invoice reconstruction errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(InvoiceReconstructionError):
    """Base exception for capture input errors."""
    pass


class InputFileNotFoundError(InputError):
    """Raised when a capture file cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class UnsupportedFileTypeError(InputError):
    """
    Raised when a capture file has an unsupported extension.

    Example:
        >>> raise UnsupportedFileTypeError(".pdf", [".txt", ".json"])
    """

    def __init__(self, file_type: str, supported_types: list):
        message = f"Unsupported file type: '{file_type}'"
        details = {"file_type": file_type, "supported_types": supported_types}
        super().__init__(message, details)


class PayloadFormatError(InputError):
    """Raised when a captured JSON payload cannot be decoded."""

    def __init__(self, source: str, reason: str = None):
        message = f"Invalid capture payload: {source}"
        details = {"source": source, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# PARSE ERRORS
# =============================================================================

class ParseError(InvoiceReconstructionError):
    """Base exception for parse-time anomalies."""
    pass


class MalformedSegmentError(ParseError):
    """
    Raised for a text segment that cannot form an invoice record.

    Never escapes RecordParser.parse(): the segment is dropped and
    the error is logged as a diagnostic.
    """

    def __init__(self, segment_index: int, reason: str):
        message = f"Malformed segment #{segment_index}: {reason}"
        details = {"segment_index": segment_index, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# STORE ERRORS
# =============================================================================

class StoreError(InvoiceReconstructionError):
    """Base exception for invoice store errors."""
    pass


class RecordNotFoundError(StoreError):
    """Raised when a record is requested for a key absent from the store."""

    def __init__(self, key: str, available: int = 0):
        message = f"No invoice record stored under key: '{key}'"
        details = {"key": key, "available": available}
        super().__init__(message, details)


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class OutputError(InvoiceReconstructionError):
    """Base exception for output handling errors."""
    pass


class ExportError(OutputError):
    """Raised when writing a JSON or HTML export fails."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Failed to write export: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


class ExcelExportError(OutputError):
    """Raised when Excel export fails."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Failed to export Excel file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


__all__ = [
    'InvoiceReconstructionError',
    'InputError',
    'InputFileNotFoundError',
    'UnsupportedFileTypeError',
    'PayloadFormatError',
    'ParseError',
    'MalformedSegmentError',
    'StoreError',
    'RecordNotFoundError',
    'OutputError',
    'ExportError',
    'ExcelExportError',
]
