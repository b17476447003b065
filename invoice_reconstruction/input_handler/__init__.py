"""
Input Handler Module for the Invoice Reconstruction System.

This module provides functionality for:
    - Loading visible-text captures of billing pages
    - Loading captured GraphQL payloads
    - Recognizing invoice-details payloads and their PDF links

Supported formats:
    - Text: .txt, .text
    - Payloads: .json (single payload or list of payloads)

Author: Billing Data Team
"""

from .handler import InputHandler, CaptureInput
from .payload_reader import PayloadReader, InvoiceLink

__all__ = ['InputHandler', 'CaptureInput', 'PayloadReader', 'InvoiceLink']
