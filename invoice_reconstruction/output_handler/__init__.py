"""
Output Handler Module for the Invoice Reconstruction System.

This module provides functionality for:
    - Printable HTML documents per record (Jinja2)
    - Combined JSON export of a store
    - Excel workbook export
    - PDF link manifests

Author: Billing Data Team
"""

from .handler import OutputHandler
from .renderer import InvoiceRenderer
from .json_exporter import JSONExporter
from .excel_exporter import ExcelExporter

__all__ = ['OutputHandler', 'InvoiceRenderer', 'JSONExporter', 'ExcelExporter']
