"""
Records Module for the Invoice Reconstruction System.

This module provides:
    - The invoice record data model
    - Dedup key assignment
    - The thread-safe in-memory invoice store

Author: Billing Data Team
"""

from .invoice_record import HeaderField, LineItem, LineSection, TotalLine, InvoiceRecord
from .dedup import assign_key, base_key
from .store import InvoiceStore

__all__ = [
    'HeaderField',
    'LineItem',
    'LineSection',
    'TotalLine',
    'InvoiceRecord',
    'assign_key',
    'base_key',
    'InvoiceStore'
]
