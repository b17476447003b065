"""
Invoice Text Reconstruction System - Source Package.

This package rebuilds structured invoice records from the flattened
visible text of a subscription billing page and exports them.

Modules:
    - input_handler: Text and captured-payload file loading
    - parser: Tokenizer, marker vocabulary and record parser
    - records: Invoice data model, dedup keys and the invoice store
    - output_handler: HTML rendering, JSON, Excel and PDF link exports
    - session: Capture session tying parser, store and link registry

Architecture:
    Input → Tokenize → Parse segments → Store (dedup keys) → Output
"""

__version__ = "1.0.0"
__author__ = "Billing Data Team"

__all__ = [
    'input_handler',
    'parser',
    'records',
    'output_handler',
    'session',
    'utils'
]
