"""
Parser Module for the Invoice Reconstruction System.

This module provides functionality for:
    - Tokenizing flattened visible text into lines
    - Classifying marker lines and currency amounts
    - Reconstructing invoice records with a single-pass state machine

Author: Billing Data Team
"""

from .tokenizer import tokenize
from .markers import MarkerKind, MarkerVocabulary, CurrencyMatcher
from .record_parser import RecordParser, parse

__all__ = [
    'tokenize',
    'MarkerKind',
    'MarkerVocabulary',
    'CurrencyMatcher',
    'RecordParser',
    'parse'
]
