"""
Invoice Store Module.

This module provides the in-memory store that collects reconstructed
invoice records for the lifetime of a capture session.

Features:
    - Insertion-ordered, unique keys
    - Key assignment and insertion as a single atomic step
    - Consistent snapshots for exporters and renderers
    - Explicit clear for session reset

Author: Billing Data Team
"""

import threading
from typing import Dict, Iterator, List, Optional, Tuple

from invoice_reconstruction.utils.logger import get_logger
from invoice_reconstruction.utils.exceptions import RecordNotFoundError
from .dedup import assign_key
from .invoice_record import InvoiceRecord

# Initialize module logger
logger = get_logger(__name__)


class InvoiceStore:
    """
    Thread-safe, insertion-ordered mapping from dedup key to record.

    The store is only mutated through add() and clear(). Every mutation
    and every full read happens under one lock, so a snapshot never
    observes a half-assigned key even when captures arrive from several
    threads.

    Example:
        >>> store = InvoiceStore()
        >>> key = store.add(record)
        >>> store.require(key) is record
        True
        >>> store.clear()
        >>> len(store)
        0
    """

    def __init__(self) -> None:
        self._records: Dict[str, InvoiceRecord] = {}
        self._lock = threading.RLock()

    def add(self, record: InvoiceRecord) -> str:
        """
        Add a record under a freshly assigned dedup key.

        Args:
            record: Reconstructed invoice record. Its account number and
                    service period headers form the key.

        Returns:
            The key the record was stored under.
        """
        with self._lock:
            key = assign_key(
                record.account_number or "",
                record.service_period or "",
                self._records
            )
            self._records[key] = record

        logger.debug(f"Stored record under key: {key}")
        return key

    def add_all(self, records: List[InvoiceRecord]) -> List[str]:
        """
        Add several records in order.

        Returns:
            Assigned keys, in the same order as ``records``.
        """
        return [self.add(record) for record in records]

    def get(self, key: str) -> Optional[InvoiceRecord]:
        """Get a record by key, or None if absent."""
        with self._lock:
            return self._records.get(key)

    def require(self, key: str) -> InvoiceRecord:
        """
        Get a record by key.

        Raises:
            RecordNotFoundError: If no record is stored under ``key``.
        """
        with self._lock:
            record = self._records.get(key)
            available = len(self._records)

        if record is None:
            raise RecordNotFoundError(key, available)
        return record

    def snapshot(self) -> List[Tuple[str, InvoiceRecord]]:
        """
        Get a consistent copy of all (key, record) pairs in insertion order.
        """
        with self._lock:
            return list(self._records.items())

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._records.keys())

    def clear(self) -> None:
        """Remove every record."""
        with self._lock:
            count = len(self._records)
            self._records.clear()

        logger.info(f"Invoice store cleared ({count} records removed)")

    def to_dict(self) -> Dict[str, dict]:
        """
        Serialize the whole store, one entry per key in insertion order.

        Returns:
            Mapping of key to the record's interchange dictionary.
        """
        return {key: record.to_dict() for key, record in self.snapshot()}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records

    def __iter__(self) -> Iterator[Tuple[str, InvoiceRecord]]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"InvoiceStore(records={len(self)})"
