"""
Capture Session Module.

A CaptureSession owns everything one capture run accumulates: the
invoice store fed by the record parser, and the registry of invoice
PDF links read from GraphQL payloads. Sessions are independent; two
sessions never share records.

Author: Billing Data Team
"""

import threading
from typing import Any, Dict, List, Optional, Tuple

from invoice_reconstruction.utils.logger import get_logger
from invoice_reconstruction.input_handler.handler import CaptureInput
from invoice_reconstruction.input_handler.payload_reader import InvoiceLink, PayloadReader
from invoice_reconstruction.parser.record_parser import RecordParser
from invoice_reconstruction.records.invoice_record import InvoiceRecord
from invoice_reconstruction.records.store import InvoiceStore

# Initialize module logger
logger = get_logger(__name__)


class CaptureSession:
    """
    Coordinates parsing and storage for one capture run.

    Attributes:
        parser: RecordParser turning text blobs into records
        payload_reader: PayloadReader for captured GraphQL payloads
        store: InvoiceStore receiving parsed records

    Example:
        >>> session = CaptureSession()
        >>> keys = session.ingest_text(visible_text)
        >>> session.record_count
        3
        >>> session.clear()
    """

    def __init__(
        self,
        parser: Optional[RecordParser] = None,
        payload_reader: Optional[PayloadReader] = None,
        store: Optional[InvoiceStore] = None
    ) -> None:
        self.parser = parser or RecordParser()
        self.payload_reader = payload_reader or PayloadReader()
        self.store = store if store is not None else InvoiceStore()

        self._links: Dict[str, str] = {}
        self._links_lock = threading.Lock()

    def ingest_text(self, raw_text: Optional[str]) -> List[str]:
        """
        Parse a visible-text blob and store every record found.

        Args:
            raw_text: Flattened billing page text.

        Returns:
            Dedup keys of the stored records, in source order.
        """
        parsed = self.parser.parse(raw_text)
        keys = self.store.add_all([record for _, record in parsed])

        logger.info(
            f"Stored {len(keys)} record(s); session now holds {len(self.store)}"
        )
        return keys

    def ingest_payload(self, payload: Any) -> Optional[InvoiceLink]:
        """
        Record the PDF link carried by a captured GraphQL payload.

        A later payload for the same invoice id replaces the earlier URL.

        Returns:
            The link that was recorded, or None if the payload carried none.
        """
        link = self.payload_reader.read_invoice_link(payload)
        if link is None:
            return None

        with self._links_lock:
            self._links[link.invoice_id] = link.pdf_download_url
            count = len(self._links)

        logger.info(f"Captured invoice: {link.invoice_id}. Total invoices: {count}")
        return link

    def ingest(self, capture: CaptureInput) -> int:
        """
        Feed a loaded capture file into the session.

        Returns:
            Number of records (text captures) or links (payload
            captures) added.
        """
        if not capture.success:
            logger.warning(f"Skipping failed capture {capture.filename}: {capture.error}")
            return 0

        if capture.kind == 'text':
            return len(self.ingest_text(capture.text))

        links = [self.ingest_payload(payload) for payload in capture.payloads]
        return sum(1 for link in links if link is not None)

    @property
    def links(self) -> Dict[str, str]:
        """Copy of the invoice id to PDF URL registry, in capture order."""
        with self._links_lock:
            return dict(self._links)

    @property
    def record_count(self) -> int:
        return len(self.store)

    def records(self) -> List[Tuple[str, InvoiceRecord]]:
        """Snapshot of (key, record) pairs in insertion order."""
        return self.store.snapshot()

    def clear(self) -> None:
        """Reset the session: drop every record and every captured link."""
        self.store.clear()
        with self._links_lock:
            self._links.clear()
        logger.info("Capture session cleared")
