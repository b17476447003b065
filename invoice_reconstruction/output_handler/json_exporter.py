"""
JSON Exporter Module.

Writes the combined export of a store (one entry per dedup key) and the
PDF link manifest of a capture session.

Author: Billing Data Team
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

from config import get_config
from invoice_reconstruction.utils.logger import get_logger
from invoice_reconstruction.utils.helpers import ensure_directory, safe_filename
from invoice_reconstruction.utils.exceptions import ExportError
from invoice_reconstruction.records.store import InvoiceStore

# Initialize module logger
logger = get_logger(__name__)


class JSONExporter:
    """
    Exports stores and link registries as JSON.

    Attributes:
        output_dir: Directory for output files
        indent: JSON indentation level

    Example:
        >>> exporter = JSONExporter()
        >>> path = exporter.export(session.store)
        >>> manifest = exporter.export_links(session.links)
    """

    def __init__(self, output_dir: Optional[str] = None) -> None:
        self.output_dir = Path(output_dir or get_config("paths.output_dir", "outputs"))
        self.indent = get_config("output.json.indent", 2)
        self.filename = get_config("output.json.filename", "invoices.json")
        self.links_filename = get_config("output.pdf_links.filename", "pdf_links.json")
        self.pdf_filename_pattern = get_config(
            "output.pdf_links.filename_pattern", "NYT_Invoice_{invoice_id}.pdf"
        )

    def to_json(self, store: InvoiceStore) -> str:
        """
        Serialize a store to the combined interchange format.

        Returns:
            JSON object string, keys in store insertion order.
        """
        return json.dumps(store.to_dict(), indent=self.indent, ensure_ascii=False)

    def export(
        self,
        store: InvoiceStore,
        filename: Optional[str] = None,
        output_dir: Optional[str] = None
    ) -> str:
        """
        Write the combined export of a store.

        Returns:
            Path to the written file.

        Raises:
            ExportError: If the file cannot be written.
        """
        filepath = self._target(filename or self.filename, output_dir)
        self._write(filepath, self.to_json(store))

        logger.info(f"JSON export saved: {filepath} ({len(store)} records)")
        return str(filepath)

    def link_manifest(self, links: Dict[str, str]) -> List[Dict[str, str]]:
        """
        Build the PDF link manifest entries.

        Each entry carries the invoice id, its download URL and the
        filename the PDF should be saved as.
        """
        return [
            {
                'invoiceId': invoice_id,
                'pdfDownloadUrl': url,
                'filename': safe_filename(self.pdf_filename_pattern.format(invoice_id=invoice_id))
            }
            for invoice_id, url in links.items()
        ]

    def export_links(
        self,
        links: Dict[str, str],
        filename: Optional[str] = None,
        output_dir: Optional[str] = None
    ) -> str:
        """
        Write the PDF link manifest.

        Returns:
            Path to the written file.

        Raises:
            ExportError: If the file cannot be written.
        """
        if not links:
            logger.warning("No invoice links captured; writing empty manifest")

        filepath = self._target(filename or self.links_filename, output_dir)
        content = json.dumps(self.link_manifest(links), indent=self.indent, ensure_ascii=False)
        self._write(filepath, content)

        logger.info(f"PDF link manifest saved: {filepath} ({len(links)} links)")
        return str(filepath)

    def _target(self, filename: str, output_dir: Optional[str]) -> Path:
        out_dir = Path(output_dir) if output_dir else self.output_dir
        return out_dir / filename

    def _write(self, filepath: Path, content: str) -> None:
        try:
            ensure_directory(filepath.parent)
            filepath.write_text(content, encoding='utf-8')
        except OSError as e:
            logger.error(f"JSON export failed: {e}")
            raise ExportError(str(filepath), str(e))
