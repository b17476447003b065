"""
Main Output Handler Module.

This module provides the unified OutputHandler class that coordinates
all output operations: rendering single records, per-record document
export, the combined JSON export, the Excel workbook and the PDF link
manifest.

Author: Billing Data Team
"""

from pathlib import Path
from typing import Any, Container, Dict, Iterable, List, Optional, Set

from config import get_config
from invoice_reconstruction.utils.logger import get_logger
from invoice_reconstruction.utils.helpers import ensure_directory, safe_filename
from invoice_reconstruction.utils.exceptions import ExportError, OutputError
from invoice_reconstruction.records.store import InvoiceStore
from invoice_reconstruction.session import CaptureSession
from .renderer import InvoiceRenderer
from .json_exporter import JSONExporter
from .excel_exporter import ExcelExporter

# Initialize module logger
logger = get_logger(__name__)


class OutputHandler:
    """
    Unified output handler for reconstructed invoices.

    Rendering is the one boundary where a caller mistake surfaces as an
    error: asking for a key the store does not hold raises
    RecordNotFoundError. Bulk exports in save() are independent; one
    failing export is logged and the others still run.

    Attributes:
        output_dir: Base directory for all outputs
        renderer: InvoiceRenderer instance
        json_exporter: JSONExporter instance
        excel_exporter: ExcelExporter instance

    Example:
        >>> handler = OutputHandler("outputs/")
        >>> html = handler.render_key(session.store, "12345_Jan 1 - Jan 31")
        >>> handler.save(session, formats=["json", "html"])
    """

    FORMATS = ('json', 'html', 'excel', 'links')

    def __init__(self, output_dir: Optional[str] = None) -> None:
        self.output_dir = Path(output_dir or get_config("paths.output_dir", "outputs"))
        self.document_pattern = get_config("output.html.filename_pattern", "invoice_{key}.html")

        # Exporters are created on first use
        self._renderer = None
        self._json_exporter = None
        self._excel_exporter = None

        logger.debug(f"OutputHandler initialized (output_dir: {self.output_dir})")

    @property
    def renderer(self) -> InvoiceRenderer:
        """Get or create the document renderer."""
        if self._renderer is None:
            self._renderer = InvoiceRenderer()
        return self._renderer

    @property
    def json_exporter(self) -> JSONExporter:
        """Get or create the JSON exporter."""
        if self._json_exporter is None:
            self._json_exporter = JSONExporter(str(self.output_dir))
        return self._json_exporter

    @property
    def excel_exporter(self) -> ExcelExporter:
        """Get or create the Excel exporter."""
        if self._excel_exporter is None:
            self._excel_exporter = ExcelExporter(str(self.output_dir))
        return self._excel_exporter

    def render_key(self, store: InvoiceStore, key: str) -> str:
        """
        Render the record stored under ``key``.

        Raises:
            RecordNotFoundError: If the store has no record for ``key``.
        """
        record = store.require(key)
        return self.renderer.render(record, key=key)

    def document_filename(self, key: str, taken: Container[str] = ()) -> str:
        """
        Filesystem-safe document filename for a dedup key.

        Distinct keys can sanitize to the same name ("01/02" and "01:02").
        A name already in ``taken`` gets "_2", "_3", ... before its
        extension.
        """
        filename = Path(safe_filename(self.document_pattern.format(key=key)))
        if filename.name not in taken:
            return filename.name

        suffix = 2
        while f"{filename.stem}_{suffix}{filename.suffix}" in taken:
            suffix += 1
        return f"{filename.stem}_{suffix}{filename.suffix}"

    def export_documents(
        self,
        store: InvoiceStore,
        output_dir: Optional[str] = None
    ) -> List[str]:
        """
        Write one HTML document per stored record.

        Returns:
            Paths of the written documents, in store order.

        Raises:
            ExportError: If a document cannot be written.
        """
        out_dir = Path(output_dir) if output_dir else self.output_dir
        written = []
        taken: Set[str] = set()

        for key, record in store.snapshot():
            filename = self.document_filename(key, taken)
            taken.add(filename)
            filepath = out_dir / filename
            try:
                ensure_directory(out_dir)
                filepath.write_text(self.renderer.render(record, key=key), encoding='utf-8')
            except OSError as e:
                logger.error(f"Document export failed for {key}: {e}")
                raise ExportError(str(filepath), str(e))
            written.append(str(filepath))

        logger.info(f"Exported {len(written)} document(s) to {out_dir}")
        return written

    def to_json(self, store: InvoiceStore, filename: Optional[str] = None) -> str:
        """Write the combined JSON export. Returns the file path."""
        return self.json_exporter.export(store, filename)

    def to_excel(self, store: InvoiceStore, filename: Optional[str] = None) -> str:
        """Write the Excel workbook. Returns the file path."""
        return self.excel_exporter.export(store.snapshot(), filename)

    def to_links(self, links: Dict[str, str], filename: Optional[str] = None) -> str:
        """Write the PDF link manifest. Returns the file path."""
        return self.json_exporter.export_links(links, filename)

    def save(
        self,
        session: CaptureSession,
        formats: Iterable[str] = FORMATS
    ) -> Dict[str, Any]:
        """
        Write every requested output for a session.

        Args:
            session: Capture session to export.
            formats: Any of 'json', 'html', 'excel', 'links'.

        Returns:
            Dictionary with the written path(s) per format; a format
            that failed or had nothing to write maps to None.

        Example:
            >>> output_info = handler.save(session, ["json", "excel"])
            >>> print(f"Saved to: {output_info['json']}")
        """
        formats = list(formats)
        unknown = [fmt for fmt in formats if fmt not in self.FORMATS]
        if unknown:
            raise ValueError(f"Unknown output format(s): {unknown}")

        output_info: Dict[str, Any] = {fmt: None for fmt in formats}
        store = session.store

        if 'json' in formats:
            try:
                output_info['json'] = self.to_json(store)
            except OutputError as e:
                logger.error(f"JSON export failed: {e}")

        if 'html' in formats:
            try:
                output_info['html'] = self.export_documents(store)
            except OutputError as e:
                logger.error(f"Document export failed: {e}")

        if 'excel' in formats:
            if len(store) == 0:
                logger.warning("No records to export to Excel")
            else:
                try:
                    output_info['excel'] = self.to_excel(store)
                except OutputError as e:
                    logger.error(f"Excel export failed: {e}")

        if 'links' in formats:
            try:
                output_info['links'] = self.to_links(session.links)
            except OutputError as e:
                logger.error(f"Link manifest export failed: {e}")

        return output_info
