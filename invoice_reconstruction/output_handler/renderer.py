"""
Invoice Document Renderer Module.

Projects one InvoiceRecord into a self-contained, printable HTML
document using a Jinja2 template. Rendering is a pure function of the
record: no parsing, no store access, no I/O beyond loading the template.

Author: Billing Data Team
"""

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from config import get_config
from invoice_reconstruction.utils.logger import get_logger
from invoice_reconstruction.records.invoice_record import InvoiceRecord

# Initialize module logger
logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


class InvoiceRenderer:
    """
    Renders invoice records to printable HTML documents.

    The document lists headers top to bottom, then every section with
    its line items and optional total and note, then the totals block,
    each in record order. All values are HTML-escaped.

    Attributes:
        template_name: Template file inside the template directory
        document_title: Default document title

    Example:
        >>> renderer = InvoiceRenderer()
        >>> html = renderer.render(record, key="12345_Jan 1 - Jan 31")
        >>> Path("invoice.html").write_text(html, encoding="utf-8")
    """

    def __init__(
        self,
        template_name: Optional[str] = None,
        document_title: Optional[str] = None,
        template_dir: Optional[Path] = None
    ) -> None:
        self.template_name = template_name or get_config("output.html.template", "invoice.html")
        self.document_title = document_title or get_config("output.html.document_title", "Invoice")

        self._environment = Environment(
            loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True
        )
        self._template = self._environment.get_template(self.template_name)

        logger.debug(f"InvoiceRenderer initialized (template: {self.template_name})")

    def render(
        self,
        record: InvoiceRecord,
        title: Optional[str] = None,
        key: Optional[str] = None
    ) -> str:
        """
        Render one record.

        Args:
            record: Record to render.
            title: Document title; defaults to "<document title> <account>
                   - <service period>".
            key: Optional dedup key, embedded as a data attribute.

        Returns:
            Complete HTML document.
        """
        if title is None:
            title = self.default_title(record)

        return self._template.render(record=record, title=title, key=key)

    def default_title(self, record: InvoiceRecord) -> str:
        parts = [part for part in (record.account_number, record.service_period) if part]
        if not parts:
            return self.document_title
        return f"{self.document_title} {' - '.join(parts)}"
