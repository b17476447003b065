"""
Excel Exporter Module.

This module provides Excel workbook generation for reconstructed
invoice records. Uses openpyxl for modern Excel format support.

Features:
    - One sheet each for headers, line items and totals
    - Formatted header rows
    - Auto-column width
    - Rows keyed by dedup key, in store order

Author: Billing Data Team
"""

from pathlib import Path
from typing import List, Optional, Tuple

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from config import get_config
from invoice_reconstruction.utils.logger import get_logger
from invoice_reconstruction.utils.helpers import ensure_directory, generate_timestamp
from invoice_reconstruction.utils.exceptions import ExcelExportError
from invoice_reconstruction.records.invoice_record import InvoiceRecord

# Initialize module logger
logger = get_logger(__name__)


class ExcelExporter:
    """
    Exports invoice records to Excel format.

    Amounts are written as the original text, never converted to
    numbers, so the workbook shows exactly what the billing page showed.

    Attributes:
        output_dir: Directory for output files
        filename_pattern: Pattern for generated filenames

    Example:
        >>> exporter = ExcelExporter()
        >>> filepath = exporter.export(store.snapshot(), "invoices.xlsx")
        >>> print(f"Saved to: {filepath}")
    """

    HEADER_COLUMNS = ['Key', 'Header', 'Value']
    LINE_ITEM_COLUMNS = ['Key', 'Section', 'Item', 'Amount', 'Period', 'Section Total', 'Section Note']
    TOTAL_COLUMNS = ['Key', 'Title', 'Amount', 'Note']

    SHEET_COLORS = {
        'Headers': "4472C4",
        'Line Items': "548235",
        'Totals': "C65911",
    }

    def __init__(self, output_dir: Optional[str] = None) -> None:
        self.output_dir = Path(output_dir or get_config("paths.output_dir", "outputs"))
        self.filename_pattern = get_config(
            "output.excel.filename_pattern",
            "invoices_{timestamp}.xlsx"
        )

        logger.debug(f"ExcelExporter initialized (output_dir: {self.output_dir})")

    def export(
        self,
        records: List[Tuple[str, InvoiceRecord]],
        filename: Optional[str] = None,
        output_dir: Optional[str] = None
    ) -> str:
        """
        Export (key, record) pairs to an Excel file.

        Args:
            records: Store snapshot to export.
            filename: Output filename. If None, auto-generated.
            output_dir: Output directory. If None, uses configured dir.

        Returns:
            Path to the created Excel file.

        Raises:
            ExcelExportError: If export fails.
        """
        if not records:
            raise ExcelExportError("No records", "No records to export")

        out_dir = Path(output_dir) if output_dir else self.output_dir
        filepath = out_dir / (filename or self.get_default_filename())

        try:
            ensure_directory(out_dir)
            workbook = openpyxl.Workbook()

            headers_sheet = workbook.active
            headers_sheet.title = 'Headers'
            self._fill_sheet(headers_sheet, self.HEADER_COLUMNS, self._header_rows(records))

            self._fill_sheet(
                workbook.create_sheet(title='Line Items'),
                self.LINE_ITEM_COLUMNS,
                self._line_item_rows(records)
            )
            self._fill_sheet(
                workbook.create_sheet(title='Totals'),
                self.TOTAL_COLUMNS,
                self._total_rows(records)
            )

            workbook.save(filepath)

            logger.info(f"Excel file saved: {filepath} ({len(records)} records)")
            return str(filepath)

        except Exception as e:
            logger.error(f"Excel export failed: {e}")
            raise ExcelExportError(str(filepath), str(e))

    def _header_rows(self, records: List[Tuple[str, InvoiceRecord]]) -> List[list]:
        return [
            [key, header.name, header.value]
            for key, record in records
            for header in record.headers
        ]

    def _line_item_rows(self, records: List[Tuple[str, InvoiceRecord]]) -> List[list]:
        rows = []
        for key, record in records:
            for section in record.sections:
                for item in section.lines:
                    rows.append([
                        key,
                        section.title,
                        item.name,
                        item.amount,
                        item.period or '',
                        section.section_total or '',
                        section.note or ''
                    ])
        return rows

    def _total_rows(self, records: List[Tuple[str, InvoiceRecord]]) -> List[list]:
        return [
            [key, total.title, total.amount, total.note or '']
            for key, record in records
            for total in record.totals
        ]

    def _fill_sheet(self, sheet, columns: List[str], rows: List[list]) -> None:
        """
        Write a styled header row, the data rows, and fit column widths.

        Args:
            sheet: openpyxl Worksheet instance.
            columns: Column titles.
            rows: Data rows, one list per row.
        """
        color = self.SHEET_COLORS.get(sheet.title, "4472C4")
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color=color, end_color=color, fill_type="solid")
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        for col, title in enumerate(columns, 1):
            cell = sheet.cell(row=1, column=col, value=title)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = thin_border

        for row_num, row in enumerate(rows, 2):
            for col, value in enumerate(row, 1):
                cell = sheet.cell(row=row_num, column=col, value=value)
                # Text starting with "=" must not turn into a formula
                cell.data_type = 's'
                cell.border = thin_border

        for col, title in enumerate(columns, 1):
            max_length = max(
                [len(title)] + [len(str(row[col - 1])) for row in rows if row[col - 1]]
            )
            sheet.column_dimensions[get_column_letter(col)].width = min(max_length + 2, 50)

        sheet.freeze_panes = 'A2'

    def get_default_filename(self) -> str:
        """
        Generate a default filename with timestamp.

        Returns:
            Default filename string.
        """
        return self.filename_pattern.format(timestamp=generate_timestamp())
