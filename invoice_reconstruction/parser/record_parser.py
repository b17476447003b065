"""
Record Reconstruction Parser Module.

This module provides the RecordParser class that rebuilds invoice
records from flattened billing text.

Approach:
    The captured text has lost all table markup. What survives is a
    line order and a small vocabulary of marker lines ("Account
    Number", "Service Period", "Total", section titles). The parser
    splits the line stream into one segment per "Account Number"
    marker, then walks each segment with an index cursor that consumes
    either one line (a marker or a self-contained item line) or two
    lines (a label followed by its value). There is no backtracking.

Failure semantics:
    Parsing never raises. Segments that cannot form a record are
    dropped with a diagnostic; lines that match no rule are ignored.

Author: Billing Data Team
"""

from typing import List, Optional, Tuple

from invoice_reconstruction.utils.logger import get_logger
from invoice_reconstruction.utils.exceptions import MalformedSegmentError
from invoice_reconstruction.records.invoice_record import (
    ACCOUNT_NUMBER_HEADER,
    HeaderField,
    InvoiceRecord,
    LineItem,
    LineSection,
    TotalLine,
)
from .markers import CurrencyMatcher, MarkerKind, MarkerVocabulary
from .tokenizer import tokenize

# Initialize module logger
logger = get_logger(__name__)


class _SegmentWalk:
    """Mutable state of one segment walk: the record and its open section."""

    def __init__(self, account_number: str) -> None:
        self.record = InvoiceRecord(
            headers=[HeaderField(ACCOUNT_NUMBER_HEADER, account_number)]
        )
        self.section: Optional[LineSection] = None

    def open_section(self, title: str) -> None:
        # Adjacent repeats of the open title continue the same section
        if self.section is not None and self.section.title == title:
            return
        self.section = LineSection(title=title)
        self.record.sections.append(self.section)


class RecordParser:
    """
    Line-oriented state machine that reconstructs invoice records.

    Attributes:
        vocabulary: MarkerVocabulary used to classify lines
        currency: CurrencyMatcher used to recognize amounts

    Example:
        >>> parser = RecordParser()
        >>> text = "Account Number\\n12345\\nService Period\\nJan 1 - Jan 31"
        >>> [(index, record.service_period) for index, record in parser.parse(text)]
        [(0, 'Jan 1 - Jan 31')]
    """

    def __init__(
        self,
        vocabulary: Optional[MarkerVocabulary] = None,
        currency: Optional[CurrencyMatcher] = None
    ) -> None:
        self.vocabulary = vocabulary or MarkerVocabulary()
        self.currency = currency or CurrencyMatcher()

        logger.debug(
            f"RecordParser initialized (currency prefixes: {self.currency.prefixes})"
        )

    def parse(self, raw_text: Optional[str]) -> List[Tuple[int, InvoiceRecord]]:
        """
        Reconstruct every invoice record found in a text blob.

        Args:
            raw_text: Flattened visible text of a billing page.

        Returns:
            (segment index, record) pairs in source order. The segment
            index counts "Account Number" segments from 0, including
            segments that were dropped.
        """
        lines = tokenize(raw_text)
        segments = self.split_segments(lines)

        results = []
        for segment_index, segment in enumerate(segments):
            try:
                record = self.parse_segment(segment_index, segment)
            except MalformedSegmentError as e:
                logger.warning(f"Dropping segment: {e}")
                continue

            results.append((segment_index, record))
            logger.debug(
                f"Segment #{segment_index} parsed: {record!r}"
            )

        logger.info(
            f"Parsed {len(results)} record(s) from {len(segments)} segment(s) "
            f"({len(lines)} lines)"
        )
        return results

    def split_segments(self, lines: List[str]) -> List[List[str]]:
        """
        Split the line stream at every account marker.

        Lines before the first marker are preamble and are discarded.
        The marker lines themselves are not part of any segment.

        Returns:
            One list of lines per marker, in source order.
        """
        segments: List[List[str]] = []
        current: Optional[List[str]] = None

        for line in lines:
            if self.vocabulary.is_account_marker(line):
                current = []
                segments.append(current)
            elif current is not None:
                current.append(line)

        return segments

    def parse_segment(self, segment_index: int, lines: List[str]) -> InvoiceRecord:
        """
        Parse one segment into an invoice record.

        Args:
            segment_index: Position of the segment, used in diagnostics.
            lines: Lines following an "Account Number" marker.

        Returns:
            The reconstructed record.

        Raises:
            MalformedSegmentError: If the segment has no account number
                or yields no service period.
        """
        if not lines or not lines[0].strip():
            raise MalformedSegmentError(segment_index, "missing account number")

        walk = _SegmentWalk(lines[0])

        cursor = 1
        while cursor < len(lines):
            cursor += self._step(walk, lines, cursor)

        record = walk.record
        if not record.headers or not record.service_period:
            raise MalformedSegmentError(segment_index, "missing service period")

        return record

    def _step(self, walk: _SegmentWalk, lines: List[str], cursor: int) -> int:
        """
        Apply the first matching rule at ``cursor``.

        Returns:
            Number of lines consumed (1 or 2).
        """
        line = lines[cursor]
        next_line = lines[cursor + 1] if cursor + 1 < len(lines) else None
        kind = self.vocabulary.classify(line)

        if kind is MarkerKind.HEADER_LABEL and next_line is not None:
            walk.record.headers.append(
                HeaderField(self.vocabulary.header_name(line), next_line)
            )
            return 2

        if kind is MarkerKind.SECTION_TITLE:
            walk.open_section(line)
            return 1

        if (kind is MarkerKind.TOTAL and next_line is not None
                and self.currency.has_amount(next_line)):
            walk.record.totals.append(TotalLine(title=line, amount=next_line))
            return 2

        if (self.vocabulary.is_payment_line(line) and next_line is not None
                and self.currency.has_symbol(next_line)):
            walk.record.totals.append(TotalLine(title=line, amount=next_line))
            return 2

        if walk.section is None:
            return 1

        if (kind is MarkerKind.ITEM_LABEL and next_line is not None
                and self.currency.has_amount(next_line)):
            walk.section.lines.append(LineItem(name=line, amount=next_line))
            return 2

        if self.currency.has_symbol(line):
            item = self.currency.split_item(line)
            if item is not None:
                name, amount = item
                walk.section.lines.append(LineItem(name=name, amount=amount))

        return 1


def parse(raw_text: Optional[str]) -> List[Tuple[int, InvoiceRecord]]:
    """
    Parse a text blob with the configured default vocabulary.

    Convenience wrapper around RecordParser().parse().
    """
    return RecordParser().parse(raw_text)
