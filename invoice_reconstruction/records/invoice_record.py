"""
Invoice Record Data Classes.

This module defines the data structures produced by the text
reconstruction parser. Amounts are kept as the original formatted
currency strings so nothing is lost to locale or rounding.

Classes:
    HeaderField: Top-of-invoice name/value pair
    LineItem: A single billed or credited line
    LineSection: Named group of line items (subscription tier, credits)
    TotalLine: Summary line outside any section
    InvoiceRecord: One reconstructed invoice

Author: Billing Data Team
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
import json


ACCOUNT_NUMBER_HEADER = "Account Number"
SERVICE_PERIOD_HEADER = "Service Period"


@dataclass
class HeaderField:
    """
    Represents a header metadata pair.

    Example:
        >>> HeaderField(name="Payment Due", value="Feb 15, 2024")
    """
    name: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'value': self.value}


@dataclass
class LineItem:
    """
    Represents a single billed or credited line.

    Attributes:
        name: Label of the line (e.g. "Subscription", "Digital access")
        amount: Amount exactly as it appeared in the source text
        period: Optional billing period the line covers
    """
    name: str
    amount: str
    period: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'amount': self.amount, 'period': self.period}


@dataclass
class LineSection:
    """
    Represents a named grouping of billed items.

    Attributes:
        title: Section title as it appeared in the source text
        lines: Line items in source order
        section_total: Optional section total (serialized as ``sectionTotal``)
        note: Optional free-text note
    """
    title: str
    lines: List[LineItem] = field(default_factory=list)
    section_total: Optional[str] = None
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'lines': [item.to_dict() for item in self.lines],
            'sectionTotal': self.section_total,
            'note': self.note
        }


@dataclass
class TotalLine:
    """Summary line outside any section (grand total, payment received, ...)."""
    title: str
    amount: str
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'title': self.title, 'amount': self.amount, 'note': self.note}


@dataclass
class InvoiceRecord:
    """
    Represents one invoice reconstructed from flattened billing text.

    A record carries no identity of its own; the store assigns it a
    dedup key when it is added. Headers, sections and totals keep the
    order in which they appeared in the source text.

    Attributes:
        headers: Ordered header fields, account number first
        sections: Ordered line-item sections
        totals: Ordered summary lines

    Example:
        >>> record = InvoiceRecord(headers=[
        ...     HeaderField("Account Number", "12345"),
        ...     HeaderField("Service Period", "Jan 1 - Jan 31"),
        ... ])
        >>> record.service_period
        'Jan 1 - Jan 31'
        >>> print(record.to_json())
    """
    headers: List[HeaderField] = field(default_factory=list)
    sections: List[LineSection] = field(default_factory=list)
    totals: List[TotalLine] = field(default_factory=list)

    def header_value(self, name: str) -> Optional[str]:
        """
        Get the value of the first header with the given name.

        Args:
            name: Header name (e.g. "Payment Due").

        Returns:
            Header value, or None if the record has no such header.
        """
        for header in self.headers:
            if header.name == name:
                return header.value
        return None

    @property
    def account_number(self) -> Optional[str]:
        return self.header_value(ACCOUNT_NUMBER_HEADER)

    @property
    def service_period(self) -> Optional[str]:
        return self.header_value(SERVICE_PERIOD_HEADER)

    @property
    def line_item_count(self) -> int:
        """Number of line items across all sections."""
        return sum(len(section.lines) for section in self.sections)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the interchange dictionary format.

        Returns:
            Dictionary with ``headers``, ``sections`` and ``totals`` lists.
        """
        return {
            'headers': [header.to_dict() for header in self.headers],
            'sections': [section.to_dict() for section in self.sections],
            'totals': [total.to_dict() for total in self.totals]
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return (
            f"InvoiceRecord("
            f"account={self.account_number}, "
            f"period={self.service_period}, "
            f"sections={len(self.sections)}, "
            f"totals={len(self.totals)})"
        )
