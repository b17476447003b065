"""
Marker Vocabulary Module.

The billing text carries no field delimiters besides line breaks and a
small, fixed vocabulary of recurring labels. This module models that
vocabulary explicitly so the parser's state machine only ever branches
on a MarkerKind, and provides the currency matcher used to recognize
amounts.

Classes:
    MarkerKind: Enumeration of recognized marker lines
    MarkerVocabulary: Classifies lines into MarkerKinds
    CurrencyMatcher: Detects and extracts currency-formatted amounts

Author: Billing Data Team
"""

import re
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from config import get_config
from invoice_reconstruction.utils.logger import get_logger
from invoice_reconstruction.records.invoice_record import SERVICE_PERIOD_HEADER

# Initialize module logger
logger = get_logger(__name__)


DEFAULT_SECTION_TITLES = [
    'All Access',
    'All Digital Access',
    'All Access Family',
    'Basic Digital Access',
    'Digital Access',
    'News',
    'Games',
    'Cooking',
    'The Athletic',
    'Wirecutter',
    'Home Delivery',
    'Credits',
]

DEFAULT_ITEM_LABELS = ['Subscription', 'Sales tax']

DEFAULT_PAYMENT_KEYWORDS = ['Payment', 'Visa']

DEFAULT_CURRENCY_PREFIXES = ['C$', '$']


class MarkerKind(Enum):
    """Kinds of lines that drive parser transitions."""
    ACCOUNT_NUMBER = "account_number"
    HEADER_LABEL = "header_label"
    SECTION_TITLE = "section_title"
    TOTAL = "total"
    ITEM_LABEL = "item_label"
    OTHER = "other"


class MarkerVocabulary:
    """
    Classifies trimmed lines against the recognized marker set.

    Exact-match markers are resolved through a single lookup table.
    Where one string is configured for several kinds, the first kind in
    this order wins: account number, header label, section title,
    total, item label.

    Attributes:
        account_marker: Line that starts a new invoice segment
        service_period_marker: Label line of the service period header
        header_labels: Label lines whose next line is a header value,
                       the service period label first
        total_marker: Label line of the grand total
        section_titles: Recognized section titles
        item_labels: Label lines whose next line is an item amount
        payment_keywords: Substrings that mark payment summary lines

    Example:
        >>> vocabulary = MarkerVocabulary()
        >>> vocabulary.classify("Service Period")
        <MarkerKind.HEADER_LABEL: 'header_label'>
        >>> vocabulary.is_payment_line("Visa ending in 4242")
        True
    """

    def __init__(
        self,
        account_marker: Optional[str] = None,
        service_period_marker: Optional[str] = None,
        header_labels: Optional[Iterable[str]] = None,
        total_marker: Optional[str] = None,
        section_titles: Optional[Iterable[str]] = None,
        item_labels: Optional[Iterable[str]] = None,
        payment_keywords: Optional[Iterable[str]] = None
    ) -> None:
        self.account_marker = account_marker or get_config(
            "parser.markers.account_number", "Account Number"
        )
        self.service_period_marker = service_period_marker or get_config(
            "parser.markers.service_period", "Service Period"
        )
        extra_labels = list(header_labels) if header_labels is not None else [
            get_config("parser.markers.payment_due", "Payment Due")
        ]
        self.header_labels = [self.service_period_marker] + [
            label for label in extra_labels if label != self.service_period_marker
        ]
        self.total_marker = total_marker or get_config("parser.markers.total", "Total")
        self.section_titles = list(section_titles) if section_titles is not None else \
            get_config("parser.section_titles", DEFAULT_SECTION_TITLES)
        self.item_labels = list(item_labels) if item_labels is not None else \
            get_config("parser.item_labels", DEFAULT_ITEM_LABELS)
        self.payment_keywords = [
            keyword for keyword in (
                payment_keywords if payment_keywords is not None
                else get_config("parser.payment_keywords", DEFAULT_PAYMENT_KEYWORDS)
            )
            if keyword
        ]

        self._kinds = {}
        # Lowest precedence first so higher-precedence kinds overwrite
        for label in self.item_labels:
            self._kinds[label] = MarkerKind.ITEM_LABEL
        self._kinds[self.total_marker] = MarkerKind.TOTAL
        for title in self.section_titles:
            self._kinds[title] = MarkerKind.SECTION_TITLE
        for label in self.header_labels:
            self._kinds[label] = MarkerKind.HEADER_LABEL
        self._kinds[self.account_marker] = MarkerKind.ACCOUNT_NUMBER

        logger.debug(
            f"MarkerVocabulary initialized ({len(self.section_titles)} section titles, "
            f"{len(self.item_labels)} item labels)"
        )

    def classify(self, line: str) -> MarkerKind:
        """
        Get the marker kind of an exact line.

        Args:
            line: Trimmed line from the tokenizer.

        Returns:
            The matching MarkerKind, or MarkerKind.OTHER.
        """
        return self._kinds.get(line, MarkerKind.OTHER)

    def is_account_marker(self, line: str) -> bool:
        return line == self.account_marker

    def header_name(self, label: str) -> str:
        """
        Get the record header name for a header label line.

        The service period label is stored under the canonical
        "Service Period" name whatever its configured wording.
        """
        if label == self.service_period_marker:
            return SERVICE_PERIOD_HEADER
        return label

    def is_payment_line(self, line: str) -> bool:
        """Check whether a line mentions a payment keyword anywhere."""
        return any(keyword in line for keyword in self.payment_keywords)


class CurrencyMatcher:
    """
    Recognizes currency-formatted amounts for a configurable prefix set.

    An amount token is an optional minus sign, a recognized prefix, an
    optional space, then a number with optional thousands separators
    and decimals: ``$9.99``, ``C$12.34``, ``-$5.00``, ``$ 1,024.00``.
    A credit in accounting notation keeps its parentheses: ``($5.00)``.
    Longer prefixes are tried first so ``C$12.34`` is never split into
    ``C`` and ``$12.34``.

    Example:
        >>> matcher = CurrencyMatcher(["C$", "$"])
        >>> matcher.split_item("Digital access   C$12.34")
        ('Digital access', 'C$12.34')
        >>> matcher.has_symbol("Visa ending in 4242")
        False
    """

    def __init__(self, prefixes: Optional[Iterable[str]] = None) -> None:
        configured = prefixes if prefixes is not None else get_config(
            "parser.currency_prefixes", DEFAULT_CURRENCY_PREFIXES
        )
        self.prefixes: List[str] = sorted(
            {prefix for prefix in configured if prefix},
            key=len,
            reverse=True
        )

        if self.prefixes:
            alternation = "|".join(re.escape(prefix) for prefix in self.prefixes)
            amount = rf"(?:{alternation})\s?[-−]?\d[\d,]*(?:\.\d+)?"
            self._amount_pattern = re.compile(rf"\({amount}\)|[-−]?{amount}")
        else:
            logger.warning("No currency prefixes configured; amounts will not be recognized")
            self._amount_pattern = None

    def has_symbol(self, line: str) -> bool:
        """Check whether a line contains any recognized currency prefix."""
        return any(prefix in line for prefix in self.prefixes)

    def has_amount(self, line: str) -> bool:
        """Check whether a line contains a currency-formatted amount."""
        return self.find_amount(line) is not None

    def find_amount(self, line: str) -> Optional[str]:
        """
        Get the first currency-formatted token of a line.

        Returns:
            The token exactly as written, or None.
        """
        if self._amount_pattern is None:
            return None
        match = self._amount_pattern.search(line)
        return match.group(0) if match else None

    def split_item(self, line: str) -> Optional[Tuple[str, str]]:
        """
        Split an item line into (name, amount).

        The amount is the first currency-formatted token; the name is
        the rest of the line with that token removed and whitespace
        collapsed.

        Returns:
            (name, amount), or None if either part would be empty.
        """
        if self._amount_pattern is None:
            return None

        match = self._amount_pattern.search(line)
        if match is None:
            return None

        remainder = f"{line[:match.start()]} {line[match.end():]}"
        name = " ".join(remainder.split())
        amount = match.group(0)

        if not name or not amount:
            return None
        return name, amount
