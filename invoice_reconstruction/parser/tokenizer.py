"""
Line Tokenizer Module.

Turns a flattened "visible text" blob into the line stream consumed by
the record parser: one trimmed, non-empty line per entry.

Author: Billing Data Team
"""

import re
from typing import List, Optional, Union

LINE_BREAK = re.compile(r"\r\n|\r|\n|\u2028|\u2029")


def tokenize(raw_text: Optional[Union[str, bytes]]) -> List[str]:
    """
    Split a raw text blob into trimmed, non-empty lines.

    Lines break on ``\\n``, ``\\r\\n``, ``\\r`` and the Unicode line and
    paragraph separators browsers emit for visible text. Other control
    characters (form feed, vertical tab) stay inside the line.
    The result is a plain list, so it can be iterated any number of
    times.

    Args:
        raw_text: Captured text. Bytes are decoded as UTF-8.

    Returns:
        Ordered list of lines; empty for empty or whitespace-only input.

    Example:
        >>> tokenize("  Account Number \\n\\n 12345\\r\\n")
        ['Account Number', '12345']
        >>> tokenize("   ")
        []
    """
    if not raw_text:
        return []

    if isinstance(raw_text, bytes):
        raw_text = raw_text.decode('utf-8', errors='replace')

    lines = []
    for line in LINE_BREAK.split(raw_text):
        line = line.strip()
        if line:
            lines.append(line)
    return lines
