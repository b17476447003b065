"""
Key Deduplication Module.

Derives the human-readable key under which a record is stored. Records
for distinct billing periods get stable keys; repeated periods (for
example a corrected re-issue of the same invoice) get a numeric suffix
instead of silently overwriting the earlier record.

Author: Billing Data Team
"""

from typing import Container

KEY_SEPARATOR = "_"


def base_key(account_number: str, service_period: str) -> str:
    """
    Build the unsuffixed key for an account/period pair.

    Example:
        >>> base_key("12345", "Jan 1 - Jan 31")
        '12345_Jan 1 - Jan 31'
    """
    return f"{account_number}{KEY_SEPARATOR}{service_period}"


def assign_key(
    account_number: str,
    service_period: str,
    existing_keys: Container[str]
) -> str:
    """
    Produce a key that is not yet present in ``existing_keys``.

    The base key is used when free; otherwise ``_2``, ``_3``, ... are
    appended until an unused key is found.

    Args:
        account_number: Account number value of the record.
        service_period: Service period value of the record.
        existing_keys: Keys already taken (typically the store's keys).

    Returns:
        Unique key.

    Example:
        >>> assign_key("X", "Y", {"X_Y"})
        'X_Y_2'
        >>> assign_key("X", "Y", {"X_Y", "X_Y_2"})
        'X_Y_3'
    """
    key = base_key(account_number, service_period)
    if key not in existing_keys:
        return key

    suffix = 2
    while f"{key}{KEY_SEPARATOR}{suffix}" in existing_keys:
        suffix += 1
    return f"{key}{KEY_SEPARATOR}{suffix}"
