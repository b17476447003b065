import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import ConfigurationManager  # noqa: E402


SINGLE_INVOICE = (
    "Account Number\n12345\nService Period\nJan 1 - Jan 31\n"
    "All Access\nSubscription\n$9.99\nTotal\n$9.99"
)

BILLING_PAGE = """
Your Account
Billing history

Account Number
12345
Service Period
Jan 1 - Jan 31
Payment Due
Feb 1
All Access
Subscription
$25.00
Sales tax
$2.13
Digital access   C$12.34
Discount -$5.00
Total
$34.47
Visa ending in 4242
$34.47

Account Number
12345
Service Period
Feb 1 - Feb 28
Games
Subscription
$6.00
Total
$6.00
"""


@pytest.fixture(autouse=True)
def fresh_config():
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture
def single_invoice_text():
    return SINGLE_INVOICE


@pytest.fixture
def billing_page_text():
    return BILLING_PAGE
