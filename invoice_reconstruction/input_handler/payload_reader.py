"""
GraphQL Payload Reader Module.

The billing page loads invoice details through a GraphQL endpoint. A
capture layer that records that traffic hands us the JSON bodies; this
module recognizes the invoice-details operation and pulls out the
invoice id and its PDF download URL.

Accepted payload shapes:
    - A bare response body: {"data": {"invoiceDetails": {...}}}
    - A capture envelope:   {"url": "...", "status": 200,
                             "request": {...}, "response": {...}}

Author: Billing Data Team
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from config import get_config
from invoice_reconstruction.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class InvoiceLink:
    """Invoice id paired with the URL its PDF can be downloaded from."""
    invoice_id: str
    pdf_download_url: str

    def to_dict(self) -> Dict[str, str]:
        return {'invoiceId': self.invoice_id, 'pdfDownloadUrl': self.pdf_download_url}


class PayloadReader:
    """
    Reads invoice links out of captured GraphQL traffic.

    Attributes:
        endpoint_fragment: Substring identifying the GraphQL endpoint URL
        operation_name: Operation that returns invoice details

    Example:
        >>> reader = PayloadReader()
        >>> reader.read_invoice_link({"data": {"invoiceDetails": {
        ...     "invoiceId": "INV-1", "pdfDownloadUrl": "https://example.com/1.pdf"}}})
        InvoiceLink(invoice_id='INV-1', pdf_download_url='https://example.com/1.pdf')
    """

    def __init__(
        self,
        endpoint_fragment: Optional[str] = None,
        operation_name: Optional[str] = None
    ) -> None:
        self.endpoint_fragment = endpoint_fragment or get_config(
            "capture.endpoint_fragment", "samizdat-graphql.nytimes.com/graphql/v2"
        )
        self.operation_name = operation_name or get_config(
            "capture.operation_name", "getDigitalInvoiceDetails"
        )

    def is_target_endpoint(self, url: Any) -> bool:
        """Check whether a request URL points at the GraphQL endpoint."""
        return isinstance(url, str) and self.endpoint_fragment in url

    def requested_invoice_id(self, request_body: Union[str, Dict[str, Any], None]) -> Optional[str]:
        """
        Get the invoice id a GraphQL request asks details for.

        Args:
            request_body: Request body as a JSON string or decoded dict.

        Returns:
            The ``variables.invoiceId`` of an invoice-details request,
            or None for any other operation or an undecodable body.
        """
        if isinstance(request_body, str):
            try:
                request_body = json.loads(request_body)
            except ValueError as e:
                logger.debug(f"Ignoring undecodable request body: {e}")
                return None

        if not isinstance(request_body, dict):
            return None

        operation = request_body.get('operationName')
        logger.debug(f"GraphQL operation: {operation}")
        if operation != self.operation_name:
            return None

        variables = request_body.get('variables') or {}
        invoice_id = variables.get('invoiceId') if isinstance(variables, dict) else None
        return str(invoice_id) if invoice_id else None

    def read_invoice_link(self, payload: Any) -> Optional[InvoiceLink]:
        """
        Extract an InvoiceLink from a captured payload.

        Envelopes are only read when they target the GraphQL endpoint
        and carry a successful status. An envelope's request body (its
        ``request`` value, or that value's ``body``) names the invoice
        id asked for; it stands in when the response omits the id.
        Payloads without both an invoice id and a PDF URL yield None.

        Args:
            payload: Decoded JSON payload.

        Returns:
            InvoiceLink, or None if the payload holds no invoice details.
        """
        if not isinstance(payload, dict):
            return None

        requested_id = None
        if 'response' in payload:
            if not self.is_target_endpoint(payload.get('url')):
                return None
            status = payload.get('status', 200)
            if not isinstance(status, int) or not 200 <= status < 300:
                logger.debug(f"Skipping capture with status {status}")
                return None
            request = payload.get('request')
            if isinstance(request, dict) and 'body' in request:
                request = request['body']
            requested_id = self.requested_invoice_id(request)
            if requested_id:
                logger.debug(f"Detected {self.operation_name} request for invoiceId: {requested_id}")
            payload = payload.get('response')
            if not isinstance(payload, dict):
                return None

        data = payload.get('data')
        details = data.get('invoiceDetails') if isinstance(data, dict) else None
        if not isinstance(details, dict):
            return None

        invoice_id = details.get('invoiceId') or requested_id
        pdf_url = details.get('pdfDownloadUrl')
        if not invoice_id or not pdf_url:
            return None

        return InvoiceLink(invoice_id=str(invoice_id), pdf_download_url=str(pdf_url))
