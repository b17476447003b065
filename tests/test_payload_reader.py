import json

from invoice_reconstruction.input_handler import InvoiceLink, PayloadReader

DETAILS = {
    "data": {
        "invoiceDetails": {
            "invoiceId": "INV-42",
            "pdfDownloadUrl": "https://example.com/pdf/INV-42",
        }
    }
}

ENDPOINT = "https://samizdat-graphql.nytimes.com/graphql/v2?operation=x"


def test_reads_bare_response_body():
    assert PayloadReader().read_invoice_link(DETAILS) == InvoiceLink(
        "INV-42", "https://example.com/pdf/INV-42"
    )


def test_reads_capture_envelope():
    reader = PayloadReader()
    envelope = {"url": ENDPOINT, "status": 200, "response": DETAILS}
    assert reader.read_invoice_link(envelope).to_dict() == {
        "invoiceId": "INV-42",
        "pdfDownloadUrl": "https://example.com/pdf/INV-42",
    }


def test_ignores_other_endpoints_and_failed_responses():
    reader = PayloadReader()
    assert reader.read_invoice_link({"url": "https://example.com/graphql", "response": DETAILS}) is None
    assert reader.read_invoice_link({"url": ENDPOINT, "status": 500, "response": DETAILS}) is None
    assert reader.read_invoice_link({"url": ENDPOINT, "response": "not json"}) is None


def test_ignores_payloads_without_details():
    reader = PayloadReader()
    assert reader.read_invoice_link(None) is None
    assert reader.read_invoice_link([DETAILS]) is None
    assert reader.read_invoice_link({"data": {"user": {}}}) is None
    assert reader.read_invoice_link({"data": {"invoiceDetails": {"invoiceId": "INV-1"}}}) is None


def test_requested_invoice_id():
    reader = PayloadReader()
    body = {"operationName": "getDigitalInvoiceDetails", "variables": {"invoiceId": "INV-7"}}
    assert reader.requested_invoice_id(body) == "INV-7"
    assert reader.requested_invoice_id(json.dumps(body)) == "INV-7"
    assert reader.requested_invoice_id({"operationName": "other", "variables": {"invoiceId": "1"}}) is None
    assert reader.requested_invoice_id("{not json") is None
    assert reader.requested_invoice_id(None) is None


def test_endpoint_and_operation_are_configurable():
    reader = PayloadReader(endpoint_fragment="billing.example.com/gql", operation_name="invoice")
    assert reader.is_target_endpoint("https://billing.example.com/gql")
    assert not reader.is_target_endpoint(ENDPOINT)
    assert reader.requested_invoice_id({"operationName": "invoice", "variables": {"invoiceId": 9}}) == "9"


def test_envelope_request_supplies_missing_invoice_id():
    reader = PayloadReader()
    request_body = json.dumps({
        "operationName": "getDigitalInvoiceDetails",
        "variables": {"invoiceId": "INV-9"},
    })
    response = {"data": {"invoiceDetails": {"pdfDownloadUrl": "https://example.com/pdf/INV-9"}}}

    assert reader.read_invoice_link(
        {"url": ENDPOINT, "status": 200, "request": {"body": request_body}, "response": response}
    ) == InvoiceLink("INV-9", "https://example.com/pdf/INV-9")
    assert reader.read_invoice_link(
        {"url": ENDPOINT, "request": json.loads(request_body), "response": DETAILS}
    ).invoice_id == "INV-42"
    assert reader.read_invoice_link(
        {"url": ENDPOINT, "request": {"body": '{"operationName": "other"}'}, "response": response}
    ) is None
