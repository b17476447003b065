import json
from pathlib import Path

import openpyxl
import pytest
from bs4 import BeautifulSoup

from invoice_reconstruction.output_handler import ExcelExporter, JSONExporter, OutputHandler
from invoice_reconstruction.records import HeaderField, InvoiceRecord, InvoiceStore
from invoice_reconstruction.session import CaptureSession
from invoice_reconstruction.utils.exceptions import ExcelExportError, RecordNotFoundError


@pytest.fixture
def session(billing_page_text, single_invoice_text):
    session = CaptureSession()
    session.ingest_text(billing_page_text)
    session.ingest_text(single_invoice_text)
    session.ingest_payload({"data": {"invoiceDetails": {
        "invoiceId": "INV-1",
        "pdfDownloadUrl": "https://example.com/invoices/INV-1.pdf",
    }}})
    return session


def test_combined_json_export(session, tmp_path):
    path = OutputHandler(str(tmp_path)).to_json(session.store)
    data = json.loads(Path(path).read_text(encoding="utf-8"))

    assert list(data) == [
        "12345_Jan 1 - Jan 31",
        "12345_Feb 1 - Feb 28",
        "12345_Jan 1 - Jan 31_2",
    ]
    first = data["12345_Jan 1 - Jan 31"]
    assert set(first) == {"headers", "sections", "totals"}
    assert first["sections"][0]["lines"][2] == {
        "name": "Digital access",
        "amount": "C$12.34",
        "period": None,
    }
    assert data["12345_Jan 1 - Jan 31_2"]["totals"] == [
        {"title": "Total", "amount": "$9.99", "note": None}
    ]


def test_one_document_per_record(session, tmp_path):
    handler = OutputHandler(str(tmp_path))
    paths = handler.export_documents(session.store)

    assert [Path(p).name for p in paths] == [
        "invoice_12345_Jan 1 - Jan 31.html",
        "invoice_12345_Feb 1 - Feb 28.html",
        "invoice_12345_Jan 1 - Jan 31_2.html",
    ]
    soup = BeautifulSoup(Path(paths[1]).read_text(encoding="utf-8"), "html.parser")
    assert soup.select_one("article.invoice")["data-key"] == "12345_Feb 1 - Feb 28"
    assert [n.get_text(strip=True) for n in soup.select("td.total-amount")] == ["$6.00"]


def test_document_filename_is_sanitized(tmp_path):
    handler = OutputHandler(str(tmp_path))
    assert handler.document_filename("1_01/01/2024 - 01/31/2024") == \
        "invoice_1_01_01_2024 - 01_31_2024.html"


def test_keys_that_sanitize_alike_get_distinct_documents(tmp_path):
    store = InvoiceStore()
    for period in ["01/02", "01:02", "01_02"]:
        store.add(InvoiceRecord(headers=[
            HeaderField("Account Number", "1"),
            HeaderField("Service Period", period),
        ]))

    paths = OutputHandler(str(tmp_path)).export_documents(store)

    assert [Path(p).name for p in paths] == [
        "invoice_1_01_02.html",
        "invoice_1_01_02_2.html",
        "invoice_1_01_02_3.html",
    ]
    assert len(list(tmp_path.iterdir())) == 3
    keys = [
        BeautifulSoup(Path(p).read_text(encoding="utf-8"), "html.parser")
        .select_one("article.invoice")["data-key"]
        for p in paths
    ]
    assert keys == ["1_01/02", "1_01:02", "1_01_02"]


def test_render_key(session, tmp_path):
    handler = OutputHandler(str(tmp_path))
    html = handler.render_key(session.store, "12345_Feb 1 - Feb 28")
    assert "Feb 1 - Feb 28" in html

    with pytest.raises(RecordNotFoundError) as excinfo:
        handler.render_key(session.store, "99999_Never")
    assert excinfo.value.details == {"key": "99999_Never", "available": 3}


def test_excel_export(session, tmp_path):
    path = OutputHandler(str(tmp_path)).to_excel(session.store, "invoices.xlsx")
    workbook = openpyxl.load_workbook(path)

    assert workbook.sheetnames == ["Headers", "Line Items", "Totals"]

    headers = list(workbook["Headers"].iter_rows(values_only=True))
    assert headers[0] == ("Key", "Header", "Value")
    assert headers[1] == ("12345_Jan 1 - Jan 31", "Account Number", "12345")

    items = list(workbook["Line Items"].iter_rows(values_only=True))
    assert items[0][:4] == ("Key", "Section", "Item", "Amount")
    assert items[1][:4] == ("12345_Jan 1 - Jan 31", "All Access", "Subscription", "$25.00")
    assert len(items) == 1 + 4 + 1 + 1

    totals = list(workbook["Totals"].iter_rows(values_only=True))
    assert [row[1] for row in totals[1:]] == ["Total", "Visa ending in 4242", "Total", "Total"]


def test_excel_export_requires_records(tmp_path):
    with pytest.raises(ExcelExportError):
        ExcelExporter(str(tmp_path)).export([])


def test_link_manifest(session, tmp_path):
    path = OutputHandler(str(tmp_path)).to_links(session.links)
    manifest = json.loads(Path(path).read_text(encoding="utf-8"))
    assert manifest == [{
        "invoiceId": "INV-1",
        "pdfDownloadUrl": "https://example.com/invoices/INV-1.pdf",
        "filename": "NYT_Invoice_INV-1.pdf",
    }]


def test_json_exporter_of_empty_store():
    assert json.loads(JSONExporter().to_json(InvoiceStore())) == {}


def test_save_writes_every_format(session, tmp_path):
    output_info = OutputHandler(str(tmp_path)).save(session, ["json", "html", "excel", "links"])

    assert Path(output_info["json"]).exists()
    assert len(output_info["html"]) == 3
    assert Path(output_info["excel"]).suffix == ".xlsx"
    assert Path(output_info["links"]).name == "pdf_links.json"


def test_save_skips_excel_for_empty_session(tmp_path):
    output_info = OutputHandler(str(tmp_path)).save(CaptureSession(), ["excel", "json"])
    assert output_info["excel"] is None
    assert json.loads(Path(output_info["json"]).read_text(encoding="utf-8")) == {}


def test_save_rejects_unknown_format(session, tmp_path):
    with pytest.raises(ValueError):
        OutputHandler(str(tmp_path)).save(session, ["pdf"])
