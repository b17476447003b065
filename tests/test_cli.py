import json
import logging
from pathlib import Path

import pytest

import main
from invoice_reconstruction.utils.logger import LOGGER_NAMESPACE


@pytest.fixture(autouse=True)
def detach_cli_logging():
    yield
    app_logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers.clear()
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture
def capture_file(tmp_path, billing_page_text):
    path = tmp_path / "capture.txt"
    path.write_text(billing_page_text, encoding="utf-8")
    return path


def test_cli_writes_json_export(capture_file, tmp_path):
    out_dir = tmp_path / "out"
    exit_code = main.main(["--input", str(capture_file), "--output", str(out_dir), "--quiet"])

    assert exit_code == 0
    data = json.loads((out_dir / "invoices.json").read_text(encoding="utf-8"))
    assert list(data) == ["12345_Jan 1 - Jan 31", "12345_Feb 1 - Feb 28"]


def test_cli_writes_requested_formats(capture_file, tmp_path):
    out_dir = tmp_path / "out"
    exit_code = main.main([
        "-i", str(capture_file), "-o", str(out_dir), "-q",
        "--format", "html", "links",
    ])

    assert exit_code == 0
    assert sorted(p.name for p in out_dir.iterdir()) == [
        "invoice_12345_Feb 1 - Feb 28.html",
        "invoice_12345_Jan 1 - Jan 31.html",
        "pdf_links.json",
    ]


def test_cli_render_prints_document(capture_file, tmp_path, capsys):
    exit_code = main.main([
        "-i", str(capture_file), "-o", str(tmp_path), "-q",
        "--render", "12345_Feb 1 - Feb 28",
    ])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert out.startswith("<!DOCTYPE html>")
    assert "Feb 1 - Feb 28" in out
    assert not (tmp_path / "invoices.json").exists()


def test_cli_render_unknown_key_fails(capture_file, tmp_path, capsys):
    exit_code = main.main(["-i", str(capture_file), "-o", str(tmp_path), "-q", "--render", "nope"])

    assert exit_code == 1
    assert "No invoice record stored under key: 'nope'" in capsys.readouterr().err


def test_cli_missing_input_fails(tmp_path, capsys):
    exit_code = main.main(["-i", str(tmp_path / "missing.txt"), "-o", str(tmp_path), "-q"])

    assert exit_code == 1
    assert "File not found" in capsys.readouterr().err


def test_cli_custom_config(capture_file, tmp_path):
    config_path = tmp_path / "settings.yaml"
    config_path.write_text(
        "output:\n  json:\n    filename: custom.json\n    indent: 0\n",
        encoding="utf-8",
    )
    out_dir = tmp_path / "out"

    exit_code = main.main(["-i", str(capture_file), "-o", str(out_dir), "-q", "-c", str(config_path)])

    assert exit_code == 0
    assert Path(out_dir / "custom.json").exists()
