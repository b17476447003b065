import io
import logging

import pytest

from invoice_reconstruction.utils.logger import LOGGER_NAMESPACE, get_logger, setup_logger


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    app_logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers.clear()
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)


def test_module_loggers_share_the_application_namespace():
    assert get_logger("parser").name == "invoice_reconstruction.parser"
    assert get_logger("invoice_reconstruction.records.store").name == \
        "invoice_reconstruction.records.store"


def test_setup_logger_writes_plain_console_output():
    stream = io.StringIO()
    setup_logger(level="WARNING", log_format="%(levelname)s %(message)s", colorize=False, stream=stream)

    get_logger("parser").info("hidden")
    get_logger("parser").warning("Dropping segment")

    assert stream.getvalue() == "WARNING Dropping segment\n"


def test_setup_logger_colors_and_rotating_file(tmp_path):
    stream = io.StringIO()
    log_file = tmp_path / "logs" / "run.log"
    setup_logger(log_format="%(message)s", log_file=str(log_file), stream=stream)

    get_logger("session").error("Excel export failed")
    for handler in logging.getLogger(LOGGER_NAMESPACE).handlers:
        handler.flush()

    assert "\x1b[" in stream.getvalue()
    assert log_file.read_text(encoding="utf-8").strip().endswith("Excel export failed")
