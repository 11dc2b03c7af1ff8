import json
import logging

import spdx_store.log
from spdx_store.log import JSONFormatter, add_log_handlers, progress_bar


def test_logger_adapter(caplog):
    logger = spdx_store.log.getLogger("test_log")
    with caplog.at_level(logging.DEBUG, logger="spdx_store.test_log"):
        logger.info("created %s", "SPDXRef-1", document_uri="https://example/doc")
        logger.warning("no document")

    first, second = caplog.records[-2:]
    assert first.name == "spdx_store.test_log"
    assert first.getMessage() == "created SPDXRef-1"
    assert first.document_uri == "https://example/doc"
    assert second.levelname == "WARNING"
    assert second.document_uri is None


def test_json_formatter():
    record = logging.LogRecord(
        "spdx_store.test", logging.INFO, __file__, 1, "hello %s", ("world",), None
    )
    record.document_uri = "https://example/doc"

    result = json.loads(JSONFormatter(context={"host": "ci"}).format(record))
    assert result["message"] == "hello world"
    assert result["levelname"] == "INFO"
    assert result["document_uri"] == "https://example/doc"
    assert result["host"] == "ci"
    # empty attributes are not emitted
    assert "exc_text" not in result


def test_file_handler(tmp_path):
    log_file = tmp_path / "log.txt"
    handler = add_log_handlers(
        level=logging.DEBUG,
        log_format="%(name)s: %(message)s",
        filename=str(log_file),
    )
    try:
        spdx_store.log.getLogger("test_file").warning("in file")
    finally:
        logging.getLogger("").removeHandler(handler)
        handler.close()

    assert "spdx_store.test_file: in file" in log_file.read_text()


def test_json_file_handler(tmp_path):
    log_file = tmp_path / "log.json"
    handler = add_log_handlers(
        level=logging.DEBUG,
        log_format="",
        filename=str(log_file),
        json_format=True,
    )
    try:
        spdx_store.log.getLogger("test_json").error(
            "json record", document_uri="https://example/doc"
        )
    finally:
        logging.getLogger("").removeHandler(handler)
        handler.close()

    result = json.loads(log_file.read_text().splitlines()[-1])
    assert result["name"] == "spdx_store.test_json"
    assert result["document_uri"] == "https://example/doc"


def test_progress_bar():
    assert list(progress_bar([1, 2, 3])) == [1, 2, 3]
