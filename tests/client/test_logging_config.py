import logging
import sys

from vcd_client.logging_config import SessionTokenFilter, _coerce_level, configure_logging


def _record(msg, *args):
    return logging.LogRecord("vcd_client", logging.INFO, __file__, 1, msg, args, None)


def test_token_filter_masks_header_value():
    record = _record("headers: %s", {"x-vcloud-authorization": "d1c5a5d0e8b04a4d9f4c"})

    assert SessionTokenFilter().filter(record) is True
    assert "d1c5a5d0e8b04a4d9f4c" not in record.getMessage()
    assert "x-vcloud-authorization': '***" in record.getMessage()


def test_token_filter_leaves_other_messages_untouched():
    record = _record("GET %s", "/api/vApp/vapp-1")

    SessionTokenFilter().filter(record)

    assert record.getMessage() == "GET /api/vApp/vapp-1"
    assert record.args == ("/api/vApp/vapp-1",)


def test_coerce_level(monkeypatch):
    assert _coerce_level("debug") == logging.DEBUG
    assert _coerce_level(logging.ERROR) == logging.ERROR
    assert _coerce_level("nonsense") == logging.INFO
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    assert _coerce_level(None) == logging.WARNING


def test_configure_logging_writes_to_stderr():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers, root.level
    root.handlers = []
    try:
        configure_logging("INFO")

        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stderr
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
