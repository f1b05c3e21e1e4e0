import logging

from campus_fees.logging_setup import configure_logging


def test_configure_logging_sets_levels(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", list(root.handlers))
    monkeypatch.setattr(root, "level", root.level)
    httpx_logger = logging.getLogger("httpx")
    monkeypatch.setattr(httpx_logger, "level", httpx_logger.level)

    configure_logging("debug")
    assert root.level == logging.DEBUG
    assert httpx_logger.level == logging.DEBUG

    configure_logging("WARNING")
    assert root.level == logging.WARNING
    assert httpx_logger.level == logging.WARNING
