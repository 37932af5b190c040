"""Fixtures for black-box CLI tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def cli_logging(monkeypatch, tmp_path):
    """Keep each invocation's root-logger handlers and log file out of the session."""
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    monkeypatch.setenv("LIBRIS_LOG_PATH", str(tmp_path / "latest.log"))
    yield
    for handler in root.handlers:
        handler.close()
