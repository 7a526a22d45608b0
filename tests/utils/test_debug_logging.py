"""Tests for the shikiview logging helpers."""

import importlib
import logging

# ``shikiview.utils`` re-exports the ``debug`` function, shadowing the submodule.
dbg = importlib.import_module("shikiview.utils.debug")


def test_debug_is_silent_by_default(caplog, monkeypatch):
    monkeypatch.delenv("SHIKIVIEW_DEBUG", raising=False)
    caplog.set_level(logging.DEBUG, logger="shikiview")

    dbg.debug("hidden message")
    assert "hidden message" not in caplog.text


def test_debug_logs_when_enabled(caplog, monkeypatch):
    monkeypatch.setenv("SHIKIVIEW_DEBUG", "1")
    caplog.set_level(logging.DEBUG, logger="shikiview")

    dbg.debug("hello world")

    assert [(r.name, r.levelname, r.getMessage()) for r in caplog.records] == [
        ("shikiview", "DEBUG", "hello world")
    ]


def test_warn_logs_without_debug(caplog, monkeypatch):
    monkeypatch.delenv("SHIKIVIEW_DEBUG", raising=False)
    caplog.set_level(logging.WARNING, logger="shikiview")

    dbg.warn("oversized poster skipped")

    assert caplog.records[0].levelname == "WARNING"
    assert "oversized poster skipped" in caplog.text
