# -*- coding: utf-8 -*-
import logging

from infra.perf import PERF_LOGGER, is_enabled, span


def test_span_is_silent_when_disabled(monkeypatch, caplog):
    monkeypatch.delenv("POWERTREE_PERF", raising=False)
    assert is_enabled() is False
    with caplog.at_level(logging.INFO, logger=PERF_LOGGER):
        with span("noop", threshold_ms=0):
            pass
    assert caplog.records == []


def test_span_logs_when_enabled(monkeypatch, caplog):
    monkeypatch.setenv("POWERTREE_PERF", "1")
    with caplog.at_level(logging.INFO, logger=PERF_LOGGER):
        with span("block", threshold_ms=0):
            pass
    assert any("PERF block" in r.getMessage() for r in caplog.records)


def test_perf_logging_writes_to_file(tmp_path):
    from infra.logging_setup import init_perf_logging

    path = init_perf_logging(directory=tmp_path)
    logger = logging.getLogger(PERF_LOGGER)
    try:
        assert init_perf_logging(directory=tmp_path) == path
        handlers = [h for h in logger.handlers if getattr(h, "baseFilename", "") == str(path)]
        assert len(handlers) == 1
    finally:
        for h in list(logger.handlers):
            if getattr(h, "baseFilename", "") == str(path):
                logger.removeHandler(h)
                h.close()


def test_init_logging_installs_handlers_once(tmp_path):
    from infra.logging_setup import init_logging

    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        path = init_logging(directory=tmp_path, level=logging.DEBUG)
        assert path == tmp_path / "powertree.log"
        added = [h for h in root.handlers if h not in before]
        assert len(added) == 2
        init_logging(directory=tmp_path)
        assert len([h for h in root.handlers if h not in before]) == 2
        logging.getLogger("powertree.test").warning("hello")
        for h in added:
            h.flush()
        assert "hello" in path.read_text(encoding="utf-8")
    finally:
        for h in [h for h in root.handlers if h not in before]:
            root.removeHandler(h)
            h.close()
        root.setLevel(level)
