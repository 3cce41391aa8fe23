# quantum/tests/test_settings.py
import logging

import pytest
from quantum import settings
from quantum.logging import get_logger, set_log_level

def test_make_rng_is_reproducible():
    a, b = settings.make_rng(5), settings.make_rng(5)
    assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]

def test_default_rng_is_shared():
    assert settings.default_rng() is settings.default_rng()

def test_num_threads_from_env(monkeypatch):
    monkeypatch.delenv("QREG_NUM_THREADS", raising=False)
    assert settings.num_threads() is None
    monkeypatch.setenv("QREG_NUM_THREADS", "3")
    assert settings.num_threads() == 3
    monkeypatch.setenv("QREG_NUM_THREADS", "0")
    with pytest.raises(ValueError):
        settings.num_threads()

def test_loggers_are_namespaced_and_cached():
    log = get_logger("quantum.engine")
    assert log is get_logger("quantum.engine")
    assert get_logger("custom").name == "quantum.custom"
    # capture handlers added by the test runner are subclasses; ours is the plain stream
    own = [h for h in log.handlers if type(h) is logging.StreamHandler]
    assert len(own) == 1 and not log.propagate
    assert own[0].formatter._fmt == "[%(levelname)s] %(name)s: %(message)s"

def test_set_log_level():
    log = get_logger("quantum.state")
    try:
        set_log_level("DEBUG")
        assert log.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in log.handlers
                   if type(h) is logging.StreamHandler)
    finally:
        set_log_level(logging.WARNING)
    assert log.level == logging.WARNING
