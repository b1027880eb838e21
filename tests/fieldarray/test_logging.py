import logging

import pytest

from bitfieldarray import MalformedSnapshotError, dumps, loads
from bitfieldarray.logger import LOGGER_NAME, get_fieldarray_logger


def test_level_comes_from_environment(monkeypatch):
    monkeypatch.setenv("BITFIELDARRAY_LOG_LEVEL", "debug")
    assert get_fieldarray_logger().level == logging.DEBUG
    monkeypatch.setenv("BITFIELDARRAY_LOG_LEVEL", "not-a-level")
    assert get_fieldarray_logger().level == logging.WARNING
    monkeypatch.delenv("BITFIELDARRAY_LOG_LEVEL")
    assert get_fieldarray_logger().level == logging.WARNING


def test_handler_installed_once():
    first = get_fieldarray_logger()
    count = len(first.handlers)
    assert get_fieldarray_logger() is first
    assert len(first.handlers) == count


def test_malformed_snapshot_logs_warning(scenario, caplog):
    blob = bytearray(dumps(scenario))
    blob[-1] ^= 0x01
    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        with pytest.raises(MalformedSnapshotError):
            loads(bytes(blob))
    assert any("checksum mismatch" in r.getMessage() for r in caplog.records)


def test_snapshot_debug_lines(scenario, caplog):
    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        loads(dumps(scenario))
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("[snapshot.write_snapshot]") for m in messages)
    assert any(m.startswith("[snapshot.read_snapshot]") for m in messages)
