"""Tests for the package's loguru configuration helpers."""

import io

import pytest
from loguru import logger

import datamapper
from datamapper import (
    configure_console_logging,
    configure_file_logging,
    configure_test_logging,
    initialize_logging,
    reset_logging,
)
from datamapper.exceptions import LoggingConfigError


@pytest.fixture(autouse=True)
def clean_logging_state():
    yield
    reset_logging()


def emit(message):
    logger.info(message)


def test_invalid_level_rejected():
    with pytest.raises(LoggingConfigError, match="Invalid log level 'loud'"):
        configure_console_logging(level="loud")


def test_level_names_are_case_insensitive():
    assert datamapper.validate_log_level("warning") == "WARNING"


def test_console_sink_receives_package_logs():
    stream = io.StringIO()
    sink_id = configure_console_logging(level="INFO", destination=stream, colorize=False)

    emit("hello from the engine")

    assert "hello from the engine" in stream.getvalue()
    assert sink_id in datamapper.get_logger_state().sink_ids


def test_console_sink_respects_level():
    stream = io.StringIO()
    configure_console_logging(level="ERROR", destination=stream, colorize=False)
    emit("just info")
    assert stream.getvalue() == ""


def test_file_sink_creates_directories(tmp_path):
    log_file = tmp_path / "nested" / "run.log"
    configure_file_logging(log_file, level="DEBUG")

    emit("written to disk")
    reset_logging()

    assert "written to disk" in log_file.read_text(encoding="utf-8")


def test_reset_removes_package_sinks():
    configure_test_logging(console_destination=io.StringIO())
    assert datamapper.is_logging_initialized()
    assert datamapper.get_logger_state().is_test_mode()

    reset_logging()
    assert not datamapper.is_logging_initialized()
    assert datamapper.get_logger_state().sink_ids == []


def test_initialize_logging_console_only(monkeypatch):
    monkeypatch.delenv(datamapper.ENV_LOG_DIR, raising=False)
    monkeypatch.setenv(datamapper.ENV_LOG_LEVEL, "WARNING")

    sink_ids = initialize_logging()
    assert set(sink_ids) == {'console'}
    assert datamapper.is_logging_initialized()


def test_initialize_logging_with_log_dir(monkeypatch, tmp_path):
    monkeypatch.setenv(datamapper.ENV_LOG_DIR, str(tmp_path))

    sink_ids = initialize_logging(console_level="ERROR")
    assert set(sink_ids) == {'console', 'file'}

    reset_logging()
    log_files = list(tmp_path.glob("datamapper_*.log"))
    assert len(log_files) == 1
    assert "datamapper logging initialized" in log_files[0].read_text(encoding="utf-8")


def test_initialize_logging_rejects_bad_env_level(monkeypatch):
    monkeypatch.setenv(datamapper.ENV_LOG_LEVEL, "chatty")
    with pytest.raises(LoggingConfigError):
        initialize_logging()
