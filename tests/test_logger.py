"""Tests for the structured logger."""

from unittest.mock import MagicMock

import pytest

from config_importer.logger import postgres_writer
from config_importer.logger.logger import Logger, get_logger, init_logger
from config_importer.logger.postgres_writer import PostgresWriter
from config_importer.logger.types import Category, Level, param
from config_importer.storage.file_storage import FileStorage


def test_entries_go_to_writer():
    writer = MagicMock()
    logger = Logger("config-importer", "test", writer).with_category(Category.CONFIG)

    logger.info("Config imported", param("name", "system.site"))

    entry = writer.write.call_args.args[0]
    assert entry.level == Level.INFO
    assert entry.category == Category.CONFIG
    assert entry.context == {"name": "system.site"}
    assert entry.function_name == "test_entries_go_to_writer"


def test_level_filter():
    writer = MagicMock()
    logger = Logger("config-importer", "test", writer, level=Level.INFO)

    logger.debug("hidden")

    writer.write.assert_not_called()


def test_error_carries_stack_trace():
    writer = MagicMock()
    logger = Logger("config-importer", "test", writer)

    try:
        raise ValueError("boom")
    except ValueError as e:
        logger.error("Failed", e)

    entry = writer.write.call_args.args[0]
    assert entry.error_message == "boom"
    assert "ValueError" in entry.stack_trace


def test_stdout_fallback(capsys):
    Logger("config-importer", "test").with_category(Category.STORAGE).warn("Careful")

    assert "[warn] storage: Careful" in capsys.readouterr().out


def test_init_logger_replaces_global():
    logger = init_logger("other", "test")

    assert get_logger() is logger


def test_writer_without_connection_falls_back_to_stderr(capsys):
    writer = PostgresWriter("dbname=none", batch_size=1)
    logger = Logger("config-importer", "test", writer)

    logger.info("Config imported")

    assert '"message": "Config imported"' in capsys.readouterr().err
    assert writer.buffer == []


@pytest.mark.parametrize(
    ("value", "level"),
    [("INFO", Level.INFO), ("debug", Level.DEBUG), ("warning", Level.WARN), (" Error ", Level.ERROR), (None, Level.INFO)],
)
def test_level_parse(value, level):
    assert Level.parse(value) == level


def test_level_parse_unknown(capsys):
    assert Level.parse("verbose") == Level.INFO
    assert "verbose" in capsys.readouterr().err


@pytest.mark.parametrize("value", ["INFO", "warning", "verbose"])
def test_default_logger_accepts_any_log_level(monkeypatch, sync_dir, value):
    monkeypatch.setenv("LOG_LEVEL", value)

    FileStorage(sync_dir)

    assert get_logger().level in (Level.INFO, Level.WARN)


def test_default_logger_uses_settings(monkeypatch):
    monkeypatch.setenv("SERVICE_NAME", "site-deploy")
    monkeypatch.setenv("ENVIRONMENT", "prod")

    logger = get_logger()

    assert (logger.service_name, logger.environment) == ("site-deploy", "prod")


def test_writer_flushes_at_exit(monkeypatch):
    register = MagicMock()
    unregister = MagicMock()
    monkeypatch.setattr(postgres_writer.psycopg2, "connect", MagicMock())
    monkeypatch.setattr(postgres_writer.atexit, "register", register)
    monkeypatch.setattr(postgres_writer.atexit, "unregister", unregister)
    writer = PostgresWriter("dbname=logs")

    writer.connect()
    register.assert_called_once_with(writer.close)

    writer.close()
    unregister.assert_called_once_with(writer.close)
