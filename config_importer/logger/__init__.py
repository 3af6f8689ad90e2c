"""Structured logging for the config importer."""

from config_importer.logger.logger import Logger, get_logger, init_logger
from config_importer.logger.postgres_writer import PostgresWriter
from config_importer.logger.types import Category, Field, Level, LogEntry, param

__all__ = [
    "Logger",
    "get_logger",
    "init_logger",
    "PostgresWriter",
    "Category",
    "Level",
    "LogEntry",
    "Field",
    "param",
]
