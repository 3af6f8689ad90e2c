"""Основной logger для структурированного логирования."""

import inspect
import os
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from config_importer.config.settings import Settings
from config_importer.logger.postgres_writer import PostgresWriter
from config_importer.logger.types import Category, Field, Level, LogEntry


class Logger:
    """Structured logger; writes to PostgreSQL or falls back to stdout."""

    def __init__(
        self,
        service_name: str,
        environment: str,
        writer: PostgresWriter | None = None,
        level: Level = Level.INFO,
    ) -> None:
        """
        Initialize Logger.

        Args:
            service_name: Имя сервиса
            environment: Окружение (dev, stage, prod)
            writer: PostgresWriter для записи логов
            level: Минимальный уровень, ниже которого записи отбрасываются
        """
        self.service_name = service_name
        self.environment = environment
        self.writer = writer
        self.level = level
        self.instance_id = os.getenv("HOSTNAME") or str(uuid.uuid4())

        self._fields: dict[str, Any] = {}
        self._category: Category | None = None

    def trace(self, msg: str, *fields: Field) -> None:
        self._log(Level.TRACE, msg, None, *fields)

    def debug(self, msg: str, *fields: Field) -> None:
        self._log(Level.DEBUG, msg, None, *fields)

    def info(self, msg: str, *fields: Field) -> None:
        self._log(Level.INFO, msg, None, *fields)

    def warn(self, msg: str, *fields: Field) -> None:
        self._log(Level.WARN, msg, None, *fields)

    def error(self, msg: str, err: Exception | None = None, *fields: Field) -> None:
        self._log(Level.ERROR, msg, err, *fields)

    def _log(
        self,
        level: Level,
        msg: str,
        err: Exception | None,
        *fields: Field,
    ) -> None:
        if level.rank < self.level.rank:
            return

        frame = inspect.currentframe()
        caller_frame = frame.f_back.f_back if frame and frame.f_back else None

        function_name = None
        file_path = None
        line_number = None
        if caller_frame:
            function_name = caller_frame.f_code.co_name
            file_path = self._clean_file_path(caller_frame.f_code.co_filename)
            line_number = caller_frame.f_lineno

        context: dict[str, Any] = dict(self._fields)
        category = self._category
        for field in fields:
            if field.key == "_category":
                if isinstance(field.value, Category):
                    category = field.value
                continue
            context[field.key] = field.value

        entry = LogEntry(
            timestamp=datetime.utcnow(),
            service_name=self.service_name,
            instance_id=self.instance_id,
            environment=self.environment,
            level=level,
            category=category,
            function_name=function_name,
            file_path=file_path,
            line_number=line_number,
            message=msg,
            context=context or None,
        )

        if err:
            entry.error_message = str(err)
            if level == Level.ERROR:
                entry.stack_trace = "".join(
                    traceback.format_exception(type(err), err, err.__traceback__)
                )

        if self.writer:
            self.writer.write(entry)
        else:
            # Fallback: пишем в stdout если writer не задан
            cat = entry.category.value if entry.category else "-"
            extra = f" {entry.context}" if entry.context else ""
            print(f"[{entry.level.value}] {cat}: {entry.message}{extra}")

    def with_category(self, category: Category) -> "Logger":
        """Возвращает новый logger с указанной категорией."""
        new_logger = self._copy()
        new_logger._category = category
        return new_logger

    def _copy(self) -> "Logger":
        new_logger = Logger(self.service_name, self.environment, self.writer, self.level)
        new_logger.instance_id = self.instance_id
        new_logger._fields = dict(self._fields)
        new_logger._category = self._category
        return new_logger

    @staticmethod
    def _clean_file_path(file_path: str) -> str:
        """Очищает путь к файлу от абсолютного пути."""
        parts = Path(file_path).parts
        if "config_importer" in parts:
            idx = parts.index("config_importer")
            return str(Path(*parts[idx:]))
        return Path(file_path).name


# Глобальный logger instance
_global_logger: Logger | None = None


def get_logger() -> Logger:
    """Return the global logger, creating a stdout logger on first use."""
    global _global_logger
    if _global_logger is None:
        settings = Settings()
        _global_logger = Logger(
            settings.service_name,
            settings.environment,
            level=Level.parse(settings.log_level),
        )
    return _global_logger


def init_logger(
    service_name: str,
    environment: str,
    writer: PostgresWriter | None = None,
    level: Level = Level.INFO,
) -> Logger:
    """
    Инициализирует глобальный logger.

    Args:
        service_name: Имя сервиса
        environment: Окружение (dev, stage, prod)
        writer: PostgresWriter для записи логов
        level: Минимальный уровень логирования

    Returns:
        Logger instance
    """
    global _global_logger
    _global_logger = Logger(service_name, environment, writer, level)
    return _global_logger
