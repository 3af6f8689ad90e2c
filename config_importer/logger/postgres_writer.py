"""PostgreSQL writer для логов с батчингом."""

import atexit
import json
import sys
from typing import Any

import psycopg2
import psycopg2.extras
from psycopg2.extensions import connection as Connection

from config_importer.logger.types import LogEntry

INSERT_QUERY = """
    INSERT INTO logs (
        timestamp, service_name, instance_id, environment,
        level, category, function_name, file_path, line_number,
        message, error_message, stack_trace, context, ingestion_time
    ) VALUES %s
"""


class PostgresWriter:
    """Buffers log entries and bulk-inserts them into the logs table."""

    def __init__(self, dsn: str, batch_size: int = 50) -> None:
        """
        Initialize PostgresWriter.

        Args:
            dsn: PostgreSQL connection string
            batch_size: Размер батча для flush
        """
        self.dsn = dsn
        self.batch_size = batch_size
        self.buffer: list[LogEntry] = []
        self._conn: Connection | None = None
        self._closed = False

    def connect(self) -> None:
        """Подключается к PostgreSQL."""
        try:
            self._conn = psycopg2.connect(self.dsn)
            self._conn.set_session(autocommit=False)
            # Flush the partial batch at interpreter exit
            atexit.register(self.close)
        except Exception as e:
            print(
                f"[LOGGER ERROR] Failed to connect to PostgreSQL: {e}",
                file=sys.stderr,
            )
            raise

    def write(self, entry: LogEntry) -> None:
        """Добавляет запись в буфер."""
        if self._closed:
            return

        self.buffer.append(entry)
        if len(self.buffer) >= self.batch_size:
            self.flush()

    def flush(self) -> None:
        """Записывает буфер в БД."""
        if not self.buffer:
            return
        if not self._conn:
            self._fallback_to_stderr()
            return

        values = [
            (
                entry.timestamp,
                entry.service_name,
                entry.instance_id,
                entry.environment,
                entry.level.value,
                entry.category.value if entry.category else None,
                entry.function_name,
                entry.file_path,
                entry.line_number,
                entry.message,
                entry.error_message,
                entry.stack_trace,
                json.dumps(entry.context, default=str) if entry.context else None,
                entry.ingestion_time,
            )
            for entry in self.buffer
        ]

        try:
            with self._conn.cursor() as cursor:
                psycopg2.extras.execute_values(
                    cursor, INSERT_QUERY, values, page_size=self.batch_size
                )
            self._conn.commit()
            self.buffer.clear()
        except psycopg2.Error as e:
            print(
                f"[LOGGER ERROR] Failed to insert logs into PostgreSQL: {e}",
                file=sys.stderr,
            )
            self._conn.rollback()
            self._fallback_to_stderr()

    def _fallback_to_stderr(self) -> None:
        """Записывает логи в stderr если PostgreSQL недоступен."""
        for entry in self.buffer:
            data: dict[str, Any] = {
                "timestamp": entry.timestamp.isoformat(),
                "level": entry.level.value,
                "category": entry.category.value if entry.category else None,
                "message": entry.message,
                "service_name": entry.service_name,
            }
            if entry.error_message:
                data["error"] = entry.error_message
            if entry.context:
                data["context"] = entry.context
            print(json.dumps(data, default=str), file=sys.stderr)
        self.buffer.clear()

    def close(self) -> None:
        """Сбрасывает оставшиеся логи и закрывает соединение."""
        atexit.unregister(self.close)
        self.flush()
        self._closed = True
        if self._conn:
            self._conn.close()
            self._conn = None
