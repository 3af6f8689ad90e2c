"""Types and constants for structured logging."""

import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Level(str, Enum):
    """Log level определяет уровень важности лога."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return list(Level).index(self)

    @classmethod
    def parse(cls, value: str | None) -> "Level":
        """Parse a LOG_LEVEL value; case-insensitive, "warning" means WARN, unknown means INFO."""
        name = (value or "info").strip().lower()
        if name == "warning":
            name = "warn"
        try:
            return cls(name)
        except ValueError:
            print(f"[LOGGER ERROR] Unknown log level {value!r}, using info", file=sys.stderr)
            return cls.INFO


class Category(str, Enum):
    """Category группирует события импорта."""

    CONFIG = "config"  # Simple configuration
    ENTITY = "entity"  # Config entities
    STORAGE = "storage"  # YAML-файлы в sync directory
    DATABASE = "database"  # Операции с БД


@dataclass
class LogEntry:
    """LogEntry представляет одну запись лога."""

    timestamp: datetime
    service_name: str
    instance_id: str
    environment: str
    level: Level
    message: str
    ingestion_time: datetime = field(default_factory=datetime.utcnow)
    category: Category | None = None
    function_name: str | None = None
    file_path: str | None = None
    line_number: int | None = None
    error_message: str | None = None
    stack_trace: str | None = None
    context: dict[str, Any] | None = None


@dataclass
class Field:
    """Field для структурированных данных в логах."""

    key: str
    value: Any


def param(key: str, value: Any) -> Field:
    """Универсальная функция для добавления параметра."""
    return Field(key=key, value=value)
