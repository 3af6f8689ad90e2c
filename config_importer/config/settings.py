"""Settings module for the config importer."""

import os
from typing import Any

from config_importer.database.postgres import PostgresConfig


class Settings:
    """Process-wide settings.

    Every value comes from the environment unless passed explicitly.
    """

    def __init__(
        self,
        config_sync_directory: str | None = None,
        entity_types_file: str | None = None,
        postgres: PostgresConfig | None = None,
    ) -> None:
        # Service info
        self.environment = os.getenv("ENVIRONMENT", "dev")
        self.service_name = os.getenv("SERVICE_NAME", "config-importer")
        self.log_level = os.getenv("LOG_LEVEL", "info")

        # Где лежат YAML-экспорты
        self.config_sync_directory = config_sync_directory or os.getenv(
            "CONFIG_SYNC_DIRECTORY"
        )
        self.entity_types_file = entity_types_file or os.getenv("ENTITY_TYPES_FILE")

        # PostgreSQL (live config store)
        self.postgres = postgres or PostgresConfig()

    def get(self, name: str, default: Any = None) -> Any:  # noqa: ANN401
        """
        Get a setting by name.

        Args:
            name: Setting name, e.g. "config_sync_directory"
            default: Returned when the setting is absent or unset

        Returns:
            Setting value or default
        """
        value = getattr(self, name, None)
        return default if value is None else value
