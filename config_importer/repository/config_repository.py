"""Configuration repository for PostgreSQL."""

import functools
import json
from typing import Any

from psycopg2.extras import Json, RealDictCursor

from config_importer.database.postgres import PostgresClient
from config_importer.logger.logger import get_logger
from config_importer.logger.types import Category, param

# YAML exports may hold dates and timestamps; JSONB stores them as ISO strings
json_dumps = functools.partial(json.dumps, default=str)


class ConfigRepository:
    """Repository for the live configuration store in PostgreSQL."""

    TABLE_NAME = "config"

    def __init__(self, postgres_client: PostgresClient, collection: str = "") -> None:
        """
        Initialize ConfigRepository.

        Args:
            postgres_client: PostgreSQL client instance
            collection: Config collection, "" is the active one
        """
        self.postgres = postgres_client
        self.collection = collection
        self.logger = get_logger().with_category(Category.DATABASE)

    def ensure_table_exists(self) -> None:
        """Create the config table if it does not exist."""
        try:
            with self.postgres.connection() as conn, conn.cursor() as cur:
                cur.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {self.TABLE_NAME} (
                        collection VARCHAR(255) NOT NULL DEFAULT '',
                        name VARCHAR(255) NOT NULL,
                        data JSONB NOT NULL,
                        updated_at TIMESTAMP NOT NULL DEFAULT NOW(),
                        PRIMARY KEY (collection, name)
                    )
                    """
                )
        except Exception as e:
            self.logger.error("Failed to create config table", e)
            raise

    def read(self, name: str) -> dict[str, Any] | None:
        """
        Read config data by name.

        Args:
            name: Config name

        Returns:
            Config data or None if not stored
        """
        with self.postgres.connection() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(
                f"""
                SELECT data
                FROM {self.TABLE_NAME}
                WHERE collection = %s AND name = %s
                """,
                (self.collection, name),
            )
            row = cur.fetchone()

        return None if row is None else dict(row["data"])

    def write(self, name: str, data: dict[str, Any]) -> None:
        """
        Insert or replace config data.

        Args:
            name: Config name
            data: Full config payload
        """
        try:
            with self.postgres.connection() as conn, conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO {self.TABLE_NAME} (collection, name, data, updated_at)
                    VALUES (%s, %s, %s, NOW())
                    ON CONFLICT (collection, name) DO UPDATE SET
                        data = EXCLUDED.data,
                        updated_at = NOW()
                    """,
                    (self.collection, name, Json(data, dumps=json_dumps)),
                )
        except Exception as e:
            self.logger.error("Failed to write config", e, param("name", name))
            raise

        self.logger.debug("Config written", param("name", name))

    def delete(self, name: str) -> bool:
        """
        Delete config by name.

        Returns:
            True if a row was deleted
        """
        try:
            with self.postgres.connection() as conn, conn.cursor() as cur:
                cur.execute(
                    f"DELETE FROM {self.TABLE_NAME} WHERE collection = %s AND name = %s",
                    (self.collection, name),
                )
                return cur.rowcount > 0
        except Exception as e:
            self.logger.error("Failed to delete config", e, param("name", name))
            raise

    def list_all(self, prefix: str = "") -> list[str]:
        """
        List stored config names.

        Args:
            prefix: Only names starting with this prefix

        Returns:
            Sorted config names
        """
        pattern = prefix.replace("%", r"\%").replace("_", r"\_") + "%"
        with self.postgres.connection() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(
                f"""
                SELECT name
                FROM {self.TABLE_NAME}
                WHERE collection = %s AND name LIKE %s
                ORDER BY name
                """,
                (self.collection, pattern),
            )
            return [row["name"] for row in cur.fetchall()]
