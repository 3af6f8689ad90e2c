"""PostgreSQL client for the live configuration store."""

import os
from collections.abc import Generator
from contextlib import contextmanager

from psycopg2.extensions import connection as Connection
from psycopg2.pool import ThreadedConnectionPool


class PostgresConfig:
    """Connection settings for the site database."""

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        database: str | None = None,
        user: str | None = None,
        password: str | None = None,
        connect_timeout: int | None = None,
    ) -> None:
        self.host = host or os.getenv("DB_HOST", "localhost")
        self.port = port or int(os.getenv("DB_PORT", "5432"))
        self.database = database or os.getenv("DB_NAME", "site")
        self.user = user or os.getenv("DB_USER", "site")
        self.password = password or self._read_password()
        self.connect_timeout = connect_timeout or int(os.getenv("DB_CONNECT_TIMEOUT", "10"))

    @staticmethod
    def _read_password() -> str:
        """Read password from Docker secret or env."""
        secret_file = "/run/secrets/db_password"
        if os.path.exists(secret_file):
            with open(secret_file) as f:
                return f.read().strip()
        return os.getenv("DB_PASSWORD", "")

    @property
    def dsn(self) -> str:
        return (
            f"host={self.host} port={self.port} dbname={self.database} "
            f"user={self.user} password={self.password} "
            f"connect_timeout={self.connect_timeout}"
        )


class PostgresClient:
    """
    Small connection pool. One import touches one connection at a time,
    so the pool stays at one or two connections.
    """

    def __init__(self, config: PostgresConfig) -> None:
        self.config = config
        self.pool: ThreadedConnectionPool | None = None

    def connect(self) -> None:
        """Create the connection pool."""
        try:
            self.pool = ThreadedConnectionPool(minconn=1, maxconn=2, dsn=self.config.dsn)
        except Exception as e:
            raise ConnectionError(f"Failed to create connection pool: {e}") from e

    def close(self) -> None:
        """Close the connection pool."""
        if self.pool:
            self.pool.closeall()
            self.pool = None

    @contextmanager
    def connection(self) -> Generator[Connection, None, None]:
        """
        Borrow a pooled connection as one transaction.

        Commits when the block exits normally, rolls back when it raises.
        The connection goes back to the pool either way.
        """
        if not self.pool:
            raise RuntimeError("Connection pool not initialized. Call connect() first.")
        conn = self.pool.getconn()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self.pool.putconn(conn)
