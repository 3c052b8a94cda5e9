"""PostgreSQL connection pool for the ORB Showcase service.

The API checks out one connection per request. Its pool is opened read-only
so a catalog query can never modify ``orb.repositories``; the ``load``
command opens its own short-lived, writable pool.
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg2
from psycopg2.extensions import connection as PgConnection  # noqa: N812
from psycopg2.pool import PoolError, ThreadedConnectionPool

from packages.common.config import OrbConfig
from packages.common.logging import get_logger

logger = get_logger(__name__)


class PostgresPoolError(Exception):
    """Raised when a pooled PostgreSQL operation fails."""


def connection_kwargs(config: OrbConfig, application_name: str) -> dict[str, Any]:
    """libpq keyword arguments for catalog connections."""
    kwargs: dict[str, Any] = {
        "host": config.postgres_host,
        "port": config.postgres_port,
        "database": config.postgres_db,
        "user": config.postgres_user,
        "password": config.postgres_password.get_secret_value(),
        "application_name": application_name,
    }
    if config.postgres_statement_timeout_ms:
        kwargs["options"] = f"-c statement_timeout={config.postgres_statement_timeout_ms}"
    return kwargs


class PostgresPool:
    """Thread-safe pool of catalog connections.

    Example:
        >>> with PostgresPool(config, readonly=True) as pool:
        ...     with pool.get_connection() as conn:
        ...         PostgresRepositoryStore(conn).search(RepositoryQuery())
    """

    def __init__(
        self,
        config: OrbConfig,
        *,
        readonly: bool = False,
        application_name: str = "orb-showcase",
    ) -> None:
        self.readonly = readonly
        self._config = config
        self._closed = False

        try:
            self.pool = ThreadedConnectionPool(
                minconn=config.postgres_min_pool_size,
                maxconn=config.postgres_max_pool_size,
                **connection_kwargs(config, application_name),
            )
        except psycopg2.Error as e:
            logger.exception(
                "Could not open catalog connection pool",
                extra={"host": config.postgres_host, "error": str(e)},
            )
            raise PostgresPoolError(f"Failed to initialize PostgreSQL pool: {e}") from e

        logger.info(
            "Catalog connection pool ready",
            extra={
                "host": config.postgres_host,
                "database": config.postgres_db,
                "readonly": readonly,
                "max_pool_size": config.postgres_max_pool_size,
            },
        )

    @contextmanager
    def get_connection(self) -> Generator[PgConnection, None, None]:
        """Check out a connection for the duration of the block.

        Read-only pools put each session in read-only mode before handing it
        out. A psycopg2 error inside the block rolls the session back and is
        re-raised as ``PostgresPoolError``; the connection always goes back to
        the pool.
        """
        conn = None
        try:
            conn = self.pool.getconn()
            if self.readonly:
                conn.set_session(readonly=True)
            yield conn
        except psycopg2.Error as e:
            logger.exception("Catalog connection error", extra={"error": str(e)})
            if conn is not None and not conn.closed:
                conn.rollback()
            raise PostgresPoolError(f"PostgreSQL connection error: {e}") from e
        finally:
            if conn is not None:
                self._release(conn)

    def _release(self, conn: PgConnection) -> None:
        try:
            self.pool.putconn(conn)
        except PoolError as e:
            logger.warning("Dropped connection the pool no longer tracks", extra={"error": str(e)})

    def close_all(self) -> None:
        """Close every pooled connection. Safe to call twice."""
        if self._closed:
            return
        self.pool.closeall()
        self._closed = True
        logger.info("Catalog connection pool closed", extra={"database": self._config.postgres_db})

    def __enter__(self) -> "PostgresPool":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close_all()


__all__ = ["PostgresPool", "PostgresPoolError", "connection_kwargs"]
