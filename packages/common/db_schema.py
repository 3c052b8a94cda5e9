"""PostgreSQL schema creation and verification for the ORB catalog.

Provides utilities for loading and executing the bundled SQL schema, recording
the applied version, and verifying table existence. Used by ``orb init``.
"""

import hashlib
import re
from datetime import datetime
from pathlib import Path

import psycopg2
from psycopg2.extensions import connection
from psycopg2.extensions import cursor as Cursor  # noqa: N812

from packages.common.config import OrbConfig
from packages.common.logging import get_logger
from packages.common.tracing import TracingContext

logger = get_logger(__name__)

# Must match the "THIS VERSION:" comment in sql/schema.sql
CURRENT_SCHEMA_VERSION = "1.0.0"

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parent / "sql" / "schema.sql"

EXPECTED_TABLES = ("repositories", "schema_versions")


def load_schema_file(path: Path) -> str:
    """Load SQL schema file from given path.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    return path.read_text(encoding="utf-8")


def get_schema_checksum(sql_content: str) -> str:
    """Calculate SHA-256 checksum of schema SQL."""
    return hashlib.sha256(sql_content.encode("utf-8")).hexdigest()


def extract_schema_version(sql_content: str) -> str | None:
    """Extract schema version from SQL file comment.

    Parses the "THIS VERSION: X.Y.Z" comment from the schema SQL file.

    Example:
        >>> extract_schema_version("-- THIS VERSION: 1.0.0\\nCREATE TABLE t (id INT);")
        '1.0.0'
    """
    match = re.search(r"--\s*THIS\s+VERSION:\s*(\S+)", sql_content, re.IGNORECASE)
    return match.group(1) if match else None


def get_current_version(cursor: Cursor) -> str | None:
    """Get the currently applied schema version, or None on first run."""
    try:
        cursor.execute(
            "SELECT version FROM orb.schema_versions "
            "WHERE status = 'success' "
            "ORDER BY applied_at DESC LIMIT 1"
        )
        result = cursor.fetchone()
        return result[0] if result else None
    except psycopg2.Error:
        # Table doesn't exist yet; clear the aborted transaction
        cursor.connection.rollback()
        return None


def get_connection(config: OrbConfig) -> connection:
    """Create a standalone PostgreSQL connection using config.

    Raises:
        ConnectionError: On connection failure.
    """
    try:
        return psycopg2.connect(config.postgres_connection_string)
    except psycopg2.Error as e:
        raise ConnectionError(f"Failed to connect to PostgreSQL: {e}") from e


def create_schema(config: OrbConfig, schema_path: str | None = None) -> str:
    """Create the catalog schema by executing the schema SQL with version tracking.

    Skips execution when the recorded version and checksum already match the
    file. Otherwise applies the DDL inside one transaction and records the
    version, checksum and execution time in ``orb.schema_versions``.

    Args:
        config: ORB configuration with PostgreSQL credentials.
        schema_path: Optional path to an alternative SQL schema file.

    Returns:
        str: The schema version now applied.

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ConnectionError: If database connection fails.
        ValueError: If schema file missing THIS VERSION comment.
        RuntimeError: If SQL execution fails (transaction is rolled back).
    """
    with TracingContext() as correlation_id:
        schema_path_obj = Path(schema_path) if schema_path else DEFAULT_SCHEMA_PATH
        sql_content = load_schema_file(schema_path_obj)

        file_version = extract_schema_version(sql_content)
        if not file_version:
            raise ValueError(
                "Schema file missing THIS VERSION comment. "
                "Add '-- THIS VERSION: X.Y.Z' to schema SQL file."
            )

        if file_version != CURRENT_SCHEMA_VERSION:
            logger.warning(
                "Schema file version mismatch with CURRENT_SCHEMA_VERSION constant",
                extra={"file_version": file_version, "constant_version": CURRENT_SCHEMA_VERSION},
            )

        checksum = get_schema_checksum(sql_content)
        logger.info(
            "Loaded schema SQL",
            extra={
                "correlation_id": correlation_id,
                "file_path": str(schema_path_obj),
                "version": file_version,
                "checksum": checksum[:16] + "...",
            },
        )

        conn = get_connection(config)
        try:
            with conn.cursor() as cursor:
                current_version = get_current_version(cursor)

                if current_version == file_version:
                    cursor.execute(
                        "SELECT checksum FROM orb.schema_versions WHERE version = %s",
                        (current_version,),
                    )
                    result = cursor.fetchone()
                    if result and result[0] == checksum:
                        logger.info(
                            "Schema already at current version - skipping",
                            extra={"version": current_version},
                        )
                        return file_version

                    logger.warning(
                        "Schema checksum mismatch - schema file modified",
                        extra={"version": current_version},
                    )

                start_time = datetime.now()
                cursor.execute(sql_content)
                execution_time = int((datetime.now() - start_time).total_seconds() * 1000)

                cursor.execute(
                    """
                    INSERT INTO orb.schema_versions (version, description, checksum, execution_time_ms)
                    VALUES (%s, %s, %s, %s)
                    ON CONFLICT (version) DO UPDATE
                    SET applied_at = NOW(),
                        checksum = EXCLUDED.checksum,
                        execution_time_ms = EXCLUDED.execution_time_ms,
                        status = 'success'
                    """,
                    (
                        file_version,
                        f"Applied schema version {file_version}",
                        checksum,
                        execution_time,
                    ),
                )

            conn.commit()
            logger.info(
                "Schema creation completed successfully",
                extra={
                    "from_version": current_version or "none",
                    "to_version": file_version,
                    "execution_time_ms": execution_time,
                },
            )
            return file_version

        except psycopg2.Error as e:
            conn.rollback()
            logger.exception("Schema creation failed, rolling back", extra={"version": file_version})
            raise RuntimeError("Schema creation failed") from e

        finally:
            conn.close()


def verify_schema(config: OrbConfig) -> list[str]:
    """Return the names of the expected catalog tables missing from the database."""
    conn = get_connection(config)
    try:
        with conn.cursor() as cursor:
            cursor.execute(
                "SELECT table_name FROM information_schema.tables WHERE table_schema = 'orb'"
            )
            present = {row[0] for row in cursor.fetchall()}
    finally:
        conn.close()

    missing = [table for table in EXPECTED_TABLES if table not in present]
    if missing:
        logger.warning("Catalog schema incomplete", extra={"missing_tables": missing})
    return missing


__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "DEFAULT_SCHEMA_PATH",
    "create_schema",
    "extract_schema_version",
    "get_connection",
    "get_current_version",
    "get_schema_checksum",
    "load_schema_file",
    "verify_schema",
]
