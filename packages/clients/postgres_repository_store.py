"""PostgreSQL implementation of the RepositoryStore port.

Every filter is pushed into SQL: approval first, then the free-text ILIKE,
then one ``= ANY(%s)`` predicate per active categorical dimension. Sorting
and LIMIT/OFFSET also happen in the database.
"""

from collections.abc import Sequence
from typing import Any

import psycopg2
from psycopg2.extensions import connection
from psycopg2.extras import RealDictCursor, execute_values

from packages.common.logging import get_logger
from packages.core.errors import StorageError
from packages.core.ports.repositories import RepositoryStore
from packages.schemas.models import (
    MAX_CONTACTS,
    MAX_FUNDERS,
    MAX_GRANTS_PER_FUNDER,
    FilterDimension,
    Repository,
    RepositoryQuery,
    SortField,
    SortOrder,
)

logger = get_logger(__name__)

TABLE = "orb.repositories"

REPOSITORY_COLUMNS: tuple[str, ...] = (
    "full_name",
    "owner",
    "name",
    "short_description",
    "readme",
    "homepage",
    "default_branch",
    "html_url",
    "university",
    "license",
    "language",
    "topic_area",
    "stars",
    "forks",
    "watchers",
    "created_at",
    "approved",
    *(f"contact_{kind}_{i}" for i in range(1, MAX_CONTACTS + 1) for kind in ("name", "email")),
    *(
        column
        for i in range(1, MAX_FUNDERS + 1)
        for column in (
            f"funder_{i}",
            *(f"grant_number_{i}_{j}" for j in range(1, MAX_GRANTS_PER_FUNDER + 1)),
        )
    ),
)

# Allow-list: the only strings ever interpolated into ORDER BY
SORT_COLUMNS: dict[SortField, str] = {
    SortField.STARS: "stars",
    SortField.FORKS: "forks",
    SortField.WATCHERS: "watchers",
    SortField.CREATED_AT: "created_at",
    SortField.FULL_NAME: "full_name",
}

_SELECT = f"SELECT {', '.join(REPOSITORY_COLUMNS)} FROM {TABLE}"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_search_sql(query: RepositoryQuery) -> tuple[str, list[Any]]:
    """Compose the listing SQL and its parameters for a validated query."""
    clauses = ["approved IS TRUE"]
    params: list[Any] = []

    term = query.search_term
    if term:
        pattern = f"%{escape_like(term)}%"
        clauses.append("(full_name ILIKE %s OR short_description ILIKE %s)")
        params.extend([pattern, pattern])

    for dimension, values in query.active_filters.items():
        clauses.append(f"{dimension.field_name} = ANY(%s)")
        params.append(list(values))

    direction = "ASC" if query.order is SortOrder.ASC else "DESC"
    sort_column = SORT_COLUMNS[query.sort]
    order_by = f"{sort_column} {direction} NULLS LAST"
    if query.sort is not SortField.FULL_NAME:
        order_by += ", full_name ASC"

    sql = f"{_SELECT} WHERE {' AND '.join(clauses)} ORDER BY {order_by} LIMIT %s OFFSET %s"
    params.extend([query.limit, query.offset])
    return sql, params


class PostgresRepositoryStore(RepositoryStore):
    """PostgreSQL implementation of RepositoryStore.

    Bound to a single connection checked out for the current request.
    """

    def __init__(self, conn: connection) -> None:
        """Initialize with PostgreSQL connection.

        Args:
            conn: psycopg2 connection object.
        """
        self.conn = conn

    def _fetch(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(sql, params)
                rows: list[dict[str, Any]] = cur.fetchall()
            return rows
        except psycopg2.Error as e:
            self.conn.rollback()
            logger.exception("Repository query failed", extra={"error": str(e)})
            raise StorageError(f"Repository query failed: {e}") from e

    def search(self, query: RepositoryQuery) -> list[Repository]:
        sql, params = build_search_sql(query)
        rows = self._fetch(sql, params)
        logger.debug(f"Query returned {len(rows)} rows")
        return [Repository.from_row(row) for row in rows]

    def find_by_full_name(self, full_name: str) -> Repository | None:
        rows = self._fetch(f"{_SELECT} WHERE approved IS TRUE AND full_name = %s", (full_name,))
        return Repository.from_row(rows[0]) if rows else None

    def distinct_values(self, dimension: FilterDimension) -> list[str]:
        column = dimension.field_name
        rows = self._fetch(
            f"SELECT DISTINCT {column} AS value FROM {TABLE} "
            f"WHERE approved IS TRUE AND {column} IS NOT NULL AND {column} <> '' "
            f"ORDER BY {column} ASC",
            (),
        )
        return [row["value"] for row in rows]

    def upsert(self, repositories: Sequence[Repository]) -> int:
        """Insert or update repositories keyed by full_name.

        Uses PostgreSQL's ON CONFLICT for bulk upserts in one transaction.
        """
        if not repositories:
            return 0

        rows = [repo.to_row() for repo in repositories]
        values = [tuple(row[column] for column in REPOSITORY_COLUMNS) for row in rows]
        updates = ", ".join(
            f"{column} = EXCLUDED.{column}" for column in REPOSITORY_COLUMNS if column != "full_name"
        )

        try:
            with self.conn.cursor() as cur:
                execute_values(
                    cur,
                    f"INSERT INTO {TABLE} ({', '.join(REPOSITORY_COLUMNS)}) VALUES %s "
                    f"ON CONFLICT (full_name) DO UPDATE SET {updates}, loaded_at = NOW()",
                    values,
                    page_size=500,
                )
            self.conn.commit()
        except psycopg2.Error as e:
            self.conn.rollback()
            logger.exception("Repository upsert failed", extra={"error": str(e)})
            raise StorageError(f"Repository upsert failed: {e}") from e

        logger.info(f"Upserted {len(rows)} repositories")
        return len(rows)


__all__ = [
    "PostgresRepositoryStore",
    "REPOSITORY_COLUMNS",
    "SORT_COLUMNS",
    "build_search_sql",
    "escape_like",
]
