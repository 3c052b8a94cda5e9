"""Tests for PostgresRepositoryStore SQL composition and error handling."""

from unittest.mock import MagicMock, patch

import psycopg2
import pytest

from packages.clients.postgres_repository_store import (
    REPOSITORY_COLUMNS,
    PostgresRepositoryStore,
    build_search_sql,
    escape_like,
)
from packages.core.errors import StorageError
from packages.schemas.models import FilterDimension, RepositoryQuery, SortField, SortOrder
from tests.conftest import make_repository


@pytest.fixture
def mock_conn() -> MagicMock:
    conn = MagicMock()
    cursor = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    return conn


@pytest.mark.unit
class TestBuildSearchSql:
    def test_approval_clause_comes_first(self) -> None:
        sql, params = build_search_sql(RepositoryQuery())

        assert "WHERE approved IS TRUE ORDER BY" in sql
        assert params == [100, 0]

    def test_default_order(self) -> None:
        sql, _ = build_search_sql(RepositoryQuery())

        assert "ORDER BY stars DESC NULLS LAST, full_name ASC LIMIT %s OFFSET %s" in sql

    def test_full_name_sort_has_no_tie_breaker(self) -> None:
        sql, _ = build_search_sql(RepositoryQuery(sort=SortField.FULL_NAME, order=SortOrder.ASC))

        assert "ORDER BY full_name ASC NULLS LAST LIMIT" in sql

    def test_term_uses_escaped_ilike(self) -> None:
        sql, params = build_search_sql(RepositoryQuery(term=" 100%_done "))

        assert "(full_name ILIKE %s OR short_description ILIKE %s)" in sql
        assert params[:2] == ["%100\\%\\_done%", "%100\\%\\_done%"]

    def test_filters_use_any_per_dimension(self) -> None:
        query = RepositoryQuery(
            filters={
                FilterDimension.LANGUAGE: ("Python", "Go"),
                FilterDimension.TOPIC: ("Genomics",),
                FilterDimension.OWNER: (),
            },
            limit=10,
            offset=20,
        )

        sql, params = build_search_sql(query)

        assert "language = ANY(%s)" in sql
        assert "topic_area = ANY(%s)" in sql
        assert "owner = ANY(%s)" not in sql
        assert params == [["Python", "Go"], ["Genomics"], 10, 20]

    def test_user_values_never_interpolated(self) -> None:
        sql, _ = build_search_sql(
            RepositoryQuery(term="'; DROP TABLE x; --", filters={FilterDimension.OWNER: ("evil'",)})
        )

        assert "DROP" not in sql
        assert "evil" not in sql


@pytest.mark.unit
def test_escape_like() -> None:
    assert escape_like("a\\b%c_d") == "a\\\\b\\%c\\_d"


@pytest.mark.unit
class TestPostgresRepositoryStore:
    def test_search_maps_rows(self, mock_conn: MagicMock) -> None:
        cursor = mock_conn.cursor.return_value.__enter__.return_value
        cursor.fetchall.return_value = [
            {
                "full_name": "ucla/sample-project",
                "short_description": "Sample",
                "stars": 5,
                "approved": True,
                "contact_name_1": "Grace",
                "contact_email_1": None,
                "funder_1": "NIH",
                "grant_number_1_1": "R01",
            }
        ]

        results = PostgresRepositoryStore(mock_conn).search(RepositoryQuery())

        assert results[0].description == "Sample"
        assert results[0].contacts[0].name == "Grace"
        assert results[0].funding[0].grants == ("R01",)
        cursor.execute.assert_called_once()

    def test_find_by_full_name_missing(self, mock_conn: MagicMock) -> None:
        cursor = mock_conn.cursor.return_value.__enter__.return_value
        cursor.fetchall.return_value = []

        assert PostgresRepositoryStore(mock_conn).find_by_full_name("a/b") is None
        sql, params = cursor.execute.call_args.args
        assert "approved IS TRUE AND full_name = %s" in sql
        assert params == ("a/b",)

    def test_distinct_values_uses_dimension_column(self, mock_conn: MagicMock) -> None:
        cursor = mock_conn.cursor.return_value.__enter__.return_value
        cursor.fetchall.return_value = [{"value": "Climate"}, {"value": "Genomics"}]

        values = PostgresRepositoryStore(mock_conn).distinct_values(FilterDimension.TOPIC)

        assert values == ["Climate", "Genomics"]
        assert "SELECT DISTINCT topic_area" in cursor.execute.call_args.args[0]

    def test_query_error_rolls_back(self, mock_conn: MagicMock) -> None:
        cursor = mock_conn.cursor.return_value.__enter__.return_value
        cursor.execute.side_effect = psycopg2.OperationalError("connection lost")

        with pytest.raises(StorageError):
            PostgresRepositoryStore(mock_conn).search(RepositoryQuery())

        mock_conn.rollback.assert_called_once()

    def test_upsert_commits(self, mock_conn: MagicMock) -> None:
        repos = [make_repository("org/one", stars=1), make_repository("org/two")]

        with patch("packages.clients.postgres_repository_store.execute_values") as mock_exec:
            written = PostgresRepositoryStore(mock_conn).upsert(repos)

        assert written == 2
        mock_conn.commit.assert_called_once()
        sql = mock_exec.call_args.args[1]
        values = mock_exec.call_args.args[2]
        assert "ON CONFLICT (full_name) DO UPDATE" in sql
        assert len(values[0]) == len(REPOSITORY_COLUMNS)
        assert values[0][0] == "org/one"

    def test_upsert_keeps_missing_owner_null(self, mock_conn: MagicMock) -> None:
        with patch("packages.clients.postgres_repository_store.execute_values") as mock_exec:
            PostgresRepositoryStore(mock_conn).upsert([make_repository("ucla/orphan", owner=None)])

        values = mock_exec.call_args.args[2]
        assert values[0][REPOSITORY_COLUMNS.index("owner")] is None

    def test_upsert_empty_is_noop(self, mock_conn: MagicMock) -> None:
        assert PostgresRepositoryStore(mock_conn).upsert([]) == 0
        mock_conn.cursor.assert_not_called()

    def test_upsert_error_rolls_back(self, mock_conn: MagicMock) -> None:
        with (
            patch(
                "packages.clients.postgres_repository_store.execute_values",
                side_effect=psycopg2.IntegrityError("bad row"),
            ),
            pytest.raises(StorageError),
        ):
            PostgresRepositoryStore(mock_conn).upsert([make_repository()])

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
