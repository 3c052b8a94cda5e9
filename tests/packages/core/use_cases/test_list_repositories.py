"""Tests for ListRepositoriesUseCase.

Validates listing semantics against the in-memory store:
- Only approved records are returned, in the public response shape
- Filters are OR within a dimension and AND across dimensions
- Unknown sort fields fall back to stars (or raise in strict mode)
- limit/offset are validated before the store is queried
"""

from unittest.mock import MagicMock

import pytest
from prometheus_client import REGISTRY

from packages.clients.memory_repository_store import InMemoryRepositoryStore
from packages.core.errors import InvalidQueryError
from packages.core.use_cases.list_repositories import (
    ListRepositoriesUseCase,
    normalize_filters,
    resolve_sort_field,
    resolve_sort_order,
)
from packages.schemas.models import FilterDimension, SortField, SortOrder
from tests.conftest import make_repository


@pytest.fixture
def use_case(memory_store: InMemoryRepositoryStore) -> ListRepositoriesUseCase:
    return ListRepositoriesUseCase(memory_store)


def _names(results: list) -> list[str]:
    return [repo.full_name for repo in results]


@pytest.mark.unit
class TestListing:
    def test_default_sort_is_stars_desc_with_nulls_last(
        self, use_case: ListRepositoriesUseCase
    ) -> None:
        results = use_case.execute()

        assert _names(results) == [
            "ucsc/climate-model",
            "uc-berkeley/example-repo",
            "ucla/sample-project",
            "ucdavis/genome-tools",
        ]

    def test_unapproved_never_returned(self, use_case: ListRepositoriesUseCase) -> None:
        assert "ucsd/hidden-draft" not in _names(use_case.execute(sort="stars", limit=100))
        assert use_case.execute(term="hidden") == []

    def test_counts_are_strings(self, use_case: ListRepositoriesUseCase) -> None:
        first = use_case.execute(term="example")[0]

        assert first.stars == "12"
        assert first.forks == "3"
        assert first.created_at == "2021-03-04T05:06:07Z"
        assert first.description == "Example research software for data analysis"

    def test_university_filter(self, use_case: ListRepositoriesUseCase) -> None:
        results = use_case.execute(filters={FilterDimension.UNIVERSITY: ["UC Berkeley"]})

        assert _names(results) == ["uc-berkeley/example-repo"]

    def test_or_within_and_across(self, use_case: ListRepositoriesUseCase) -> None:
        results = use_case.execute(
            filters={
                FilterDimension.LANGUAGE: ["Python", "JavaScript"],
                FilterDimension.LICENSE: ["MIT", "Apache-2.0"],
            }
        )

        assert _names(results) == ["uc-berkeley/example-repo", "ucla/sample-project"]

    def test_term_is_case_insensitive_substring(self, use_case: ListRepositoriesUseCase) -> None:
        assert _names(use_case.execute(term="GENOME")) == ["ucdavis/genome-tools"]
        assert _names(use_case.execute(term="dashboard")) == ["ucla/sample-project"]

    def test_blank_term_ignored(self, use_case: ListRepositoriesUseCase) -> None:
        assert len(use_case.execute(term="   ")) == 4

    def test_sort_forks_ascending(self, use_case: ListRepositoriesUseCase) -> None:
        results = use_case.execute(sort="forks", order="asc")

        assert _names(results) == [
            "ucdavis/genome-tools",
            "uc-berkeley/example-repo",
            "ucla/sample-project",
            "ucsc/climate-model",
        ]

    def test_sort_full_name(self, use_case: ListRepositoriesUseCase) -> None:
        results = use_case.execute(sort="full_name", order="asc")

        assert _names(results) == sorted(_names(results))

    def test_pagination(self, use_case: ListRepositoriesUseCase) -> None:
        first = use_case.execute(limit=2, offset=0)
        second = use_case.execute(limit=2, offset=2)
        beyond = use_case.execute(limit=2, offset=10)

        assert _names(first) + _names(second) == _names(use_case.execute())
        assert beyond == []

    def test_drops_unapproved_rows_from_misbehaving_store(self) -> None:
        store = MagicMock()
        store.search.return_value = [
            make_repository("org/visible"),
            make_repository("org/draft", approved=False),
        ]

        results = ListRepositoriesUseCase(store).execute()

        assert _names(results) == ["org/visible"]


@pytest.mark.unit
class TestValidation:
    @pytest.mark.parametrize("limit", [0, -1, 101])
    def test_limit_out_of_range(self, use_case: ListRepositoriesUseCase, limit: int) -> None:
        with pytest.raises(InvalidQueryError) as exc_info:
            use_case.execute(limit=limit)

        assert exc_info.value.field == "limit"

    def test_limit_at_maximum(self, use_case: ListRepositoriesUseCase) -> None:
        assert len(use_case.execute(limit=100)) == 4

    def test_negative_offset(self, use_case: ListRepositoriesUseCase) -> None:
        with pytest.raises(InvalidQueryError):
            use_case.execute(offset=-1)

    def test_term_too_long(self, use_case: ListRepositoriesUseCase) -> None:
        with pytest.raises(InvalidQueryError):
            use_case.execute(term="x" * 257)

    def test_invalid_order(self, use_case: ListRepositoriesUseCase) -> None:
        with pytest.raises(InvalidQueryError):
            use_case.execute(order="sideways")

    def test_invalid_params_never_reach_store(self) -> None:
        store = MagicMock()

        with pytest.raises(InvalidQueryError):
            ListRepositoriesUseCase(store).execute(limit=0)

        store.search.assert_not_called()

    def test_unknown_sort_falls_back_to_stars(self, use_case: ListRepositoriesUseCase) -> None:
        before = REGISTRY.get_sample_value("catalog_sort_fallbacks_total") or 0.0

        results = use_case.execute(sort="popularity")

        assert _names(results) == _names(use_case.execute(sort="stars"))
        assert REGISTRY.get_sample_value("catalog_sort_fallbacks_total") == before + 1

    def test_strict_sort_rejects_unknown_field(self, memory_store: InMemoryRepositoryStore) -> None:
        strict = ListRepositoriesUseCase(memory_store, strict_sort=True)

        with pytest.raises(InvalidQueryError) as exc_info:
            strict.execute(sort="popularity")

        assert exc_info.value.field == "sort"


@pytest.mark.unit
class TestParameterHelpers:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, SortField.STARS),
            ("", SortField.STARS),
            ("FORKS", SortField.FORKS),
            (" created_at ", SortField.CREATED_AT),
        ],
    )
    def test_resolve_sort_field(self, raw: str | None, expected: SortField) -> None:
        assert resolve_sort_field(raw) is expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, SortOrder.DESC),
            ("asc", SortOrder.ASC),
            ("ASC", SortOrder.ASC),
            ("ascending", SortOrder.ASC),
            ("descending", SortOrder.DESC),
        ],
    )
    def test_resolve_sort_order(self, raw: str | None, expected: SortOrder) -> None:
        assert resolve_sort_order(raw) is expected

    def test_normalize_filters(self) -> None:
        normalized = normalize_filters(
            {
                FilterDimension.LANGUAGE: [" Python", "Python", "", "Go"],
                FilterDimension.OWNER: ["  "],
            }
        )

        assert normalized == {FilterDimension.LANGUAGE: ("Python", "Go")}
