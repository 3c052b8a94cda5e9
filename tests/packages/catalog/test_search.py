"""Tests for fuzzy relevance scoring."""

import pytest

from packages.catalog.search import MIN_RELEVANCE, rank, relevance, score_text
from packages.schemas.models import Repository
from tests.conftest import make_repository


@pytest.mark.unit
class TestScoreText:
    def test_exact_match_scores_one(self) -> None:
        assert score_text("genome-tools", "Genome-Tools") == 1.0

    def test_substring_beats_approximate(self) -> None:
        substring = score_text("genome", "ucdavis/genome-tools")
        approximate = score_text("genme", "ucdavis/genome-tools")

        assert 0.75 <= substring < 1.0
        assert MIN_RELEVANCE <= approximate < substring

    def test_earlier_substring_scores_higher(self) -> None:
        assert score_text("tool", "tool kit for data") > score_text("tool", "data kit for tool")

    def test_empty_text_scores_zero(self) -> None:
        assert score_text("genome", None) == 0.0
        assert score_text("genome", "") == 0.0

    def test_no_shared_characters_scores_zero(self) -> None:
        assert score_text("qqqq", "regional climate model") == 0.0


@pytest.mark.unit
class TestRelevance:
    def test_matches_bare_repository_name(self) -> None:
        repo = make_repository("ucdavis/genome-tools")

        assert relevance("genome-tools", repo) == 1.0

    def test_description_counts(self) -> None:
        repo = make_repository("ucsc/cm", description="Regional climate model")

        assert relevance("climate", repo) >= MIN_RELEVANCE

    def test_multi_word_terms_match_words_independently(self) -> None:
        repo = make_repository("ucsc/climate-model", description="Regional simulation")

        assert relevance("model climate", repo) >= 0.75

    def test_case_insensitive(self) -> None:
        repo = make_repository("ucla/Sample-Project")

        assert relevance("SAMPLE", repo) == relevance("sample", repo)

    def test_blank_term_scores_zero(self) -> None:
        assert relevance("   ", make_repository()) == 0.0


@pytest.mark.unit
class TestRank:
    def test_orders_by_descending_relevance(self, seed_repositories: list[Repository]) -> None:
        result = rank(seed_repositories, "genme")

        assert result[0].full_name == "ucdavis/genome-tools"

    def test_ties_keep_input_order(self) -> None:
        first = make_repository("a/alpha-data", description="same")
        second = make_repository("b/alpha-data", description="same")

        assert rank([first, second], "alpha-data") == [first, second]
        assert rank([second, first], "alpha-data") == [second, first]

    def test_floor_excludes_weak_matches(self, seed_repositories: list[Repository]) -> None:
        assert rank(seed_repositories, "qqqq") == []

    def test_custom_floor(self, seed_repositories: list[Repository]) -> None:
        strict = rank(seed_repositories, "sample", min_relevance=0.75)

        assert [repo.full_name for repo in strict] == ["ucla/sample-project"]

    def test_limit(self) -> None:
        records = [make_repository(f"org/tool-{i}") for i in range(10)]

        assert len(rank(records, "tool", limit=4)) == 4
