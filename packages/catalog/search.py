"""Fuzzy relevance scoring for free-text catalog search.

Scores are on a 0..1 scale where 1 is an exact (case-insensitive) match.
Literal substring hits always outrank approximate matches; approximate
matches use the best-aligned window of the text (partial ratio).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from difflib import SequenceMatcher

from packages.schemas.models import Repository

MIN_RELEVANCE = 0.4
SEARCH_RESULT_LIMIT = 100

# Description hits count slightly less than name hits
DESCRIPTION_WEIGHT = 0.9
APPROXIMATE_WEIGHT = 0.75


def _partial_ratio(needle: str, haystack: str) -> float:
    """Best similarity between ``needle`` and any same-length window of ``haystack``."""
    if len(needle) > len(haystack):
        return SequenceMatcher(None, needle, haystack).ratio()

    matcher = SequenceMatcher(None, needle, haystack, autojunk=False)
    best = 0.0
    for block in matcher.get_matching_blocks():
        start = max(0, block.b - block.a)
        window = haystack[start : start + len(needle)]
        ratio = SequenceMatcher(None, needle, window).ratio()
        if ratio > best:
            best = ratio
            if best == 1.0:
                break
    return best


def score_text(term: str, text: str | None) -> float:
    """Relevance of ``text`` for an already case-folded ``term``."""
    if not text or not term:
        return 0.0

    folded = text.casefold()
    if folded == term:
        return 1.0

    index = folded.find(term)
    if index >= 0:
        coverage = len(term) / len(folded)
        position = index / len(folded)
        return 0.8 + 0.15 * coverage - 0.05 * position

    return APPROXIMATE_WEIGHT * _partial_ratio(term, folded)


def relevance(term: str, repo: Repository) -> float:
    """Score a repository against a search term.

    The whole term and each of its words are scored separately over the
    full name, the bare repository name and the description; the best of the
    whole-term score and the mean per-word score wins.
    """
    folded = term.strip().casefold()
    if not folded:
        return 0.0

    def best(part: str) -> float:
        return max(
            score_text(part, repo.full_name),
            score_text(part, repo.name),
            DESCRIPTION_WEIGHT * score_text(part, repo.description),
        )

    whole = best(folded)
    words = folded.split()
    if len(words) < 2:
        return whole
    return max(whole, sum(best(word) for word in words) / len(words))


def rank(
    records: Iterable[Repository],
    term: str,
    *,
    min_relevance: float = MIN_RELEVANCE,
    limit: int = SEARCH_RESULT_LIMIT,
) -> list[Repository]:
    """Keep records scoring at least ``min_relevance``, best first.

    Ties keep their input order.
    """
    scored: Sequence[tuple[float, Repository]] = [
        (score, repo) for repo in records if (score := relevance(term, repo)) >= min_relevance
    ]
    ordered = sorted(scored, key=lambda pair: pair[0], reverse=True)
    return [repo for _, repo in ordered[:limit]]


__all__ = ["MIN_RELEVANCE", "SEARCH_RESULT_LIMIT", "rank", "relevance", "score_text"]
