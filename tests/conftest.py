"""Shared pytest fixtures for the ORB Showcase test suite.

Provides the test configuration, sample repositories and an in-memory
repository store used across all test modules.
"""

import os
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

import pytest

from packages.clients.memory_repository_store import InMemoryRepositoryStore
from packages.common.config import OrbConfig, get_config
from packages.schemas.models import Contact, Funding, Repository

# ========== Test Environment Setup ==========


@pytest.fixture(scope="session", autouse=True)
def setup_test_env() -> Iterator[None]:
    """Set up test environment variables before any tests run.

    Ensures get_config() loads without touching a developer's real settings.
    """
    os.environ.setdefault("POSTGRES_USER", "orb")
    os.environ.setdefault("POSTGRES_PASSWORD", "test")
    os.environ.setdefault("POSTGRES_DB", "orb")
    os.environ.setdefault("POSTGRES_PORT", "5432")
    os.environ["ORB_API_URL"] = "http://orb.test"
    os.environ["CLIENT_MIN_WAIT"] = "0"
    os.environ["CLIENT_MAX_WAIT"] = "0"
    get_config.cache_clear()

    yield

    get_config.cache_clear()


# ========== Configuration Fixtures ==========


@pytest.fixture
def test_config() -> OrbConfig:
    """Provide a test configuration with zero retry back-off.

    Returns:
        OrbConfig: Configuration instance for testing.
    """
    return OrbConfig(
        postgres_user="test",
        postgres_password="test",
        postgres_db="orb_test",
        postgres_host="localhost",
        orb_api_url="http://orb.test",
        client_max_attempts=3,
        client_min_wait=0,
        client_max_wait=0,
        log_level="DEBUG",
    )


# ========== Test Data Factories ==========


def make_repository(full_name: str = "uc-berkeley/example-repo", **overrides: Any) -> Repository:
    """Build an approved repository, overriding any field."""
    fields: dict[str, Any] = {
        "full_name": full_name,
        "owner": full_name.partition("/")[0],
        "approved": True,
    }
    fields.update(overrides)
    return Repository(**fields)


@pytest.fixture
def seed_repositories() -> list[Repository]:
    """Catalog seed: four approved repositories and one unapproved draft."""
    return [
        make_repository(
            "uc-berkeley/example-repo",
            description="Example research software for data analysis",
            university="UC Berkeley",
            language="Python",
            license="MIT",
            topic_area="Data Science",
            stars=12,
            forks=3,
            watchers=12,
            created_at=datetime(2021, 3, 4, 5, 6, 7, tzinfo=UTC),
            html_url="https://github.com/uc-berkeley/example-repo",
            contacts=(Contact(name="Ada Admin", email="ada@berkeley.edu"),),
            funding=(Funding(funder="NSF", grants=("NSF-123", "NSF-456")),),
        ),
        make_repository(
            "ucla/sample-project",
            description="Sample web dashboard",
            university="UCLA",
            language="JavaScript",
            license="Apache-2.0",
            topic_area="Visualization",
            stars=5,
            forks=8,
            watchers=5,
            created_at=datetime(2022, 1, 1, tzinfo=UTC),
        ),
        make_repository(
            "ucdavis/genome-tools",
            description="Genome assembly toolkit",
            university="UC Davis",
            language="Python",
            license="BSD-3-Clause",
            topic_area="Genomics",
            stars=None,
            forks=1,
            created_at=datetime(2020, 6, 15, tzinfo=UTC),
        ),
        make_repository(
            "ucsc/climate-model",
            description="Regional climate model",
            university="UC Santa Cruz",
            language=None,
            license="MIT",
            topic_area="Climate",
            stars=30,
            forks=None,
            created_at=None,
        ),
        make_repository(
            "ucsd/hidden-draft",
            description="Not yet reviewed",
            university="UC San Diego",
            language="Python",
            stars=999,
            approved=False,
        ),
    ]


@pytest.fixture
def memory_store(seed_repositories: list[Repository]) -> InMemoryRepositoryStore:
    """In-memory repository store preloaded with the seed catalog."""
    return InMemoryRepositoryStore(seed_repositories)
