"""Tests for GetRepositoryUseCase."""

import pytest

from packages.clients.memory_repository_store import InMemoryRepositoryStore
from packages.core.errors import InvalidQueryError, RepositoryNotFoundError
from packages.core.use_cases.get_repository import GetRepositoryUseCase, build_full_name


@pytest.mark.unit
def test_get_repository_returns_public_shape(memory_store: InMemoryRepositoryStore) -> None:
    repo = GetRepositoryUseCase(memory_store).execute("uc-berkeley", "example-repo")

    assert repo.full_name == "uc-berkeley/example-repo"
    assert repo.stars == "12"
    assert repo.contacts[0].name == "Ada Admin"
    assert repo.funding[0].grants == ("NSF-123", "NSF-456")


@pytest.mark.unit
def test_get_repository_not_found(memory_store: InMemoryRepositoryStore) -> None:
    with pytest.raises(RepositoryNotFoundError) as exc_info:
        GetRepositoryUseCase(memory_store).execute("nobody", "nothing")

    assert exc_info.value.full_name == "nobody/nothing"


@pytest.mark.unit
def test_get_repository_hides_unapproved(memory_store: InMemoryRepositoryStore) -> None:
    with pytest.raises(RepositoryNotFoundError):
        GetRepositoryUseCase(memory_store).execute("ucsd", "hidden-draft")


@pytest.mark.unit
class TestBuildFullName:
    def test_joins_parts(self) -> None:
        assert build_full_name("ucla", "sample-project") == "ucla/sample-project"

    @pytest.mark.parametrize(("owner", "name"), [("", "x"), ("x", "  "), ("a/b", "c"), ("a", "b/c")])
    def test_rejects_malformed_parts(self, owner: str, name: str) -> None:
        with pytest.raises(InvalidQueryError):
            build_full_name(owner, name)
