"""Pydantic data models for the ORB Showcase catalog.

Defines the repository record as stored and queried internally, the public
response shape served by the HTTP API, and the enums that describe the
categorical filter dimensions and the sort allow-list.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_CONTACTS = 3
MAX_FUNDERS = 3
MAX_GRANTS_PER_FUNDER = 3

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


# ========== Enums ==========


class FilterDimension(str, Enum):
    """Categorical fields usable for exact-match multi-select filtering."""

    UNIVERSITY = "university"
    LANGUAGE = "language"
    LICENSE = "license"
    OWNER = "owner"
    TOPIC = "topic"

    @property
    def field_name(self) -> str:
        """Attribute on :class:`Repository` (and column in storage) for this dimension."""
        return "topic_area" if self is FilterDimension.TOPIC else self.value

    @property
    def plural(self) -> str:
        """Collection name used in ``GET /api/filters/{plural}``."""
        return "universities" if self is FilterDimension.UNIVERSITY else f"{self.value}s"

    @classmethod
    def from_plural(cls, plural: str) -> "FilterDimension":
        """Resolve ``universities``/``languages``/... (or the singular form) to a dimension.

        Raises:
            ValueError: If the name matches no dimension.
        """
        for dimension in cls:
            if plural in (dimension.plural, dimension.value):
                return dimension
        valid = ", ".join(d.plural for d in cls)
        raise ValueError(f"Unknown filter dimension '{plural}'. Valid values: {valid}")


class SortField(str, Enum):
    """Sort allow-list for repository listings."""

    STARS = "stars"
    FORKS = "forks"
    WATCHERS = "watchers"
    CREATED_AT = "created_at"
    FULL_NAME = "full_name"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


DEFAULT_SORT_FIELD = SortField.STARS
DEFAULT_SORT_ORDER = SortOrder.DESC


# ========== Entities ==========


class Contact(BaseModel):
    """Point of contact for a repository."""

    model_config = ConfigDict(frozen=True)

    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)


class Funding(BaseModel):
    """A funder and the grant numbers it awarded to a repository."""

    model_config = ConfigDict(frozen=True)

    funder: str = Field(..., min_length=1, max_length=255)
    grants: tuple[str, ...] = Field(default=(), max_length=MAX_GRANTS_PER_FUNDER)


class Repository(BaseModel):
    """A catalogued open-source repository.

    Only ``full_name`` is required; every other field may be absent. Counts
    are native integers here and are only turned into strings by
    :class:`RepositoryOut`.
    """

    model_config = ConfigDict(frozen=True)

    full_name: str = Field(..., min_length=3, max_length=512, description="owner/name")
    description: str | None = None
    readme: str | None = None
    homepage: str | None = None
    default_branch: str | None = None
    html_url: str | None = None
    university: str | None = None
    license: str | None = None
    owner: str | None = None
    language: str | None = None
    topic_area: str | None = None
    stars: int | None = Field(default=None, ge=0)
    forks: int | None = Field(default=None, ge=0)
    watchers: int | None = Field(default=None, ge=0)
    created_at: datetime | None = None
    approved: bool = False
    contacts: tuple[Contact, ...] = Field(default=(), max_length=MAX_CONTACTS)
    funding: tuple[Funding, ...] = Field(default=(), max_length=MAX_FUNDERS)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        """Require the ``owner/name`` shape with both halves non-empty."""
        owner, sep, name = v.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"full_name must look like 'owner/name', got {v!r}")
        return v

    @field_validator("created_at")
    @classmethod
    def validate_created_at_tz(cls, v: datetime | None) -> datetime | None:
        """Treat naive timestamps as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @property
    def name(self) -> str:
        """Repository name without the owner prefix."""
        return self.full_name.partition("/")[2]

    def value_for(self, dimension: FilterDimension) -> str | None:
        """Return this record's value for a categorical filter dimension."""
        value: str | None = getattr(self, dimension.field_name)
        return value

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Repository":
        """Build a record from a storage row.

        Renames ``short_description`` to ``description`` and folds the
        numbered contact/funder/grant columns into ordered lists, skipping
        empty slots.
        """
        contacts = []
        for i in range(1, MAX_CONTACTS + 1):
            name = row.get(f"contact_name_{i}")
            email = row.get(f"contact_email_{i}")
            if name or email:
                contacts.append(Contact(name=name, email=email))

        funding = []
        for i in range(1, MAX_FUNDERS + 1):
            funder = row.get(f"funder_{i}")
            if not funder:
                continue
            grants = tuple(
                grant
                for j in range(1, MAX_GRANTS_PER_FUNDER + 1)
                if (grant := row.get(f"grant_number_{i}_{j}"))
            )
            funding.append(Funding(funder=funder, grants=grants))

        return cls(
            full_name=row["full_name"],
            description=row.get("short_description"),
            readme=row.get("readme"),
            homepage=row.get("homepage"),
            default_branch=row.get("default_branch"),
            html_url=row.get("html_url"),
            university=row.get("university"),
            license=row.get("license"),
            owner=row.get("owner"),
            language=row.get("language"),
            topic_area=row.get("topic_area"),
            stars=row.get("stars"),
            forks=row.get("forks"),
            watchers=row.get("watchers"),
            created_at=row.get("created_at"),
            approved=bool(row.get("approved", False)),
            contacts=tuple(contacts),
            funding=tuple(funding),
        )

    def to_row(self) -> dict[str, Any]:
        """Flatten the record into storage columns (inverse of :meth:`from_row`)."""
        row: dict[str, Any] = {
            "full_name": self.full_name,
            "owner": self.owner,
            "name": self.name,
            "short_description": self.description,
            "readme": self.readme,
            "homepage": self.homepage,
            "default_branch": self.default_branch,
            "html_url": self.html_url,
            "university": self.university,
            "license": self.license,
            "language": self.language,
            "topic_area": self.topic_area,
            "stars": self.stars,
            "forks": self.forks,
            "watchers": self.watchers,
            "created_at": self.created_at,
            "approved": self.approved,
        }
        for i in range(1, MAX_CONTACTS + 1):
            contact = self.contacts[i - 1] if i <= len(self.contacts) else None
            row[f"contact_name_{i}"] = contact.name if contact else None
            row[f"contact_email_{i}"] = contact.email if contact else None
        for i in range(1, MAX_FUNDERS + 1):
            funding = self.funding[i - 1] if i <= len(self.funding) else None
            row[f"funder_{i}"] = funding.funder if funding else None
            for j in range(1, MAX_GRANTS_PER_FUNDER + 1):
                grant = funding.grants[j - 1] if funding and j <= len(funding.grants) else None
                row[f"grant_number_{i}_{j}"] = grant
        return row


def format_timestamp(value: datetime | None) -> str | None:
    """Render a timestamp in the canonical ``YYYY-MM-DDTHH:MM:SSZ`` UTC form."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


def _count_to_str(value: int | None) -> str | None:
    return None if value is None else str(value)


class RepositoryOut(BaseModel):
    """Public response shape for a repository.

    Counts are serialized as strings and ``created_at`` as canonical UTC text
    to stay compatible with existing API consumers.
    """

    full_name: str
    description: str | None = None
    readme: str | None = None
    homepage: str | None = None
    default_branch: str | None = None
    html_url: str | None = None
    university: str | None = None
    license: str | None = None
    owner: str | None = None
    language: str | None = None
    topic_area: str | None = None
    stars: str | None = None
    forks: str | None = None
    watchers: str | None = None
    created_at: str | None = None
    contacts: list[Contact] = Field(default_factory=list)
    funding: list[Funding] = Field(default_factory=list)

    @classmethod
    def from_repository(cls, repo: Repository) -> "RepositoryOut":
        return cls(
            full_name=repo.full_name,
            description=repo.description,
            readme=repo.readme,
            homepage=repo.homepage,
            default_branch=repo.default_branch,
            html_url=repo.html_url,
            university=repo.university,
            license=repo.license,
            owner=repo.owner,
            language=repo.language,
            topic_area=repo.topic_area,
            stars=_count_to_str(repo.stars),
            forks=_count_to_str(repo.forks),
            watchers=_count_to_str(repo.watchers),
            created_at=format_timestamp(repo.created_at),
            contacts=list(repo.contacts),
            funding=list(repo.funding),
        )


class RepositoryQuery(BaseModel):
    """Validated parameters for a server-side repository listing."""

    model_config = ConfigDict(frozen=True)

    term: str | None = None
    filters: dict[FilterDimension, tuple[str, ...]] = Field(default_factory=dict)
    sort: SortField = DEFAULT_SORT_FIELD
    order: SortOrder = DEFAULT_SORT_ORDER
    limit: int = Field(default=100, ge=1, le=100)
    offset: int = Field(default=0, ge=0)

    @property
    def active_filters(self) -> dict[FilterDimension, tuple[str, ...]]:
        """Filters with at least one selected value."""
        return {dimension: values for dimension, values in self.filters.items() if values}

    @property
    def search_term(self) -> str | None:
        """The free-text term with surrounding whitespace removed, or None if blank."""
        if self.term is None:
            return None
        stripped = self.term.strip()
        return stripped or None


__all__ = [
    "Contact",
    "DEFAULT_SORT_FIELD",
    "DEFAULT_SORT_ORDER",
    "FilterDimension",
    "Funding",
    "MAX_CONTACTS",
    "MAX_FUNDERS",
    "MAX_GRANTS_PER_FUNDER",
    "Repository",
    "RepositoryOut",
    "RepositoryQuery",
    "SortField",
    "SortOrder",
    "TIMESTAMP_FORMAT",
    "format_timestamp",
]
