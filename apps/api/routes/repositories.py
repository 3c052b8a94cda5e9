"""Repository listing and lookup endpoints.

Implements GET /api/repositories with search, multi-select filters, sorting
and pagination, and GET /api/repositories/{owner}/{name}.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from apps.api.deps import get_get_repository_use_case, get_list_repositories_use_case
from packages.core.errors import InvalidQueryError, RepositoryNotFoundError
from packages.core.use_cases import GetRepositoryUseCase, ListRepositoriesUseCase
from packages.schemas.models import FilterDimension, RepositoryOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/repositories", tags=["repositories"])


@router.get("", response_model=list[RepositoryOut])
def list_repositories(
    q: Annotated[
        str | None,
        Query(max_length=256, description="Case-insensitive search over name and description"),
    ] = None,
    university: Annotated[list[str] | None, Query(description="University (repeatable)")] = None,
    language: Annotated[list[str] | None, Query(description="Language (repeatable)")] = None,
    license: Annotated[list[str] | None, Query(description="License (repeatable)")] = None,
    owner: Annotated[list[str] | None, Query(description="Owner/organization (repeatable)")] = None,
    topic: Annotated[list[str] | None, Query(description="Topic area (repeatable)")] = None,
    sort: Annotated[
        str | None,
        Query(description="stars, forks, watchers, created_at or full_name (default: stars)"),
    ] = None,
    order: Annotated[str | None, Query(description="asc or desc (default: desc)")] = None,
    limit: Annotated[
        int | None,
        Query(ge=1, le=100, description="Maximum repositories to return (default: 100)"),
    ] = None,
    offset: Annotated[
        int,
        Query(ge=0, description="Number of repositories to skip (pagination)"),
    ] = 0,
    *,
    use_case: Annotated[ListRepositoriesUseCase, Depends(get_list_repositories_use_case)],
) -> list[RepositoryOut]:
    """List approved repositories.

    Filters combine with AND across dimensions and OR within a dimension, e.g.
    ``?language=Python&language=Go&university=UC Davis``.

    Raises:
        HTTPException 400: Malformed sort order, or unknown sort field in strict mode
        HTTPException 422: Parameter fails schema validation (e.g. limit=0)
        HTTPException 500: Database or internal errors
    """
    filters = {
        FilterDimension.UNIVERSITY: university or [],
        FilterDimension.LANGUAGE: language or [],
        FilterDimension.LICENSE: license or [],
        FilterDimension.OWNER: owner or [],
        FilterDimension.TOPIC: topic or [],
    }

    try:
        return use_case.execute(
            term=q,
            filters=filters,
            sort=sort,
            order=order,
            limit=limit,
            offset=offset,
        )
    except HTTPException:
        raise
    except InvalidQueryError as e:
        logger.warning("Rejected repository listing", extra={"field": e.field, "error": str(e)})
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.exception("List repositories failed")
        raise HTTPException(status_code=500, detail="Failed to list repositories") from e


@router.get("/{owner}/{name}", response_model=RepositoryOut)
def get_repository(
    owner: str,
    name: str,
    use_case: Annotated[GetRepositoryUseCase, Depends(get_get_repository_use_case)],
) -> RepositoryOut:
    """Fetch one approved repository by owner and name.

    Raises:
        HTTPException 404: Repository not in the catalog (or not approved)
        HTTPException 500: Database or internal errors
    """
    try:
        return use_case.execute(owner, name)
    except HTTPException:
        raise
    except RepositoryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidQueryError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.exception("Get repository failed", extra={"owner": owner, "name": name})
        raise HTTPException(status_code=500, detail="Failed to fetch repository") from e


# Export public API
__all__ = ["router"]
