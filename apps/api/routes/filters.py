"""Filter option endpoints: distinct values per categorical dimension."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from apps.api.deps import get_list_filter_values_use_case
from packages.core.errors import InvalidQueryError
from packages.core.use_cases import ListFilterValuesUseCase

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/filters", tags=["filters"])


@router.get("/{dimension}", response_model=list[str])
def list_filter_values(
    dimension: str,
    use_case: Annotated[ListFilterValuesUseCase, Depends(get_list_filter_values_use_case)],
) -> list[str]:
    """Sorted distinct values for ``universities``, ``languages``, ``licenses``, ``owners`` or ``topics``.

    Raises:
        HTTPException 400: Unknown dimension
        HTTPException 500: Database or internal errors
    """
    try:
        return use_case.execute(dimension)
    except HTTPException:
        raise
    except InvalidQueryError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.exception("List filter values failed", extra={"dimension": dimension})
        raise HTTPException(status_code=500, detail="Failed to list filter values") from e


# Export public API
__all__ = ["router"]
