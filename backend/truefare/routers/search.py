"""Search router — one search across flights, hotels and cars, ranked into bundles."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from truefare.schemas.bundle import SearchResult
from truefare.schemas.search import SearchRequest
from truefare.services.search_orchestrator import (
    FlightSearchUnavailable,
    SearchOrchestrator,
    SearchValidationError,
    search_orchestrator,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_search_orchestrator() -> SearchOrchestrator:
    return search_orchestrator


@router.post("", response_model=SearchResult)
async def search(
    req: SearchRequest,
    orchestrator: SearchOrchestrator = Depends(get_search_orchestrator),
):
    """Run a search and return bundles sorted by deal rank plus the raw offer lists."""
    try:
        return await orchestrator.search(req.params, req.selection)
    except SearchValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FlightSearchUnavailable as e:
        raise HTTPException(
            status_code=503,
            detail={"message": str(e), "error_type": e.error_type, "retryable": e.retryable},
        )
