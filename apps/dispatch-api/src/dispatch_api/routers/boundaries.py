from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from geo_assignment import InvalidInputError
from geo_assignment.assignment import DEFAULT_SIMPLIFY_TOLERANCE

from dispatch_api.dependencies import get_assignment_service
from dispatch_api.errors import ApiError
from dispatch_api.response import success_response
from dispatch_api.services.assignment_service import AssignmentService

router = APIRouter(prefix="/v1/fire-stations", tags=["fire-stations"])


@router.get("/boundaries")
async def list_boundaries(
    limit: int | None = Query(default=None, ge=1),
    simplify: bool = False,
    tolerance: float = Query(default=DEFAULT_SIMPLIFY_TOLERANCE, ge=0),
    service: AssignmentService = Depends(get_assignment_service),
) -> dict:
    try:
        result = await service.list_boundaries(limit=limit, simplify=simplify, tolerance=tolerance)
    except InvalidInputError as exc:
        raise ApiError("VALIDATION_ERROR", str(exc), 422) from exc
    return success_response(result.model_dump(), meta={"count": result.count})


@router.get("/geojson")
async def boundaries_geojson(service: AssignmentService = Depends(get_assignment_service)) -> dict:
    return success_response(await service.boundaries_geojson(), meta={})


@router.post("/clear-cache")
async def clear_cache(service: AssignmentService = Depends(get_assignment_service)) -> dict:
    result = await service.clear_cache()
    return success_response(result.model_dump(), meta={})


@router.get("/cache-stats")
async def cache_statistics(service: AssignmentService = Depends(get_assignment_service)) -> dict:
    result = await service.cache_statistics()
    return success_response(result.model_dump(mode="json"), meta={})
