from __future__ import annotations

from fastapi import APIRouter, Depends

from geo_assignment import AgencyType, InvalidInputError

from dispatch_api.dependencies import get_assignment_service
from dispatch_api.errors import ApiError
from dispatch_api.response import success_response
from dispatch_api.schemas.assignment import (
    AssignIncidentRequest,
    LocationRequest,
    StationAssignmentRequest,
    StationAssignmentResult,
)
from dispatch_api.services.assignment_service import AssignmentService

station_assignment_router = APIRouter(prefix="/v1/station-assignment", tags=["station-assignment"])
fire_districts_router = APIRouter(prefix="/v1/fire-districts", tags=["fire-districts"])


@station_assignment_router.post("/find-by-location")
async def find_station_by_location(
    body: StationAssignmentRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> dict:
    try:
        result = await service.find_station(body.latitude, body.longitude, body.agency_type)
    except InvalidInputError as exc:
        raise ApiError("VALIDATION_ERROR", str(exc), 422) from exc
    return success_response(result.model_dump(), meta={})


@fire_districts_router.post("/find-responsible-district")
async def find_responsible_district(
    body: LocationRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> dict:
    try:
        result = await service.find_responsible_district(body.latitude, body.longitude)
    except InvalidInputError as exc:
        raise ApiError("VALIDATION_ERROR", str(exc), 422) from exc
    return success_response(result.model_dump(), meta={})


@fire_districts_router.post("/assign-incident")
async def assign_incident(
    body: AssignIncidentRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> dict:
    try:
        result = await service.assign_incident(body.incident_id, body.latitude, body.longitude)
    except InvalidInputError as exc:
        raise ApiError("VALIDATION_ERROR", str(exc), 422) from exc
    return success_response(result.model_dump(), meta={})


@fire_districts_router.get("/cache-info")
async def cache_info(service: AssignmentService = Depends(get_assignment_service)) -> dict:
    result = await service.cache_statistics()
    return success_response(result.model_dump(mode="json"), meta={})


async def _find_for_agency(
    service: AssignmentService,
    body: LocationRequest,
    agency: AgencyType,
) -> StationAssignmentResult:
    try:
        return await service.find_station(body.latitude, body.longitude, agency.value)
    except InvalidInputError as exc:
        raise ApiError("VALIDATION_ERROR", str(exc), 422) from exc


@station_assignment_router.post("/fire-station/find-by-location")
async def find_fire_station(
    body: LocationRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> dict:
    result = await _find_for_agency(service, body, AgencyType.FIRE)
    return success_response(result.model_dump(), meta={})


@station_assignment_router.post("/coastguard-station/find-nearest")
async def find_nearest_coastguard_station(
    body: LocationRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> dict:
    result = await _find_for_agency(service, body, AgencyType.COASTGUARD)
    return success_response(result.model_dump(), meta={})


@station_assignment_router.post("/police-station/find-nearest")
async def find_nearest_police_station(
    body: LocationRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> dict:
    result = await _find_for_agency(service, body, AgencyType.POLICE)
    return success_response(result.model_dump(), meta={})


@station_assignment_router.post("/hospital/find-nearest")
async def find_nearest_hospital(
    body: LocationRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> dict:
    result = await _find_for_agency(service, body, AgencyType.HOSPITAL)
    return success_response(result.model_dump(), meta={})
