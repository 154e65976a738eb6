from pydantic import BaseModel, Field


class LocationRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class StationAssignmentRequest(LocationRequest):
    agency_type: str = Field(..., min_length=1)


class AssignIncidentRequest(LocationRequest):
    incident_id: int = Field(..., ge=1)


class StationAssignmentResult(BaseModel):
    found: bool
    message: str
    station_id: int | None = None
    station_name: str | None = None
    region: str | None = None
    method: str | None = None
    distance_meters: float | None = None


class ResponsibleDistrictResult(BaseModel):
    found: bool
    message: str
    station_id: int | None = None
    station_name: str | None = None
    region: str | None = None
    area: float | None = None


class IncidentAssignmentResult(BaseModel):
    success: bool
    incident_id: int
    message: str
    assigned_station_id: int | None = None
    assigned_station_name: str | None = None
    region: str | None = None
