from datetime import datetime

from pydantic import BaseModel


class FireStationBoundaryItem(BaseModel):
    boundary_id: int
    station_id: int
    station_name: str
    region: str
    area: float
    coordinates: list[list[list[float]]]


class FireStationBoundaryList(BaseModel):
    items: list[FireStationBoundaryItem]
    count: int


class CacheClearResult(BaseModel):
    cleared: bool
    removed_entries: int


class CacheStatisticsResult(BaseModel):
    cached: bool
    cache_key: str
    timestamp: datetime
    entries: int
    hits: int
    misses: int
