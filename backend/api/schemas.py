"""
Pydantic request/response bodies shared by the API routes.
"""
from typing import List, Optional

from pydantic import BaseModel

from domain.models import CameraPose, Location, Marker


class LocationResponse(BaseModel):
    name: str
    code: str
    latitude: float
    longitude: float
    capital: Optional[str] = None


class NearestCountryResponse(BaseModel):
    country: LocationResponse
    distance_km: float


class PoseResponse(BaseModel):
    lat: float
    lng: float
    altitude: float


class MarkerResponse(BaseModel):
    lat: float
    lng: float
    label: str
    size: float
    color: str


class SuggestionResponse(BaseModel):
    kind: str
    label: str
    code: Optional[str] = None


class FlightResponse(BaseModel):
    status: str
    destination: Optional[LocationResponse] = None
    phase: Optional[str] = None


class SessionStateResponse(BaseModel):
    text: str
    visible: bool
    state: str
    selected_index: int
    suggestions: List[SuggestionResponse]
    pose: PoseResponse
    auto_rotate: bool
    markers: List[MarkerResponse]
    flight: FlightResponse


def location_to_response(location: Location) -> LocationResponse:
    return LocationResponse(
        name=location.name,
        code=location.code,
        latitude=location.latitude,
        longitude=location.longitude,
        capital=location.capital,
    )


def pose_to_response(pose: CameraPose) -> PoseResponse:
    return PoseResponse(lat=pose.lat, lng=pose.lng, altitude=pose.altitude)


def marker_to_response(marker: Marker) -> MarkerResponse:
    return MarkerResponse(
        lat=marker.lat, lng=marker.lng, label=marker.label, size=marker.size, color=marker.color
    )
