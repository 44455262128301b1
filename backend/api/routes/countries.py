"""
Country dataset API routes.
"""
from typing import List

from fastapi import APIRouter, HTTPException

from api.schemas import LocationResponse, NearestCountryResponse, location_to_response
from domain.errors import NearestLookupEmpty
from services.country_dataset import get_default_dataset
from services.geo import is_valid_coordinate

router = APIRouter()


@router.get("", response_model=List[LocationResponse])
async def search_countries(q: str = ""):
    """Local suggestions for a search box; all countries when q is empty."""
    dataset = get_default_dataset()
    if not q.strip():
        return [location_to_response(c) for c in dataset.all_countries()]
    return [location_to_response(c) for c in dataset.search_countries(q)]


@router.get("/nearest", response_model=NearestCountryResponse)
async def nearest_country(lat: float, lng: float):
    if not is_valid_coordinate(lat, lng):
        raise HTTPException(status_code=400, detail=f"Invalid coordinates: {lat}, {lng}")
    try:
        match = get_default_dataset().nearest_match(lat, lng)
    except NearestLookupEmpty:
        raise HTTPException(status_code=404, detail="No countries available")
    return NearestCountryResponse(
        country=location_to_response(match.location),
        distance_km=match.distance_km,
    )


@router.get("/{code}", response_model=LocationResponse)
async def get_country(code: str):
    country = get_default_dataset().get_country_by_code(code)
    if not country:
        raise HTTPException(status_code=404, detail="Country not found")
    return location_to_response(country)
