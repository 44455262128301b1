"""
Search/globe session API routes.

A front-end forwards search box events here and polls /state to render the
suggestion list and the camera pose.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from api.schemas import (
    FlightResponse,
    SessionStateResponse,
    SuggestionResponse,
    location_to_response,
    marker_to_response,
    pose_to_response,
)
from domain.errors import InvalidDestination
from domain.models import Location
from services.country_dataset import get_default_dataset
from services.globe_session import GlobeSession
from services.predictor import try_build_predictor
from services.render_surface import HeadlessGlobe
from services.scheduling import AsyncioScheduler
from settings import settings

router = APIRouter()
logger = logging.getLogger(__name__)

_session: Optional[GlobeSession] = None


def get_globe_session() -> GlobeSession:
    global _session
    if _session is None:
        scheduler = AsyncioScheduler(frame_interval_ms=settings.FRAME_INTERVAL_MS)
        _session = GlobeSession(
            dataset=get_default_dataset(),
            surface=HeadlessGlobe(scheduler),
            scheduler=scheduler,
            predictor=try_build_predictor(settings),
        )
        _session.start()
    return _session


def shutdown_globe_session() -> None:
    global _session
    if _session is not None:
        _session.stop()
        _session = None


class InputRequest(BaseModel):
    text: str


class KeyRequest(BaseModel):
    key: str


class SelectRequest(BaseModel):
    index: int


class FlyRequest(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class KeyResponse(BaseModel):
    handled: bool
    state: SessionStateResponse


def session_to_response(session: GlobeSession) -> SessionStateResponse:
    snap = session.snapshot()
    flight = snap["flight"]
    return SessionStateResponse(
        text=snap["text"],
        visible=snap["visible"],
        state=snap["state"],
        selected_index=snap["selected_index"],
        suggestions=[SuggestionResponse(**s) for s in snap["suggestions"]],
        pose=pose_to_response(snap["pose"]),
        auto_rotate=snap["auto_rotate"],
        markers=[marker_to_response(m) for m in snap["markers"]],
        flight=FlightResponse(
            status=flight["status"],
            destination=location_to_response(flight["destination"]) if flight["destination"] else None,
            phase=flight["phase"],
        ),
    )


@router.get("/state", response_model=SessionStateResponse)
async def get_state(session: GlobeSession = Depends(get_globe_session)):
    return session_to_response(session)


@router.post("/input", response_model=SessionStateResponse)
async def post_input(data: InputRequest, session: GlobeSession = Depends(get_globe_session)):
    session.controller.on_input(data.text)
    return session_to_response(session)


@router.post("/key", response_model=KeyResponse)
async def post_key(data: KeyRequest, session: GlobeSession = Depends(get_globe_session)):
    handled = session.controller.on_key(data.key)
    return KeyResponse(handled=handled, state=session_to_response(session))


@router.post("/select", response_model=SessionStateResponse)
async def post_select(data: SelectRequest, session: GlobeSession = Depends(get_globe_session)):
    if not session.controller.select_index(data.index):
        raise HTTPException(status_code=404, detail=f"No suggestion at index {data.index}")
    return session_to_response(session)


@router.post("/focus", response_model=SessionStateResponse)
async def post_focus(session: GlobeSession = Depends(get_globe_session)):
    session.controller.on_focus()
    return session_to_response(session)


@router.post("/blur", response_model=SessionStateResponse)
async def post_blur(session: GlobeSession = Depends(get_globe_session)):
    session.controller.on_blur()
    return session_to_response(session)


@router.post("/fly", response_model=SessionStateResponse)
async def post_fly(data: FlyRequest, session: GlobeSession = Depends(get_globe_session)):
    """Fly directly to a country code or to explicit coordinates."""
    if data.code:
        if session.fly_to_code(data.code) is None:
            raise HTTPException(status_code=404, detail="Country not found")
        return session_to_response(session)

    if data.latitude is None or data.longitude is None:
        raise HTTPException(status_code=400, detail="Provide a country code or latitude/longitude")
    destination = Location(
        name=data.name or f"({data.latitude:.4f}, {data.longitude:.4f})",
        code="",
        latitude=data.latitude,
        longitude=data.longitude,
    )
    try:
        session.fly_to(destination)
    except InvalidDestination as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return session_to_response(session)


@router.delete("/markers", response_model=SessionStateResponse)
async def clear_markers(session: GlobeSession = Depends(get_globe_session)):
    session.engine.clear_markers()
    return session_to_response(session)
