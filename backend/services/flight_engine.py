"""
Camera flight engine.

Flies the globe camera to a destination in three legs: zoom out to a cruise
altitude, rotate over to the destination, zoom in. Each leg is eased with a
quadratic ease-in-out and longitude always takes the shorter way around.

The engine owns the animation: every frame writes a pose with zero transition
time and keeps exactly one pending frame handle, so a new flight (or stop())
can cancel the previous one before it writes again.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from domain.errors import InvalidDestination
from domain.models import CameraPose, FlightPhase, FlightPlan, Location, Marker
from services.geo import ease_in_out_quad, interpolate_longitude, is_valid_coordinate, lerp
from services.render_surface import RenderSurface
from services.scheduling import Cancellable, Scheduler

logger = logging.getLogger(__name__)

CRUISE_ALTITUDE = 3.5
ARRIVAL_ALTITUDE = 1.5
ZOOM_OUT_MS = 1000
ROTATE_MS = 1500
ZOOM_IN_MS = 1200
AUTO_ROTATE_RESUME_DELAY_MS = 2000

MARKER_SIZE = 0.05
MARKER_COLOR = "#ff6b6b"


def build_flight_plan(start: CameraPose, destination: Location) -> FlightPlan:
    """Compute the zoom-out / rotate / zoom-in legs from the current pose."""
    if not is_valid_coordinate(destination.latitude, destination.longitude):
        raise InvalidDestination(
            f"invalid destination coordinates lat={destination.latitude} lng={destination.longitude}"
        )
    lat = float(destination.latitude)
    lng = float(destination.longitude)
    phases = (
        FlightPhase("zoom_out", CameraPose(start.lat, start.lng, CRUISE_ALTITUDE), ZOOM_OUT_MS),
        FlightPhase("rotate", CameraPose(lat, lng, CRUISE_ALTITUDE), ROTATE_MS),
        FlightPhase("zoom_in", CameraPose(lat, lng, ARRIVAL_ALTITUDE), ZOOM_IN_MS),
    )
    return FlightPlan(start=start, destination=destination, phases=phases)


def interpolate_pose(start: CameraPose, target: CameraPose, eased: float) -> CameraPose:
    return CameraPose(
        lat=lerp(start.lat, target.lat, eased),
        lng=interpolate_longitude(start.lng, target.lng, eased),
        altitude=lerp(start.altitude, target.altitude, eased),
    )


class Flight:
    """Completion signal for one fly_to request."""

    def __init__(self, plan: FlightPlan):
        self.plan = plan
        self.phase_index = 0
        self.phase_start_pose: CameraPose = plan.start
        self.phase_start_ms = 0.0
        self.completed = False
        self.cancelled = False
        self._callbacks: List[Callable[["Flight"], None]] = []

    @property
    def destination(self) -> Location:
        return self.plan.destination

    @property
    def done(self) -> bool:
        return self.completed or self.cancelled

    @property
    def current_phase(self) -> Optional[FlightPhase]:
        if self.done:
            return None
        return self.plan.phases[self.phase_index]

    def add_done_callback(self, callback: Callable[["Flight"], None]) -> None:
        if self.done:
            callback(self)
        else:
            self._callbacks.append(callback)

    async def wait(self) -> bool:
        """Wait for the flight to end; True if it completed, False if cancelled."""
        if self.done:
            return self.completed
        future = asyncio.get_running_loop().create_future()

        def _resolve(flight: "Flight") -> None:
            if not future.done():
                future.set_result(flight.completed)

        self.add_done_callback(_resolve)
        return await future

    def _finish(self, completed: bool) -> None:
        if self.done:
            return
        self.completed = completed
        self.cancelled = not completed
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)


class CameraFlightEngine:
    def __init__(self, surface: RenderSurface, scheduler: Scheduler):
        self._surface = surface
        self._scheduler = scheduler
        self._flight: Optional[Flight] = None
        self._frame: Optional[Cancellable] = None
        self._resume_timer: Optional[Cancellable] = None
        self._markers: List[Marker] = []
        self._running = True

    @property
    def active_flight(self) -> Optional[Flight]:
        if self._flight is not None and not self._flight.done:
            return self._flight
        return None

    @property
    def markers(self) -> List[Marker]:
        return list(self._markers)

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        """Cancel any pending frame and auto-rotate resume. Safe to call repeatedly."""
        self._cancel_flight()
        self._cancel_resume_timer()
        self._running = False

    def fly_to(self, destination: Location) -> Flight:
        plan = build_flight_plan(self._surface.get_pose(), destination)
        self._running = True
        self._cancel_flight()
        self._cancel_resume_timer()

        self._surface.set_auto_rotate(False)
        self.add_marker(destination)

        flight = Flight(plan)
        self._flight = flight
        logger.debug(
            "Flying to %s (%.4f, %.4f) from %s",
            destination.name,
            destination.latitude,
            destination.longitude,
            plan.start,
        )
        self._enter_phase(flight, 0, self._scheduler.now_ms())
        return flight

    def add_marker(self, location: Location) -> None:
        self._markers.append(
            Marker(
                lat=location.latitude,
                lng=location.longitude,
                label=location.name,
                size=MARKER_SIZE,
                color=MARKER_COLOR,
            )
        )
        self._surface.set_markers(list(self._markers))

    def clear_markers(self) -> None:
        self._markers = []
        self._surface.set_markers([])

    def _enter_phase(self, flight: Flight, index: int, start_ms: float) -> None:
        flight.phase_index = index
        flight.phase_start_pose = self._surface.get_pose()
        flight.phase_start_ms = start_ms
        logger.debug("Flight to %s: phase %s", flight.destination.name, flight.plan.phases[index].name)
        self._tick(flight)

    def _tick(self, flight: Flight) -> None:
        if flight is not self._flight or flight.done or not self._running:
            return
        self._frame = None

        phase = flight.plan.phases[flight.phase_index]
        elapsed = self._scheduler.now_ms() - flight.phase_start_ms
        progress = min(elapsed / phase.duration_ms, 1.0) if phase.duration_ms > 0 else 1.0
        progress = max(progress, 0.0)
        pose = interpolate_pose(flight.phase_start_pose, phase.target, ease_in_out_quad(progress))
        self._surface.set_pose(pose, 0)

        if progress < 1.0:
            self._frame = self._scheduler.request_frame(lambda: self._tick(flight))
            return

        next_index = flight.phase_index + 1
        if next_index < len(flight.plan.phases):
            self._enter_phase(flight, next_index, flight.phase_start_ms + phase.duration_ms)
            return

        self._resume_timer = self._scheduler.call_later(
            AUTO_ROTATE_RESUME_DELAY_MS, self._resume_auto_rotate
        )
        # Done callbacks may start another flight, which cancels the resume above.
        flight._finish(completed=True)

    def _resume_auto_rotate(self) -> None:
        self._resume_timer = None
        self._surface.set_auto_rotate(True)

    def _cancel_flight(self) -> None:
        if self._frame is not None:
            self._frame.cancel()
            self._frame = None
        if self._flight is not None and not self._flight.done:
            logger.debug("Cancelling flight to %s", self._flight.destination.name)
            self._flight._finish(completed=False)

    def _cancel_resume_timer(self) -> None:
        if self._resume_timer is not None:
            self._resume_timer.cancel()
            self._resume_timer = None
